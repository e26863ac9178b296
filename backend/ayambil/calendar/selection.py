"""Bounded, ordered selection of booking dates."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from ayambil.calendar.availability import Availability, is_selectable

logger = logging.getLogger(__name__)

DEFAULT_MAX_DATES = 3


class SelectionManager:
    """Track up to ``max_dates`` distinct ISO dates in insertion order.

    ``on_complete`` fires with a copy of the selection whenever an append fills
    the last free slot. Inert input (non-selectable days, a full selection) is
    ignored without raising.
    """

    def __init__(
        self,
        max_dates: int = DEFAULT_MAX_DATES,
        *,
        initial: Iterable[str] = (),
        on_complete: Callable[[list[str]], None] | None = None,
    ) -> None:
        if max_dates < 1:
            raise ValueError("max_dates must be at least 1")
        self.max_dates = max_dates
        self.on_complete = on_complete
        self._selected: list[str] = []
        for iso_date in initial:
            if iso_date not in self._selected and len(self._selected) < max_dates:
                self._selected.append(iso_date)

    @property
    def selected(self) -> list[str]:
        return list(self._selected)

    def __contains__(self, iso_date: object) -> bool:
        return iso_date in self._selected

    def __len__(self) -> int:
        return len(self._selected)

    @property
    def is_complete(self) -> bool:
        return len(self._selected) >= self.max_dates

    @property
    def has_room(self) -> bool:
        return len(self._selected) < self.max_dates

    def toggle(self, iso_date: str, availability: Availability | None) -> bool:
        """Remove ``iso_date`` if chosen, else append it when there is room.

        Returns True when the selection changed.
        """
        if not is_selectable(availability):
            return False
        if iso_date in self._selected:
            self._selected.remove(iso_date)
            return True
        if not self.has_room:
            logger.debug("Selection full, ignoring %s", iso_date)
            return False
        self._selected.append(iso_date)
        if self.is_complete and self.on_complete is not None:
            self.on_complete(self.selected)
        return True

    def clear(self) -> None:
        self._selected.clear()


__all__ = ["DEFAULT_MAX_DATES", "SelectionManager"]
