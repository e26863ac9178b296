"""Opaque lookup tables supplied by the translation layer."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from ayambil.calendar.dates import format_date_with_month, localize_numeral


@dataclass(frozen=True)
class CalendarLocale:
    """Month names (12, indexed by ``month0``), weekday names (7, Sunday first)
    and the numeral locale tag. Content is never defined here."""

    months: tuple[str, ...]
    weekdays: tuple[str, ...]
    numeral_locale: str = "en"

    def __post_init__(self) -> None:
        if len(self.months) != 12:
            raise ValueError(f"Expected 12 month names, got {len(self.months)}")
        if len(self.weekdays) != 7:
            raise ValueError(f"Expected 7 weekday names, got {len(self.weekdays)}")

    @classmethod
    def from_resources(cls, resources: Mapping[str, Any], language: str) -> "CalendarLocale":
        """Build from an i18n resource bundle shaped ``{"calendar": {"months": [...], "weekdays": [...]}}``."""
        calendar = resources["calendar"]
        months: Sequence[str] = calendar["months"]
        weekdays: Sequence[str] = calendar["weekdays"]
        return cls(months=tuple(months), weekdays=tuple(weekdays), numeral_locale=language)

    def month_name(self, month0: int) -> str:
        return self.months[month0]

    def numeral(self, value: int | str) -> str:
        return localize_numeral(value, self.numeral_locale)

    def month_title(self, year: int, month0: int) -> str:
        return f"{self.months[month0]} {self.numeral(year)}"

    def long_date(self, display_date: str) -> str:
        return format_date_with_month(display_date, self.numeral_locale, list(self.months))
