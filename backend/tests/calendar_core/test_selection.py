"""Bounded booking date selection."""
from __future__ import annotations

import pytest

from ayambil.calendar.availability import Availability
from ayambil.calendar.selection import SelectionManager

OPEN = Availability.AVAILABLE


def test_toggle_appends_in_order_and_removes() -> None:
    selection = SelectionManager()
    assert selection.toggle("2030-03-12", OPEN)
    assert selection.toggle("2030-03-11", OPEN)
    assert selection.selected == ["2030-03-12", "2030-03-11"]

    assert selection.toggle("2030-03-12", Availability.SELECTED)
    assert selection.selected == ["2030-03-11"]


def test_non_selectable_days_are_ignored() -> None:
    selection = SelectionManager()
    for availability in (Availability.PAST, Availability.NOT_OPEN, Availability.FULL, None):
        assert not selection.toggle("2030-03-12", availability)
    assert len(selection) == 0


def test_full_selection_ignores_new_dates_but_allows_removal() -> None:
    selection = SelectionManager(max_dates=2)
    selection.toggle("2030-03-12", OPEN)
    selection.toggle("2030-03-13", OPEN)

    assert not selection.toggle("2030-03-14", OPEN)
    assert selection.selected == ["2030-03-12", "2030-03-13"]
    assert selection.toggle("2030-03-12", Availability.SELECTED)
    assert selection.has_room


def test_on_complete_fires_with_a_copy_when_full() -> None:
    received: list[list[str]] = []
    selection = SelectionManager(max_dates=2, on_complete=received.append)

    selection.toggle("2030-03-12", OPEN)
    assert received == []
    selection.toggle("2030-03-13", OPEN)
    assert received == [["2030-03-12", "2030-03-13"]]

    received[0].append("mutated")
    assert selection.selected == ["2030-03-12", "2030-03-13"]


def test_initial_selection_is_deduplicated_and_capped() -> None:
    selection = SelectionManager(
        max_dates=2, initial=["2030-03-12", "2030-03-12", "2030-03-13", "2030-03-14"]
    )
    assert selection.selected == ["2030-03-12", "2030-03-13"]
    assert selection.is_complete
    assert "2030-03-13" in selection


def test_selected_returns_a_copy_and_clear_empties() -> None:
    selection = SelectionManager(initial=["2030-03-12"])
    snapshot = selection.selected
    snapshot.append("2030-03-13")
    assert selection.selected == ["2030-03-12"]
    selection.clear()
    assert selection.selected == []


def test_max_dates_must_be_positive() -> None:
    with pytest.raises(ValueError):
        SelectionManager(max_dates=0)
