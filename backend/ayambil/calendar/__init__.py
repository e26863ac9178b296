"""Availability calendar core: dates, month grid, classification and selection."""

from ayambil.calendar.availability import (
    Availability,
    DayCell,
    MonthAvailability,
    classify,
    classify_date,
    classify_month,
    is_selectable,
    remaining,
)
from ayambil.calendar.dates import (
    display_to_iso,
    format_date_by_language,
    format_date_with_month,
    is_past,
    iso_to_display,
    localize_numeral,
    parse_iso,
    to_display,
    to_iso,
)
from ayambil.calendar.grid import (
    build_month_grid,
    can_go_prev,
    days_in_month,
    first_weekday_offset,
    month_bounds,
    shift_month,
)
from ayambil.calendar.range_selector import (
    DateStatus,
    RangeSelector,
    RangeState,
    dates_in_range,
)
from ayambil.calendar.selection import DEFAULT_MAX_DATES, SelectionManager

__all__ = [
    "Availability",
    "DEFAULT_MAX_DATES",
    "DateStatus",
    "DayCell",
    "MonthAvailability",
    "RangeSelector",
    "RangeState",
    "SelectionManager",
    "build_month_grid",
    "can_go_prev",
    "classify",
    "classify_date",
    "classify_month",
    "dates_in_range",
    "days_in_month",
    "display_to_iso",
    "first_weekday_offset",
    "format_date_by_language",
    "format_date_with_month",
    "is_past",
    "is_selectable",
    "iso_to_display",
    "localize_numeral",
    "month_bounds",
    "parse_iso",
    "remaining",
    "shift_month",
    "to_display",
    "to_iso",
]
