"""Date conversion and numeral localization helpers.

All cross-boundary date keys are ISO ``YYYY-MM-DD`` strings. Month arguments
use the zero-based ``month0`` convention (0 = January) because the month-name
tables supplied by the translation layer are indexed that way.
"""

from __future__ import annotations

from datetime import date

GUJARATI_DIGITS = ("૦", "૧", "૨", "૩", "૪", "૫", "૬", "૭", "૮", "૯")
HINDI_DIGITS = ("०", "१", "२", "३", "४", "५", "६", "७", "८", "९")

_DIGIT_TABLES: dict[str, tuple[str, ...]] = {
    "gu": GUJARATI_DIGITS,
    "hi": HINDI_DIGITS,
}


def to_iso(day: int, month0: int, year: int) -> str:
    """Return ``YYYY-MM-DD`` for a day of a zero-based month."""
    return f"{year:04d}-{month0 + 1:02d}-{day:02d}"


def to_display(day: int, month0: int, year: int) -> str:
    """Return ``DD/MM/YYYY`` for a day of a zero-based month."""
    return f"{day:02d}/{month0 + 1:02d}/{year:04d}"


def parse_iso(value: str | None) -> date | None:
    """Parse an ISO date string, returning ``None`` when it is malformed."""
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except (ValueError, TypeError):
        return None


def display_to_iso(value: str) -> str:
    """Convert ``DD/MM/YYYY`` to ``YYYY-MM-DD``; unparseable input is returned as-is."""
    parts = value.split("/")
    if len(parts) != 3:
        return value
    dd, mm, yyyy = (part.strip() for part in parts)
    try:
        return date(int(yyyy), int(mm), int(dd)).isoformat()
    except ValueError:
        return value


def iso_to_display(value: str) -> str:
    """Convert ``YYYY-MM-DD`` to ``DD/MM/YYYY``; unparseable input is returned as-is."""
    parsed = parse_iso(value)
    if parsed is None:
        return value
    return to_display(parsed.day, parsed.month - 1, parsed.year)


def is_past(iso_date: str, today: date) -> bool:
    """Return True when ``iso_date`` falls strictly before ``today``.

    Both sides are plain calendar dates, so "today" is never past. Malformed
    input is treated as not past; the caller renders the raw string.
    """
    parsed = parse_iso(iso_date)
    if parsed is None:
        return False
    return parsed < today


def localize_numeral(value: int | str, locale: str | None) -> str:
    """Map ASCII digits onto the numeral glyphs of ``locale``.

    Only ``gu`` and ``hi`` have digit tables; any other locale returns the
    input unchanged. Non-digit characters always pass through.
    """
    text = str(value)
    table = _DIGIT_TABLES.get((locale or "").split("-")[0].lower())
    if table is None:
        return text
    return "".join(table[int(ch)] if "0" <= ch <= "9" else ch for ch in text)


def format_date_by_language(iso_date: str | None, locale: str | None) -> str:
    """Render an ISO date as ``DD/MM/YYYY`` using the locale's digits."""
    if not iso_date:
        return "-"
    parsed = parse_iso(iso_date)
    if parsed is None:
        return iso_date
    return localize_numeral(to_display(parsed.day, parsed.month - 1, parsed.year), locale)


def format_date_with_month(display_date: str, locale: str | None, months: list[str]) -> str:
    """Render ``DD/MM/YYYY`` as ``<day> <month name> <year>``."""
    if not display_date:
        return "-"
    try:
        dd, mm, yyyy = display_date.split("/")
        month_num, day_num, year_num = int(mm), int(dd), int(yyyy)
    except ValueError:
        return display_date
    if not 1 <= month_num <= len(months):
        return display_date
    month_name = months[month_num - 1]
    if localize_numeral(0, locale) == "0":
        return f"{dd} {month_name} {yyyy}"
    return f"{localize_numeral(day_num, locale)} {month_name} {localize_numeral(year_num, locale)}"


__all__ = [
    "GUJARATI_DIGITS",
    "HINDI_DIGITS",
    "display_to_iso",
    "format_date_by_language",
    "format_date_with_month",
    "is_past",
    "iso_to_display",
    "localize_numeral",
    "parse_iso",
    "to_display",
    "to_iso",
]
