"""Calendar-date clock in the configured booking timezone."""

from __future__ import annotations

from datetime import date, datetime

from ayambil.core.config import get_settings


def local_today() -> date:
    """Today's date at the booking location.

    Past-date checks compare calendar dates only, so a booking for today is
    never rejected as past regardless of the server's own timezone.
    """
    return datetime.now(get_settings().tz).date()
