"""Open (or close) a range of booking dates from the command line.

Usage: ``python scripts/open_dates.py 2026-11-01 2026-11-30 [open|closed]``
"""
from __future__ import annotations

import asyncio
import sys
from datetime import date

from ayambil.calendar.range_selector import DateStatus
from ayambil.db.session import get_sessionmaker
from ayambil.services import calendar_service


async def main(start: str, end: str, status: str = "open") -> None:
    days = calendar_service.expand_range(date.fromisoformat(start), date.fromisoformat(end))
    async with get_sessionmaker()() as session:
        written = await calendar_service.bulk_set_status(
            session, days=days, status=DateStatus(status)
        )
    print(f"{len(written)} dates set to {status}")


if __name__ == "__main__":
    if len(sys.argv) not in (3, 4):
        raise SystemExit(__doc__)
    asyncio.run(main(*sys.argv[1:]))
