"""Print room availability for a room type and date range as JSON.

Usage:
    DATABASE_URL=... python scripts/check_availability.py <room_type_id> <date_from> [date_to]

Dates are YYYY-MM-DD; omit date_to for an open-ended range.
"""

from __future__ import annotations

import json
import os
import sys
from datetime import date

from roomledger.domain.availability import get_available_rooms
from roomledger.infra.settings import load_settings
from roomledger.observability.correlation import correlation_scope
from roomledger.observability.logging import configure_logging


def main() -> None:
    if len(sys.argv) not in (3, 4):
        print("Usage: python scripts/check_availability.py <room_type_id> <date_from> [date_to]")
        sys.exit(2)

    # Guard: require env vars
    if not os.environ.get("DATABASE_URL"):
        print("ERROR: DATABASE_URL not set")
        sys.exit(1)

    room_type_id = int(sys.argv[1])
    date_from = date.fromisoformat(sys.argv[2])
    date_to = date.fromisoformat(sys.argv[3]) if len(sys.argv) == 4 else None

    logger = configure_logging(load_settings().log_level)

    with correlation_scope() as cid:
        available = get_available_rooms(room_type_id, date_from, date_to)
        logger.info(
            "availability checked",
            extra={
                "extra_fields": {
                    "room_type_id": room_type_id,
                    "available": available,
                },
            },
        )

    print(
        json.dumps(
            {
                "room_type_id": room_type_id,
                "date_from": date_from.isoformat(),
                "date_to": date_to.isoformat() if date_to else None,
                "available": available,
                "known": available is not None,
                "correlation_id": cid,
            }
        )
    )


if __name__ == "__main__":
    main()
