"""Shared pytest fixtures for roomledger tests."""
import os
import sys
sys.dont_write_bytecode = True

from unittest.mock import MagicMock  # noqa: E402

import pytest  # noqa: E402

_TABLES = (
    "reservation_services",
    "reservation_room_types",
    "archive_reservations",
    "reservations",
    "room_types",
    "staff_services",
    "services",
    "staff",
    "clients",
)


@pytest.fixture
def cur():
    """Mocked psycopg2 cursor."""
    return MagicMock()


@pytest.fixture
def clean_db():
    """Empty every roomledger table before and after the test (requires Postgres)."""
    if not os.environ.get("DATABASE_URL"):
        pytest.skip("DATABASE_URL not set - skipping DB integration tests")

    from roomledger.infra.db import txn

    def _truncate():
        with txn() as c:
            c.execute(f"TRUNCATE {', '.join(_TABLES)} RESTART IDENTITY")

    _truncate()
    yield
    _truncate()
