"""Unit tests for complimentary service entitlement (no Postgres needed)."""

from unittest.mock import patch

import pytest

from roomledger.domain.errors import ReservationNotFoundError
from roomledger.domain.free_services import (
    grant_free_services,
    set_free_included,
    turned_on,
)
from roomledger.infra.repositories.service_links_repository import (
    insert_free_service_links,
)

_MOD = "roomledger.domain.free_services"


def _reservation(free_included):
    return {"id": 7, "client_id": 1, "free_included": free_included}


class TestTurnedOn:
    @pytest.mark.parametrize(
        "old, new, expected",
        [
            (False, True, True),
            (None, True, True),
            (True, True, False),
            (True, False, False),
            (True, None, False),
            (False, False, False),
            (None, None, False),
            (False, None, False),
        ],
    )
    def test_matrix(self, old, new, expected):
        assert turned_on(old, new) is expected


class TestGrantFreeServices:
    def test_grants_on_transition(self, cur):
        with patch(f"{_MOD}.insert_free_service_links", return_value=[4, 9]) as mock_ins:
            granted = grant_free_services(
                cur, reservation_id=7, old_value=False, new_value=True
            )

        assert granted == [4, 9]
        mock_ins.assert_called_once_with(cur, 7)

    def test_repeated_true_grants_nothing(self, cur):
        with patch(f"{_MOD}.insert_free_service_links") as mock_ins:
            granted = grant_free_services(
                cur, reservation_id=7, old_value=True, new_value=True
            )

        assert granted == []
        mock_ins.assert_not_called()

    def test_turning_off_grants_nothing(self, cur):
        with patch(f"{_MOD}.insert_free_service_links") as mock_ins:
            grant_free_services(cur, reservation_id=7, old_value=True, new_value=False)

        mock_ins.assert_not_called()


class TestSetFreeIncluded:
    def test_false_to_true_grants(self, cur):
        with patch(f"{_MOD}.get_reservation", return_value=_reservation(False)), \
             patch(f"{_MOD}.update_reservation", return_value=_reservation(True)) as mock_upd, \
             patch(f"{_MOD}.insert_free_service_links", return_value=[4]):
            result = set_free_included(7, True, cur=cur)

        assert result["granted_service_ids"] == [4]
        assert result["reservation"]["free_included"] is True
        mock_upd.assert_called_once_with(cur, 7, {"free_included": True})

    def test_true_to_true_grants_nothing(self, cur):
        with patch(f"{_MOD}.get_reservation", return_value=_reservation(True)), \
             patch(f"{_MOD}.update_reservation", return_value=_reservation(True)), \
             patch(f"{_MOD}.insert_free_service_links") as mock_ins:
            result = set_free_included(7, True, cur=cur)

        assert result["granted_service_ids"] == []
        mock_ins.assert_not_called()

    def test_missing_reservation(self, cur):
        with patch(f"{_MOD}.get_reservation", return_value=None), \
             patch(f"{_MOD}.update_reservation") as mock_upd:
            with pytest.raises(ReservationNotFoundError):
                set_free_included(404, True, cur=cur)

        mock_upd.assert_not_called()

    def test_grant_failure_propagates(self, cur):
        """A failing grant aborts the flag write with it (txn rolls back)."""
        with patch(f"{_MOD}.txn") as mock_txn, \
             patch(f"{_MOD}.get_reservation", return_value=_reservation(None)), \
             patch(f"{_MOD}.update_reservation", return_value=_reservation(True)), \
             patch(f"{_MOD}.insert_free_service_links", side_effect=RuntimeError("boom")):
            mock_txn.return_value.__enter__.return_value = cur
            with pytest.raises(RuntimeError, match="boom"):
                set_free_included(7, True)


class TestInsertFreeServiceLinksQuery:
    def test_only_zero_priced_and_idempotent(self, cur):
        cur.fetchall.return_value = [(9,), (4,)]

        result = insert_free_service_links(cur, 7)

        assert result == [4, 9]
        query, params = cur.execute.call_args.args
        assert "s.price = 0" in query
        assert "ON CONFLICT (reservation_id, service_id) DO NOTHING" in query
        assert params == (7,)
