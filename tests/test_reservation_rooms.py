"""Unit tests for booking room types on a reservation.

The guard and repositories are patched; these run without Postgres.
"""

from unittest.mock import patch

import pytest

from roomledger.domain.errors import (
    OverbookingError,
    ReferentialError,
    ReservationNotFoundError,
)
from roomledger.domain.reservation_rooms import (
    add_reservation_room,
    remove_reservation_room,
    set_reservation_room_amount,
)

_MOD = "roomledger.domain.reservation_rooms"


def _link(amount):
    return {"reservation_id": 2, "room_type_id": 3, "amount": amount}


class TestAddReservationRoom:
    def test_new_link_is_guarded_then_written(self, cur):
        with patch(f"{_MOD}.get_reservation", return_value={"id": 2}), \
             patch(f"{_MOD}.get_room_link", return_value=None), \
             patch(f"{_MOD}.assert_room_amount_allowed", return_value=14) as mock_guard, \
             patch(f"{_MOD}.upsert_room_link", return_value=_link(10)) as mock_upsert:
            result = add_reservation_room(2, 3, 10, cur=cur)

        assert result == _link(10)
        mock_guard.assert_called_once_with(
            cur, reservation_id=2, room_type_id=3, new_amount=10, old_amount=None
        )
        mock_upsert.assert_called_once_with(
            cur, reservation_id=2, room_type_id=3, amount=10
        )

    def test_existing_amount_passed_as_old_amount(self, cur):
        with patch(f"{_MOD}.get_reservation", return_value={"id": 2}), \
             patch(f"{_MOD}.get_room_link", return_value=_link(4)), \
             patch(f"{_MOD}.assert_room_amount_allowed") as mock_guard, \
             patch(f"{_MOD}.upsert_room_link", return_value=_link(4)):
            add_reservation_room(2, 3, 4, cur=cur)

        assert mock_guard.call_args.kwargs["old_amount"] == 4

    def test_rejection_leaves_links_untouched(self, cur):
        with patch(f"{_MOD}.get_reservation", return_value={"id": 2}), \
             patch(f"{_MOD}.get_room_link", return_value=None), \
             patch(
                 f"{_MOD}.assert_room_amount_allowed",
                 side_effect=OverbookingError(3, 5, 4),
             ), \
             patch(f"{_MOD}.upsert_room_link") as mock_upsert:
            with pytest.raises(OverbookingError):
                add_reservation_room(2, 3, 5, cur=cur)

        mock_upsert.assert_not_called()

    def test_missing_reservation(self, cur):
        with patch(f"{_MOD}.get_reservation", return_value=None), \
             patch(f"{_MOD}.upsert_room_link") as mock_upsert:
            with pytest.raises(ReservationNotFoundError):
                add_reservation_room(404, 3, 1, cur=cur)

        mock_upsert.assert_not_called()

    def test_reservation_row_is_locked(self, cur):
        with patch(f"{_MOD}.get_reservation", return_value={"id": 2}) as mock_res, \
             patch(f"{_MOD}.get_room_link", return_value=None), \
             patch(f"{_MOD}.assert_room_amount_allowed"), \
             patch(f"{_MOD}.upsert_room_link", return_value=_link(1)):
            add_reservation_room(2, 3, 1, cur=cur)

        mock_res.assert_called_once_with(cur, 2, lock=True)

    def test_opens_own_transaction(self, cur):
        with patch(f"{_MOD}.txn") as mock_txn, \
             patch(f"{_MOD}.get_reservation", return_value={"id": 2}), \
             patch(f"{_MOD}.get_room_link", return_value=None), \
             patch(f"{_MOD}.assert_room_amount_allowed"), \
             patch(f"{_MOD}.upsert_room_link", return_value=_link(1)) as mock_upsert:
            mock_txn.return_value.__enter__.return_value = cur
            add_reservation_room(2, 3, 1)

        mock_txn.assert_called_once()
        assert mock_upsert.call_args.args[0] is cur


class TestSetReservationRoomAmount:
    def test_missing_link_is_referential_error(self, cur):
        with patch(f"{_MOD}.txn") as mock_txn, \
             patch(f"{_MOD}.get_reservation", return_value={"id": 2}), \
             patch(f"{_MOD}.get_room_link", return_value=None), \
             patch(f"{_MOD}.upsert_room_link") as mock_upsert:
            mock_txn.return_value.__enter__.return_value = cur
            with pytest.raises(ReferentialError) as exc_info:
                set_reservation_room_amount(2, 3, 2)

        assert exc_info.value.entity == "room link"
        mock_upsert.assert_not_called()

    def test_updates_existing_link(self, cur):
        with patch(f"{_MOD}.txn") as mock_txn, \
             patch(f"{_MOD}.get_reservation", return_value={"id": 2}), \
             patch(f"{_MOD}.get_room_link", return_value=_link(2)), \
             patch(f"{_MOD}.assert_room_amount_allowed") as mock_guard, \
             patch(f"{_MOD}.upsert_room_link", return_value=_link(3)):
            mock_txn.return_value.__enter__.return_value = cur
            result = set_reservation_room_amount(2, 3, 3)

        assert result["amount"] == 3
        assert mock_guard.call_args.kwargs["old_amount"] == 2
        assert mock_guard.call_args.kwargs["new_amount"] == 3


class TestRemoveReservationRoom:
    def test_remove_is_not_guarded(self, cur):
        with patch(f"{_MOD}.txn") as mock_txn, \
             patch(f"{_MOD}.delete_room_link", return_value=True) as mock_delete:
            mock_txn.return_value.__enter__.return_value = cur
            assert remove_reservation_room(2, 3) is True

        mock_delete.assert_called_once_with(cur, reservation_id=2, room_type_id=3)

    def test_remove_missing_returns_false(self, cur):
        with patch(f"{_MOD}.txn") as mock_txn, \
             patch(f"{_MOD}.delete_room_link", return_value=False):
            mock_txn.return_value.__enter__.return_value = cur
            assert remove_reservation_room(2, 3) is False
