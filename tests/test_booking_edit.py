"""
Tests for the conflict-aware booking edit guard.
"""

import pytest

from factories import make_booking, make_room
from models.booking_edit import propose_edit, resolve_time_flags, validate_booking_values
from models.pricing import balance_due
from utils.exceptions import ConflictError, StateError, ValidationError


def _snapshot(*bookings, rooms=None):
    return {
        'rooms': rooms or [make_room('801'), make_room('802'), make_room('803')],
        'bookings': list(bookings)
    }


class TestExtension:
    """Tests for moving the check-out date."""

    def test_extending_paid_booking_reverts_to_unpaid(self, now):
        """Paid 2400 for two nights, one more night makes it 3600 with 1200 due."""
        booking = make_booking(payment_status='Paid', paid_amount=2400)
        result = propose_edit(booking, {'check_out_date': '2024-01-13'}, _snapshot(booking), 'Desk', now)

        assert result['total_amount'] == 3600
        assert result['payment_status'] == 'Unpaid'
        assert balance_due(result) == 1200
        assert result['updated_by'] == 'Desk'
        assert booking['check_out_date'] == '2024-01-12'

    def test_extension_into_next_booking_is_rejected(self, now):
        booking = make_booking()
        nxt = make_booking('b2', check_in='2024-01-12', check_out='2024-01-14', booker_name='Nurse Jane')

        with pytest.raises(ConflictError) as exc:
            propose_edit(booking, {'check_out_date': '2024-01-13'}, _snapshot(booking, nxt), 'Desk', now)

        assert exc.value.reason == 'Cannot extend date to 2024-01-13. Room is booked by Nurse Jane.'
        assert exc.value.details['conflict_booking_id'] == 'b2'

    def test_shortening_keeps_paid_status(self, now):
        booking = make_booking(payment_status='Paid', paid_amount=2400)
        result = propose_edit(booking, {'check_out_date': '2024-01-11'}, _snapshot(booking), 'Desk', now)
        assert result['total_amount'] == 1200
        assert result['payment_status'] == 'Paid'

    def test_own_dates_do_not_conflict(self, now):
        """The edited booking is excluded from its own availability check."""
        booking = make_booking()
        result = propose_edit(booking, {'check_in_date': '2024-01-11'}, _snapshot(booking), 'Desk', now)
        assert result['total_amount'] == 1200

    def test_check_in_must_precede_check_out(self, now):
        booking = make_booking()
        with pytest.raises(ValidationError):
            propose_edit(booking, {'check_out_date': '2024-01-10'}, _snapshot(booking), 'Desk', now)


class TestRoomMove:
    """Tests for moving a booking to another room."""

    def test_move_to_free_room(self, now):
        booking = make_booking()
        result = propose_edit(booking, {'room_number': '803'}, _snapshot(booking), 'Desk', now)
        assert result['room_number'] == '803'
        assert result['total_amount'] == 2400

    def test_move_to_occupied_room_names_the_booker(self, now):
        booking = make_booking()
        other = make_booking('b2', room_number='803', booker_name='Prof. Williams')
        with pytest.raises(ConflictError) as exc:
            propose_edit(booking, {'room_number': '803'}, _snapshot(booking, other), 'Desk', now)
        assert 'Prof. Williams' in exc.value.reason

    def test_move_into_maintenance(self, now):
        booking = make_booking()
        rooms = [make_room('802'), make_room('803', status='Maintenance', maintenance_start='2024-01-11', maintenance_end='2024-01-11')]
        with pytest.raises(ConflictError) as exc:
            propose_edit(booking, {'room_number': '803'}, _snapshot(booking, rooms=rooms), 'Desk', now)
        assert exc.value.details['blocked_by'] == 'maintenance'

    def test_unknown_room(self, now):
        booking = make_booking()
        with pytest.raises(ValidationError):
            propose_edit(booking, {'room_number': '999'}, _snapshot(booking), 'Desk', now)


class TestSurchargeEdits:
    """Tests for early / late edits."""

    def test_late_check_out_time_adds_surcharge(self, now):
        booking = make_booking()
        result = propose_edit(booking, {'expected_check_out_time': '13:00'}, _snapshot(booking), 'Desk', now)
        assert result['late_check_out'] is True
        assert result['total_amount'] == 3000

    def test_early_flag_gets_default_time(self, now):
        booking = make_booking()
        result = propose_edit(booking, {'early_check_in': True}, _snapshot(booking), 'Desk', now)
        assert result['expected_check_in_time'] == '09:00'
        assert result['total_amount'] == 3000

    def test_clearing_flag_clears_time(self, now):
        booking = make_booking(late_check_out=True, expected_check_out_time='14:00')
        result = propose_edit(booking, {'late_check_out': False}, _snapshot(booking), 'Desk', now)
        assert result['expected_check_out_time'] is None
        assert result['total_amount'] == 2400

    @pytest.mark.parametrize('cleared', [None, ''])
    def test_clearing_time_clears_flag(self, cleared, now):
        booking = make_booking(early_check_in=True, expected_check_in_time='10:00')
        assert booking['total_amount'] == 3000

        result = propose_edit(booking, {'expected_check_in_time': cleared}, _snapshot(booking), 'Desk', now)

        assert result['early_check_in'] is False
        assert result['expected_check_in_time'] is None
        assert result['total_amount'] == 2400

    def test_clearing_check_out_time_clears_flag(self, now):
        booking = make_booking(late_check_out=True, expected_check_out_time='15:00')
        result = propose_edit(booking, {'expected_check_out_time': None}, _snapshot(booking), 'Desk', now)
        assert result['late_check_out'] is False
        assert result['total_amount'] == 2400

    def test_late_check_out_blocked_by_same_day_arrival(self, now):
        booking = make_booking()
        nxt = make_booking('b2', check_in='2024-01-12', check_out='2024-01-14', booker_name='Nurse Jane')
        with pytest.raises(ConflictError) as exc:
            propose_edit(booking, {'late_check_out': True}, _snapshot(booking, nxt), 'Desk', now)
        assert 'Nurse Jane' in exc.value.reason

    def test_rate_change_reprices(self, now):
        booking = make_booking()
        result = propose_edit(booking, {'rate': 1500}, _snapshot(booking), 'Desk', now)
        assert result['total_amount'] == 3000


class TestEditRules:
    """Tests for locked bookings and field validation."""

    def test_detail_edit_keeps_price(self, now):
        booking = make_booking(payment_status='Paid', paid_amount=2400)
        result = propose_edit(booking, {'notes': 'Needs extra pillow'}, _snapshot(booking), 'Desk', now)
        assert result['notes'] == 'Needs extra pillow'
        assert result['payment_status'] == 'Paid'
        assert result['total_amount'] == 2400

    @pytest.mark.parametrize('status', ['Cancelled', 'Checked-out'])
    def test_locked_statuses(self, status, now):
        booking = make_booking(status=status)
        with pytest.raises(StateError):
            propose_edit(booking, {'notes': 'x'}, _snapshot(booking), 'Desk', now)

    def test_protected_fields_rejected(self, now):
        booking = make_booking()
        with pytest.raises(ValidationError) as exc:
            propose_edit(booking, {'status': 'Checked-in', 'total_amount': 0}, _snapshot(booking), 'Desk', now)
        assert exc.value.details['fields'] == ['status', 'total_amount']
        assert exc.value.details['protected'] == ['status', 'total_amount']

    def test_unknown_field_rejected(self, now):
        booking = make_booking()
        with pytest.raises(ValidationError) as exc:
            propose_edit(booking, {'minibar': 1}, _snapshot(booking), 'Desk', now)
        assert exc.value.details['protected'] == []

    def test_empty_patch(self, now):
        with pytest.raises(ValidationError):
            propose_edit(make_booking(), {}, _snapshot(), 'Desk', now)

    def test_invalid_values(self):
        with pytest.raises(ValidationError):
            validate_booking_values({'rate': 999})
        with pytest.raises(ValidationError):
            validate_booking_values({'expected_check_in_time': '25:00'})
        with pytest.raises(ValidationError):
            validate_booking_values({'id_proof_type': 'Library Card'})
        with pytest.raises(ValidationError):
            validate_booking_values({'co_occupants': ['a', 'b', 'c', 'd']})

    def test_time_in_patch_decides_flag(self):
        values = {'early_check_in': True, 'expected_check_in_time': '15:00'}
        resolve_time_flags(values)
        assert values['early_check_in'] is False
