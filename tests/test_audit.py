"""
Tests for audit helpers and error serialization.
"""

from utils.audit import changed_fields, log_audit, stamp_created, stamp_updated
from utils.exceptions import ConflictError, StateError, ValidationError


class TestStamps:
    """Tests for audit field stamping."""

    def test_stamp_created(self, now):
        record = stamp_created({'id': 'b1'}, 'Desk', now)
        assert record == {'id': 'b1', 'created_by': 'Desk', 'created_at': '2024-01-10T15:30:00+07:00'}

    def test_stamp_updated_defaults_user(self, now):
        original = {'id': 'b1', 'created_by': 'Desk'}
        record = stamp_updated(original, None, now)
        assert record['updated_by'] == 'Unknown'
        assert record['created_by'] == 'Desk'
        assert 'updated_at' not in original


class TestChangedFields:
    """Tests for before/after diffs."""

    def test_only_changed_fields(self):
        before = {'notes': '', 'rate': 1200, 'updated_at': 'x'}
        after = {'notes': 'VIP', 'rate': 1200, 'updated_at': 'y', 'license_plate': 'ABC'}
        assert changed_fields(before, after) == {
            'license_plate': {'before': None, 'after': 'ABC'},
            'notes': {'before': '', 'after': 'VIP'},
        }

    def test_log_audit_without_states(self):
        entry = log_audit('CANCEL', 'booking', 'b1', user='Desk')
        assert entry['changes'] is None
        assert entry['user'] == 'Desk'


class TestErrors:
    """Tests for error payloads."""

    def test_status_codes(self):
        assert ValidationError('x').status_code == 400
        assert ConflictError('x').status_code == 409
        assert StateError('x').status_code == 422

    def test_to_dict(self):
        error = ConflictError('Occupied by Dr. Somchai', conflict_booking_id='b1')
        assert error.to_dict() == {
            'error': 'Occupied by Dr. Somchai',
            'error_type': 'conflict',
            'details': {'conflict_booking_id': 'b1'}
        }
        assert ValidationError('Bad').to_dict() == {'error': 'Bad', 'error_type': 'validation'}
