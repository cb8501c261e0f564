"""
In-memory snapshot store.

Holds the only mutable copy of rooms and bookings. Core functions read a
snapshot and return new records; the store merges those records back and
bumps its version. Passing expected_version makes a merge fail when the
store moved on since the caller read it.
"""

import copy
import logging
from datetime import date

from utils.datetime_helpers import format_timestamp, get_now, get_today
from utils.exceptions import ConflictError, ValidationError
from utils.messages import get_message
from .intervals import add_days, to_date_string
from .pricing import compute_booking_total
from .room import build_room_inventory
from .state import (
    PAYMENT_PAID,
    PAYMENT_UNPAID,
    STATUS_CHECKED_IN,
    STATUS_CONFIRMED,
)

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Versioned store of rooms and bookings."""

    def __init__(self, rooms: list = None, bookings: list = None):
        self.rooms = list(rooms or [])
        self.bookings = list(bookings or [])
        self.audit_log = []
        self.version = 0

    # =========================================================================
    # READ
    # =========================================================================

    def snapshot(self) -> dict:
        """Deep copy of the current state, safe to hand to core functions."""
        return {
            'rooms': copy.deepcopy(self.rooms),
            'bookings': copy.deepcopy(self.bookings),
            'version': self.version
        }

    def get_booking(self, booking_id: str) -> dict:
        for booking in self.bookings:
            if booking['id'] == booking_id:
                return copy.deepcopy(booking)
        return None

    def get_room(self, room_number: str) -> dict:
        for room in self.rooms:
            if room['number'] == room_number:
                return copy.deepcopy(room)
        return None

    # =========================================================================
    # WRITE
    # =========================================================================

    def _check_version(self, expected_version):
        if expected_version is not None and expected_version != self.version:
            logger.warning(f'Stale write: expected version {expected_version}, store is at {self.version}')
            raise ConflictError(
                get_message('snapshot_changed'),
                expected_version=expected_version,
                version=self.version
            )

    def _bump(self) -> int:
        self.version += 1
        return self.version

    def merge_booking(self, booking: dict, expected_version: int = None) -> int:
        """
        Insert or replace a booking by id.

        Args:
            booking: Booking record returned by a core function
            expected_version: Version the caller read, or None to skip the check

        Returns:
            int: New store version

        Raises:
            ConflictError: If expected_version is stale
        """
        self._check_version(expected_version)
        record = copy.deepcopy(booking)
        for index, existing in enumerate(self.bookings):
            if existing['id'] == record['id']:
                self.bookings[index] = record
                break
        else:
            self.bookings.append(record)
        return self._bump()

    def remove_booking(self, booking_id: str, expected_version: int = None) -> int:
        """
        Delete a booking by id.

        Raises:
            ConflictError: If expected_version is stale
            ValidationError: If the booking does not exist
        """
        self._check_version(expected_version)
        remaining = [b for b in self.bookings if b['id'] != booking_id]
        if len(remaining) == len(self.bookings):
            raise ValidationError(get_message('booking_not_found'), booking_id=booking_id)
        self.bookings = remaining
        return self._bump()

    def merge_room(self, room: dict, expected_version: int = None) -> int:
        """
        Replace a room by number.

        Raises:
            ConflictError: If expected_version is stale
            ValidationError: If the room does not exist
        """
        self._check_version(expected_version)
        for index, existing in enumerate(self.rooms):
            if existing['number'] == room['number']:
                self.rooms[index] = copy.deepcopy(room)
                return self._bump()
        raise ValidationError(get_message('room_not_found', room_number=room['number']), room_number=room['number'])

    def record_audit(self, entry: dict) -> None:
        """Keep an audit entry produced by utils.audit."""
        self.audit_log.append(entry)

    def load(self, rooms: list, bookings: list) -> int:
        """Replace the whole state (seeding, tests)."""
        self.rooms = copy.deepcopy(rooms)
        self.bookings = copy.deepcopy(bookings)
        self.audit_log = []
        return self._bump()

    def seed_demo(self, today: date = None) -> int:
        """Load the demo room inventory and bookings around today."""
        return self.load(build_room_inventory(), build_demo_bookings(today))


# =============================================================================
# DEMO DATA
# =============================================================================

def _demo_booking(**fields) -> dict:
    booking = {
        'guest_phone': None,
        'identification_number': None,
        'organization': '',
        'check_in_time': None,
        'transactions': [],
        'license_plate': None,
        'receipt_number': None,
        'notes': '',
        'early_check_in': False,
        'expected_check_in_time': None,
        'late_check_out': False,
        'expected_check_out_time': None,
        'co_occupants': [],
        'id_proof_type': None,
        'updated_by': None,
        'updated_at': None,
    }
    booking.update(fields)
    booking['total_amount'] = compute_booking_total(booking)
    return booking


def _demo_transaction(tx_id: str, tx_type: str, amount, receipt_number: str, updated_by: str, timestamp: str) -> dict:
    return {
        'id': tx_id,
        'type': tx_type,
        'amount': amount,
        'status': PAYMENT_PAID,
        'receipt_number': receipt_number,
        'updated_by': updated_by,
        'timestamp': timestamp,
        'note': None
    }


def build_demo_bookings(today: date = None) -> list:
    """
    Six demo bookings placed relative to today: arrivals, departures,
    in-house guests and a future reservation.
    """
    today = today or get_today()
    day = to_date_string(today)
    stamp = format_timestamp(get_now())
    year = today.year

    return [
        _demo_booking(
            id='b1', booking_no=f'BK-{year}-001',
            booker_name='Dr. Somchai', booker_phone='081-234-5678',
            guest_name='Dr. Somchai', organization='Surgery Dept',
            room_number='802', check_in_date=day, check_out_date=add_days(day, 2),
            status=STATUS_CONFIRMED, payment_status=PAYMENT_UNPAID,
            rate=1200, paid_amount=0,
            created_by='System Seeder', created_at=stamp
        ),
        _demo_booking(
            id='b2', booking_no=f'BK-{year}-002',
            booker_name='Nurse Jane', booker_phone='089-999-8888',
            guest_name='Mr. John Doe', organization='Pediatrics',
            room_number='805', check_in_date=day, check_out_date=add_days(day, 1),
            status=STATUS_CHECKED_IN, payment_status=PAYMENT_PAID,
            rate=1500, paid_amount=1500, check_in_time='13:45',
            receipt_number='RCP-001', id_proof_type='National ID',
            transactions=[_demo_transaction('t1', 'Room Charge', 1500, 'RCP-001', 'Staff Member', stamp)],
            created_by='Staff Member', created_at=stamp,
            updated_by='Super Admin', updated_at=stamp
        ),
        _demo_booking(
            id='b3', booking_no=f'BK-{year}-003',
            booker_name='Prof. Williams', booker_phone='02-218-1111',
            guest_name='Prof. Williams', organization='International',
            room_number='901', check_in_date=add_days(day, -2), check_out_date=day,
            status=STATUS_CHECKED_IN, payment_status=PAYMENT_PAID,
            rate=1200, paid_amount=2400, id_proof_type='Passport',
            transactions=[_demo_transaction('t2', 'Room Charge', 2400, 'RCP-005', 'Super Admin', stamp)],
            created_by='Super Admin', created_at=stamp
        ),
        _demo_booking(
            id='b4', booking_no=f'BK-{year}-004',
            booker_name='Admin Staff', booker_phone='080-000-0000',
            guest_name='Guest Speaker A', organization='Dean Office',
            room_number='910', check_in_date=add_days(day, -3), check_out_date=day,
            status=STATUS_CHECKED_IN, payment_status=PAYMENT_UNPAID,
            rate=1500, paid_amount=0, id_proof_type='Staff ID',
            created_by='System Seeder', created_at=stamp
        ),
        _demo_booking(
            id='b5', booking_no=f'BK-{year}-005',
            booker_name='Dr. Piti', booker_phone='085-555-5555',
            guest_name='Dr. Piti', organization='Radiology',
            room_number='801', check_in_date=add_days(day, -1), check_out_date=add_days(day, 3),
            status=STATUS_CHECKED_IN, payment_status=PAYMENT_PAID,
            rate=1200, paid_amount=5400, id_proof_type='Staff ID',
            early_check_in=True, expected_check_in_time='09:00',
            license_plate='1กข 1234',
            transactions=[
                _demo_transaction('t3', 'Room Charge', 4800, 'RCP-003', 'Staff Member', stamp),
                _demo_transaction('t4', 'Early Check-in', 600, 'RCP-004', 'Staff Member', stamp),
            ],
            created_by='Staff Member', created_at=stamp
        ),
        _demo_booking(
            id='b6', booking_no=f'BK-{year}-006',
            booker_name='Future Reserver', booker_phone='099-999-9999',
            guest_name='Future Guest', organization='Cardiology',
            room_number='803', check_in_date=add_days(day, 1), check_out_date=add_days(day, 4),
            status=STATUS_CONFIRMED, payment_status=PAYMENT_UNPAID,
            rate=1200, paid_amount=0,
            created_by='Super Admin', created_at=stamp
        ),
    ]
