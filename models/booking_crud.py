"""
Booking creation, lookup and deletion over a snapshot.

Functions take the snapshot ({'rooms': [...], 'bookings': [...]}) explicitly
and return new records; merging them into storage is the caller's job.
"""

import logging
import re

from utils.audit import stamp_created
from utils.datetime_helpers import get_now
from utils.exceptions import ConflictError, StateError, ValidationError
from utils.helpers import generate_id
from utils.messages import get_message
from utils.validators import missing_fields, sanitize_input, validate_date_range
from .booking_edit import check_late_check_out, resolve_time_flags, validate_booking_values
from .booking_state import can_delete
from .pricing import RATE_INTERNAL, compute_booking_total
from .room_availability import check_room_available, resolve_room_availability, select_room
from .state import PAYMENT_UNPAID, STATUS_CONFIRMED

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ('booker_name', 'booker_phone', 'check_in_date', 'check_out_date')

OPTIONAL_TEXT_FIELDS = (
    'guest_name', 'guest_phone', 'identification_number', 'organization',
    'license_plate', 'notes', 'id_proof_type', 'expected_check_in_time',
    'expected_check_out_time'
)

REPEAT_GUEST_NOTE = 'Returning Guest'


# =============================================================================
# BOOKING NUMBER GENERATION
# =============================================================================

def generate_booking_number(bookings: list, year: int) -> str:
    """
    Generate the next booking number for a year.

    Format: BK-YYYY-NNN where NNN is the highest sequence already used that
    year plus one.

    Example: BK-2024-007

    Args:
        bookings: Booking snapshot
        year: Booking year

    Returns:
        str: Unused booking number
    """
    pattern = re.compile(rf'^BK-{year}-(\d+)$')
    max_seq = 0
    for booking in bookings:
        match = pattern.match(booking.get('booking_no') or '')
        if match:
            max_seq = max(max_seq, int(match.group(1)))
    return f'BK-{year}-{max_seq + 1:03d}'


# =============================================================================
# READ
# =============================================================================

def get_booking_by_id(bookings: list, booking_id: str) -> dict:
    """Booking with the given id, or None."""
    for booking in bookings:
        if booking.get('id') == booking_id:
            return booking
    return None


def require_booking(bookings: list, booking_id: str) -> dict:
    """
    Booking with the given id.

    Raises:
        ValidationError: If no such booking exists
    """
    booking = get_booking_by_id(bookings, booking_id)
    if booking is None:
        raise ValidationError(get_message('booking_not_found'), booking_id=booking_id)
    return booking


def get_room_bookings(bookings: list, room_number: str) -> list:
    """All bookings of a room, ordered by check-in date."""
    return sorted(
        (b for b in bookings if b.get('room_number') == room_number),
        key=lambda b: b['check_in_date']
    )


# =============================================================================
# CREATE
# =============================================================================

def _pick_room(data: dict, snapshot: dict, preferred_room: str = None) -> dict:
    """Requested room (must be free) or the first free room."""
    rooms = snapshot['rooms']
    bookings = snapshot['bookings']
    start = data['check_in_date']
    end = data['check_out_date']

    room_number = data.get('room_number')
    if room_number:
        room = next((r for r in rooms if r['number'] == room_number), None)
        if room is None:
            raise ValidationError(get_message('room_not_found', room_number=room_number), room_number=room_number)
        check_room_available(room, bookings, start, end)
        return room

    room = select_room(resolve_room_availability(rooms, bookings, start, end), preferred_room)
    if room is None:
        raise ConflictError(get_message('no_rooms_available', check_in=start, check_out=end))
    return room


def create_booking(data: dict, snapshot: dict, created_by: str = None, now=None) -> dict:
    """
    Create a Confirmed, Unpaid booking.

    Args:
        data: Request values. Required: booker_name, booker_phone,
            check_in_date, check_out_date. Optional: room_number (auto-selected
            when absent), rate (default 1200), guest fields (default to the
            booker), early_check_in / expected_check_in_time,
            late_check_out / expected_check_out_time, organization, notes,
            license_plate, co_occupants, id_proof_type.
        snapshot: {'rooms': [...], 'bookings': [...]}
        created_by: Operator name
        now: Current datetime

    Returns:
        dict: New booking record

    Raises:
        ValidationError: Missing or malformed values
        ConflictError: Room not available (booking, maintenance or same-day
            arrival blocking a late check-out)
    """
    if not data:
        raise ValidationError(get_message('data_required'))

    missing = missing_fields(data, REQUIRED_FIELDS)
    if missing:
        raise ValidationError(get_message('fields_required', fields=', '.join(missing)), fields=missing)

    validate_booking_values(data)
    if not validate_date_range(data['check_in_date'], data['check_out_date']):
        raise ValidationError(get_message('invalid_date_range'))

    now = now or get_now()
    room = _pick_room(data, snapshot, data.get('preferred_room'))

    booker_name = sanitize_input(data['booker_name'], 100)
    booker_phone = sanitize_input(data['booker_phone'], 30)

    booking = {
        'id': generate_id(),
        'booking_no': generate_booking_number(snapshot['bookings'], now.year),
        'booker_name': booker_name,
        'booker_phone': booker_phone,
        'guest_name': booker_name,
        'guest_phone': booker_phone,
        'identification_number': None,
        'organization': '',
        'room_number': room['number'],
        'check_in_date': data['check_in_date'],
        'check_out_date': data['check_out_date'],
        'check_in_time': None,
        'status': STATUS_CONFIRMED,
        'payment_status': PAYMENT_UNPAID,
        'rate': data.get('rate') or RATE_INTERNAL,
        'total_amount': 0,
        'paid_amount': 0,
        'transactions': [],
        'license_plate': None,
        'receipt_number': None,
        'notes': '',
        'early_check_in': False,
        'expected_check_in_time': None,
        'late_check_out': False,
        'expected_check_out_time': None,
        'co_occupants': list(data.get('co_occupants') or []),
        'id_proof_type': None,
    }

    for field in OPTIONAL_TEXT_FIELDS:
        value = data.get(field)
        if isinstance(value, str):
            value = value.strip()
        if value:
            booking[field] = value

    time_flags = {
        key: data[key] for key in
        ('early_check_in', 'expected_check_in_time', 'late_check_out', 'expected_check_out_time')
        if key in data
    }
    resolve_time_flags(booking, time_flags)

    check_late_check_out(booking, snapshot['bookings'])

    booking['total_amount'] = compute_booking_total(booking)
    booking = stamp_created(booking, created_by, now)

    logger.info(
        f"Booking {booking['booking_no']} created: room {booking['room_number']} "
        f"{booking['check_in_date']}..{booking['check_out_date']} total {booking['total_amount']}"
    )
    return booking


def schedule_repeat_booking(
    source: dict,
    check_in_date: str,
    check_out_date: str,
    snapshot: dict,
    created_by: str = None,
    now=None
) -> dict:
    """
    Book a returning guest again, favouring the room they stayed in.

    Guest details and rate are copied from the source booking; the room is
    the source room when free, else the first free room.

    Raises:
        ValidationError, ConflictError: As create_booking()
    """
    data = {
        'booker_name': source['booker_name'],
        'booker_phone': source['booker_phone'],
        'guest_name': source.get('guest_name'),
        'guest_phone': source.get('guest_phone'),
        'organization': source.get('organization'),
        'identification_number': source.get('identification_number'),
        'rate': source.get('rate') or RATE_INTERNAL,
        'check_in_date': check_in_date,
        'check_out_date': check_out_date,
        'preferred_room': source.get('room_number'),
        'notes': REPEAT_GUEST_NOTE,
    }
    return create_booking(data, snapshot, created_by, now)


# =============================================================================
# DELETE
# =============================================================================

def delete_booking(bookings: list, booking_id: str) -> list:
    """
    Remove a booking from a snapshot list.

    Returns:
        list: New list without the booking

    Raises:
        ValidationError: Unknown booking
        StateError: Checked-in and Checked-out bookings cannot be deleted
    """
    booking = require_booking(bookings, booking_id)
    if not can_delete(booking['status']):
        raise StateError(get_message('cannot_delete', status=booking['status']), current=booking['status'])

    logger.info(f"Booking {booking.get('booking_no')} deleted")
    return [b for b in bookings if b.get('id') != booking_id]
