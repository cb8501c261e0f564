"""
Room availability resolution and conflict detection.
Decides which rooms are free for a stay, and why the others are not.

Works on snapshot lists (rooms, bookings) passed in by the caller; nothing
here mutates its inputs.
"""

import logging

from utils.exceptions import ConflictError
from utils.messages import get_message
from .intervals import overlaps, overlaps_closed
from .state import is_blocking

logger = logging.getLogger(__name__)

ROOM_ACTIVE = 'Active'
ROOM_MAINTENANCE = 'Maintenance'

BLOCKED_BY_MAINTENANCE = 'maintenance'
BLOCKED_BY_BOOKING = 'booking'


# =============================================================================
# SINGLE-RULE CHECKS
# =============================================================================

def check_room_maintenance(room: dict, start: str, end: str) -> str:
    """
    Check whether a room's maintenance status blocks a date range.

    Rooms in Maintenance without a window are closed indefinitely. With a
    window, the window and [start, end] are compared as closed intervals.

    Args:
        room: Room dict
        start: Requested start date (YYYY-MM-DD)
        end: Requested end date (YYYY-MM-DD)

    Returns:
        str: Blocking reason, or None if maintenance does not block
    """
    if room.get('status') != ROOM_MAINTENANCE:
        return None

    window_start = room.get('maintenance_start')
    window_end = room.get('maintenance_end')
    if not window_start or not window_end:
        return get_message('closed_indefinitely')

    if overlaps_closed(start, end, window_start, window_end):
        return get_message('maintenance_conflict', start=window_start, end=window_end)

    return None


def get_conflicting_bookings(
    room_number: str,
    bookings: list,
    start: str,
    end: str,
    exclude_booking_id: str = None
) -> list:
    """
    Get every non-cancelled booking on a room that overlaps [start, end).

    Args:
        room_number: Room number
        bookings: Booking snapshot
        start: Requested check-in date
        end: Requested check-out date
        exclude_booking_id: Booking to ignore (the one being edited)

    Returns:
        list: Conflicting bookings in snapshot order
    """
    conflicts = []
    for booking in bookings:
        if booking.get('room_number') != room_number:
            continue
        if exclude_booking_id and booking.get('id') == exclude_booking_id:
            continue
        if not is_blocking(booking):
            continue
        if overlaps(start, end, booking['check_in_date'], booking['check_out_date']):
            conflicts.append(booking)
    return conflicts


def find_booking_conflict(
    room_number: str,
    bookings: list,
    start: str,
    end: str,
    exclude_booking_id: str = None
) -> dict:
    """First conflicting booking in snapshot order, or None."""
    conflicts = get_conflicting_bookings(room_number, bookings, start, end, exclude_booking_id)
    return conflicts[0] if conflicts else None


def find_same_day_arrival(
    room_number: str,
    bookings: list,
    check_out_date: str,
    exclude_booking_id: str = None
) -> dict:
    """
    Find another guest arriving on the day a booking checks out.

    A late check-out would run into the next guest's standard check-in
    window, so such an arrival blocks the late check-out surcharge.

    Args:
        room_number: Room number
        bookings: Booking snapshot
        check_out_date: Check-out date of the booking asking for late check-out
        exclude_booking_id: The booking itself

    Returns:
        dict: The arriving booking, or None
    """
    for booking in bookings:
        if booking.get('room_number') != room_number:
            continue
        if exclude_booking_id and booking.get('id') == exclude_booking_id:
            continue
        if not is_blocking(booking):
            continue
        if booking['check_in_date'] == check_out_date:
            return booking
    return None


# =============================================================================
# RESOLVER
# =============================================================================

def resolve_room(
    room: dict,
    bookings: list,
    start: str,
    end: str,
    exclude_booking_id: str = None
) -> dict:
    """
    Resolve availability of one room for [start, end).

    Returns:
        dict: {
            'room': dict,
            'available': bool,
            'reason': str or None,
            'blocked_by': 'maintenance' | 'booking' | None,
            'conflict_booking_id': str or None
        }
    """
    result = {
        'room': room,
        'available': True,
        'reason': None,
        'blocked_by': None,
        'conflict_booking_id': None
    }

    reason = check_room_maintenance(room, start, end)
    if reason:
        result.update(available=False, reason=reason, blocked_by=BLOCKED_BY_MAINTENANCE)
        return result

    conflict = find_booking_conflict(room['number'], bookings, start, end, exclude_booking_id)
    if conflict:
        result.update(
            available=False,
            reason=get_message(
                'occupied_by',
                booker_name=conflict.get('booker_name', ''),
                check_in=conflict['check_in_date'],
                check_out=conflict['check_out_date']
            ),
            blocked_by=BLOCKED_BY_BOOKING,
            conflict_booking_id=conflict.get('id')
        )

    return result


def resolve_room_availability(
    rooms: list,
    bookings: list,
    start: str,
    end: str,
    exclude_booking_id: str = None
) -> list:
    """
    Resolve availability of every candidate room for a stay.

    Args:
        rooms: Candidate rooms (snapshot order is kept)
        bookings: Booking snapshot
        start: Requested check-in date (YYYY-MM-DD)
        end: Requested check-out date (YYYY-MM-DD)
        exclude_booking_id: Booking to ignore when re-validating its own edit

    Returns:
        list: One resolve_room() result per room
    """
    results = [resolve_room(room, bookings, start, end, exclude_booking_id) for room in rooms]
    logger.debug(
        'Resolved %d rooms for %s..%s: %d available',
        len(results), start, end, sum(1 for r in results if r['available'])
    )
    return results


def select_room(results: list, preferred_room: str = None) -> dict:
    """
    Pick a room from resolver results.

    The preferred room wins when it is available; otherwise the first
    available room in snapshot order is taken.

    Args:
        results: Output of resolve_room_availability()
        preferred_room: Room number to favour (e.g. a returning guest's room)

    Returns:
        dict: Selected room, or None if nothing is available
    """
    available = [r['room'] for r in results if r['available']]
    if not available:
        return None

    if preferred_room:
        for room in available:
            if room['number'] == preferred_room:
                return room

    return available[0]


def check_room_available(
    room: dict,
    bookings: list,
    start: str,
    end: str,
    exclude_booking_id: str = None
) -> None:
    """
    Require a room to be free for [start, end).

    Raises:
        ConflictError: With the blocking reason
    """
    result = resolve_room(room, bookings, start, end, exclude_booking_id)
    if not result['available']:
        logger.info('Room %s unavailable for %s..%s: %s', room['number'], start, end, result['reason'])
        raise ConflictError(
            result['reason'],
            room_number=room['number'],
            blocked_by=result['blocked_by'],
            conflict_booking_id=result['conflict_booking_id']
        )
