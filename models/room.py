"""
Room inventory and maintenance administration.
Handles the fixed room list, maintenance windows and room statistics.
"""

import logging

from utils.exceptions import ValidationError
from utils.messages import get_message
from utils.validators import validate_date_format
from .intervals import contains_date, overlaps_closed
from .room_availability import ROOM_ACTIVE, ROOM_MAINTENANCE
from .state import STATUS_CHECKED_OUT, is_blocking

logger = logging.getLogger(__name__)

FLOORS = ('8', '9')
ROOMS_PER_FLOOR = 16

ROOM_TYPE_STANDARD = 'Standard'


# =============================================================================
# INVENTORY
# =============================================================================

def build_room_inventory(floors: tuple = FLOORS, rooms_per_floor: int = ROOMS_PER_FLOOR) -> list:
    """
    Build the dormitory room list.

    Room numbers are the floor followed by a two-digit index (801..816).

    Returns:
        list: Active Standard room dicts, floor by floor
    """
    rooms = []
    for floor in floors:
        for index in range(1, rooms_per_floor + 1):
            number = f'{floor}{index:02d}'
            rooms.append({
                'id': number,
                'number': number,
                'floor': floor,
                'type': ROOM_TYPE_STANDARD,
                'status': ROOM_ACTIVE,
                'maintenance_start': None,
                'maintenance_end': None
            })
    return rooms


def get_room_by_number(rooms: list, room_number: str) -> dict:
    """Room with the given number, or None."""
    for room in rooms:
        if room['number'] == room_number:
            return room
    return None


def require_room(rooms: list, room_number: str) -> dict:
    """
    Room with the given number.

    Raises:
        ValidationError: If the room does not exist
    """
    room = get_room_by_number(rooms, room_number)
    if room is None:
        raise ValidationError(get_message('room_not_found', room_number=room_number), room_number=room_number)
    return room


def get_rooms_by_floor(rooms: list, floor: str = None) -> list:
    """Rooms on a floor (all rooms when floor is None)."""
    if floor is None:
        return list(rooms)
    return [r for r in rooms if r['floor'] == str(floor)]


def group_rooms_by_floor(rooms: list) -> dict:
    """
    Group rooms by floor, keeping snapshot order.

    Returns:
        dict: {floor: [rooms]}
    """
    grouped = {}
    for room in rooms:
        grouped.setdefault(room['floor'], []).append(room)
    return grouped


def get_room_stats(rooms: list) -> dict:
    """Counts of total, active and maintenance rooms."""
    return {
        'total': len(rooms),
        'active': sum(1 for r in rooms if r['status'] == ROOM_ACTIVE),
        'maintenance': sum(1 for r in rooms if r['status'] == ROOM_MAINTENANCE)
    }


# =============================================================================
# MAINTENANCE
# =============================================================================

def schedule_maintenance(room: dict, start: str = None, end: str = None, indefinite: bool = False) -> dict:
    """
    Close a room for maintenance.

    Args:
        room: Room dict (not mutated)
        start: First closed day (YYYY-MM-DD), inclusive
        end: Last closed day (YYYY-MM-DD), inclusive
        indefinite: Close with no reopening date (start/end ignored)

    Returns:
        dict: Room in Maintenance status

    Raises:
        ValidationError: Missing dates, bad format or end before start
    """
    if not indefinite:
        if not start or not end:
            raise ValidationError(get_message('maintenance_dates_required'))
        for field, value in (('start', start), ('end', end)):
            if not validate_date_format(value):
                raise ValidationError(get_message('invalid_date', field=field), field=field)
        if start > end:
            raise ValidationError(get_message('maintenance_range_invalid'))

    result = dict(room)
    result['status'] = ROOM_MAINTENANCE
    result['maintenance_start'] = None if indefinite else start
    result['maintenance_end'] = None if indefinite else end

    if indefinite:
        logger.info(f"Room {room['number']} closed indefinitely")
    else:
        logger.info(f"Room {room['number']} closed for maintenance {start}..{end}")
    return result


def enable_room(room: dict) -> dict:
    """Reopen a room and clear its maintenance window."""
    result = dict(room)
    result['status'] = ROOM_ACTIVE
    result['maintenance_start'] = None
    result['maintenance_end'] = None
    logger.info(f"Room {room['number']} reopened")
    return result


def is_under_maintenance(room: dict, day: str) -> bool:
    """
    Whether maintenance closes the room on a given day.

    Indefinite closures cover every day; windows are inclusive.
    """
    if room.get('status') != ROOM_MAINTENANCE:
        return False
    if not room.get('maintenance_start') or not room.get('maintenance_end'):
        return True
    return contains_date(day, room['maintenance_start'], room['maintenance_end'])


def find_affected_bookings(room: dict, bookings: list) -> list:
    """
    Open bookings (not cancelled or checked out) that collide with maintenance.

    Existing bookings are not cancelled by a maintenance closure; callers
    report these so the desk can move the guests.

    Returns:
        list: Bookings ordered by check-in date
    """
    if room.get('status') != ROOM_MAINTENANCE:
        return []

    start = room.get('maintenance_start')
    end = room.get('maintenance_end')
    affected = []
    for booking in bookings:
        if booking.get('room_number') != room['number'] or not is_blocking(booking):
            continue
        if booking['status'] == STATUS_CHECKED_OUT:
            continue
        if not start or not end or overlaps_closed(booking['check_in_date'], booking['check_out_date'], start, end):
            affected.append(booking)
    return sorted(affected, key=lambda b: b['check_in_date'])
