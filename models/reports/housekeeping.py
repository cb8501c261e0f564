"""Housekeeping checklist for one floor and day."""
from typing import Any

from models.room import is_under_maintenance
from models.state import is_blocking

# Supplies laid out per occupied room (item, quantity)
CHECKLIST_ITEMS = [
    {'name': 'Pillowcase', 'count': 2},
    {'name': 'Bed sheet', 'count': 1},
    {'name': 'Bath towel', 'count': 2},
    {'name': 'Hand towel', 'count': 2},
    {'name': 'Bath mat', 'count': 1},
    {'name': 'Mattress pad', 'count': 1},
    {'name': 'Blanket', 'count': 2},
    {'name': 'Tissue roll', 'count': 1},
    {'name': 'Tissue box', 'count': 1},
    {'name': 'Shampoo', 'count': 2},
    {'name': 'Soap', 'count': 2},
    {'name': 'Drinking water', 'count': 2},
    {'name': 'Sanitary bag', 'count': 2},
    {'name': 'Shower cap', 'count': 2},
    {'name': 'Glass bag', 'count': 2},
]

# Count shown for a room whose guest stayed the previous night
RESTOCK_COUNT = 2


def get_housekeeping_rows(rooms: list, bookings: list, date: str) -> list[dict[str, Any]]:
    """
    One row per room.

    A room is occupied when a booking covers date with both ends included.
    show_count is set for occupied rooms whose guest did not arrive today;
    maintenance is only displayed for rooms nobody occupies.
    """
    active = [b for b in bookings if is_blocking(b)]

    rows = []
    for room in rooms:
        room_bookings = [b for b in active if b.get('room_number') == room['number']]
        occupant = next(
            (b for b in room_bookings if b['check_in_date'] <= date <= b['check_out_date']),
            None
        )
        is_occupied = occupant is not None
        is_maintenance = is_under_maintenance(room, date)

        rows.append({
            'room': room,
            'check_in': any(b['check_in_date'] == date for b in room_bookings),
            'check_out': any(b['check_out_date'] == date for b in room_bookings),
            'occupied': is_occupied,
            'show_count': is_occupied and occupant['check_in_date'] != date,
            'maintenance': is_maintenance,
            'show_maintenance': is_maintenance and not is_occupied
        })
    return rows


def get_housekeeping_report(rooms: list, bookings: list, date: str, floor: str | None = None) -> dict[str, Any]:
    """
    Build the housekeeping sheet.

    Returns:
        Dict with rows, the checklist and totals: count_total (RESTOCK_COUNT
        per show_count room), check_ins, check_outs
    """
    selected = [r for r in rooms if floor is None or r['floor'] == str(floor)]
    rows = get_housekeeping_rows(selected, bookings, date)

    return {
        'date': date,
        'floor': floor,
        'rows': rows,
        'checklist': CHECKLIST_ITEMS,
        'totals': {
            'count_total': sum(RESTOCK_COUNT for r in rows if r['show_count']),
            'check_ins': sum(1 for r in rows if r['check_in']),
            'check_outs': sum(1 for r in rows if r['check_out'])
        }
    }
