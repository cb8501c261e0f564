"""Monthly occupancy grid: one row per room, one cell per day."""
from typing import Any

from models.intervals import date_range, month_bounds
from models.room import is_under_maintenance
from models.state import is_blocking


def find_booking_on(bookings: list, room_number: str, date: str) -> dict | None:
    """Non-cancelled booking occupying a room on date ([check_in, check_out))."""
    for booking in bookings:
        if booking.get('room_number') != room_number or not is_blocking(booking):
            continue
        if booking['check_in_date'] <= date < booking['check_out_date']:
            return booking
    return None


def get_monthly_grid(
    rooms: list,
    bookings: list,
    year: int,
    month: int,
    floor: str | None = None
) -> dict[str, Any]:
    """
    Build the room-by-day grid for a month.

    Args:
        rooms: Room snapshot
        bookings: Booking snapshot
        year: Year
        month: Month (1-12)
        floor: Only rooms on this floor (all floors when None)

    Returns:
        Dict with 'days' (YYYY-MM-DD list) and 'rows', each row holding the
        room and its cells: {date, booking_id, booking_no, booker_name,
        status, is_start, maintenance}
    """
    days = date_range(*month_bounds(year, month))

    selected = [r for r in rooms if floor is None or r['floor'] == str(floor)]
    selected = sorted(selected, key=lambda r: r['number'])

    rows = []
    for room in selected:
        cells = []
        for date in days:
            booking = find_booking_on(bookings, room['number'], date)
            cells.append({
                'date': date,
                'booking_id': booking['id'] if booking else None,
                'booking_no': booking.get('booking_no') if booking else None,
                'booker_name': booking.get('booker_name') if booking else None,
                'status': booking['status'] if booking else None,
                'is_start': bool(booking) and booking['check_in_date'] == date,
                'maintenance': is_under_maintenance(room, date)
            })
        rows.append({'room': room, 'cells': cells})

    return {'year': year, 'month': month, 'floor': floor, 'days': days, 'rows': rows}
