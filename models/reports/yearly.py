"""Yearly statistics: revenue, check-ins, room utilization and guest mix."""
from typing import Any

from models.intervals import parse_date
from models.pricing import RATE_INTERNAL
from models.room import group_rooms_by_floor
from models.state import is_blocking

MONTH_NAMES = ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun', 'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']


def get_monthly_revenue(bookings: list, year: int) -> list[dict[str, Any]]:
    """
    Revenue and check-ins per month, by check-in date.

    Returns:
        Twelve dicts: {'month': 1..12, 'name': 'Jan', 'revenue', 'check_ins'}
    """
    data = [{'month': i + 1, 'name': MONTH_NAMES[i], 'revenue': 0, 'check_ins': 0} for i in range(12)]
    for booking in bookings:
        if not is_blocking(booking):
            continue
        check_in = parse_date(booking['check_in_date'])
        if check_in.year != year:
            continue
        entry = data[check_in.month - 1]
        entry['revenue'] += booking.get('total_amount') or 0
        entry['check_ins'] += 1
    return data


def get_room_utilization(rooms: list, bookings: list, year: int) -> list[dict[str, Any]]:
    """
    Nights sold and bookings per room within the year.

    Stays crossing the year boundary only count their nights inside it.

    Returns:
        Room dicts extended with 'nights' and 'booking_count', sorted by number
    """
    year_start = f'{year:04d}-01-01'
    year_end = f'{year + 1:04d}-01-01'

    stats = []
    for room in rooms:
        nights = 0
        booking_count = 0
        for booking in bookings:
            if booking.get('room_number') != room['number'] or not is_blocking(booking):
                continue
            start = max(booking['check_in_date'], year_start)
            end = min(booking['check_out_date'], year_end)
            if start < end:
                nights += (parse_date(end) - parse_date(start)).days
                booking_count += 1
        stats.append({**room, 'nights': nights, 'booking_count': booking_count})

    return sorted(stats, key=lambda r: r['number'])


def get_guest_type_breakdown(bookings: list, year: int) -> dict[str, int]:
    """Internal (1200) vs external bookings checking in during the year."""
    internal = 0
    external = 0
    for booking in bookings:
        if not is_blocking(booking) or parse_date(booking['check_in_date']).year != year:
            continue
        if booking.get('rate') == RATE_INTERNAL:
            internal += 1
        else:
            external += 1
    return {'internal': internal, 'external': external, 'total': internal + external}


def get_yearly_report(rooms: list, bookings: list, year: int) -> dict[str, Any]:
    """
    Build the yearly report.

    Returns:
        Dict with monthly data, totals, utilization grouped by floor (with
        per-floor nights and booking totals) and the guest type breakdown
    """
    monthly = get_monthly_revenue(bookings, year)
    utilization = get_room_utilization(rooms, bookings, year)

    floors = {}
    for floor, floor_rooms in group_rooms_by_floor(utilization).items():
        floors[floor] = {
            'rooms': floor_rooms,
            'total_nights': sum(r['nights'] for r in floor_rooms),
            'total_bookings': sum(r['booking_count'] for r in floor_rooms)
        }

    return {
        'year': year,
        'monthly': monthly,
        'total_revenue': sum(m['revenue'] for m in monthly),
        'total_check_ins': sum(m['check_ins'] for m in monthly),
        'floors': floors,
        'guest_types': get_guest_type_breakdown(bookings, year)
    }
