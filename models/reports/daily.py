"""Daily front desk report: arrivals, departures and stay-overs."""
from typing import Any

from models.state import STATUS_CHECKED_IN, STATUS_CHECKED_OUT, is_blocking


def _has_plate(booking: dict) -> bool:
    return bool((booking.get('license_plate') or '').strip())


def get_arrivals(bookings: list, date: str) -> list[dict[str, Any]]:
    """Non-cancelled bookings checking in on date."""
    return [b for b in bookings if b['check_in_date'] == date and is_blocking(b)]


def get_departures(bookings: list, date: str) -> list[dict[str, Any]]:
    """Non-cancelled bookings checking out on date."""
    return [b for b in bookings if b['check_out_date'] == date and is_blocking(b)]


def get_stayovers(bookings: list, date: str) -> list[dict[str, Any]]:
    """Guests who arrived before date and leave after it."""
    return [
        b for b in bookings
        if b['check_in_date'] < date < b['check_out_date'] and is_blocking(b)
    ]


def get_daily_report(bookings: list, date: str) -> dict[str, Any]:
    """
    Build the daily report.

    Args:
        bookings: Booking snapshot
        date: Report date (YYYY-MM-DD)

    Returns:
        Dict with arrivals, departures, stayovers and counters:
        arrived (arrivals already checked in or out), departed,
        parking_total / parking_collected (departing cars and returned cards)
    """
    arrivals = get_arrivals(bookings, date)
    departures = get_departures(bookings, date)
    stayovers = get_stayovers(bookings, date)

    departing_cars = [b for b in departures if _has_plate(b)]

    return {
        'date': date,
        'arrivals': arrivals,
        'departures': departures,
        'stayovers': stayovers,
        'stats': {
            'arrivals': len(arrivals),
            'arrived': sum(1 for b in arrivals if b['status'] in (STATUS_CHECKED_IN, STATUS_CHECKED_OUT)),
            'departures': len(departures),
            'departed': sum(1 for b in departures if b['status'] == STATUS_CHECKED_OUT),
            'stayovers': len(stayovers),
            'parking_total': len(departing_cars),
            'parking_collected': sum(1 for b in departing_cars if b['status'] == STATUS_CHECKED_OUT)
        }
    }
