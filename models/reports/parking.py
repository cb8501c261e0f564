"""Parking list: cars registered to guests staying on a day."""
from typing import Any

from models.state import is_blocking


def get_parking_list(bookings: list, date: str) -> list[dict[str, Any]]:
    """
    Non-cancelled bookings with a license plate covering date.

    Both check-in and check-out days count. Sorted by room number.
    """
    cars = [
        b for b in bookings
        if is_blocking(b)
        and (b.get('license_plate') or '').strip()
        and b['check_in_date'] <= date <= b['check_out_date']
    ]
    return sorted(cars, key=lambda b: b['room_number'])


def get_parking_report(rooms: list, bookings: list, date: str) -> dict[str, Any]:
    """Parking list with the number of cars and rooms."""
    cars = get_parking_list(bookings, date)
    return {
        'date': date,
        'cars': cars,
        'total_cars': len(cars),
        'total_rooms': len(rooms)
    }
