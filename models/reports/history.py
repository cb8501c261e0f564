"""Guest history report: monthly bookings grouped by person."""
from typing import Any

from models.intervals import nights, parse_date
from models.pricing import RATE_EXTERNAL, RATE_INTERNAL, get_amount_paid
from models.state import PAYMENT_PAID, PAYMENT_UNPAID, STATUS_CANCELLED
from utils.helpers import contains_text

FILTER_ALL = 'All'
FINANCE_PAID = 'Paid'
FINANCE_UNPAID = 'Unpaid'
FINANCE_DUE = 'Due'

SEARCH_FIELDS = ('booker_name', 'booker_phone', 'organization', 'booking_no', 'receipt_number', 'license_plate')

TOP_GUESTS = 5


def _matches_search(booking: dict, search: str) -> bool:
    if not search:
        return True
    return any(contains_text(booking.get(field), search) for field in SEARCH_FIELDS)


def filter_history(
    bookings: list,
    year: int,
    month: int,
    search: str = '',
    status: str | None = None,
    finance: str | None = None
) -> list[dict[str, Any]]:
    """
    Bookings checking in during a month, narrowed by search and filters.

    Args:
        bookings: Booking snapshot
        year: Year
        month: Month (1-12)
        search: Case-insensitive text matched against name, phone,
            organization, booking number, receipt and license plate
        status: Booking status, or None / 'All'
        finance: 'Paid', 'Unpaid', 'Due' (balance outstanding), or None / 'All'

    Returns:
        Matching bookings in snapshot order
    """
    result = []
    for booking in bookings:
        check_in = parse_date(booking['check_in_date'])
        if check_in.year != year or check_in.month != month:
            continue
        if not _matches_search(booking, (search or '').strip()):
            continue
        if status and status != FILTER_ALL and booking['status'] != status:
            continue
        if finance == FINANCE_PAID and booking.get('payment_status') != PAYMENT_PAID:
            continue
        if finance == FINANCE_UNPAID and booking.get('payment_status') != PAYMENT_UNPAID:
            continue
        if finance == FINANCE_DUE and booking.get('total_amount', 0) <= get_amount_paid(booking):
            continue
        result.append(booking)
    return result


def _guest_key(booking: dict) -> str:
    phone = (booking.get('booker_phone') or '').strip()
    return phone or (booking.get('booker_name') or '').strip()


def _has_receipt(booking: dict) -> bool:
    if booking.get('receipt_number'):
        return True
    return any(t.get('receipt_number') for t in booking.get('transactions') or [])


def group_by_guest(bookings: list) -> list[dict[str, Any]]:
    """
    Group bookings by booker phone (falling back to name).

    A guest has issues when anything is unpaid or outstanding, or one of
    their bookings was cancelled.

    Returns:
        Guest dicts sorted by latest stay, most recent first
    """
    groups = {}
    for booking in bookings:
        key = _guest_key(booking)
        if key not in groups:
            groups[key] = {
                'id': key,
                'booker_name': booking.get('booker_name'),
                'booker_phone': booking.get('booker_phone'),
                'organization': booking.get('organization'),
                'bookings': [],
                'total_bookings': 0,
                'total_nights': 0,
                'latest_stay_date': '',
                'room_numbers': set(),
                'total_amount': 0,
                'paid_amount': 0,
                'balance_due': 0,
                'rate_types': set(),
                'receipt_count': 0,
                'has_issues': False
            }

        group = groups[key]
        group['bookings'].append(booking)
        group['total_bookings'] += 1
        group['total_nights'] += nights(booking['check_in_date'], booking['check_out_date'])
        if booking['check_in_date'] > group['latest_stay_date']:
            group['latest_stay_date'] = booking['check_in_date']
        group['room_numbers'].add(booking.get('room_number'))
        group['total_amount'] += booking.get('total_amount') or 0
        group['paid_amount'] += get_amount_paid(booking)
        group['balance_due'] = group['total_amount'] - group['paid_amount']
        group['rate_types'].add(booking.get('rate'))
        if _has_receipt(booking):
            group['receipt_count'] += 1

        if booking.get('payment_status') == PAYMENT_UNPAID or group['balance_due'] > 0:
            group['has_issues'] = True
        if booking['status'] == STATUS_CANCELLED:
            group['has_issues'] = True

    guests = []
    for group in groups.values():
        group['room_numbers'] = sorted(group['room_numbers'])
        group['rate_types'] = sorted(r for r in group['rate_types'] if r is not None)
        guests.append(group)

    return sorted(guests, key=lambda g: g['latest_stay_date'], reverse=True)


def get_history_summary(guests: list) -> dict[str, Any]:
    """
    Summary metrics over grouped guests.

    A guest counts as internal if any booking used the internal rate,
    otherwise as external if any used the external rate.
    """
    internal = sum(1 for g in guests if RATE_INTERNAL in g['rate_types'])
    external = sum(
        1 for g in guests
        if RATE_INTERNAL not in g['rate_types'] and RATE_EXTERNAL in g['rate_types']
    )
    top = sorted(guests, key=lambda g: g['total_nights'], reverse=True)[:TOP_GUESTS]

    return {
        'total_people': len(guests),
        'total_revenue': sum(g['total_amount'] for g in guests),
        'total_due': sum(g['balance_due'] for g in guests),
        'internal_count': internal,
        'external_count': external,
        'top_guests': [
            {'id': g['id'], 'booker_name': g['booker_name'], 'total_nights': g['total_nights']}
            for g in top
        ],
        'guests_with_issues': sum(1 for g in guests if g['has_issues'])
    }


def get_history_report(
    bookings: list,
    year: int,
    month: int,
    search: str = '',
    status: str | None = None,
    finance: str | None = None
) -> dict[str, Any]:
    """Filtered bookings, grouped guests and summary for one month."""
    filtered = filter_history(bookings, year, month, search, status, finance)
    guests = group_by_guest(filtered)
    return {
        'year': year,
        'month': month,
        'bookings': filtered,
        'guests': guests,
        'summary': get_history_summary(guests)
    }
