"""Daily finance report: expected revenue, payments and receipts."""
from typing import Any

from models.intervals import nights
from models.state import PAYMENT_PAID, STATUS_CHECKED_IN, is_blocking
from models.transactions import get_financial_rows


def get_finance_bookings(bookings: list, date: str) -> list[dict[str, Any]]:
    """
    Bookings relevant to the day's takings.

    Non-cancelled bookings arriving or leaving on date, plus in-house guests
    who arrived on or before it. Sorted by room number.
    """
    selected = [
        b for b in bookings
        if is_blocking(b) and (
            b['check_in_date'] == date
            or b['check_out_date'] == date
            or (b['status'] == STATUS_CHECKED_IN and b['check_in_date'] <= date)
        )
    ]
    return sorted(selected, key=lambda b: b['room_number'])


def get_finance_report(bookings: list, date: str) -> dict[str, Any]:
    """
    Build the finance report for one day.

    Returns:
        Dict with per-booking rows (ledger plus pending balance) and totals:
        total_revenue, paid_count, guest_count, receipt_count
    """
    daily = get_finance_bookings(bookings, date)

    entries = []
    for booking in daily:
        entries.append({
            'booking': booking,
            'nights': nights(booking['check_in_date'], booking['check_out_date']),
            'rows': get_financial_rows(booking)
        })

    return {
        'date': date,
        'entries': entries,
        'stats': {
            'total_revenue': sum(b.get('total_amount') or 0 for b in daily),
            'paid_count': sum(1 for b in daily if b.get('payment_status') == PAYMENT_PAID),
            'guest_count': len(daily),
            'receipt_count': sum(
                1 for b in daily for t in b.get('transactions') or [] if t.get('receipt_number')
            )
        }
    }
