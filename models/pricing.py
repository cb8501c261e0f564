"""
Booking pricing.

Handles:
- Stay totals from rate, nights and early/late surcharges
- Surcharge detection from expected arrival/departure times
- Payment status reversion after price-impacting edits
- Amount-paid and balance resolution (ledger first, then paid_amount)
"""

from .intervals import nights
from .state import PAYMENT_PAID, PAYMENT_UNPAID


# =============================================================================
# CONSTANTS
# =============================================================================

RATE_INTERNAL = 1200   # Affiliated staff / internal guests
RATE_EXTERNAL = 1500   # External guests
RATES = (RATE_INTERNAL, RATE_EXTERNAL)

STANDARD_CHECK_IN_TIME = '14:00'
STANDARD_CHECK_OUT_TIME = '12:00'

# Share of one night's rate charged per active surcharge
SURCHARGE_RATIO = 0.5

DEFAULT_EARLY_CHECK_IN_TIME = '09:00'
DEFAULT_LATE_CHECK_OUT_TIME = '14:00'


def _as_amount(value):
    """Keep whole amounts as ints so totals read 2400, not 2400.0."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _clock_minutes(time_str: str) -> int:
    hours, minutes = time_str.split(':')
    return int(hours) * 60 + int(minutes)


# =============================================================================
# SURCHARGES
# =============================================================================

def is_early_check_in(time_str: str) -> bool:
    """Arrival before the standard 14:00 check-in."""
    if not time_str:
        return False
    return _clock_minutes(time_str) < _clock_minutes(STANDARD_CHECK_IN_TIME)


def is_late_check_out(time_str: str) -> bool:
    """Departure after the standard 12:00 check-out."""
    if not time_str:
        return False
    return _clock_minutes(time_str) > _clock_minutes(STANDARD_CHECK_OUT_TIME)


def surcharge_amount(rate, active) -> float:
    """Half of one night's rate when the surcharge is active, else 0."""
    if not active:
        return 0
    return _as_amount(rate * SURCHARGE_RATIO)


# =============================================================================
# TOTALS
# =============================================================================

def compute_total(rate, check_in: str, check_out: str, early_surcharge=False, late_surcharge=False):
    """
    Compute a stay's total amount.

    Args:
        rate: Nightly rate
        check_in: Check-in date (YYYY-MM-DD)
        check_out: Check-out date (YYYY-MM-DD)
        early_surcharge: Truthy when early check-in applies
        late_surcharge: Truthy when late check-out applies

    Returns:
        Total amount (nights * rate plus surcharges)
    """
    total = nights(check_in, check_out) * rate
    total += surcharge_amount(rate, early_surcharge)
    total += surcharge_amount(rate, late_surcharge)
    return _as_amount(total)


def price_breakdown(rate, check_in: str, check_out: str, early_surcharge=False, late_surcharge=False) -> dict:
    """
    Itemized version of compute_total().

    Returns:
        dict: {
            'nights': int,
            'rate': number,
            'room_charge': number,
            'early_check_in_surcharge': number,
            'late_check_out_surcharge': number,
            'total': number
        }
    """
    stay_nights = nights(check_in, check_out)
    room_charge = _as_amount(stay_nights * rate)
    early = surcharge_amount(rate, early_surcharge)
    late = surcharge_amount(rate, late_surcharge)
    return {
        'nights': stay_nights,
        'rate': rate,
        'room_charge': room_charge,
        'early_check_in_surcharge': early,
        'late_check_out_surcharge': late,
        'total': _as_amount(room_charge + early + late)
    }


def compute_booking_total(booking: dict):
    """compute_total() using a booking's own fields."""
    return compute_total(
        booking['rate'],
        booking['check_in_date'],
        booking['check_out_date'],
        booking.get('early_check_in'),
        booking.get('late_check_out')
    )


# =============================================================================
# PAYMENT STATUS
# =============================================================================

def payment_status_after_price_change(new_total, amount_already_paid, current_status: str) -> str:
    """
    Payment status after an edit that may change the total.

    The booking reverts to Unpaid whenever the new total exceeds what was
    actually received; otherwise the current status is kept.
    """
    if new_total > amount_already_paid:
        return PAYMENT_UNPAID
    return current_status


def get_amount_paid(booking: dict):
    """
    Money actually received for a booking.

    The receipt ledger is authoritative when it has entries; otherwise
    paid_amount is used. Legacy records without paid_amount that are marked
    Paid count as fully paid.
    """
    transactions = booking.get('transactions') or []
    if transactions:
        return _as_amount(sum(t['amount'] for t in transactions if t.get('status', PAYMENT_PAID) == PAYMENT_PAID))

    if booking.get('paid_amount') is not None:
        return booking['paid_amount']

    if booking.get('payment_status') == PAYMENT_PAID:
        return booking.get('total_amount', 0)

    return 0


def balance_due(booking: dict):
    """Outstanding amount, never negative."""
    return _as_amount(max(0, booking.get('total_amount', 0) - get_amount_paid(booking)))


def is_extension_payment(booking: dict) -> bool:
    """A balance is due on a booking that was already (partly) paid."""
    return balance_due(booking) > 0 and get_amount_paid(booking) > 0
