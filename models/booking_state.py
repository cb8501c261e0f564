"""
Booking lifecycle state machine.
Handles check-in, payment capture, check-out, cancellation and deletion rules.

Every transition takes a booking dict and returns a new one; the input is
never mutated. Illegal transitions raise StateError.
"""

import logging

from utils.audit import stamp_updated
from utils.datetime_helpers import format_clock, get_now
from utils.exceptions import StateError, ValidationError
from utils.messages import get_message
from .pricing import balance_due, get_amount_paid
from .state import (
    PAYMENT_PAID,
    STATUS_CANCELLED,
    STATUS_CHECKED_IN,
    STATUS_CHECKED_OUT,
    STATUS_CONFIRMED,
)
from .transactions import create_transaction, opening_ledger, settlement_type

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Draft is reserved: nothing moves into or out of it.
ALLOWED_TRANSITIONS = {
    STATUS_CONFIRMED: [STATUS_CHECKED_IN, STATUS_CHECKED_OUT, STATUS_CANCELLED],
    STATUS_CHECKED_IN: [STATUS_CHECKED_OUT, STATUS_CANCELLED],
    STATUS_CHECKED_OUT: [],
    STATUS_CANCELLED: [],
}

PAYABLE_STATUSES = (STATUS_CONFIRMED, STATUS_CHECKED_IN, STATUS_CHECKED_OUT)
UNDELETABLE_STATUSES = (STATUS_CHECKED_IN, STATUS_CHECKED_OUT)

ID_PROOF_TYPES = ('Staff ID', 'National ID', 'Passport')

TRANSITION_CHECK_IN = 'check-in'
TRANSITION_PAY = 'pay'
TRANSITION_CHECK_OUT = 'check-out'
TRANSITION_CANCEL = 'cancel'


# =============================================================================
# RULES
# =============================================================================

def validate_state_transition(current: str, target: str) -> None:
    """
    Require a status change to be legal.

    Raises:
        StateError: If target is not reachable from current
    """
    if target not in ALLOWED_TRANSITIONS.get(current, []):
        raise StateError(
            get_message('invalid_transition', current=current, target=target),
            current=current,
            target=target
        )


def can_transition(current: str, target: str) -> bool:
    """Non-raising variant of validate_state_transition()."""
    return target in ALLOWED_TRANSITIONS.get(current, [])


def can_delete(status: str) -> bool:
    """Bookings that are in-house or finished stay on record."""
    return status not in UNDELETABLE_STATUSES


def _now_clock(now) -> str:
    return format_clock(now or get_now())


# =============================================================================
# TRANSITIONS
# =============================================================================

def check_in(booking: dict, updated_by: str = None, now=None) -> dict:
    """
    Check a guest in.

    Args:
        booking: Booking dict
        updated_by: Operator name
        now: Current datetime (stamps check_in_time when unset)

    Returns:
        dict: Booking in Checked-in status

    Raises:
        ValidationError: No ID proof recorded
        StateError: Status does not allow check-in (including a repeated one)
    """
    if not booking.get('id_proof_type'):
        raise ValidationError(get_message('id_proof_required'))

    validate_state_transition(booking['status'], STATUS_CHECKED_IN)

    result = dict(booking)
    result['status'] = STATUS_CHECKED_IN
    if not result.get('check_in_time'):
        result['check_in_time'] = _now_clock(now)

    logger.info(f"Booking {booking.get('booking_no')} checked in to room {booking.get('room_number')}")
    return stamp_updated(result, updated_by, now)


def capture_payment(booking: dict, updated_by: str = None, now=None, receipt_number: str = None) -> dict:
    """
    Settle a booking in full.

    A Confirmed booking is also checked in (payment happens at the desk on
    arrival). The outstanding balance is added to the receipt ledger as a
    Paid transaction and paid_amount follows the ledger.

    Args:
        booking: Booking dict
        updated_by: Operator name
        now: Current datetime
        receipt_number: Optional receipt reference for the settlement

    Returns:
        dict: Paid booking

    Raises:
        StateError: For Cancelled and Draft bookings
    """
    status = booking['status']
    if status not in PAYABLE_STATUSES:
        raise StateError(get_message('cannot_pay', status=status), current=status)

    result = dict(booking)
    result['transactions'] = opening_ledger(booking, updated_by, now)

    balance = balance_due(result)
    if balance > 0:
        result['transactions'].append(create_transaction(
            settlement_type(result),
            balance,
            receipt_number=receipt_number,
            updated_by=updated_by,
            now=now
        ))

    result['paid_amount'] = get_amount_paid(result)
    result['payment_status'] = PAYMENT_PAID
    if receipt_number:
        result['receipt_number'] = receipt_number

    if status == STATUS_CONFIRMED:
        result['status'] = STATUS_CHECKED_IN
        if not result.get('check_in_time'):
            result['check_in_time'] = _now_clock(now)

    logger.info(f"Booking {booking.get('booking_no')} paid in full ({result['paid_amount']})")
    return stamp_updated(result, updated_by, now)


def check_out(booking: dict, updated_by: str = None, now=None) -> dict:
    """
    Check a guest out.

    Raises:
        StateError: Already checked out or cancelled
    """
    validate_state_transition(booking['status'], STATUS_CHECKED_OUT)

    result = dict(booking)
    result['status'] = STATUS_CHECKED_OUT

    logger.info(f"Booking {booking.get('booking_no')} checked out of room {booking.get('room_number')}")
    return stamp_updated(result, updated_by, now)


def cancel(booking: dict, updated_by: str = None, now=None) -> dict:
    """
    Cancel a booking. Its room is released immediately.

    Raises:
        StateError: Checked-out (or already cancelled) bookings
    """
    validate_state_transition(booking['status'], STATUS_CANCELLED)

    result = dict(booking)
    result['status'] = STATUS_CANCELLED

    logger.info(f"Booking {booking.get('booking_no')} cancelled")
    return stamp_updated(result, updated_by, now)


TRANSITIONS = {
    TRANSITION_CHECK_IN: check_in,
    TRANSITION_PAY: capture_payment,
    TRANSITION_CHECK_OUT: check_out,
    TRANSITION_CANCEL: cancel,
}


def apply_transition(booking: dict, kind: str, updated_by: str = None, now=None, **options) -> dict:
    """
    Dispatch a named transition.

    Args:
        booking: Booking dict
        kind: 'check-in', 'pay', 'check-out' or 'cancel'
        updated_by: Operator name
        now: Current datetime
        **options: Extra keyword arguments (receipt_number for 'pay')

    Raises:
        ValidationError: Unknown transition name
    """
    handler = TRANSITIONS.get(kind)
    if handler is None:
        raise ValidationError(get_message('unknown_transition', kind=kind))
    return handler(booking, updated_by=updated_by, now=now, **options)
