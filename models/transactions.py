"""
Receipt ledger for bookings.

Each booking may carry a list of transactions (split payments / receipts).
When the ledger has entries its paid sum is the amount collected, and
paid_amount is kept in step with it.
"""

import logging

from utils.audit import stamp_updated
from utils.datetime_helpers import format_timestamp, get_now
from utils.exceptions import ValidationError
from utils.helpers import generate_unique_code
from utils.messages import get_message
from .pricing import balance_due, get_amount_paid
from .state import PAYMENT_PAID, PAYMENT_UNPAID

logger = logging.getLogger(__name__)

TX_ROOM_CHARGE = 'Room Charge'
TX_EARLY_CHECK_IN = 'Early Check-in'
TX_LATE_CHECK_OUT = 'Late Check-out'
TX_EXTENSION = 'Extension'
TX_DAMAGE = 'Damage'
TX_OTHER = 'Other'

TRANSACTION_TYPES = (
    TX_ROOM_CHARGE, TX_EARLY_CHECK_IN, TX_LATE_CHECK_OUT,
    TX_EXTENSION, TX_DAMAGE, TX_OTHER
)

# Descriptions shown on the pending balance row
PENDING_ROOM_CHARGE = 'Room Charge'
PENDING_EXTENSION = 'Extension / Balance Due'
PENDING_TOTAL_CHARGES = 'Total Charges (Incl. Fees)'

# Ledger type used when a pending row is settled
_PENDING_TYPE = {
    PENDING_ROOM_CHARGE: TX_ROOM_CHARGE,
    PENDING_EXTENSION: TX_EXTENSION,
    PENDING_TOTAL_CHARGES: TX_ROOM_CHARGE,
}


def create_transaction(
    tx_type: str,
    amount,
    status: str = PAYMENT_PAID,
    receipt_number: str = None,
    updated_by: str = None,
    note: str = None,
    now=None
) -> dict:
    """
    Build a new ledger entry.

    Args:
        tx_type: One of TRANSACTION_TYPES
        amount: Amount of the entry
        status: Paid or Unpaid
        receipt_number: Receipt reference
        updated_by: Operator name
        note: Free text
        now: Timestamp (defaults to current time)

    Returns:
        dict: Transaction record

    Raises:
        ValidationError: If the type is unknown or the amount is not positive
    """
    if tx_type not in TRANSACTION_TYPES:
        raise ValidationError(f'Unknown transaction type: {tx_type}')
    if amount is None or amount <= 0:
        raise ValidationError('Transaction amount must be positive')

    return {
        'id': generate_unique_code('tx'),
        'type': tx_type,
        'amount': amount,
        'status': status,
        'receipt_number': receipt_number,
        'updated_by': updated_by or 'System',
        'timestamp': format_timestamp(now or get_now()),
        'note': note
    }


def opening_ledger(booking: dict, updated_by: str = None, now=None) -> list:
    """
    Copy of a booking's ledger, ready to be appended to.

    Money recorded only in paid_amount (collected before the booking had a
    ledger) is carried in as an opening Paid row, so the ledger sum never
    drops below what was already received.

    Returns:
        list: Transaction dicts (copies)
    """
    transactions = [dict(t) for t in booking.get('transactions') or []]
    if transactions:
        return transactions

    collected = get_amount_paid(booking)
    if collected > 0:
        transactions.append(create_transaction(
            TX_ROOM_CHARGE,
            collected,
            receipt_number=booking.get('receipt_number'),
            updated_by=updated_by,
            note='Opening balance',
            now=now
        ))
    return transactions


def reconcile(booking: dict) -> dict:
    """
    Return a copy whose paid_amount and payment_status follow the ledger.

    Bookings without ledger entries are returned unchanged (as a copy).
    """
    result = dict(booking)
    if not result.get('transactions'):
        return result

    paid = get_amount_paid(result)
    result['paid_amount'] = paid
    result['payment_status'] = PAYMENT_PAID if paid >= result.get('total_amount', 0) else PAYMENT_UNPAID
    return result


# =============================================================================
# FINANCE ROWS
# =============================================================================

def pending_reason(booking: dict) -> str:
    """
    Describe what an outstanding balance is most likely for.

    A ledger that already holds a room charge means the balance comes from
    an extension; an unpaid booking with surcharges owes the combined total.
    """
    transactions = booking.get('transactions') or []
    if any(t['type'] == TX_ROOM_CHARGE for t in transactions):
        return PENDING_EXTENSION
    if booking.get('early_check_in') or booking.get('late_check_out'):
        return PENDING_TOTAL_CHARGES
    return PENDING_ROOM_CHARGE


def settlement_type(booking: dict) -> str:
    """Ledger type used when the pending balance of a booking is settled."""
    return _PENDING_TYPE[pending_reason(booking)]


def get_financial_rows(booking: dict) -> list:
    """
    Ledger rows of a booking plus one pending row for any balance due.

    Returns:
        list: Row dicts with id, booking_no, description, amount, status,
        receipt_number, updated_by, is_persisted
    """
    rows = []
    for t in booking.get('transactions') or []:
        rows.append({
            'id': t['id'],
            'booking_no': booking.get('booking_no'),
            'description': t['type'],
            'amount': t['amount'],
            'status': t.get('status', PAYMENT_PAID),
            'receipt_number': t.get('receipt_number') or '',
            'updated_by': t.get('updated_by') or 'System',
            'is_persisted': True
        })

    balance = balance_due(booking)
    if balance > 0:
        rows.append({
            'id': f"temp-{booking['id']}",
            'booking_no': booking.get('booking_no'),
            'description': pending_reason(booking),
            'amount': balance,
            'status': PAYMENT_UNPAID,
            'receipt_number': '',
            'updated_by': '-',
            'is_persisted': False
        })

    return rows


def record_receipt(
    booking: dict,
    receipt_number: str,
    row_id: str = None,
    updated_by: str = None,
    now=None
) -> dict:
    """
    Save a receipt against a booking's ledger.

    With a row_id of an existing transaction, that transaction gets the
    receipt and is marked Paid. Otherwise the pending balance is settled as
    a new Paid transaction.

    Args:
        booking: Booking dict (not mutated)
        receipt_number: Receipt reference (required)
        row_id: Existing transaction id, or None / the temp row id
        updated_by: Operator name
        now: Timestamp

    Returns:
        dict: New booking with the ledger, paid_amount and payment_status updated

    Raises:
        ValidationError: Missing receipt, unknown row, or nothing to pay
    """
    receipt_number = (receipt_number or '').strip()
    if not receipt_number:
        raise ValidationError(get_message('receipt_required'))

    now = now or get_now()
    result = dict(booking)
    result['transactions'] = opening_ledger(booking, updated_by, now)

    if row_id and not row_id.startswith('temp-'):
        for t in result['transactions']:
            if t['id'] == row_id:
                t['receipt_number'] = receipt_number
                t['status'] = PAYMENT_PAID
                t['updated_by'] = updated_by or t.get('updated_by')
                break
        else:
            raise ValidationError(f'Transaction {row_id} not found')
    else:
        balance = balance_due(result)
        if balance <= 0:
            raise ValidationError(get_message('nothing_to_pay', booking_no=booking.get('booking_no')))
        result['transactions'].append(create_transaction(
            settlement_type(result),
            balance,
            receipt_number=receipt_number,
            updated_by=updated_by,
            now=now
        ))

    result = reconcile(result)
    logger.info(f"Receipt {receipt_number} saved on {booking.get('booking_no')}: paid {result['paid_amount']}")
    return stamp_updated(result, updated_by, now)
