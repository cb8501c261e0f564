"""
Conflict-aware booking edits.

propose_edit() validates a patch against the current snapshot and returns
the fully re-priced booking, or raises without changing anything. Callers
merge the returned record into their store.
"""

import logging

from utils.audit import stamp_updated
from utils.exceptions import ConflictError, StateError, ValidationError
from utils.messages import get_message
from utils.validators import validate_date_format, validate_time_format
from .booking_state import ID_PROOF_TYPES
from .pricing import (
    DEFAULT_EARLY_CHECK_IN_TIME,
    DEFAULT_LATE_CHECK_OUT_TIME,
    RATES,
    compute_booking_total,
    get_amount_paid,
    is_early_check_in,
    is_late_check_out,
    payment_status_after_price_change,
)
from .room_availability import BLOCKED_BY_BOOKING, find_same_day_arrival, resolve_room
from .state import STATUS_CANCELLED, STATUS_CHECKED_OUT

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

MAX_CO_OCCUPANTS = 3

# Fields owned by the lifecycle, the ledger or the audit trail
PROTECTED_FIELDS = (
    'id', 'booking_no', 'status', 'payment_status', 'total_amount',
    'paid_amount', 'transactions', 'created_by', 'created_at',
    'updated_by', 'updated_at'
)

SCHEDULE_FIELDS = ('room_number', 'check_in_date', 'check_out_date')
PRICE_FIELDS = (
    'rate', 'early_check_in', 'expected_check_in_time',
    'late_check_out', 'expected_check_out_time'
)
DETAIL_FIELDS = (
    'booker_name', 'booker_phone', 'guest_name', 'guest_phone',
    'identification_number', 'organization', 'check_in_time',
    'license_plate', 'receipt_number', 'notes', 'co_occupants',
    'id_proof_type'
)

EDITABLE_FIELDS = SCHEDULE_FIELDS + PRICE_FIELDS + DETAIL_FIELDS

# Free text values; None clears an optional one
TEXT_FIELDS = (
    'room_number', 'booker_name', 'booker_phone', 'guest_name', 'guest_phone',
    'identification_number', 'organization', 'license_plate', 'receipt_number',
    'notes'
)

LOCKED_STATUSES = (STATUS_CANCELLED, STATUS_CHECKED_OUT)


# =============================================================================
# VALIDATION
# =============================================================================

def _validate_patch_fields(patch: dict) -> None:
    """Reject protected or unknown fields."""
    rejected = sorted(key for key in patch if key not in EDITABLE_FIELDS)
    if rejected:
        raise ValidationError(
            get_message('field_not_editable', fields=', '.join(rejected)),
            fields=rejected,
            protected=[key for key in rejected if key in PROTECTED_FIELDS]
        )


def validate_booking_values(values: dict) -> None:
    """
    Check formats of the price and schedule fields present in values.

    Raises:
        ValidationError: On the first malformed value
    """
    for field in TEXT_FIELDS:
        if values.get(field) is not None and not isinstance(values[field], str):
            raise ValidationError(get_message('invalid_text', field=field), field=field)

    for field in ('check_in_date', 'check_out_date'):
        if field in values and not validate_date_format(values[field]):
            raise ValidationError(get_message('invalid_date', field=field), field=field)

    for field in ('expected_check_in_time', 'expected_check_out_time', 'check_in_time'):
        if values.get(field) and not validate_time_format(values[field]):
            raise ValidationError(get_message('invalid_time', field=field), field=field)

    if 'rate' in values and values['rate'] not in RATES:
        raise ValidationError(
            get_message('invalid_rate', rates=', '.join(str(r) for r in RATES)),
            field='rate'
        )

    if values.get('id_proof_type') and values['id_proof_type'] not in ID_PROOF_TYPES:
        raise ValidationError(
            get_message('invalid_id_proof', types=', '.join(ID_PROOF_TYPES)),
            field='id_proof_type'
        )

    co_occupants = values.get('co_occupants')
    if co_occupants is not None:
        if not isinstance(co_occupants, list) or not all(isinstance(name, str) for name in co_occupants):
            raise ValidationError('co_occupants must be a list of names', field='co_occupants')
        if len(co_occupants) > MAX_CO_OCCUPANTS:
            raise ValidationError(
                get_message('too_many_co_occupants', max=MAX_CO_OCCUPANTS),
                field='co_occupants'
            )


def resolve_time_flags(values: dict, patch: dict = None) -> dict:
    """
    Derive early/late flags and expected times.

    An expected time in the patch decides its flag (before 14:00 is early,
    after 12:00 is late) and a cleared time clears its flag. A flag switched
    on without a time gets the default time; a flag switched off clears the
    time.

    Args:
        values: Merged booking values (mutated in place and returned)
        patch: The incoming changes (defaults to values itself)

    Returns:
        dict: values
    """
    patch = values if patch is None else patch

    if patch.get('expected_check_in_time'):
        values['early_check_in'] = is_early_check_in(values['expected_check_in_time'])
    elif 'early_check_in' in patch:
        values['early_check_in'] = bool(patch['early_check_in'])
        if values['early_check_in'] and not values.get('expected_check_in_time'):
            values['expected_check_in_time'] = DEFAULT_EARLY_CHECK_IN_TIME
        elif not values['early_check_in']:
            values['expected_check_in_time'] = None
    elif 'expected_check_in_time' in patch:
        values['early_check_in'] = False
        values['expected_check_in_time'] = None

    if patch.get('expected_check_out_time'):
        values['late_check_out'] = is_late_check_out(values['expected_check_out_time'])
    elif 'late_check_out' in patch:
        values['late_check_out'] = bool(patch['late_check_out'])
        if values['late_check_out'] and not values.get('expected_check_out_time'):
            values['expected_check_out_time'] = DEFAULT_LATE_CHECK_OUT_TIME
        elif not values['late_check_out']:
            values['expected_check_out_time'] = None
    elif 'expected_check_out_time' in patch:
        values['late_check_out'] = False
        values['expected_check_out_time'] = None

    values['early_check_in'] = bool(values.get('early_check_in'))
    values['late_check_out'] = bool(values.get('late_check_out'))
    return values


def check_late_check_out(booking: dict, bookings: list) -> None:
    """
    Reject a late check-out when the next guest arrives on the same day.

    Raises:
        ConflictError: With the arriving guest in the reason
    """
    if not booking.get('late_check_out'):
        return

    arrival = find_same_day_arrival(
        booking['room_number'],
        bookings,
        booking['check_out_date'],
        exclude_booking_id=booking.get('id')
    )
    if arrival:
        raise ConflictError(
            get_message('late_checkout_conflict', booker_name=arrival.get('booker_name', '')),
            room_number=booking['room_number'],
            conflict_booking_id=arrival.get('id')
        )


def _find_room(rooms: list, room_number: str) -> dict:
    for room in rooms:
        if room['number'] == room_number:
            return room
    raise ValidationError(get_message('room_not_found', room_number=room_number), room_number=room_number)


# =============================================================================
# EDIT GUARD
# =============================================================================

def propose_edit(booking: dict, patch: dict, snapshot: dict, updated_by: str = None, now=None) -> dict:
    """
    Validate and apply a patch to a booking.

    Steps:
    1. Only editable fields; Cancelled / Checked-out bookings are locked
    2. Formats, rate and ID proof type
    3. Room or date change: the room must be free for the new range
       (the booking itself is ignored) and not under maintenance
    4. Late check-out (new, or with a moved date / room): no same-day arrival
    5. Total recomputed, payment status reverted if it exceeds what was paid
    6. check_in_date must be before check_out_date

    Args:
        booking: Current booking (not mutated)
        patch: Changed fields
        snapshot: {'rooms': [...], 'bookings': [...]}
        updated_by: Operator name
        now: Current datetime for the audit stamp

    Returns:
        dict: New booking record

    Raises:
        ValidationError, ConflictError, StateError
    """
    if not patch:
        raise ValidationError(get_message('data_required'))

    _validate_patch_fields(patch)

    if booking['status'] in LOCKED_STATUSES:
        raise StateError(get_message('cannot_edit', status=booking['status']), current=booking['status'])

    validate_booking_values(patch)

    updated = dict(booking)
    updated.update(patch)
    resolve_time_flags(updated, patch)

    schedule_changed = any(updated.get(f) != booking.get(f) for f in SCHEDULE_FIELDS)
    if schedule_changed:
        room = _find_room(snapshot['rooms'], updated['room_number'])
        result = resolve_room(
            room,
            snapshot['bookings'],
            updated['check_in_date'],
            updated['check_out_date'],
            exclude_booking_id=booking['id']
        )
        if not result['available']:
            reason = result['reason']
            only_extended = (
                result['blocked_by'] == BLOCKED_BY_BOOKING
                and updated['check_out_date'] != booking['check_out_date']
                and updated['check_in_date'] == booking['check_in_date']
                and updated['room_number'] == booking['room_number']
            )
            if only_extended:
                conflict = next(
                    b for b in snapshot['bookings'] if b.get('id') == result['conflict_booking_id']
                )
                reason = get_message(
                    'extension_conflict',
                    date=updated['check_out_date'],
                    booker_name=conflict.get('booker_name', '')
                )
            logger.info(f"Edit of {booking.get('booking_no')} rejected: {reason}")
            raise ConflictError(
                reason,
                room_number=room['number'],
                blocked_by=result['blocked_by'],
                conflict_booking_id=result['conflict_booking_id']
            )

    late_newly_enabled = updated['late_check_out'] and not booking.get('late_check_out')
    if late_newly_enabled or (updated['late_check_out'] and schedule_changed):
        check_late_check_out(updated, snapshot['bookings'])

    price_changed = schedule_changed or any(updated.get(f) != booking.get(f) for f in PRICE_FIELDS)
    if price_changed:
        updated['total_amount'] = compute_booking_total(updated)
        updated['payment_status'] = payment_status_after_price_change(
            updated['total_amount'],
            get_amount_paid(booking),
            booking.get('payment_status')
        )

    if updated['check_in_date'] >= updated['check_out_date']:
        raise ValidationError(get_message('invalid_date_range'))

    return stamp_updated(updated, updated_by, now)
