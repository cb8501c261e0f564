"""
Front desk booking API routes.
Create, read, edit, delete, lifecycle transitions and receipts.

Every write reads a snapshot, lets the booking core decide, then merges the
returned record into the store.
"""

from flask import Blueprint, Response, current_app, request

from blueprints.frontdesk.context import (
    get_expected_version,
    get_json_body,
    get_operator,
    get_store,
    strip_control_fields,
)
from models.booking_crud import delete_booking, get_room_bookings, schedule_repeat_booking
from models.booking_state import ALLOWED_TRANSITIONS, TRANSITIONS, can_delete, can_transition
from models.pricing import (
    balance_due,
    get_amount_paid,
    is_extension_payment,
    price_breakdown,
)
from models.requests import CreateBooking, EditBooking, Transition, apply_request
from models.state import PAYMENT_STATES, get_all_states, get_state_by_name
from models.transactions import get_financial_rows, record_receipt
from utils.api_response import api_error, api_success
from utils.audit import log_audit, log_create, log_delete, log_update
from utils.decorators import handle_core_errors
from utils.exceptions import ValidationError
from utils.messages import get_message

TRANSITION_MESSAGES = {
    'check-in': 'booking_checked_in',
    'pay': 'booking_paid',
    'check-out': 'booking_checked_out',
    'cancel': 'booking_cancelled',
}


def _booking_detail(booking: dict) -> dict:
    """Booking with its derived money figures and reachable statuses."""
    status = booking['status']
    return {
        'booking': booking,
        'state': get_state_by_name(status),
        'next_statuses': [s['name'] for s in get_all_states() if can_transition(status, s['name'])],
        'amount_paid': get_amount_paid(booking),
        'balance_due': balance_due(booking),
        'is_extension_payment': is_extension_payment(booking),
        'price': price_breakdown(
            booking['rate'],
            booking['check_in_date'],
            booking['check_out_date'],
            booking.get('early_check_in'),
            booking.get('late_check_out')
        ),
        'can_delete': can_delete(status),
        'financial_rows': get_financial_rows(booking)
    }


def _not_found() -> tuple[Response, int]:
    return api_error(get_message('booking_not_found'), 404, error_type='not_found')


def register_routes(bp: Blueprint) -> None:
    """Register booking routes on the blueprint."""

    @bp.route('/bookings', methods=['GET'])
    def list_bookings() -> tuple[Response, int]:
        """
        List bookings.

        Query params:
            room: Only this room number
            status: Only this status
        """
        store = get_store()
        room = request.args.get('room')
        status = request.args.get('status')

        if room:
            bookings = get_room_bookings(store.bookings, room)
        else:
            bookings = sorted(store.bookings, key=lambda b: b['check_in_date'])
        if status:
            bookings = [b for b in bookings if b['status'] == status]

        return api_success(data=bookings, version=store.version)

    @bp.route('/states', methods=['GET'])
    def list_states() -> tuple[Response, int]:
        """Booking and payment status catalogue with the allowed transitions."""
        return api_success(data={
            'booking_states': get_all_states(),
            'payment_states': PAYMENT_STATES,
            'transitions': ALLOWED_TRANSITIONS
        })

    @bp.route('/bookings/<booking_id>', methods=['GET'])
    def get_booking(booking_id: str) -> tuple[Response, int]:
        """Booking detail with amount paid, balance due and price breakdown."""
        store = get_store()
        booking = store.get_booking(booking_id)
        if booking is None:
            return _not_found()
        return api_success(data=_booking_detail(booking), version=store.version)

    @bp.route('/bookings', methods=['POST'])
    @handle_core_errors
    def create_booking() -> tuple[Response, int]:
        """
        Create a booking.

        Request body:
            booker_name, booker_phone, check_in_date, check_out_date: required
            room_number: optional (first free room when absent)
            rate, guest_name, guest_phone, organization, notes,
            early_check_in / expected_check_in_time,
            late_check_out / expected_check_out_time, license_plate,
            co_occupants, id_proof_type: optional

        Returns:
            JSON with the new booking (201)
        """
        data = get_json_body()
        operator = get_operator(data)
        values = strip_control_fields(data)
        values.setdefault('rate', current_app.config['RATE_INTERNAL'])

        store = get_store()
        booking = apply_request(CreateBooking(values), store.snapshot(), operator=operator)
        version = store.merge_booking(booking, get_expected_version(data))
        store.record_audit(log_create('booking', booking['id'], booking, user=operator))

        return api_success(
            data=_booking_detail(booking),
            message=get_message('booking_created', booking_no=booking['booking_no']),
            status=201,
            version=version
        )

    @bp.route('/bookings/<booking_id>', methods=['PATCH'])
    @handle_core_errors
    def edit_booking(booking_id: str) -> tuple[Response, int]:
        """
        Edit a booking through the conflict-aware edit guard.

        Request body: any editable booking fields, plus optional operator and
        expected_version.

        Returns:
            JSON with the re-priced booking
        """
        data = get_json_body()
        store = get_store()
        before = store.get_booking(booking_id)
        if before is None:
            return _not_found()

        operator = get_operator(data)
        booking = apply_request(
            EditBooking(booking_id, strip_control_fields(data)),
            store.snapshot(),
            operator=operator
        )
        version = store.merge_booking(booking, get_expected_version(data))
        store.record_audit(log_update('booking', booking_id, before, booking, user=operator))

        return api_success(
            data=_booking_detail(booking),
            message=get_message('booking_updated', booking_no=booking['booking_no']),
            version=version
        )

    @bp.route('/bookings/<booking_id>/<transition>', methods=['POST'])
    @handle_core_errors
    def transition_booking(booking_id: str, transition: str) -> tuple[Response, int]:
        """
        Apply a lifecycle transition.

        transition: check-in | pay | check-out | cancel
        Request body (optional): receipt_number (pay), operator, expected_version
        """
        if transition not in TRANSITIONS:
            return api_error(get_message('unknown_transition', kind=transition), 404, error_type='not_found')

        data = get_json_body(required=False)
        store = get_store()
        before = store.get_booking(booking_id)
        if before is None:
            return _not_found()

        options = {}
        if transition == 'pay' and data.get('receipt_number'):
            options['receipt_number'] = str(data['receipt_number']).strip()

        operator = get_operator(data)
        booking = apply_request(
            Transition(booking_id, transition, options),
            store.snapshot(),
            operator=operator
        )
        version = store.merge_booking(booking, get_expected_version(data))
        store.record_audit(log_audit(
            transition.replace('-', '_').upper(), 'booking', booking_id,
            before=before, after=booking, user=operator
        ))

        return api_success(
            data=_booking_detail(booking),
            message=get_message(TRANSITION_MESSAGES[transition], booking_no=booking['booking_no']),
            version=version
        )

    @bp.route('/bookings/<booking_id>', methods=['DELETE'])
    @handle_core_errors
    def remove_booking(booking_id: str) -> tuple[Response, int]:
        """Delete a booking (not allowed once checked in)."""
        data = get_json_body(required=False)
        store = get_store()
        booking = store.get_booking(booking_id)
        if booking is None:
            return _not_found()

        # Raises StateError for in-house / finished stays
        delete_booking(store.bookings, booking_id)
        version = store.remove_booking(booking_id, get_expected_version(data))
        store.record_audit(log_delete('booking', booking_id, booking, user=get_operator(data)))

        return api_success(
            message=get_message('booking_deleted', booking_no=booking['booking_no']),
            version=version
        )

    @bp.route('/bookings/<booking_id>/receipts', methods=['POST'])
    @handle_core_errors
    def save_receipt(booking_id: str) -> tuple[Response, int]:
        """
        Record a receipt in the booking ledger.

        Request body:
            receipt_number: str - required
            row_id: str - transaction id to attach the receipt to; omitted
                (or the pending temp row) settles the balance due
        """
        data = get_json_body()
        store = get_store()
        before = store.get_booking(booking_id)
        if before is None:
            return _not_found()

        operator = get_operator(data)
        receipt_number = str(data.get('receipt_number') or '').strip()
        booking = record_receipt(before, receipt_number, data.get('row_id'), updated_by=operator)
        version = store.merge_booking(booking, get_expected_version(data))
        store.record_audit(log_update('booking', booking_id, before, booking, user=operator))

        return api_success(
            data=_booking_detail(booking),
            message=get_message('receipt_saved', receipt_number=receipt_number),
            version=version
        )

    @bp.route('/bookings/<booking_id>/repeat', methods=['POST'])
    @handle_core_errors
    def repeat_booking(booking_id: str) -> tuple[Response, int]:
        """
        Book a returning guest again, in the same room when it is free.

        Request body:
            check_in_date, check_out_date: required
        """
        data = get_json_body()
        store = get_store()
        source = store.get_booking(booking_id)
        if source is None:
            return _not_found()
        if not data.get('check_in_date') or not data.get('check_out_date'):
            raise ValidationError(get_message('dates_required'))

        operator = get_operator(data)
        booking = schedule_repeat_booking(
            source, data['check_in_date'], data['check_out_date'], store.snapshot(), created_by=operator
        )
        version = store.merge_booking(booking, get_expected_version(data))
        store.record_audit(log_create('booking', booking['id'], booking, user=operator))

        return api_success(
            data=_booking_detail(booking),
            message=get_message('booking_created', booking_no=booking['booking_no']),
            status=201,
            version=version
        )

    @bp.route('/audit', methods=['GET'])
    def list_audit() -> tuple[Response, int]:
        """Audit entries recorded since startup, newest first."""
        store = get_store()
        return api_success(data=list(reversed(store.audit_log)))
