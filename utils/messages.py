"""
Centralized front desk messages.
All user-facing text in one place for consistency.
"""

MESSAGES = {
    # Success messages
    'booking_created': 'Booking {booking_no} created',
    'booking_updated': 'Booking {booking_no} updated',
    'booking_deleted': 'Booking {booking_no} deleted',
    'booking_checked_in': 'Guest checked in',
    'booking_paid': 'Payment recorded',
    'booking_checked_out': 'Guest checked out',
    'booking_cancelled': 'Booking {booking_no} cancelled',
    'receipt_saved': 'Receipt {receipt_number} saved',
    'maintenance_scheduled': 'Room {room_number} closed for maintenance',
    'room_enabled': 'Room {room_number} is active again',
    'demo_seeded': 'Demo data loaded: {rooms} rooms, {bookings} bookings',

    # Error messages
    'data_required': 'Request body is required',
    'booking_not_found': 'Booking not found',
    'room_not_found': 'Room {room_number} not found',
    'dates_required': 'Please select both check-in and check-out dates',
    'invalid_date': '{field} must be a YYYY-MM-DD date',
    'invalid_time': '{field} must be a HH:MM time',
    'invalid_text': '{field} must be text',
    'invalid_date_range': 'Check-out date must be after check-in date',
    'invalid_rate': 'Rate must be one of {rates}',
    'fields_required': 'Missing required fields: {fields}',
    'id_proof_required': 'ID proof required',
    'invalid_id_proof': 'ID proof type must be one of {types}',
    'too_many_co_occupants': 'Maximum {max} co-occupants allowed',
    'maintenance_dates_required': "Please select dates or choose 'Indefinite'",
    'maintenance_range_invalid': 'Maintenance end date cannot be before its start date',
    'field_not_editable': 'Field cannot be edited: {fields}',
    'receipt_required': 'Receipt number is required',
    'nothing_to_pay': 'Booking {booking_no} has no outstanding balance',
    'snapshot_changed': 'Bookings changed since they were read; reload and retry',
    'unknown_transition': 'Unknown transition: {kind}',
    'unknown_report': 'Unknown report: {report}',

    # Conflict reasons
    'closed_indefinitely': 'Room is closed indefinitely',
    'maintenance_conflict': 'Maintenance ({start} to {end})',
    'occupied_by': 'Occupied by {booker_name} ({check_in} - {check_out})',
    'extension_conflict': 'Cannot extend date to {date}. Room is booked by {booker_name}.',
    'late_checkout_conflict': 'Cannot select late check-out. Next guest ({booker_name}) arrives same day.',
    'no_rooms_available': 'No rooms available from {check_in} to {check_out}',

    # State errors
    'invalid_transition': 'Cannot change booking from {current} to {target}',
    'cannot_delete': 'Cannot delete a booking that is {status}',
    'cannot_edit': 'Cannot edit a booking that is {status}',
    'cannot_pay': 'Cannot take payment for a booking that is {status}',
}


def get_message(key: str, **kwargs) -> str:
    """
    Get message with optional formatting.

    Args:
        key: Message key
        **kwargs: Format parameters

    Returns:
        Formatted message or key if not found
    """
    message = MESSAGES.get(key, key)
    if kwargs:
        return message.format(**kwargs)
    return message
