"""
Front desk room API routes.
Room list, maintenance scheduling and availability search.
"""

from flask import Blueprint, Response, current_app, request

from blueprints.frontdesk.context import (
    get_expected_version,
    get_json_body,
    get_operator,
    get_store,
)
from models.requests import ScheduleMaintenance, apply_request
from models.room import enable_room, find_affected_bookings, get_room_stats, get_rooms_by_floor
from models.room_availability import resolve_room_availability, select_room
from utils.api_response import api_error, api_success
from utils.audit import log_update
from utils.decorators import handle_core_errors
from utils.exceptions import ValidationError
from utils.messages import get_message
from utils.validators import validate_date_range, validate_date_string


def _serialize_result(result: dict) -> dict:
    return {
        'room_number': result['room']['number'],
        'floor': result['room']['floor'],
        'available': result['available'],
        'reason': result['reason'],
        'blocked_by': result['blocked_by'],
        'conflict_booking_id': result['conflict_booking_id']
    }


def register_routes(bp: Blueprint) -> None:
    """Register room routes on the blueprint."""

    @bp.route('/rooms', methods=['GET'])
    def list_rooms() -> tuple[Response, int]:
        """
        List rooms.

        Query params:
            floor: Optional floor filter ('8', '9')

        Returns:
            JSON with rooms, stats and the nightly rates
        """
        store = get_store()
        rooms = get_rooms_by_floor(store.rooms, request.args.get('floor'))
        return api_success(
            data={
                'rooms': rooms,
                'stats': get_room_stats(store.rooms),
                'rates': [current_app.config['RATE_INTERNAL'], current_app.config['RATE_EXTERNAL']]
            },
            version=store.version
        )

    @bp.route('/rooms/<room_number>/maintenance', methods=['POST'])
    @handle_core_errors
    def schedule_room_maintenance(room_number: str) -> tuple[Response, int]:
        """
        Close a room for maintenance.

        Request body:
            start: str - first closed day (YYYY-MM-DD)
            end: str - last closed day (YYYY-MM-DD)
            indefinite: bool - close with no reopening date

        Returns:
            JSON with the room; a warning lists bookings inside the window
        """
        data = get_json_body()
        store = get_store()
        before = store.get_room(room_number)
        if before is None:
            return api_error(get_message('room_not_found', room_number=room_number), 404, error_type='not_found')

        room = apply_request(
            ScheduleMaintenance(
                room_number=room_number,
                start=data.get('start'),
                end=data.get('end'),
                indefinite=bool(data.get('indefinite'))
            ),
            store.snapshot()
        )
        operator = get_operator(data)
        version = store.merge_room(room, get_expected_version(data))
        store.record_audit(log_update('room', room_number, before, room, user=operator))

        affected = find_affected_bookings(room, store.bookings)
        warning = None
        if affected:
            warning = 'Bookings affected: ' + ', '.join(b['booking_no'] for b in affected)
            current_app.logger.warning(f'Maintenance on room {room_number} overlaps {len(affected)} booking(s)')

        return api_success(
            data={'room': room, 'affected_bookings': affected},
            message=get_message('maintenance_scheduled', room_number=room_number),
            warning=warning,
            version=version
        )

    @bp.route('/rooms/<room_number>/maintenance', methods=['DELETE'])
    @handle_core_errors
    def reopen_room(room_number: str) -> tuple[Response, int]:
        """Reopen a room and clear its maintenance window."""
        data = get_json_body(required=False)
        store = get_store()
        before = store.get_room(room_number)
        if before is None:
            return api_error(get_message('room_not_found', room_number=room_number), 404, error_type='not_found')

        room = enable_room(before)
        version = store.merge_room(room, get_expected_version(data))
        store.record_audit(log_update('room', room_number, before, room, user=get_operator(data)))

        return api_success(
            data={'room': room},
            message=get_message('room_enabled', room_number=room_number),
            version=version
        )

    @bp.route('/availability', methods=['POST'])
    @handle_core_errors
    def search_availability() -> tuple[Response, int]:
        """
        Resolve room availability for a stay.

        Request body:
            check_in_date: str - YYYY-MM-DD
            check_out_date: str - YYYY-MM-DD (after check-in)
            floor: str - optional floor filter
            exclude_booking_id: str - booking to ignore (when moving it)
            preferred_room: str - room to suggest when free

        Returns:
            JSON with one result per room and the suggested room number
        """
        data = get_json_body()

        valid, check_in, err = validate_date_string(data.get('check_in_date'), 'check_in_date')
        if not valid:
            raise ValidationError(err)
        valid, check_out, err = validate_date_string(data.get('check_out_date'), 'check_out_date')
        if not valid:
            raise ValidationError(err)
        if not validate_date_range(check_in, check_out):
            raise ValidationError(get_message('invalid_date_range'))

        store = get_store()
        rooms = get_rooms_by_floor(store.rooms, data.get('floor'))
        results = resolve_room_availability(
            rooms, store.bookings, check_in, check_out, data.get('exclude_booking_id')
        )
        suggested = select_room(results, data.get('preferred_room'))

        return api_success(
            data={
                'check_in_date': check_in,
                'check_out_date': check_out,
                'results': [_serialize_result(r) for r in results],
                'available_count': sum(1 for r in results if r['available']),
                'suggested_room': suggested['number'] if suggested else None
            },
            version=store.version
        )
