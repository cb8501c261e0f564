"""
Front desk requests.

A closed set of request types covers everything an operator can ask of the
booking core. apply_request() routes each one to the rule that validates it
and returns the new record for the caller to merge.
"""

from dataclasses import dataclass, field

from utils.exceptions import ValidationError
from .booking_crud import create_booking, require_booking
from .booking_edit import propose_edit
from .booking_state import apply_transition
from .room import require_room, schedule_maintenance


@dataclass(frozen=True)
class CreateBooking:
    """New booking from request values (see booking_crud.create_booking)."""
    data: dict


@dataclass(frozen=True)
class EditBooking:
    """Patch of editable booking fields."""
    booking_id: str
    patch: dict


@dataclass(frozen=True)
class Transition:
    """Lifecycle transition: check-in, pay, check-out or cancel."""
    booking_id: str
    kind: str
    options: dict = field(default_factory=dict)


@dataclass(frozen=True)
class ScheduleMaintenance:
    """Close a room, for a window or indefinitely."""
    room_number: str
    start: str = None
    end: str = None
    indefinite: bool = False


REQUEST_TYPES = (CreateBooking, EditBooking, Transition, ScheduleMaintenance)


def apply_request(request, snapshot: dict, operator: str = None, now=None) -> dict:
    """
    Validate a request against the snapshot.

    Args:
        request: One of REQUEST_TYPES
        snapshot: {'rooms': [...], 'bookings': [...]}
        operator: Name stamped on audit fields
        now: Current datetime

    Returns:
        dict: New booking (CreateBooking, EditBooking, Transition) or new
        room (ScheduleMaintenance)

    Raises:
        ValidationError, ConflictError, StateError
    """
    if isinstance(request, CreateBooking):
        return create_booking(request.data, snapshot, created_by=operator, now=now)

    if isinstance(request, EditBooking):
        booking = require_booking(snapshot['bookings'], request.booking_id)
        return propose_edit(booking, request.patch, snapshot, updated_by=operator, now=now)

    if isinstance(request, Transition):
        booking = require_booking(snapshot['bookings'], request.booking_id)
        return apply_transition(booking, request.kind, updated_by=operator, now=now, **request.options)

    if isinstance(request, ScheduleMaintenance):
        room = require_room(snapshot['rooms'], request.room_number)
        return schedule_maintenance(room, request.start, request.end, request.indefinite)

    raise ValidationError(f'Unsupported request: {type(request).__name__}')
