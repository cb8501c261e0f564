"""
Booking and payment status definitions.

Provides the fixed status catalogue and lookup helpers used by the
availability resolver, the lifecycle state machine and the reports.
"""

# =============================================================================
# BOOKING STATUSES
# =============================================================================

STATUS_DRAFT = 'Draft'
STATUS_CONFIRMED = 'Confirmed'
STATUS_CHECKED_IN = 'Checked-in'
STATUS_CHECKED_OUT = 'Checked-out'
STATUS_CANCELLED = 'Cancelled'

PAYMENT_UNPAID = 'Unpaid'
PAYMENT_PAID = 'Paid'

BOOKING_STATES = [
    {'name': STATUS_DRAFT, 'display_order': 1, 'color': '#6B7280',
     'is_availability_releasing': False, 'is_terminal': False},
    {'name': STATUS_CONFIRMED, 'display_order': 2, 'color': '#1D4ED8',
     'is_availability_releasing': False, 'is_terminal': False},
    {'name': STATUS_CHECKED_IN, 'display_order': 3, 'color': '#15803D',
     'is_availability_releasing': False, 'is_terminal': False},
    {'name': STATUS_CHECKED_OUT, 'display_order': 4, 'color': '#7E22CE',
     'is_availability_releasing': False, 'is_terminal': True},
    {'name': STATUS_CANCELLED, 'display_order': 5, 'color': '#B91C1C',
     'is_availability_releasing': True, 'is_terminal': True},
]

PAYMENT_STATES = [
    {'name': PAYMENT_UNPAID, 'color': '#C2410C'},
    {'name': PAYMENT_PAID, 'color': '#047857'},
]


# =============================================================================
# LOOKUPS
# =============================================================================

def get_all_states() -> list:
    """
    Get all booking states.

    Returns:
        List of state dicts ordered by display_order
    """
    return [dict(state) for state in sorted(BOOKING_STATES, key=lambda s: s['display_order'])]


def get_state_by_name(name: str) -> dict:
    """
    Get state by name.

    Args:
        name: Status name (e.g., 'Confirmed', 'Cancelled')

    Returns:
        State dictionary or None
    """
    for state in BOOKING_STATES:
        if state['name'] == name:
            return dict(state)
    return None


def get_releasing_states() -> list:
    """Names of statuses that free the room (never block availability)."""
    return [s['name'] for s in BOOKING_STATES if s['is_availability_releasing']]


def is_blocking(booking: dict) -> bool:
    """True if the booking occupies its room (i.e. it is not cancelled)."""
    return booking.get('status') not in get_releasing_states()
