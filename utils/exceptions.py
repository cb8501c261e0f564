"""
Front desk error types.

Every core operation either returns a new record or raises one of these.
Routes translate them into JSON errors (see utils.decorators.handle_core_errors).
"""


class FrontDeskError(Exception):
    """Base class for all recoverable front desk errors."""

    error_type = 'error'
    status_code = 400

    def __init__(self, message: str, **details):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict:
        """Serialize for API responses."""
        payload = {'error': self.message, 'error_type': self.error_type}
        if self.details:
            payload['details'] = self.details
        return payload


class ValidationError(FrontDeskError):
    """Malformed or missing input (missing ID proof, bad dates, unknown room...)."""

    error_type = 'validation'
    status_code = 400


class ConflictError(FrontDeskError):
    """Requested room/dates collide with a booking or a maintenance window."""

    error_type = 'conflict'
    status_code = 409

    def __init__(self, reason: str, **details):
        self.reason = reason
        super().__init__(reason, **details)


class StateError(FrontDeskError):
    """Operation not allowed for the booking's current status."""

    error_type = 'state'
    status_code = 422
