"""
Route decorators.
Translates core front desk errors into JSON error responses.
"""

from functools import wraps

from flask import current_app, request

from utils.api_response import api_error
from utils.exceptions import FrontDeskError


def handle_core_errors(func):
    """
    Decorator converting FrontDeskError into the JSON error envelope.

    Usage:
        @bp.route('/bookings', methods=['POST'])
        @handle_core_errors
        def create_booking():
            ...

    ValidationError -> 400, ConflictError -> 409, StateError -> 422.
    Anything else propagates to the app's 500 handler.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except FrontDeskError as e:
            current_app.logger.warning(
                f'{request.method} {request.path} rejected ({e.error_type}): {e.message}'
            )
            payload = e.to_dict()
            return api_error(
                payload.pop('error'),
                status=e.status_code,
                **payload
            )
    return wrapper


__all__ = ['handle_core_errors']
