"""
Request helpers shared by the front desk routes.
"""

from flask import current_app, request

from extensions import store
from utils.exceptions import ValidationError
from utils.messages import get_message


def get_store():
    """Snapshot store of the current app."""
    return store.get()


def get_json_body(required: bool = True) -> dict:
    """
    JSON body of the request.

    Raises:
        ValidationError: If required and the body is missing or not an object
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        if required:
            raise ValidationError(get_message('data_required'))
        return {}
    return data


CONTROL_FIELDS = ('operator', 'expected_version')


def strip_control_fields(data: dict) -> dict:
    """Request values without the operator / version fields."""
    return {k: v for k, v in data.items() if k not in CONTROL_FIELDS}


def get_operator(data: dict = None) -> str:
    """
    Operator name for audit fields.

    Taken from the 'operator' body field, then the X-Operator header, then
    the configured default.
    """
    if data and data.get('operator'):
        return str(data['operator']).strip()
    header = request.headers.get('X-Operator')
    if header:
        return header.strip()
    return current_app.config.get('DEFAULT_OPERATOR', 'Front Desk')


def get_expected_version(data: dict = None):
    """
    Snapshot version the client last read, if it sent one.

    Accepts an 'expected_version' body field or an If-Match header.

    Raises:
        ValidationError: If the value is not an integer
    """
    value = (data or {}).get('expected_version')
    if value is None:
        value = request.headers.get('If-Match')
    if value is None or value == '':
        return None
    try:
        return int(str(value).strip('"'))
    except ValueError:
        raise ValidationError('expected_version must be an integer')
