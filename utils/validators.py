"""
Input validation helper functions.
Provides validation for common input types.
"""

import re
from datetime import datetime


def validate_date_format(date_str: str) -> bool:
    """
    Validate date is in YYYY-MM-DD format.

    Args:
        date_str: Date string to validate

    Returns:
        True if valid format
    """
    if not isinstance(date_str, str):
        return False
    try:
        datetime.strptime(date_str, '%Y-%m-%d')
        return True
    except ValueError:
        return False


def validate_time_format(time_str: str) -> bool:
    """
    Validate time is a 24h HH:MM clock value.

    Args:
        time_str: Time string to validate

    Returns:
        True if valid format
    """
    if not isinstance(time_str, str):
        return False
    return bool(re.match(r'^([01][0-9]|2[0-3]):[0-5][0-9]$', time_str))


def validate_date_range(start_date: str, end_date: str) -> bool:
    """
    Validate that end date is strictly after start date.

    Args:
        start_date: Start date (YYYY-MM-DD)
        end_date: End date (YYYY-MM-DD)

    Returns:
        True if valid date range
    """
    if not validate_date_format(start_date) or not validate_date_format(end_date):
        return False
    return end_date > start_date


def validate_date_string(value, field_name: str = 'date') -> tuple:
    """
    Validate a required YYYY-MM-DD request value.

    Args:
        value: Raw value from the request
        field_name: Name used in the error message

    Returns:
        Tuple of (is_valid, cleaned_value, error_message)
    """
    if value is None or value == '':
        return False, None, f'{field_name} is required'
    if not validate_date_format(value):
        return False, None, f'{field_name} must be a YYYY-MM-DD date'
    return True, value, ''


def missing_fields(data: dict, fields: list) -> list:
    """
    List required fields that are absent or blank.

    Args:
        data: Input mapping
        fields: Required field names

    Returns:
        Names of the missing fields, in the given order
    """
    missing = []
    for field in fields:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field)
    return missing


def sanitize_input(text: str, max_length: int = None) -> str:
    """
    Sanitize text input by trimming and limiting length.

    Args:
        text: Text to sanitize
        max_length: Maximum length (optional)

    Returns:
        Sanitized text
    """
    if not text:
        return ''

    # Strip whitespace
    sanitized = text.strip()

    # Limit length if specified
    if max_length and len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized
