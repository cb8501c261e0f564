"""
Standardized API response helpers.

Provides consistent JSON response format across all API endpoints:

    Success:  {"success": true, "data": {...}, "message": "..."}
    Error:    {"success": false, "error": "...", "error_type": "conflict"}
    Warning:  {"success": true, "data": {...}, "warning": "..."}

Usage:
    from utils.api_response import api_success, api_error

    return api_success(data={'id': 'b1'}, message='Booking created')
    return api_error('Request body is required', status=400)
"""

from flask import jsonify
from typing import Any


def api_success(
    data: dict | list | None = None,
    message: str | None = None,
    warning: str | None = None,
    status: int = 200,
    **extra_fields: Any
) -> tuple:
    """
    Build a standardized success JSON response.

    Args:
        data: Optional payload to include as 'data' key.
        message: Optional success message.
        warning: Optional warning message (e.g. bookings affected by maintenance).
        status: HTTP status code (default 200).
        **extra_fields: Additional top-level fields (e.g. version).

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': True}

    if data is not None:
        response['data'] = data

    if message:
        response['message'] = message

    if warning:
        response['warning'] = warning

    if extra_fields:
        response.update(extra_fields)

    return jsonify(response), status


def api_error(
    error: str,
    status: int = 400,
    error_type: str | None = None,
    **extra_fields: Any
) -> tuple:
    """
    Build a standardized error JSON response.

    Args:
        error: Error message.
        status: HTTP status code (default 400).
        error_type: Machine-readable category (validation, conflict, state, not_found).
        **extra_fields: Additional top-level fields (e.g. details).

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': False, 'error': error}

    if error_type:
        response['error_type'] = error_type

    if extra_fields:
        response.update(extra_fields)

    return jsonify(response), status
