"""
Front desk report API routes.
Read-only projections of the current snapshot.
"""

from flask import Blueprint, Response, request

from blueprints.frontdesk.context import get_store
from models.intervals import to_date_string
from models.reports import (
    get_daily_report,
    get_finance_report,
    get_history_report,
    get_housekeeping_report,
    get_monthly_grid,
    get_parking_report,
    get_yearly_report,
)
from utils.api_response import api_error, api_success
from utils.datetime_helpers import get_today
from utils.decorators import handle_core_errors
from utils.exceptions import ValidationError
from utils.messages import get_message
from utils.validators import validate_date_format


def _date_arg() -> str:
    value = request.args.get('date')
    if not value:
        return to_date_string(get_today())
    if not validate_date_format(value):
        raise ValidationError(get_message('invalid_date', field='date'), field='date')
    return value


def _int_arg(name: str, default: int, low: int = None, high: int = None) -> int:
    value = request.args.get(name)
    if value is None or value == '':
        return default
    try:
        number = int(value)
    except ValueError:
        raise ValidationError(f'{name} must be an integer', field=name)
    if (low is not None and number < low) or (high is not None and number > high):
        raise ValidationError(f'{name} must be between {low} and {high}', field=name)
    return number


def _daily(rooms, bookings):
    return get_daily_report(bookings, _date_arg())


def _monthly(rooms, bookings):
    today = get_today()
    return get_monthly_grid(
        rooms, bookings,
        _int_arg('year', today.year),
        _int_arg('month', today.month, 1, 12),
        request.args.get('floor')
    )


def _yearly(rooms, bookings):
    return get_yearly_report(rooms, bookings, _int_arg('year', get_today().year))


def _history(rooms, bookings):
    today = get_today()
    return get_history_report(
        bookings,
        _int_arg('year', today.year),
        _int_arg('month', today.month, 1, 12),
        search=request.args.get('search', ''),
        status=request.args.get('status'),
        finance=request.args.get('finance')
    )


def _finance(rooms, bookings):
    return get_finance_report(bookings, _date_arg())


def _housekeeping(rooms, bookings):
    return get_housekeeping_report(rooms, bookings, _date_arg(), request.args.get('floor'))


def _parking(rooms, bookings):
    return get_parking_report(rooms, bookings, _date_arg())


REPORTS = {
    'daily': _daily,
    'monthly': _monthly,
    'yearly': _yearly,
    'history': _history,
    'finance': _finance,
    'housekeeping': _housekeeping,
    'parking': _parking,
}


def register_routes(bp: Blueprint) -> None:
    """Register report routes on the blueprint."""

    @bp.route('/reports/<name>', methods=['GET'])
    @handle_core_errors
    def get_report(name: str) -> tuple[Response, int]:
        """
        Build a report.

        name: daily | monthly | yearly | history | finance | housekeeping | parking

        Query params (by report):
            date: YYYY-MM-DD (daily, finance, housekeeping, parking; default today)
            year, month: (monthly, yearly, history; default current)
            floor: (monthly, housekeeping)
            search, status, finance: (history)
        """
        builder = REPORTS.get(name)
        if builder is None:
            return api_error(get_message('unknown_report', report=name), 404, error_type='not_found')

        store = get_store()
        return api_success(data=builder(store.rooms, store.bookings), version=store.version)
