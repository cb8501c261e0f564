"""Timezone-aware date/time helpers for the front desk application."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from flask import current_app, has_app_context

DEFAULT_TIMEZONE = 'Asia/Bangkok'


def get_timezone() -> ZoneInfo:
    """Get the configured timezone (default outside an app context)."""
    tz_name = DEFAULT_TIMEZONE
    if has_app_context():
        tz_name = current_app.config.get('TIMEZONE', DEFAULT_TIMEZONE)
    return ZoneInfo(tz_name)


def get_today() -> date:
    """Get today's date in the configured timezone."""
    return datetime.now(get_timezone()).date()


def get_now() -> datetime:
    """Get current datetime in the configured timezone."""
    return datetime.now(get_timezone())


def format_clock(moment: datetime) -> str:
    """Format a datetime as a 24h HH:MM clock string."""
    return moment.strftime('%H:%M')


def format_timestamp(moment: datetime) -> str:
    """Format a datetime as an ISO 8601 timestamp for audit fields."""
    return moment.isoformat(timespec='seconds')
