"""Reports model module."""
from models.reports.daily import get_daily_report
from models.reports.finance import get_finance_report
from models.reports.history import get_history_report
from models.reports.housekeeping import get_housekeeping_report
from models.reports.monthly import get_monthly_grid
from models.reports.parking import get_parking_report
from models.reports.yearly import get_yearly_report

__all__ = [
    'get_daily_report',
    'get_finance_report',
    'get_history_report',
    'get_housekeeping_report',
    'get_monthly_grid',
    'get_parking_report',
    'get_yearly_report'
]
