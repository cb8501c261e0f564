"""
Tests for the front desk reports.
"""

from datetime import date

import pytest

from factories import make_booking, make_room
from models.reports import (
    get_daily_report,
    get_finance_report,
    get_history_report,
    get_housekeeping_report,
    get_monthly_grid,
    get_parking_report,
    get_yearly_report,
)
from models.reports.history import filter_history
from models.room import build_room_inventory
from models.snapshot import build_demo_bookings

TODAY = '2024-01-10'


@pytest.fixture
def demo_bookings():
    """Demo bookings placed around 2024-01-10."""
    return build_demo_bookings(date(2024, 1, 10))


class TestDailyReport:
    """Tests for arrivals, departures and stay-overs."""

    def test_demo_day(self, demo_bookings):
        report = get_daily_report(demo_bookings, TODAY)

        assert [b['id'] for b in report['arrivals']] == ['b1', 'b2']
        assert [b['id'] for b in report['departures']] == ['b3', 'b4']
        assert [b['id'] for b in report['stayovers']] == ['b5']
        assert report['stats']['arrivals'] == 2
        assert report['stats']['arrived'] == 1
        assert report['stats']['departed'] == 0

    def test_cancelled_bookings_are_left_out(self):
        bookings = [make_booking(status='Cancelled')]
        assert get_daily_report(bookings, TODAY)['stats']['arrivals'] == 0

    def test_departing_cars(self):
        bookings = [
            make_booking(check_in='2024-01-08', check_out=TODAY, license_plate='1กข 1234', status='Checked-out'),
            make_booking('b2', room_number='803', check_in='2024-01-08', check_out=TODAY, license_plate='2ขค 99'),
        ]
        stats = get_daily_report(bookings, TODAY)['stats']
        assert stats['parking_total'] == 2
        assert stats['parking_collected'] == 1


class TestMonthlyGrid:
    """Tests for the room-by-day grid."""

    def test_cells_follow_half_open_stays(self):
        rooms = [make_room('802'), make_room('803', status='Maintenance', maintenance_start='2024-01-05', maintenance_end='2024-01-06')]
        grid = get_monthly_grid(rooms, [make_booking()], 2024, 1)

        assert len(grid['days']) == 31
        cells = grid['rows'][0]['cells']
        assert cells[9]['booking_id'] == 'b1' and cells[9]['is_start'] is True
        assert cells[10]['booking_id'] == 'b1' and cells[10]['is_start'] is False
        assert cells[11]['booking_id'] is None
        maintenance_days = [c['date'] for c in grid['rows'][1]['cells'] if c['maintenance']]
        assert maintenance_days == ['2024-01-05', '2024-01-06']

    def test_floor_filter(self):
        grid = get_monthly_grid(build_room_inventory(), [], 2024, 2, floor='9')
        assert len(grid['rows']) == 16
        assert len(grid['days']) == 29


class TestYearlyReport:
    """Tests for the yearly statistics."""

    def test_revenue_and_utilization(self):
        bookings = [
            make_booking(),
            make_booking('b2', room_number='901', check_in='2024-12-30', check_out='2025-01-02', rate=1500),
            make_booking('b3', check_in='2024-03-01', check_out='2024-03-02', status='Cancelled'),
        ]
        report = get_yearly_report(build_room_inventory(), bookings, 2024)

        assert report['monthly'][0]['revenue'] == 2400
        assert report['monthly'][11]['check_ins'] == 1
        assert report['total_revenue'] == 2400 + 4500
        assert report['total_check_ins'] == 2
        assert report['floors']['8']['total_nights'] == 2
        assert report['floors']['9']['total_nights'] == 2
        assert report['guest_types'] == {'internal': 1, 'external': 1, 'total': 2}


class TestHistoryReport:
    """Tests for guest history."""

    @pytest.fixture
    def history(self):
        return [
            make_booking(payment_status='Paid', paid_amount=2400),
            make_booking('b2', check_in='2024-01-20', check_out='2024-01-23'),
            make_booking('b3', room_number='901', booker_name='Nurse Jane', booker_phone='089-999-8888',
                         organization='Pediatrics', rate=1500, status='Cancelled'),
            make_booking('b4', check_in='2024-02-01', check_out='2024-02-02'),
        ]

    def test_groups_by_phone(self, history):
        report = get_history_report(history, 2024, 1)

        assert len(report['bookings']) == 3
        guests = report['guests']
        assert [g['booker_name'] for g in guests] == ['Dr. Somchai', 'Nurse Jane']
        assert guests[0]['total_bookings'] == 2
        assert guests[0]['total_nights'] == 5
        assert guests[0]['balance_due'] == 3600
        assert guests[1]['has_issues'] is True

        summary = report['summary']
        assert summary['total_people'] == 2
        assert summary['internal_count'] == 1
        assert summary['external_count'] == 1
        assert summary['top_guests'][0]['total_nights'] == 5

    def test_search_and_filters(self, history):
        assert [b['id'] for b in filter_history(history, 2024, 1, search='pedia')] == ['b3']
        assert [b['id'] for b in filter_history(history, 2024, 1, finance='Paid')] == ['b1']
        assert [b['id'] for b in filter_history(history, 2024, 1, finance='Due')] == ['b2', 'b3']
        assert [b['id'] for b in filter_history(history, 2024, 1, status='Cancelled')] == ['b3']
        assert len(filter_history(history, 2024, 1, status='All')) == 3


class TestFinanceReport:
    """Tests for the daily finance sheet."""

    def test_demo_day(self, demo_bookings):
        report = get_finance_report(demo_bookings, TODAY)

        rooms = [e['booking']['room_number'] for e in report['entries']]
        assert rooms == ['801', '802', '805', '901', '910']
        assert report['stats']['guest_count'] == 5
        assert report['stats']['paid_count'] == 3
        assert report['stats']['receipt_count'] == 4

        unpaid = next(e for e in report['entries'] if e['booking']['id'] == 'b4')
        assert unpaid['nights'] == 3
        assert unpaid['rows'][-1]['amount'] == 4500


class TestHousekeepingReport:
    """Tests for the housekeeping sheet."""

    def test_rows_and_totals(self):
        rooms = [make_room('801'), make_room('802'), make_room('803', status='Maintenance')]
        bookings = [
            make_booking('b1', room_number='801', check_in='2024-01-09', check_out='2024-01-11'),
            make_booking('b2', room_number='802', check_in=TODAY, check_out='2024-01-11'),
        ]
        report = get_housekeeping_report(rooms, bookings, TODAY)
        rows = {r['room']['number']: r for r in report['rows']}

        assert rows['801']['show_count'] is True
        assert rows['802']['show_count'] is False
        assert rows['802']['check_in'] is True
        assert rows['803']['show_maintenance'] is True
        assert report['totals'] == {'count_total': 2, 'check_ins': 1, 'check_outs': 0}
        assert len(report['checklist']) == 15


class TestParkingReport:
    """Tests for the parking list."""

    def test_cars_on_day(self, demo_bookings):
        report = get_parking_report(build_room_inventory(), demo_bookings, TODAY)
        assert report['total_cars'] == 1
        assert report['cars'][0]['license_plate'] == '1กข 1234'
        assert report['total_rooms'] == 32

    def test_check_out_day_counts(self):
        bookings = [make_booking(license_plate='ABC'), make_booking('b2', license_plate='  ')]
        assert get_parking_report([], bookings, '2024-01-12')['total_cars'] == 1
