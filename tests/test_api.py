"""
Tests for the front desk JSON API.
"""

from factories import make_booking
from models.room import build_room_inventory


def _create(client, **fields):
    payload = {
        'booker_name': 'Dr. Somchai',
        'booker_phone': '081-234-5678',
        'room_number': '802',
        'check_in_date': '2024-01-10',
        'check_out_date': '2024-01-12',
        'operator': 'Night Shift',
    }
    payload.update(fields)
    return client.post('/api/bookings', json=payload)


class TestIndex:
    """Tests for the service root."""

    def test_index(self, client):
        response = client.get('/')
        assert response.status_code == 200
        assert response.get_json()['data']['name'] == 'Dormitory Front Desk'

    def test_unknown_route_is_json(self, client):
        response = client.get('/api/nothing-here')
        assert response.status_code == 404
        assert response.get_json()['error_type'] == 'not_found'


class TestRoomRoutes:
    """Tests for room listing, maintenance and availability."""

    def test_list_rooms(self, client, store):
        data = client.get('/api/rooms?floor=8').get_json()['data']
        assert len(data['rooms']) == 16
        assert data['stats']['total'] == 32
        assert data['rates'] == [1200, 1500]

    def test_availability_scenario(self, client, store):
        """802 is booked 10-12: free from the 12th, taken on the 11th."""
        _create(client)

        free = client.post('/api/availability', json={
            'check_in_date': '2024-01-12', 'check_out_date': '2024-01-14', 'floor': '8', 'preferred_room': '802'
        }).get_json()['data']
        assert free['suggested_room'] == '802'
        assert free['available_count'] == 16

        taken = client.post('/api/availability', json={
            'check_in_date': '2024-01-11', 'check_out_date': '2024-01-13', 'floor': '8'
        }).get_json()['data']
        room = next(r for r in taken['results'] if r['room_number'] == '802')
        assert room['available'] is False
        assert 'Dr. Somchai' in room['reason']
        assert taken['suggested_room'] == '801'

    def test_availability_requires_valid_range(self, client, store):
        response = client.post('/api/availability', json={
            'check_in_date': '2024-01-12', 'check_out_date': '2024-01-12'
        })
        assert response.status_code == 400
        assert response.get_json()['error_type'] == 'validation'

    def test_maintenance_warns_about_bookings(self, client, store):
        _create(client)
        response = client.post('/api/rooms/802/maintenance', json={'start': '2024-01-11', 'end': '2024-01-11'})
        body = response.get_json()

        assert response.status_code == 200
        assert body['data']['room']['status'] == 'Maintenance'
        assert 'BK-' in body['warning']

        response = client.delete('/api/rooms/802/maintenance')
        assert response.get_json()['data']['room']['status'] == 'Active'

    def test_maintenance_unknown_room(self, client, store):
        response = client.post('/api/rooms/999/maintenance', json={'indefinite': True})
        assert response.status_code == 404

    def test_maintenance_bad_window(self, client, store):
        response = client.post('/api/rooms/802/maintenance', json={'start': '2024-01-15', 'end': '2024-01-11'})
        assert response.status_code == 400


class TestBookingRoutes:
    """Tests for booking creation, edits and lifecycle."""

    def test_create_booking(self, client, store):
        response = _create(client)
        body = response.get_json()

        assert response.status_code == 201
        booking = body['data']['booking']
        assert booking['total_amount'] == 2400
        assert booking['created_by'] == 'Night Shift'
        assert body['data']['balance_due'] == 2400
        assert body['data']['can_delete'] is True
        assert body['version'] == store.version

    def test_double_booking_conflict(self, client, store):
        _create(client)
        response = _create(client, booker_name='Nurse Jane', check_in_date='2024-01-11', check_out_date='2024-01-13')
        body = response.get_json()

        assert response.status_code == 409
        assert body['error_type'] == 'conflict'
        assert 'Dr. Somchai' in body['error']
        assert len(store.bookings) == 1

    def test_list_and_detail(self, client, store):
        booking_id = _create(client).get_json()['data']['booking']['id']
        _create(client, room_number='803', check_in_date='2024-01-05', check_out_date='2024-01-06')

        listed = client.get('/api/bookings').get_json()['data']
        assert [b['room_number'] for b in listed] == ['803', '802']
        assert len(client.get('/api/bookings?room=802').get_json()['data']) == 1
        assert client.get('/api/bookings?status=Cancelled').get_json()['data'] == []

        detail = client.get(f'/api/bookings/{booking_id}').get_json()['data']
        assert detail['state']['name'] == 'Confirmed'
        assert detail['next_statuses'] == ['Checked-in', 'Checked-out', 'Cancelled']
        assert detail['price']['nights'] == 2

    def test_states(self, client):
        data = client.get('/api/states').get_json()['data']
        assert [s['name'] for s in data['booking_states']][0] == 'Draft'
        assert data['transitions']['Checked-out'] == []

    def test_non_text_name_is_bad_request(self, client, store):
        response = _create(client, booker_name=123)
        assert response.status_code == 400
        assert response.get_json()['error_type'] == 'validation'
        assert store.bookings == []

    def test_missing_body(self, client, store):
        response = client.post('/api/bookings')
        assert response.status_code == 400

    def test_extend_paid_booking(self, client, store):
        booking_id = _create(client).get_json()['data']['booking']['id']
        client.post(f'/api/bookings/{booking_id}/pay', json={'receipt_number': 'RCP-1'})

        body = client.patch(f'/api/bookings/{booking_id}', json={'check_out_date': '2024-01-13'}).get_json()

        assert body['data']['booking']['total_amount'] == 3600
        assert body['data']['booking']['payment_status'] == 'Unpaid'
        assert body['data']['balance_due'] == 1200
        assert body['data']['is_extension_payment'] is True

        body = client.post(f'/api/bookings/{booking_id}/receipts', json={'receipt_number': 'RCP-2'}).get_json()
        assert body['data']['booking']['paid_amount'] == 3600
        assert body['data']['booking']['payment_status'] == 'Paid'
        assert body['data']['balance_due'] == 0

    def test_stale_version_rejected(self, client, store):
        booking_id = _create(client).get_json()['data']['booking']['id']
        stale = store.version
        client.patch(f'/api/bookings/{booking_id}', json={'notes': 'first'})

        response = client.patch(f'/api/bookings/{booking_id}', json={'notes': 'second', 'expected_version': stale})

        assert response.status_code == 409
        assert store.get_booking(booking_id)['notes'] == 'first'

    def test_check_in_flow(self, client, store):
        booking_id = _create(client).get_json()['data']['booking']['id']

        response = client.post(f'/api/bookings/{booking_id}/check-in')
        assert response.status_code == 400

        client.patch(f'/api/bookings/{booking_id}', json={'id_proof_type': 'Passport'})
        response = client.post(f'/api/bookings/{booking_id}/check-in', headers={'X-Operator': 'Desk A'})
        assert response.status_code == 200
        assert response.get_json()['data']['booking']['updated_by'] == 'Desk A'

        response = client.post(f'/api/bookings/{booking_id}/check-in')
        assert response.status_code == 422
        assert response.get_json()['error_type'] == 'state'

        response = client.delete(f'/api/bookings/{booking_id}')
        assert response.status_code == 422

    def test_cancel_frees_room(self, client, store):
        booking_id = _create(client).get_json()['data']['booking']['id']
        client.post(f'/api/bookings/{booking_id}/cancel')

        response = _create(client, booker_name='Nurse Jane')
        assert response.status_code == 201
        assert response.get_json()['data']['booking']['room_number'] == '802'

    def test_unknown_transition(self, client, store):
        booking_id = _create(client).get_json()['data']['booking']['id']
        response = client.post(f'/api/bookings/{booking_id}/upgrade')
        assert response.status_code == 404

    def test_delete_confirmed(self, client, store):
        booking_id = _create(client).get_json()['data']['booking']['id']
        response = client.delete(f'/api/bookings/{booking_id}')
        assert response.status_code == 200
        assert client.get(f'/api/bookings/{booking_id}').status_code == 404

    def test_receipt_settles_balance(self, client, store):
        store.load(build_room_inventory(), [make_booking(
            check_out='2024-01-13', status='Checked-in', paid_amount=2400,
            transactions=[{'id': 't1', 'type': 'Room Charge', 'amount': 2400, 'status': 'Paid',
                           'receipt_number': 'RCP-1', 'updated_by': 'Desk', 'timestamp': None, 'note': None}]
        )])

        response = client.post('/api/bookings/b1/receipts', json={'receipt_number': 'RCP-2', 'row_id': 'temp-b1'})
        body = response.get_json()

        assert response.status_code == 200
        assert body['data']['booking']['payment_status'] == 'Paid'
        assert body['data']['balance_due'] == 0
        assert [r['receipt_number'] for r in body['data']['financial_rows']] == ['RCP-1', 'RCP-2']

    def test_repeat_booking(self, client, store):
        booking_id = _create(client).get_json()['data']['booking']['id']
        response = client.post(f'/api/bookings/{booking_id}/repeat', json={
            'check_in_date': '2024-02-01', 'check_out_date': '2024-02-03'
        })
        booking = response.get_json()['data']['booking']
        assert response.status_code == 201
        assert booking['room_number'] == '802'
        assert booking['notes'] == 'Returning Guest'

    def test_audit_trail(self, client, store):
        booking_id = _create(client).get_json()['data']['booking']['id']
        client.patch(f'/api/bookings/{booking_id}', json={'notes': 'VIP'})

        entries = client.get('/api/audit').get_json()['data']
        assert [e['action'] for e in entries] == ['UPDATE', 'CREATE']
        assert entries[0]['changes']['notes'] == {'before': '', 'after': 'VIP'}


class TestReportRoutes:
    """Tests for the report endpoint."""

    def test_daily(self, client, store):
        _create(client)
        data = client.get('/api/reports/daily?date=2024-01-10').get_json()['data']
        assert data['stats']['arrivals'] == 1

    def test_monthly(self, client, store):
        data = client.get('/api/reports/monthly?year=2024&month=2&floor=9').get_json()['data']
        assert len(data['rows']) == 16

    def test_bad_month(self, client, store):
        response = client.get('/api/reports/monthly?year=2024&month=13')
        assert response.status_code == 400

    def test_bad_date(self, client, store):
        response = client.get('/api/reports/finance?date=10-01-2024')
        assert response.status_code == 400

    def test_unknown_report(self, client, store):
        response = client.get('/api/reports/weekly')
        assert response.status_code == 404
