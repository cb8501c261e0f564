"""
Record builders shared by the test modules.
"""

from models.pricing import compute_total


def make_room(number='802', status='Active', maintenance_start=None, maintenance_end=None, floor=None):
    """Build a room dict."""
    return {
        'id': number,
        'number': number,
        'floor': floor or number[0],
        'type': 'Standard',
        'status': status,
        'maintenance_start': maintenance_start,
        'maintenance_end': maintenance_end
    }


def make_booking(booking_id='b1', room_number='802', check_in='2024-01-10', check_out='2024-01-12', **fields):
    """Build a priced booking dict (Confirmed, Unpaid by default)."""
    booking = {
        'id': booking_id,
        'booking_no': f'BK-2024-{booking_id}',
        'booker_name': 'Dr. Somchai',
        'booker_phone': '081-234-5678',
        'guest_name': 'Dr. Somchai',
        'guest_phone': None,
        'identification_number': None,
        'organization': 'Surgery Dept',
        'room_number': room_number,
        'check_in_date': check_in,
        'check_out_date': check_out,
        'check_in_time': None,
        'status': 'Confirmed',
        'payment_status': 'Unpaid',
        'rate': 1200,
        'paid_amount': 0,
        'transactions': [],
        'license_plate': None,
        'receipt_number': None,
        'notes': '',
        'early_check_in': False,
        'expected_check_in_time': None,
        'late_check_out': False,
        'expected_check_out_time': None,
        'co_occupants': [],
        'id_proof_type': None,
        'created_by': 'Tester',
        'created_at': '2024-01-01T09:00:00+07:00',
    }
    booking.update(fields)
    if 'total_amount' not in fields:
        booking['total_amount'] = compute_total(
            booking['rate'], check_in, check_out,
            booking['early_check_in'], booking['late_check_out']
        )
    return booking
