"""
Front desk blueprint initialization.
Registers the JSON API of the booking core.

Individual route logic is in:
- rooms.py - Room list, maintenance and availability search
- bookings.py - Booking CRUD, edits, lifecycle transitions and receipts
- reports.py - Daily / monthly / yearly / history / finance / housekeeping / parking
"""

from flask import Blueprint

# Create the front desk API blueprint
frontdesk_bp = Blueprint('frontdesk', __name__)

# Import and register routes from submodules
from blueprints.frontdesk import bookings
from blueprints.frontdesk import reports
from blueprints.frontdesk import rooms

rooms.register_routes(frontdesk_bp)
bookings.register_routes(frontdesk_bp)
reports.register_routes(frontdesk_bp)
