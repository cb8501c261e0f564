"""
Pytest configuration and fixtures.
Each test gets its own app with an empty in-memory snapshot store.
"""

import os
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from factories import make_booking, make_room

os.environ['FLASK_ENV'] = 'test'

# Fixed clock for core functions that stamp times
FIXED_NOW = datetime(2024, 1, 10, 15, 30, tzinfo=ZoneInfo('Asia/Bangkok'))


@pytest.fixture(scope='session', autouse=True)
def setup_test_environment():
    """Set up test environment before any tests run."""
    os.environ['FLASK_ENV'] = 'test'
    yield


@pytest.fixture
def app():
    """Create test application with an empty store."""
    from app import create_app

    app = create_app('test')
    app.config['TESTING'] = True

    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def store(app):
    """Snapshot store of the test app, loaded with the room inventory."""
    from extensions import store as store_ext
    from models.room import build_room_inventory

    snapshot_store = store_ext.get()
    snapshot_store.load(build_room_inventory(), [])
    return snapshot_store


@pytest.fixture
def now():
    """Fixed current time (2024-01-10 15:30, Bangkok)."""
    return FIXED_NOW


@pytest.fixture
def snapshot():
    """Three rooms on floor 8 and one booking on 802 for [2024-01-10, 2024-01-12)."""
    return {
        'rooms': [make_room('801'), make_room('802'), make_room('803')],
        'bookings': [make_booking()]
    }
