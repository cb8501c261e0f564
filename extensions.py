"""
Flask extensions initialization.
Extensions are initialized here and then initialized with the app in app.py.
"""

from flask import current_app

from models.snapshot import SnapshotStore


class FrontDeskStore:
    """Gives each app its own in-memory snapshot store."""

    extension_name = 'snapshot_store'

    def init_app(self, app):
        """
        Attach a fresh store to the app, seeded with demo data if configured.

        Args:
            app: Flask application
        """
        store = SnapshotStore()
        if app.config.get('SEED_DEMO_DATA'):
            with app.app_context():
                store.seed_demo()
            app.logger.info(f'Demo data loaded: {len(store.rooms)} rooms, {len(store.bookings)} bookings')
        app.extensions[self.extension_name] = store

    def get(self) -> SnapshotStore:
        """Store of the current app."""
        return current_app.extensions[self.extension_name]


# Initialize snapshot store
store = FrontDeskStore()
