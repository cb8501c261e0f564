"""
Dormitory Front Desk - Booking Management System
Flask application factory and initialization
"""

import os
import click
import logging
from flask import Flask
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Import configuration
from config import config

# Import extensions
from extensions import store


def create_app(config_name=None):
    """
    Application factory for Flask app.

    Args:
        config_name: Configuration name ('development', 'production', 'test')

    Returns:
        Flask application instance
    """
    # Determine config
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    # Create Flask app
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config[config_name])
    app.json.sort_keys = app.config.get('JSON_SORT_KEYS', False)

    # Configure logging
    configure_logging(app)

    # Initialize extensions
    initialize_extensions(app)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Register CLI commands
    register_cli_commands(app)

    return app


def initialize_extensions(app):
    """Initialize Flask extensions."""
    # Initialize the in-memory snapshot store
    store.init_app(app)


def register_blueprints(app):
    """Register Flask blueprints."""
    from blueprints.frontdesk import frontdesk_bp

    app.register_blueprint(frontdesk_bp, url_prefix='/api')

    @app.route('/')
    def index():
        """Service information."""
        from utils.api_response import api_success

        return api_success(data={
            'name': app.config.get('APP_NAME'),
            'version': app.config.get('APP_VERSION')
        })


def register_error_handlers(app):
    """Register JSON error handlers."""
    from utils.api_response import api_error

    @app.errorhandler(404)
    def not_found_error(error):
        """Handle 404 errors."""
        return api_error('Not found', 404, error_type='not_found')

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        """Handle 405 errors."""
        return api_error('Method not allowed', 405, error_type='method_not_allowed')

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        app.logger.error(f'Internal error: {error}')
        return api_error('Internal server error', 500, error_type='internal')


def register_cli_commands(app):
    """Register Flask CLI commands."""

    @app.cli.command('seed-demo')
    def seed_demo_command():
        """Load demo rooms and bookings into the store."""
        from utils.messages import get_message

        snapshot_store = store.get()
        snapshot_store.seed_demo()
        click.echo(get_message(
            'demo_seeded',
            rooms=len(snapshot_store.rooms),
            bookings=len(snapshot_store.bookings)
        ))

    @app.cli.command('availability')
    @click.argument('check_in')
    @click.argument('check_out')
    @click.option('--floor', default=None, help='Only rooms on this floor')
    def availability_command(check_in, check_out, floor):
        """Print room availability for CHECK_IN..CHECK_OUT (YYYY-MM-DD)."""
        from models.room import get_rooms_by_floor
        from models.room_availability import resolve_room_availability
        from utils.helpers import truncate_text
        from utils.messages import get_message
        from utils.validators import validate_date_range

        if not validate_date_range(check_in, check_out):
            raise click.BadParameter(get_message('invalid_date_range'))

        snapshot_store = store.get()
        if not snapshot_store.rooms:
            snapshot_store.seed_demo()

        rooms = get_rooms_by_floor(snapshot_store.rooms, floor)
        results = resolve_room_availability(rooms, snapshot_store.bookings, check_in, check_out)
        for result in results:
            state = 'free' if result['available'] else truncate_text(result['reason'], 60)
            click.echo(f"{result['room']['number']:>5}  {state}")
        click.echo(f"{sum(1 for r in results if r['available'])}/{len(results)} rooms available")


def configure_logging(app):
    """Configure application logging."""
    if not app.debug and not app.testing:
        # Production logging
        log_dir = app.config.get('LOG_DIR', 'logs')
        if not os.path.exists(log_dir):
            os.mkdir(log_dir)

        file_handler = logging.FileHandler(os.path.join(log_dir, 'frontdesk.log'))
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)
        app.logger.addHandler(file_handler)
        logging.getLogger('models').addHandler(file_handler)
        logging.getLogger('utils').addHandler(file_handler)

        app.logger.setLevel(logging.INFO)
        app.logger.info('Front desk startup')
    else:
        # Development logging
        app.logger.setLevel(logging.DEBUG)


# Create application instance for development server
if __name__ == '__main__':
    app = create_app()
    # host='0.0.0.0' allows access from other devices on the network
    app.run(host='0.0.0.0', debug=True)
