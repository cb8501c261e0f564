"""
Flask application configuration classes.
Provides configuration for development, production, and testing environments.
"""

import os


class Config:
    """Base configuration class with common settings."""

    # Secret key for session signing
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # Keep response keys in insertion order (reports read better that way)
    JSON_SORT_KEYS = False

    # Nightly rates (THB)
    RATE_INTERNAL = 1200
    RATE_EXTERNAL = 1500

    # Load demo rooms and bookings at startup
    SEED_DEMO_DATA = os.environ.get('SEED_DEMO_DATA', 'true').lower() == 'true'

    # Name stamped on audit fields when a request names no operator
    DEFAULT_OPERATOR = os.environ.get('DEFAULT_OPERATOR') or 'Front Desk'

    # Log file (production only)
    LOG_DIR = os.environ.get('LOG_DIR') or 'logs'

    # Timezone
    TIMEZONE = os.environ.get('TIMEZONE') or 'Asia/Bangkok'

    # Application settings
    APP_NAME = 'Dormitory Front Desk'
    APP_VERSION = '1.0.0'


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG = True
    TESTING = False


class ProductionConfig(Config):
    """Production environment configuration."""

    DEBUG = False
    TESTING = False
    SEED_DEMO_DATA = os.environ.get('SEED_DEMO_DATA', 'false').lower() == 'true'

    SECRET_KEY = os.environ.get('SECRET_KEY') or Config.SECRET_KEY

    @classmethod
    def validate(cls) -> None:
        """Validate that required production environment variables are set."""
        secret_key = os.environ.get('SECRET_KEY')
        if not secret_key:
            raise ValueError("SECRET_KEY environment variable must be set in production")
        if len(secret_key) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters in production")


class TestConfig(Config):
    """Testing environment configuration."""

    TESTING = True
    DEBUG = True
    SEED_DEMO_DATA = False
    SECRET_KEY = 'test-secret-key'


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'test': TestConfig,
    'default': DevelopmentConfig
}
