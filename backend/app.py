"""Flask application factory for Eventify maintenance commands."""
from flask import Flask
import os
import logging
from pathlib import Path
from .cli import init_db_command, cleanup_organizer_requests_command
from .logging_config import setup_logging

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URI = 'mongodb://localhost:27017/eventify'


def create_app(test_config=None):
    """Flask application factory for the Eventify backend.

    Creates and configures a Flask application instance with:
    - Database URI configuration (MongoDB or SQLAlchemy URI)
    - CLI command registration for maintenance batch jobs
    - Logging configuration

    Args:
        test_config (dict, optional): Configuration overrides for testing

    Returns:
        Flask: Configured Flask application instance
    """
    setup_logging()
    logger.info("Starting Flask application initialization")

    app = Flask(__name__, instance_relative_config=True)
    logger.debug(f"Flask app created with instance path: {app.instance_path}")

    if test_config is None:
        # Load the instance config, if it exists, when not testing
        config_loaded = app.config.from_pyfile('config.py', silent=True)
        if config_loaded:
            logger.info("Loaded configuration from instance/config.py")
        else:
            logger.debug("No instance config file found, using defaults")
    else:
        app.config.from_mapping(test_config)
        logger.info("Loaded test configuration")

    try:
        Path(app.instance_path).mkdir(parents=True, exist_ok=True)
        logger.debug(f"Created instance directory: {app.instance_path}")
    except OSError:
        logger.debug(f"Instance directory already exists: {app.instance_path}")

    # Only set default database URI if not already set (e.g., by tests)
    if 'DATABASE_URI' not in app.config:
        app.config['DATABASE_URI'] = os.getenv('MONGODB_URI', DEFAULT_DATABASE_URI)
        logger.info("Configured database URI from environment")
    else:
        logger.info("Using existing database URI")

    app.cli.add_command(init_db_command)
    app.cli.add_command(cleanup_organizer_requests_command)
    logger.info("CLI commands registered: init-db, cleanup-organizer-requests")

    logger.info("Flask application initialization completed successfully")
    return app
