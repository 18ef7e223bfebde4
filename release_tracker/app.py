"""
Release Tracker - Application Factory and Initialization
"""
import os
import sys
import logging
import json

import click
import structlog
from flask import Flask

from release_tracker.constants import BUILD_VERSION, DATABASE_URL
from release_tracker.db import db, migrate, init_db
from release_tracker.auth import auth_blueprint, init_users, login_manager
from release_tracker.exceptions import register_exception_handlers
from release_tracker.metrics import init_metrics
from release_tracker.settings import load_settings
from release_tracker.utils import ColoredFormatter, FilterRemoveDateFromWerkzeugLogs, get_or_create_secret_key

# Routes
from release_tracker.routes.games import games_bp
from release_tracker.routes.users import users_bp
from release_tracker.routes.notifications import notifications_bp
from release_tracker.routes.system import system_bp
from release_tracker.routes.wishlist import wishlist_bp

# Jobs
from release_tracker.jobs.scheduler import JobScheduler

logger = structlog.get_logger('main')


def configure_logging(level=logging.INFO):
    """Colored console logging for stdlib loggers, structlog rendered through them"""
    formatter = ColoredFormatter(
        '[%(asctime)s.%(msecs)03d] %(levelname)s (%(module)s) %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    logging.basicConfig(
        level=level,
        handlers=[handler]
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if os.environ.get('LOG_FORMAT') == 'json' else structlog.dev.ConsoleRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Hide date from http access logs
    logging.getLogger('werkzeug').addFilter(FilterRemoveDateFromWerkzeugLogs())
    logging.getLogger('apscheduler').setLevel(logging.WARNING)


def register_commands(app):

    @app.cli.command('sync-catalog')
    def sync_catalog_command():
        """Run one catalog sync now and print its counters"""
        from release_tracker.services.game_update_service import sync_catalog_job
        result = sync_catalog_job(app.config['RELEASE_TRACKER_SETTINGS'])
        if result is None:
            raise click.ClickException("Catalog sync not started, check the catalog settings")
        click.echo(json.dumps(result.to_dict(), indent=2))


def create_app(test_config=None):
    """Application factory"""
    app = Flask(__name__)
    app.config["SQLALCHEMY_DATABASE_URI"] = DATABASE_URL
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    if test_config:
        app.config.update(test_config)
    else:
        configure_logging()

    if not app.config.get('SECRET_KEY'):
        app.config['SECRET_KEY'] = get_or_create_secret_key()

    settings = app.config.get('RELEASE_TRACKER_SETTINGS') or load_settings()
    app.config['RELEASE_TRACKER_SETTINGS'] = settings

    # Initialize components
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    register_exception_handlers(app)

    # Register blueprints
    app.register_blueprint(auth_blueprint)
    app.register_blueprint(users_bp)
    app.register_blueprint(games_bp)
    app.register_blueprint(wishlist_bp)
    app.register_blueprint(notifications_bp)
    app.register_blueprint(system_bp)

    init_metrics(app)
    register_commands(app)

    init_db(app)
    init_users(app)

    if not app.config.get('TESTING') and settings['sync'].get('enabled', True):
        job_scheduler = JobScheduler()
        job_scheduler.init_app(app, settings['sync'])

    logger.info(f"Release Tracker {BUILD_VERSION} initialized")
    return app


if __name__ == '__main__':
    app = create_app()
    logger.info('Starting server on port 8080...')
    app.run(debug=False, use_reloader=False, host="0.0.0.0", port=8080)
    logger.info('Shutting down server...')
