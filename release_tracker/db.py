from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from sqlalchemy import event, inspect
import logging

from release_tracker.utils import now_utc

# Retrieve main logger
logger = logging.getLogger("main")

db = SQLAlchemy()
migrate = Migrate()


def init_db(app):
    # Models must be imported so their tables are registered on the metadata
    import release_tracker.models  # noqa: F401

    with app.app_context():
        # Ensure foreign keys and timeout are set when connection is opened
        @event.listens_for(db.engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            import sqlite3
            if not isinstance(dbapi_connection, sqlite3.Connection):
                return

            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON;")
            cursor.execute("PRAGMA busy_timeout=30000;")
            cursor.close()

        inspector = inspect(db.engine)
        if not inspector.has_table("games"):
            logger.info("Initializing database tables...")
        db.create_all()


__all__ = ["db", "migrate", "init_db", "now_utc"]
