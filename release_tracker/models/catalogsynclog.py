"""
Model: CatalogSyncLog
"""

from release_tracker.db import db, now_utc


class CatalogSyncLog(db.Model):
    """Execution log for catalog sync runs"""

    __tablename__ = "catalog_sync_log"

    id = db.Column(db.Integer, primary_key=True)
    started_at = db.Column(db.DateTime, nullable=False, default=now_utc)
    completed_at = db.Column(db.DateTime)
    status = db.Column(db.String(20))  # 'running', 'completed', 'failed'

    games_created = db.Column(db.Integer, default=0)
    games_updated = db.Column(db.Integer, default=0)
    games_skipped_stale = db.Column(db.Integer, default=0)
    games_skipped_invalid = db.Column(db.Integer, default=0)
    games_released = db.Column(db.Integer, default=0)

    error_message = db.Column(db.Text)
