"""
Repository for CatalogSyncLog database operations
"""

from release_tracker.db import db, now_utc
from release_tracker.models.catalogsynclog import CatalogSyncLog


class CatalogSyncLogRepository:
    """Repository for CatalogSyncLog database operations"""

    @staticmethod
    def start(status):
        entry = CatalogSyncLog(status=status, started_at=now_utc())
        db.session.add(entry)
        db.session.commit()
        return entry

    @staticmethod
    def finish(entry, status, result=None, error_message=None):
        entry.status = status
        entry.completed_at = now_utc()
        if result is not None:
            entry.games_created = result.created
            entry.games_updated = result.updated
            entry.games_skipped_stale = result.skipped_stale
            entry.games_skipped_invalid = result.skipped_invalid
            entry.games_released = len(result.released_game_ids)
        entry.error_message = error_message
        db.session.commit()
        return entry

    @staticmethod
    def get_latest():
        return CatalogSyncLog.query.order_by(CatalogSyncLog.id.desc()).first()
