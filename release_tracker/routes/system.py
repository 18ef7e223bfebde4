"""
System Routes - health and last sync status
"""

from flask import Blueprint

from release_tracker.api_responses import success_response
from release_tracker.constants import BUILD_VERSION
from release_tracker.repositories.synclog_repository import CatalogSyncLogRepository
from release_tracker.utils import isoformat_utc

system_bp = Blueprint("system", __name__, url_prefix="/api")


@system_bp.route("/health")
def health():
    latest = CatalogSyncLogRepository.get_latest()
    last_sync = None
    if latest is not None:
        last_sync = {
            "status": latest.status,
            "started_at": isoformat_utc(latest.started_at),
            "completed_at": isoformat_utc(latest.completed_at),
        }
    return success_response({"status": "healthy", "version": BUILD_VERSION, "last_sync": last_sync})
