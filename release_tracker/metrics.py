from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
from flask import Response, request
import time

# Catalog sync metrics
sync_runs_total = Counter("release_tracker_sync_runs_total", "Catalog sync runs", ["outcome"])

sync_records_total = Counter("release_tracker_sync_records_total", "Catalog records processed", ["action"])

sync_duration_seconds = Histogram("release_tracker_sync_duration_seconds", "Catalog sync run duration")

ACTIVE_SYNCS = Gauge("release_tracker_active_syncs", "Number of catalog sync runs in progress")

# Notification metrics
notifications_created_total = Counter(
    "release_tracker_notifications_created_total", "Notifications created", ["kind"]
)

# Database metrics
db_games_total = Gauge("release_tracker_games_total", "Total number of games")
db_users_total = Gauge("release_tracker_users_total", "Total number of users")
db_unread_notifications_total = Gauge("release_tracker_unread_notifications_total", "Unread notifications")

# API metrics
api_request_duration_seconds = Histogram(
    "release_tracker_api_request_duration_seconds", "API request duration", ["endpoint", "method"]
)

api_requests_total = Counter(
    "release_tracker_api_requests_total", "Total API requests", ["endpoint", "method", "status_code"]
)


def update_db_metrics():
    from release_tracker.models import Notification, User
    from release_tracker.repositories.game_repository import GameRepository

    db_games_total.set(GameRepository.count())
    db_users_total.set(User.query.count())
    db_unread_notifications_total.set(Notification.query.filter_by(is_read=False).count())


def init_metrics(app):
    @app.route("/api/metrics")
    def metrics():
        update_db_metrics()
        return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)

    @app.before_request
    def before_request():
        request.start_time = time.time()

    @app.after_request
    def after_request(response):
        duration = time.time() - getattr(request, "start_time", time.time())
        api_request_duration_seconds.labels(endpoint=request.endpoint or "unknown", method=request.method).observe(
            duration
        )
        api_requests_total.labels(
            endpoint=request.endpoint or "unknown", method=request.method, status_code=response.status_code
        ).inc()
        return response

    app.logger.info("Prometheus metrics initialized at /api/metrics")
