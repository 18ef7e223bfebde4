import os

APP_DIR = os.path.dirname(os.path.abspath(__file__))
CONFIG_DIR = os.environ.get("RELEASE_TRACKER_CONFIG_DIR", os.path.join(APP_DIR, "config"))
DB_FILE = os.path.join(CONFIG_DIR, "release_tracker.db")
CONFIG_FILE = os.path.join(CONFIG_DIR, "settings.yaml")

DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///" + DB_FILE)

BUILD_VERSION = "20261018_0900"

DEFAULT_SETTINGS = {
    "catalog": {
        "api_url": "https://api.rawg.io/api",
        "api_key": "",
        "mature_tags": ["nsfw"],
        "page_size": 40,
        "lookback_days": 3,
        "end_date": "2099-12-31",
        "timeout": 10,
        "max_pages": 500,
    },
    "sync": {
        "enabled": True,
        "run_on_startup": True,
        "cron_hour": 0,
        "cron_minute": 0,
    },
}

SYNC_STATUS_RUNNING = "running"
SYNC_STATUS_COMPLETED = "completed"
SYNC_STATUS_FAILED = "failed"
SYNC_STATUS_SKIPPED = "skipped"

RELEASE_MESSAGE = "'{title}' is now released!"
WISHLIST_ADDED_MESSAGE = "'{title}' was added to your wishlist. We'll keep you posted!"
