"""
Catalog synchronization job.

Pages through the catalog's games released from a few days ago onwards and
upserts them into the local database by slug:

- records without a release date are skipped;
- an existing game is left untouched unless the catalog's ``updated``
  timestamp is newer than the local ``updated_at`` (repeat runs are cheap);
- genres and platforms are replaced wholesale with the catalog's lists;
- store links are added when their URL is not yet stored for the game;
- games that move from UPCOMING to RELEASED are collected and handed to the
  notification fan-out in a single batch.

Any catalog error aborts the rest of the run. Writes already committed are
kept; the next run catches up through the same upsert rules.
"""
import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Callable, Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from release_tracker.constants import (
    SYNC_STATUS_COMPLETED,
    SYNC_STATUS_FAILED,
    SYNC_STATUS_RUNNING,
    SYNC_STATUS_SKIPPED,
)
from release_tracker.db import db
from release_tracker.exceptions import (
    CatalogAPIException,
    CatalogClientError,
    CatalogServerError,
    ValidationException,
)
from release_tracker.metrics import ACTIVE_SYNCS, sync_duration_seconds, sync_records_total, sync_runs_total
from release_tracker.models.game import Game
from release_tracker.models.gamestatus import GameStatus
from release_tracker.repositories.game_repository import GameRepository
from release_tracker.repositories.lookup_repository import GenreRepository, PlatformRepository
from release_tracker.repositories.preorderlink_repository import PreorderLinkRepository
from release_tracker.repositories.synclog_repository import CatalogSyncLogRepository
from release_tracker.services.catalog_client import CatalogClient, build_catalog_client
from release_tracker.services.catalog_records import CatalogGameRecord
from release_tracker.services.notification_service import NotificationService
from release_tracker.settings import load_settings, verify_catalog_settings
from release_tracker.utils import ensure_utc, now_utc

logger = logging.getLogger("main")

# Only one sync may run per process
_sync_state_lock = threading.Lock()
is_sync_running = False


@dataclass
class SyncResult:
    created: int = 0
    updated: int = 0
    skipped_stale: int = 0
    skipped_invalid: int = 0
    links_created: int = 0
    pages: int = 0
    released_game_ids: List[int] = field(default_factory=list)
    aborted: bool = False
    skipped: bool = False
    error: Optional[str] = None

    def to_dict(self):
        return {
            "created": self.created,
            "updated": self.updated,
            "skipped_stale": self.skipped_stale,
            "skipped_invalid": self.skipped_invalid,
            "links_created": self.links_created,
            "pages": self.pages,
            "released_game_ids": list(self.released_game_ids),
            "aborted": self.aborted,
            "skipped": self.skipped,
            "error": self.error,
        }


class GameUpdateService:
    """Upserts catalog records into the local game tables"""

    def __init__(self, client: CatalogClient, notification_service: NotificationService,
                 mature_tags: Iterable[str] = ("nsfw",), page_size: int = 40, lookback_days: int = 3,
                 max_pages: int = 500, today: Callable[[], date] = date.today, clock=now_utc):
        self.client = client
        self.notification_service = notification_service
        self.mature_tags = set(mature_tags)
        self.page_size = page_size
        self.lookback_days = lookback_days
        self.max_pages = max_pages
        self.today = today
        self.clock = clock

    def update_games(self) -> SyncResult:
        """Run one synchronization pass. Never raises for catalog or database errors."""
        global is_sync_running
        with _sync_state_lock:
            if is_sync_running:
                logger.info("Catalog sync already in progress, skipping this trigger.")
                sync_runs_total.labels(outcome=SYNC_STATUS_SKIPPED).inc()
                return SyncResult(skipped=True)
            is_sync_running = True

        ACTIVE_SYNCS.inc()
        try:
            return self._run()
        finally:
            ACTIVE_SYNCS.dec()
            with _sync_state_lock:
                is_sync_running = False

    def _run(self) -> SyncResult:
        result = SyncResult()
        started = time.time()
        log_entry = None
        logger.info("Starting catalog sync...")
        try:
            log_entry = CatalogSyncLogRepository.start(SYNC_STATUS_RUNNING)
            self._sync_pages(result)
        except (CatalogClientError, CatalogServerError) as e:
            kind = "Client" if isinstance(e, CatalogClientError) else "Server"
            logger.error(f"{kind} error: {e.status_code} - {(e.body or '')[:500]}")
            result.aborted = True
            result.error = e.message
        except CatalogAPIException as e:
            logger.error(f"Error calling catalog API: {e.message}", exc_info=True)
            result.aborted = True
            result.error = e.message
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Database error during catalog sync: {e}", exc_info=True)
            result.aborted = True
            result.error = str(e)
        except Exception as e:
            db.session.rollback()
            logger.error(f"Unexpected error during catalog sync: {e}", exc_info=True)
            result.aborted = True
            result.error = str(e) or type(e).__name__

        try:
            # Releases already committed would never be seen as transitions again
            self._notify_releases(result)
        finally:
            status = SYNC_STATUS_FAILED if result.aborted else SYNC_STATUS_COMPLETED
            if log_entry is not None:
                CatalogSyncLogRepository.finish(log_entry, status, result=result, error_message=result.error)
            sync_runs_total.labels(outcome=status).inc()
            sync_duration_seconds.observe(time.time() - started)
            logger.info(
                f"Catalog sync {status}: {result.created} created, {result.updated} updated, "
                f"{result.skipped_stale} unchanged, {result.skipped_invalid} invalid, "
                f"{len(result.released_game_ids)} released, {result.pages} pages."
            )
        return result

    def _sync_pages(self, result: SyncResult):
        today = self.today()
        since = today - timedelta(days=self.lookback_days)

        store_directory = self.client.list_stores()

        page = 1
        has_next = True
        while has_next:
            if page > self.max_pages:
                logger.warning(f"Stopping catalog sync after {self.max_pages} pages, catalog still reports more.")
                break
            catalog_page = self.client.list_games_page(since, page, self.page_size)
            result.pages += 1
            for record in catalog_page.records:
                self._process_record(record, store_directory, today, result)
            has_next = catalog_page.has_next
            page += 1

    def _process_record(self, record: CatalogGameRecord, store_directory: Dict[int, str],
                        today: date, result: SyncResult):
        if record.released is None:
            logger.warning(f"Game {record.title} ({record.slug}) had null release date, skipping")
            result.skipped_invalid += 1
            sync_records_total.labels(action="skipped_invalid").inc()
            return

        game = GameRepository.get_by_slug(record.slug)
        is_new = game is None
        previous_status = None
        if is_new:
            game = Game(slug=record.slug)
        else:
            previous_status = game.status
            if self.is_current(game, record):
                logger.debug(f"{record.slug} unchanged since last sync")
                result.skipped_stale += 1
                sync_records_total.labels(action="skipped_stale").inc()
                return
            logger.info(f"Updating {record.title}")

        # Lookup rows are resolved (and committed) before any field of the game changes
        genres = GenreRepository.find_or_create_all(record.genres) if record.genres is not None else None
        platforms = PlatformRepository.find_or_create_all(record.platforms) if record.platforms is not None else None
        detail = self.client.get_game_detail(record.slug)

        new_status = self.status_for(record.released, today)
        game.title = record.title
        game.release_date = record.released
        game.cover_image_url = record.background_image
        game.age_rating = record.esrb_rating
        game.status = new_status
        if genres is not None:
            game.genres = sorted(genres, key=lambda g: g.name)
        if platforms is not None:
            game.platforms = sorted(platforms, key=lambda p: p.name)
        game.mature = self.is_mature(record.tags)
        game.description = detail.description
        game.developer = detail.developer
        game.publisher = detail.publisher
        game.updated_at = self.clock()
        GameRepository.save(game)

        if is_new:
            result.created += 1
            sync_records_total.labels(action="created").inc()
        else:
            result.updated += 1
            sync_records_total.labels(action="updated").inc()

        # Recorded before the link merge: a failure there must not lose the release
        if not is_new and previous_status == GameStatus.UPCOMING and new_status == GameStatus.RELEASED:
            result.released_game_ids.append(game.id)

        result.links_created += self._merge_store_links(game, store_directory)

    def _merge_store_links(self, game: Game, store_directory: Dict[int, str]) -> int:
        links = self.client.list_store_links(game.slug)
        existing_urls = PreorderLinkRepository.get_urls_for_game(game.id)

        created = 0
        for link in links:
            if link.url in existing_urls:
                continue
            store_name = store_directory.get(link.store_id) or f"Store {link.store_id}"
            PreorderLinkRepository.create(game_id=game.id, store_name=store_name[:50], url=link.url)
            existing_urls.add(link.url)
            created += 1
        return created

    def _notify_releases(self, result: SyncResult):
        if not result.released_game_ids:
            return
        try:
            self.notification_service.notify_users_of_game_releases(result.released_game_ids)
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to create release notifications: {e}", exc_info=True)
            result.aborted = True
            result.error = result.error or str(e)

    @staticmethod
    def is_current(game: Game, record: CatalogGameRecord) -> bool:
        """True when the local copy is not older than the catalog's last update"""
        local = ensure_utc(game.updated_at)
        if local is None:
            return False
        external = ensure_utc(record.updated)
        # Without a catalog timestamp there is nothing proving the record changed
        if external is None:
            return True
        return not local < external

    @staticmethod
    def status_for(release_date: date, today: date) -> GameStatus:
        return GameStatus.RELEASED if release_date <= today else GameStatus.UPCOMING

    def is_mature(self, tags: Iterable[str]) -> bool:
        return not self.mature_tags.isdisjoint(tags or ())


def build_game_update_service(settings: Dict) -> GameUpdateService:
    catalog = verify_catalog_settings(settings["catalog"])
    return GameUpdateService(
        client=build_catalog_client(catalog),
        notification_service=NotificationService(),
        mature_tags=catalog["mature_tags"],
        page_size=catalog["page_size"],
        lookback_days=catalog["lookback_days"],
        max_pages=catalog["max_pages"],
    )


def sync_catalog_job(settings: Optional[Dict] = None) -> Optional[SyncResult]:
    """Entry point for the scheduler and CLI; requires an app context"""
    if settings is None:
        settings = load_settings()
    try:
        service = build_game_update_service(settings)
    except ValidationException as e:
        logger.error(f"Catalog sync not started, invalid settings: {e.message}")
        return None
    return service.update_games()
