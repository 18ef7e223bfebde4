"""
Background Jobs - catalog sync at startup and once a day
"""
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.date import DateTrigger
from datetime import datetime
import logging

logger = logging.getLogger('main')

SYNC_JOB_ID = 'sync_catalog'
STARTUP_SYNC_JOB_ID = 'sync_catalog_startup'


class JobScheduler:
    """Background job manager"""

    def __init__(self, scheduler=None):
        self.scheduler = scheduler or BackgroundScheduler()
        self._jobs_registered = False

    def init_app(self, app, sync_settings):
        """Register jobs for the Flask app and start the scheduler"""
        self._register_jobs(app, sync_settings)
        self.scheduler.start()
        app.extensions['job_scheduler'] = self
        logger.info("Job scheduler initialized")

    def _register_jobs(self, app, sync_settings):
        if self._jobs_registered:
            return

        # Catalog sync (daily, default midnight)
        self.scheduler.add_job(
            func=self._sync_catalog_job,
            trigger=CronTrigger(hour=sync_settings.get('cron_hour', 0), minute=sync_settings.get('cron_minute', 0)),
            id=SYNC_JOB_ID,
            name='Sync game catalog',
            args=[app],
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )

        if sync_settings.get('run_on_startup', True):
            self.scheduler.add_job(
                func=self._sync_catalog_job,
                trigger=DateTrigger(run_date=datetime.now()),
                id=STARTUP_SYNC_JOB_ID,
                name='Sync game catalog (startup)',
                args=[app],
                replace_existing=True,
            )

        self._jobs_registered = True
        logger.info("Background jobs registered")

    def _sync_catalog_job(self, app):
        """Catalog sync task"""
        from release_tracker.services.game_update_service import sync_catalog_job
        with app.app_context():
            sync_catalog_job(app.config.get('RELEASE_TRACKER_SETTINGS'))

    def shutdown(self):
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Job scheduler shutdown")
