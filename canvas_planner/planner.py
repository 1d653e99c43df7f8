import logging
import time

import schedule

from .ai_provider import AIProvider
from .canvas_api import CanvasAPI
from .daily_update import run_daily_update
from .notion_api import NotionAPI
from .snapshot_cache import SnapshotCache
from .sync_service import TaskSyncService
from .utils.config import Config
from .weekly_review import run_weekly_review

logger = logging.getLogger(__name__)


class Planner:
    """Wires the configured clients into the three jobs."""

    def __init__(self, config: Config, canvas_api: CanvasAPI = None, notion_api: NotionAPI = None,
                 ai: AIProvider = None):
        self.config = config
        # the completion backend is resolved first so a bad AI_PROVIDER fails before any I/O
        self.ai = ai or AIProvider(config)
        self.canvas_api = canvas_api or CanvasAPI(config)
        self.notion_api = notion_api or NotionAPI(config)
        self.cache = SnapshotCache(config.cache_file)

    def weekly(self):
        return run_weekly_review(self.config, self.canvas_api, self.notion_api, self.ai)

    def daily(self):
        return run_daily_update(self.config, self.canvas_api, self.notion_api, self.ai, self.cache)

    def sync(self):
        return TaskSyncService(self.config, self.canvas_api, self.notion_api, self.ai).run()

    def run_all(self):
        logger.info("Running test mode - all jobs...")
        self.weekly()
        logger.info("---")
        self.daily()
        logger.info("---")
        self.sync()

    def _guarded(self, job):
        def run():
            try:
                job()
            except Exception as e:
                logger.error(f"Scheduled {job.__name__} run failed: {e}")
        run.__name__ = job.__name__
        return run

    def register(self, scheduler: schedule.Scheduler) -> schedule.Scheduler:
        weekday = getattr(scheduler.every(), self.config.weekly_review_day)
        weekday.at(self.config.weekly_review_time).do(self._guarded(self.weekly))
        scheduler.every().day.at(self.config.daily_update_time).do(self._guarded(self.daily))
        scheduler.every().day.at(self.config.task_sync_time).do(self._guarded(self.sync))
        return scheduler

    def run_forever(self, scheduler: schedule.Scheduler = None):
        scheduler = self.register(scheduler or schedule.Scheduler())
        for job in scheduler.get_jobs():
            logger.info(f"Scheduled: {job}")
        while True:
            scheduler.run_pending()
            time.sleep(1)
