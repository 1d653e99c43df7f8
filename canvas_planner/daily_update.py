import json
import logging
from datetime import datetime, timezone
from typing import List, Optional

from .ai_provider import AIProvider
from .canvas_api import CanvasAPI
from .change_detector import Changes, detect_changes
from .models.assignment import Assignment
from .notion_api import NotionAPI
from .snapshot_cache import SnapshotCache
from .utils.config import Config

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful academic assistant. "
    "Summarize changes to a student's assignment list in a clear, actionable way."
)


def _brief(assignments: List[Assignment]) -> str:
    return json.dumps(
        [{'name': a.name, 'course': a.course_name, 'due': a.due_at} for a in assignments],
        indent=2,
    )


def build_summary_prompt(changes: Changes) -> str:
    return f"""New assignments: {len(changes.new)}
Updated assignments: {len(changes.updated)}

New tasks:
{_brief(changes.new)}

Updated tasks:
{_brief(changes.updated)}

Provide a brief, actionable summary (2-3 sentences) of what changed and any immediate actions needed."""


def run_daily_update(config: Config, canvas_api: CanvasAPI, notion_api: NotionAPI,
                     ai: AIProvider, cache: SnapshotCache,
                     now: Optional[datetime] = None) -> Changes:
    """
    Reports assignments that appeared or changed since the last run.

    The snapshot is only rewritten when something changed.
    """
    logger.info("Starting Daily Update...")
    now = now or datetime.now(timezone.utc)
    try:
        logger.info("Fetching current assignments...")
        current = canvas_api.get_upcoming_assignments(config.upcoming_days, now=now)
        previous = cache.load()

        changes = detect_changes(previous, current)
        logger.info(f"Changes detected: {len(changes.new)} new, {len(changes.updated)} updated")

        if not changes.has_changes:
            logger.info("No changes detected. All tasks up to date!")
            return changes

        logger.info("Generating update summary...")
        summary = ai.generate_completion(SYSTEM_PROMPT, build_summary_prompt(changes)).strip()

        logger.info("Saving daily update to Notion...")
        notion_api.create_daily_update(changes.new, changes.updated, summary, today=now)

        cache.save(current)
    except Exception as e:
        logger.error(f"Error running daily update: {e}")
        raise

    logger.info("Daily update completed successfully!")
    logger.info(f"Summary: {summary}")
    return changes
