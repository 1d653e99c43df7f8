import time
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional

from .ai_provider import AIProvider
from .canvas_api import CanvasAPI
from .models.assignment import Assignment
from .models.task import TaskFields, TaskRecord
from .notion_api import NotionAPI
from .urgency import calculate_urgency, parse_urgency
from .utils.config import Config
from .utils.dates import format_date, parse_datetime
from .utils.text import NOTION_TEXT_LIMIT, clean_html

logger = logging.getLogger(__name__)

# Stored overviews shorter than this are considered missing
OVERVIEW_MIN_LENGTH = 20

OVERVIEW_SYSTEM_PROMPT = (
    "You are a helpful academic assistant. "
    "Create brief, actionable overviews of assignments for students."
)


@dataclass
class SyncReport:
    new_count: int = 0
    updated_count: int = 0
    unchanged_count: int = 0
    urgency_updates: int = 0


def index_tasks(tasks: Iterable[TaskRecord]) -> Dict[str, TaskRecord]:
    """
    Maps Canvas assignment ids to their Notion rows.

    Rows whose Canvas URL carries no assignment id are left out and so
    never match any assignment.
    """
    index = {}
    for task in tasks:
        assignment_id = task.assignment_id
        if assignment_id is None:
            logger.debug(f"Task {task.id} has no Canvas assignment URL, leaving it unmatched")
            continue
        if assignment_id in index:
            logger.warning(f"Duplicate Notion rows for assignment {assignment_id}: "
                           f"{index[assignment_id].id} and {task.id}")
        index[assignment_id] = task
    return index


def should_regenerate_overview(task: Optional[TaskRecord]) -> bool:
    return task is None or len(task.ai_overview or '') < OVERVIEW_MIN_LENGTH


def _due_minute(value):
    # Notion stores date-times to the minute
    dt = parse_datetime(value)
    return dt.replace(second=0, microsecond=0) if dt else None


def _needs_update(task: TaskRecord, fields: TaskFields) -> bool:
    if (task.name != fields.name[:NOTION_TEXT_LIMIT]
            or task.course != fields.course
            or task.ai_overview != fields.ai_overview[:NOTION_TEXT_LIMIT]
            or task.canvas_url != fields.canvas_url):
        return True
    if fields.urgency is not None and task.urgency != fields.urgency:
        return True
    if fields.due_date is not None and _due_minute(task.due_date) != _due_minute(fields.due_date):
        return True
    return False


class TaskSyncService:
    """
    Keeps one Notion task row per Canvas assignment.

    Rows are matched on the assignment id in their Canvas URL, created when
    missing, updated when any synced field differs, and finally every open
    row with a due date gets its urgency recomputed.
    """

    def __init__(self, config: Config, canvas_api: CanvasAPI, notion_api: NotionAPI,
                 ai_provider: AIProvider,
                 clock: Callable[[], datetime] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.config = config
        self.canvas_api = canvas_api
        self.notion_api = notion_api
        self.ai = ai_provider
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.sleep = sleep

    def generate_overview(self, assignment: Assignment) -> str:
        description = clean_html(assignment.description, limit=500) or 'No description provided'
        user_prompt = f"""Create a concise overview (2-3 sentences) for this assignment:

Assignment: {assignment.name}
Course: {assignment.course_label}
Due Date: {format_date(assignment.due_at, self.config.tz)}
Points: {assignment.points_possible if assignment.points_possible is not None else 'N/A'}
Description: {description}

Focus on: what the task is, key requirements, and what the student should prioritize."""
        try:
            return self.ai.generate_completion(OVERVIEW_SYSTEM_PROMPT, user_prompt).strip()
        except Exception as e:
            logger.warning(f"Error generating AI overview for {assignment.name}, using fallback: {e}")
            return f"Complete {assignment.name} for {assignment.course_label}."

    def _sync_assignment(self, assignment: Assignment, existing: Optional[TaskRecord]) -> Optional[str]:
        """Returns 'created', 'updated', or None when the row already matches."""
        if existing is not None and existing.done:
            # completed rows keep whatever urgency they were closed with
            urgency = None
        else:
            urgency = calculate_urgency(assignment.due_at, self.clock()).value

        if should_regenerate_overview(existing):
            logger.info("  Generating AI overview...")
            overview = self.generate_overview(assignment)
        else:
            overview = existing.ai_overview

        fields = TaskFields(
            name=assignment.name,
            course=assignment.course_label,
            ai_overview=overview,
            urgency=urgency,
            canvas_url=assignment.html_url,
            due_date=assignment.due_at,
        )

        if existing is None:
            logger.info("  Creating new task...")
            fields.done = False
            self.notion_api.create_task(fields)
            return 'created'

        if not _needs_update(existing, fields):
            logger.debug(f"  Task {existing.id} is up to date")
            return None

        logger.info("  Updating existing task...")
        self.notion_api.update_task(existing.id, fields)
        return 'updated'

    def sync(self, assignments: List[Assignment], existing_tasks: List[TaskRecord]) -> SyncReport:
        report = SyncReport()
        tasks_by_assignment = index_tasks(existing_tasks)

        for i, assignment in enumerate(assignments):
            logger.info(f"Processing ({i + 1}/{len(assignments)}): {assignment.name}")
            existing = tasks_by_assignment.get(assignment.id)
            touched_remote = existing is None or should_regenerate_overview(existing)

            outcome = self._sync_assignment(assignment, existing)
            if outcome == 'created':
                report.new_count += 1
            elif outcome == 'updated':
                report.updated_count += 1
            else:
                report.unchanged_count += 1

            if (outcome or touched_remote) and i < len(assignments) - 1:
                self.sleep(self.config.request_delay)

        logger.info("Updating urgency levels for all tasks...")
        report.urgency_updates = self.refresh_urgencies()
        return report

    def refresh_urgencies(self) -> int:
        """Recomputes urgency for every open task row that has a due date."""
        now = self.clock()
        update_count = 0
        for task in self.notion_api.get_tasks():
            if not task.due_date or task.done:
                continue
            urgency = calculate_urgency(task.due_date, now)
            if urgency is not parse_urgency(task.urgency):
                logger.debug(f"  {task.name}: {task.urgency} -> {urgency.value}")
                self.notion_api.update_task(task.id, TaskFields(urgency=urgency.value))
                update_count += 1
        logger.info(f"  Updated urgency for {update_count} tasks")
        return update_count

    def run(self) -> SyncReport:
        logger.info("Starting Task Sync...")
        try:
            logger.info("Fetching all assignments from Canvas...")
            assignments = self.canvas_api.get_all_assignments()
            logger.info(f"Found {len(assignments)} total assignments")

            logger.info("Fetching existing tasks from Notion...")
            existing_tasks = self.notion_api.get_tasks()
            logger.info(f"Found {len(existing_tasks)} existing tasks in Notion")

            report = self.sync(assignments, existing_tasks)
        except Exception as e:
            logger.error(f"Error running task sync: {e}")
            raise

        logger.info("Task sync completed successfully!")
        logger.info(f"Summary: {report.new_count} new tasks, {report.updated_count} updated tasks, "
                    f"{report.urgency_updates} urgency changes")
        return report
