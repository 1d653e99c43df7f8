from datetime import datetime, timezone
from typing import Dict, List, Optional
import logging

from notion_client import Client
from notion_client.helpers import collect_paginated_api

from .models.assignment import Assignment
from .models.task import TaskFields, TaskRecord
from .urgency import Urgency
from .utils.config import Config
from .utils.dates import format_date, to_iso
from .utils.text import NOTION_TEXT_LIMIT, chunk_text

logger = logging.getLogger(__name__)

# NotionAPI: writes task rows, weekly reviews and daily updates to Notion
# and reads task rows back for reconciliation

CATEGORY_HEADINGS = {
    Urgency.OVERDUE: '🚨 Overdue',
    Urgency.URGENT: '⚡ Urgent (Next 2 Days)',
    Urgency.THIS_WEEK: '📅 This Week',
    Urgency.UPCOMING: '📆 Upcoming',
}


def _text(content: str) -> List[Dict]:
    return [{"text": {"content": chunk}} for chunk in chunk_text(content)]


def _block(block_type: str, content: str, **extra) -> Dict:
    return {
        "object": "block",
        "type": block_type,
        block_type: {"rich_text": _text(content), **extra},
    }


class NotionAPI:
    """
    Manages interaction with Notion API for the planner databases.
    Translates between Notion page properties and task records.
    """

    def __init__(self, config: Config, client: Client = None):
        self.config = config
        self.notion = client or Client(auth=config.notion_token)
        self.database_id = config.notion_database_id
        self.task_database_id = config.task_database_id

    # Task rows

    def get_tasks(self, filter: Optional[Dict] = None, database_id: Optional[str] = None) -> List[TaskRecord]:
        """
        Reads rows of the task database.

        Args:
            filter: Notion filter object; every row is returned when omitted
            database_id: Database to read instead of the task database

        Returns:
            Matching rows as TaskRecord objects
        """
        query = {"database_id": database_id or self.task_database_id, "page_size": 100}
        if filter is not None:
            query["filter"] = filter
        try:
            pages = collect_paginated_api(self.notion.databases.query, **query)
            return [TaskRecord.from_notion_page(page) for page in pages]
        except Exception as e:
            logger.error(f"Error fetching tasks from Notion: {e}")
            raise

    def query_existing_tasks(self) -> List[TaskRecord]:
        """Rows of the main database whose Type is Task."""
        return self.get_tasks(
            filter={"property": "Type", "select": {"equals": "Task"}},
            database_id=self.database_id,
        )

    def _task_properties(self, fields: TaskFields) -> Dict:
        properties = {}
        if fields.name is not None:
            properties['Name'] = {"title": _text(fields.name[:NOTION_TEXT_LIMIT])}
        if fields.course is not None:
            properties['Course'] = {"rich_text": _text(fields.course[:NOTION_TEXT_LIMIT])}
        if fields.ai_overview is not None:
            properties['AI Overview'] = {"rich_text": _text(fields.ai_overview[:NOTION_TEXT_LIMIT])}
        if fields.urgency is not None:
            properties['Urgency'] = {"select": {"name": fields.urgency}}
        if fields.canvas_url is not None:
            properties['Canvas URL'] = {"url": fields.canvas_url}
        if fields.due_date is not None:
            properties['Due Date'] = {"date": {"start": to_iso(fields.due_date)}}
        if fields.done is not None:
            properties['Done'] = {"checkbox": fields.done}
        return properties

    def create_task(self, fields: TaskFields) -> TaskRecord:
        try:
            response = self.notion.pages.create(
                parent={"database_id": self.task_database_id},
                properties=self._task_properties(fields),
            )
            return TaskRecord.from_notion_page(response)
        except Exception as e:
            logger.error(f"Error creating task in Notion: {e}")
            raise

    def update_task(self, page_id: str, fields: TaskFields) -> TaskRecord:
        try:
            response = self.notion.pages.update(
                page_id=page_id,
                properties=self._task_properties(fields),
            )
            return TaskRecord.from_notion_page(response)
        except Exception as e:
            logger.error(f"Error updating task {page_id} in Notion: {e}")
            raise

    # Report pages

    def _create_report_page(self, title: str, page_type: str, children: List[Dict]):
        return self.notion.pages.create(
            parent={"database_id": self.database_id},
            properties={
                'Name': {"title": _text(title)},
                'Type': {"select": {"name": page_type}},
                'Date': {"date": {"start": datetime.now(self.config.tz).date().isoformat()}},
            },
            children=children,
        )

    def _task_line(self, assignment: Assignment, with_due: bool = True) -> str:
        line = f"{assignment.name} - {assignment.course_label}"
        if with_due:
            line += f" (Due: {format_date(assignment.due_at, self.config.tz)})"
        return line

    def _todo(self, assignment: Assignment) -> Dict:
        return _block("to_do", self._task_line(assignment), checked=False)

    def create_weekly_review(self, week: str, summary: str, plan: str,
                             categories: Dict[Urgency, List[Assignment]]):
        try:
            return self._create_report_page(
                f"Weekly Review - {week}",
                'Weekly Review',
                self.build_weekly_review_content(summary, plan, categories),
            )
        except Exception as e:
            logger.error(f"Error creating weekly review in Notion: {e}")
            raise

    def build_weekly_review_content(self, summary: str, plan: str,
                                    categories: Dict[Urgency, List[Assignment]]) -> List[Dict]:
        blocks = [
            _block("heading_2", '📋 Summary'),
            _block("paragraph", summary),
            _block("heading_2", '🎯 Weekly Plan'),
            _block("paragraph", plan),
            _block("heading_2", '📚 Tasks Breakdown'),
        ]
        for tier, heading in CATEGORY_HEADINGS.items():
            tasks = categories.get(tier) or []
            if tasks:
                blocks.append(_block(
                    "toggle",
                    f"{heading} ({len(tasks)})",
                    children=[self._todo(task) for task in tasks],
                ))
        return blocks

    def create_daily_update(self, new_tasks: List[Assignment], updated_tasks: List[Assignment],
                            summary: str, today: Optional[datetime] = None):
        today = today or datetime.now(timezone.utc)
        try:
            return self._create_report_page(
                f"Daily Update - {format_date(today, self.config.tz)}",
                'Daily Update',
                self.build_daily_update_content(new_tasks, updated_tasks, summary),
            )
        except Exception as e:
            logger.error(f"Error creating daily update in Notion: {e}")
            raise

    def build_daily_update_content(self, new_tasks: List[Assignment], updated_tasks: List[Assignment],
                                   summary: str) -> List[Dict]:
        blocks = [_block("paragraph", summary)]
        if new_tasks:
            blocks.append(_block("heading_3", f"✨ New Tasks ({len(new_tasks)})"))
            blocks.extend(self._todo(task) for task in new_tasks)
        if updated_tasks:
            blocks.append(_block("heading_3", f"🔄 Updated Tasks ({len(updated_tasks)})"))
            blocks.extend(_block("paragraph", self._task_line(task, with_due=False)) for task in updated_tasks)
        return blocks
