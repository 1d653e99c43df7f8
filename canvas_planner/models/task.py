import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

# Join key between Notion rows and Canvas assignments
ASSIGNMENT_URL_PATTERN = re.compile(r'assignments/(\d+)')


def extract_assignment_id(url: Optional[str]) -> Optional[str]:
    """Returns the Canvas assignment id embedded in a canonical URL, if any."""
    if not url:
        return None
    match = ASSIGNMENT_URL_PATTERN.search(url)
    return match.group(1) if match else None


def _plain_text(prop: Optional[Dict[str, Any]], kind: str) -> str:
    if not prop:
        return ''
    parts = []
    for item in prop.get(kind) or []:
        text = item.get('plain_text')
        if text is None:
            text = (item.get('text') or {}).get('content', '')
        parts.append(text)
    return ''.join(parts)


@dataclass
class TaskFields:
    """Values to write to a task row. Fields left as None are not sent."""

    name: Optional[str] = None
    course: Optional[str] = None
    ai_overview: Optional[str] = None
    urgency: Optional[str] = None
    canvas_url: Optional[str] = None
    due_date: Optional[str] = None
    done: Optional[bool] = None


@dataclass(frozen=True)
class TaskRecord:
    id: str
    name: str = ''
    course: str = ''
    ai_overview: str = ''
    urgency: Optional[str] = None
    done: bool = False
    due_date: Optional[str] = None
    canvas_url: Optional[str] = None

    @property
    def assignment_id(self) -> Optional[str]:
        return extract_assignment_id(self.canvas_url)

    @classmethod
    def from_notion_page(cls, page: Dict[str, Any]) -> 'TaskRecord':
        properties = page.get('properties') or {}
        urgency = (properties.get('Urgency') or {}).get('select') or {}
        due = (properties.get('Due Date') or {}).get('date') or {}
        return cls(
            id=page['id'],
            name=_plain_text(properties.get('Name'), 'title'),
            course=_plain_text(properties.get('Course'), 'rich_text'),
            ai_overview=_plain_text(properties.get('AI Overview'), 'rich_text'),
            urgency=urgency.get('name'),
            done=bool((properties.get('Done') or {}).get('checkbox')),
            due_date=due.get('start'),
            canvas_url=(properties.get('Canvas URL') or {}).get('url'),
        )
