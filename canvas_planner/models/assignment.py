from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from ..utils.dates import parse_datetime


@dataclass(frozen=True)
class Course:
    id: str
    name: Optional[str] = None
    code: Optional[str] = None


@dataclass(frozen=True)
class Assignment:
    id: str
    name: str
    course_name: Optional[str] = None
    course_code: Optional[str] = None
    due_at: Optional[str] = None
    points_possible: Optional[float] = None
    description: Optional[str] = None
    html_url: Optional[str] = None
    course_id: Optional[str] = None

    @property
    def course_label(self) -> str:
        return self.course_name or self.course_code or 'Unknown Course'

    @property
    def due_datetime(self) -> Optional[datetime]:
        return parse_datetime(self.due_at)

    @classmethod
    def from_canvas(cls, assignment, course: Course) -> 'Assignment':
        """Builds an Assignment from a canvasapi assignment object."""
        return cls(
            id=str(assignment.id),
            name=getattr(assignment, 'name', None) or 'Untitled Assignment',
            course_name=course.name,
            course_code=course.code,
            due_at=getattr(assignment, 'due_at', None),
            points_possible=getattr(assignment, 'points_possible', None),
            description=getattr(assignment, 'description', None),
            html_url=getattr(assignment, 'html_url', None),
            course_id=course.id,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Assignment':
        """
        Rebuilds an Assignment from its cached form.

        Raises:
            KeyError: If the id or name is missing
            TypeError: If data is not a mapping or has unknown fields
        """
        if not isinstance(data, dict):
            raise TypeError(f"Expected an object, got {type(data).__name__}")
        fields = dict(data)
        fields['id'] = str(fields.pop('id'))
        fields['name'] = fields.pop('name')
        return cls(**fields)
