from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional
import logging

from canvasapi import Canvas

from .models.assignment import Assignment, Course
from .utils.config import Config
from .utils.dates import format_date
from .utils.text import clean_html

logger = logging.getLogger(__name__)

# CanvasAPI: reads active courses and their assignments from Canvas LMS
# and turns them into Assignment records for the jobs


class CanvasAPI:
    """
    Manages interaction with Canvas LMS API.
    Handles authentication, per-course failures and data transformation.
    """

    PAGE_SIZE = 100

    def __init__(self, config: Config, canvas: Canvas = None):
        self.config = config
        self.canvas = canvas or Canvas(config.canvas_url, config.canvas_token)

    def get_courses(self) -> List[Course]:
        """
        Fetches the user's active courses.

        Failures propagate: without a course list no job can do useful work.
        """
        try:
            courses = self.canvas.get_courses(enrollment_state='active', per_page=self.PAGE_SIZE)
            return [
                Course(
                    id=str(course.id),
                    name=getattr(course, 'name', None),
                    code=getattr(course, 'course_code', None),
                )
                for course in courses
            ]
        except Exception as e:
            logger.error(f"Error fetching courses: {e}")
            raise

    def get_course_assignments(self, course: Course) -> List[Assignment]:
        """
        Fetches one course's assignments ordered by due date.

        Any error is logged and the course contributes no assignments.
        """
        try:
            canvas_course = self.canvas.get_course(course.id)
            assignments = canvas_course.get_assignments(order_by='due_at', per_page=self.PAGE_SIZE)
            return [Assignment.from_canvas(assignment, course) for assignment in assignments]
        except Exception as e:
            logger.error(f"Error fetching assignments for course {course.id}: {e}")
            return []

    def _collect_assignments(self) -> List[Assignment]:
        collected = []
        for course in self.get_courses():
            logger.info(f"Processing course: {course.name or course.id}")
            collected.extend(self.get_course_assignments(course))
        return collected

    def get_all_assignments(self) -> List[Assignment]:
        """Every assignment with a due date across active courses, soonest first."""
        dated = [a for a in self._collect_assignments() if a.due_datetime is not None]
        return sorted(dated, key=lambda a: a.due_datetime)

    def get_upcoming_assignments(self, days_ahead: int = 14, now: Optional[datetime] = None) -> List[Assignment]:
        """
        Assignments due between now and days_ahead days from now.

        Args:
            days_ahead: How many days to look ahead
            now: Reference time, defaults to the current UTC time

        Returns:
            Matching assignments sorted by due date
        """
        now = now or datetime.now(timezone.utc)
        horizon = now + timedelta(days=days_ahead)
        upcoming = [
            a for a in self._collect_assignments()
            if a.due_datetime is not None and now <= a.due_datetime <= horizon
        ]
        return sorted(upcoming, key=lambda a: a.due_datetime)

    def format_assignments_for_ai(self, assignments: List[Assignment]) -> List[Dict]:
        return [
            {
                'title': a.name,
                'course': a.course_name,
                'due_date': a.due_at,
                'due_local': format_date(a.due_at, self.config.tz),
                'points': a.points_possible,
                'description': clean_html(a.description, limit=200) or 'No description',
                'url': a.html_url,
            }
            for a in assignments
        ]
