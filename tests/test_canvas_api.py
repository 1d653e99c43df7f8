import unittest
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

from canvas_planner.canvas_api import CanvasAPI
from canvas_planner.models.assignment import Course
from canvas_planner.utils.config import Config

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


def canvas_assignment(id, due_at, **extra):
    return SimpleNamespace(
        id=id,
        name=f"Assignment {id}",
        due_at=due_at,
        points_possible=extra.get('points_possible', 10),
        description=extra.get('description', '<p>Read</p>'),
        html_url=f"https://canvas.example.com/courses/1/assignments/{id}",
    )


class TestCanvasAPI(unittest.TestCase):

    def setUp(self):
        self.canvas = MagicMock()
        self.canvas.get_courses.return_value = [
            SimpleNamespace(id=1, name='Biology', course_code='BIO101'),
            SimpleNamespace(id=2, name='History', course_code='HIS200'),
        ]
        self.biology = MagicMock()
        self.biology.get_assignments.return_value = [
            canvas_assignment(12, '2026-10-25T23:59:00Z'),
            canvas_assignment(11, '2026-10-18T23:59:00Z'),
            canvas_assignment(13, None),
            canvas_assignment(14, '2026-12-25T23:59:00Z'),
            canvas_assignment(15, '2026-10-01T23:59:00Z'),
        ]
        self.history = MagicMock()
        self.history.get_assignments.side_effect = Exception('403 Forbidden')
        self.canvas.get_course.side_effect = lambda course_id: {'1': self.biology, '2': self.history}[course_id]
        self.api = CanvasAPI(Config(), canvas=self.canvas)

    def test_courses_are_active_enrollments(self):
        courses = self.api.get_courses()

        self.canvas.get_courses.assert_called_once_with(enrollment_state='active', per_page=100)
        self.assertEqual(courses[0], Course(id='1', name='Biology', code='BIO101'))

    def test_course_list_failure_propagates(self):
        self.canvas.get_courses.side_effect = Exception('401 Unauthorized')

        with self.assertRaises(Exception):
            self.api.get_all_assignments()

    def test_failing_course_contributes_nothing(self):
        self.assertEqual(self.api.get_course_assignments(Course(id='2', name='History')), [])

    def test_all_assignments_need_due_dates_and_are_sorted(self):
        assignments = self.api.get_all_assignments()

        self.assertEqual([a.id for a in assignments], ['15', '11', '12', '14'])
        self.assertEqual(assignments[0].course_name, 'Biology')
        self.assertEqual(assignments[0].course_code, 'BIO101')

    def test_upcoming_assignments_window(self):
        assignments = self.api.get_upcoming_assignments(14, now=NOW)

        self.assertEqual([a.id for a in assignments], ['11', '12'])

    def test_format_for_ai_strips_html(self):
        formatted = self.api.format_assignments_for_ai(self.api.get_upcoming_assignments(14, now=NOW))

        self.assertEqual(formatted[0]['title'], 'Assignment 11')
        self.assertEqual(formatted[0]['description'], 'Read')
        self.assertEqual(formatted[0]['course'], 'Biology')


if __name__ == '__main__':
    unittest.main()
