import unittest
from datetime import datetime, timedelta, timezone

from canvas_planner.models.assignment import Assignment
from canvas_planner.urgency import Urgency, calculate_urgency, categorize_by_urgency, parse_urgency

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


class TestCalculateUrgency(unittest.TestCase):

    def test_no_due_date_is_upcoming(self):
        self.assertEqual(calculate_urgency(None, NOW), Urgency.UPCOMING)
        self.assertEqual(calculate_urgency('', NOW), Urgency.UPCOMING)

    def test_past_due_is_overdue(self):
        self.assertEqual(calculate_urgency(NOW - timedelta(seconds=1), NOW), Urgency.OVERDUE)
        self.assertEqual(calculate_urgency(NOW - timedelta(days=30), NOW), Urgency.OVERDUE)

    def test_due_now_is_urgent(self):
        self.assertEqual(calculate_urgency(NOW, NOW), Urgency.URGENT)

    def test_two_day_boundary_is_inclusive(self):
        self.assertEqual(calculate_urgency(NOW + timedelta(days=2), NOW), Urgency.URGENT)
        self.assertEqual(calculate_urgency(NOW + timedelta(days=2.0000001), NOW), Urgency.THIS_WEEK)

    def test_seven_day_boundary_is_inclusive(self):
        self.assertEqual(calculate_urgency(NOW + timedelta(days=7), NOW), Urgency.THIS_WEEK)
        self.assertEqual(calculate_urgency(NOW + timedelta(days=7, seconds=1), NOW), Urgency.UPCOMING)

    def test_fractional_days_are_not_truncated(self):
        # 2.5 days would be 2 with integer truncation
        self.assertEqual(calculate_urgency(NOW + timedelta(days=2, hours=12), NOW), Urgency.THIS_WEEK)

    def test_accepts_canvas_timestamp_strings(self):
        self.assertEqual(calculate_urgency('2026-10-18T03:59:00Z', NOW), Urgency.URGENT)
        self.assertEqual(calculate_urgency('2026-11-30T03:59:00Z', NOW), Urgency.UPCOMING)

    def test_same_inputs_give_same_tier(self):
        due = NOW + timedelta(days=5)
        self.assertEqual(calculate_urgency(due, NOW), calculate_urgency(due, NOW))

    def test_values_match_notion_select_names(self):
        self.assertEqual(Urgency.THIS_WEEK.value, 'This Week')
        self.assertEqual(parse_urgency('This Week'), Urgency.THIS_WEEK)
        self.assertIsNone(parse_urgency('Someday'))


class TestCategorizeByUrgency(unittest.TestCase):

    def test_groups_every_assignment_once(self):
        assignments = [
            Assignment(id='1', name='Late', due_at='2026-10-16T12:00:00Z'),
            Assignment(id='2', name='Soon', due_at='2026-10-18T12:00:00Z'),
            Assignment(id='3', name='Friday', due_at='2026-10-23T12:00:00Z'),
            Assignment(id='4', name='Later', due_at='2026-11-20T12:00:00Z'),
        ]

        categories = categorize_by_urgency(assignments, NOW)

        self.assertEqual([a.id for a in categories[Urgency.OVERDUE]], ['1'])
        self.assertEqual([a.id for a in categories[Urgency.URGENT]], ['2'])
        self.assertEqual([a.id for a in categories[Urgency.THIS_WEEK]], ['3'])
        self.assertEqual([a.id for a in categories[Urgency.UPCOMING]], ['4'])


if __name__ == '__main__':
    unittest.main()
