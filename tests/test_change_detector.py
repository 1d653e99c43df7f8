import unittest

from canvas_planner.change_detector import detect_changes
from canvas_planner.models.assignment import Assignment

D1 = '2026-10-20T23:59:00Z'
D2 = '2026-10-22T23:59:00Z'


def make(id, due=D1, points=10):
    return Assignment(id=id, name=f"Assignment {id}", due_at=due, points_possible=points)


class TestDetectChanges(unittest.TestCase):

    def test_new_assignment_is_reported(self):
        previous = [make('1')]
        current = [make('1'), make('2', due=D2, points=5)]

        changes = detect_changes(previous, current)

        self.assertEqual([a.id for a in changes.new], ['2'])
        self.assertEqual(changes.updated, [])

    def test_due_date_change_is_an_update(self):
        changes = detect_changes([make('1', due=D1)], [make('1', due=D2)])

        self.assertEqual(changes.new, [])
        self.assertEqual([a.id for a in changes.updated], ['1'])
        self.assertEqual(changes.updated[0].due_at, D2)

    def test_points_change_is_an_update(self):
        changes = detect_changes([make('1', points=10)], [make('1', points=20)])

        self.assertEqual([a.id for a in changes.updated], ['1'])

    def test_other_field_changes_are_ignored(self):
        before = Assignment(id='1', name='Old name', due_at=D1, points_possible=10, description='a')
        after = Assignment(id='1', name='New name', due_at=D1, points_possible=10, description='b')

        self.assertFalse(detect_changes([before], [after]).has_changes)

    def test_both_missing_values_compare_equal(self):
        changes = detect_changes([make('1', due=None, points=None)], [make('1', due=None, points=None)])

        self.assertFalse(changes.has_changes)

    def test_removed_assignments_are_not_reported(self):
        changes = detect_changes([make('1'), make('2')], [make('2')])

        self.assertEqual(changes.new, [])
        self.assertEqual(changes.updated, [])

    def test_output_follows_current_order(self):
        previous = [make('3', points=1), make('1', points=1)]
        current = [make('5'), make('1'), make('4'), make('3')]

        changes = detect_changes(previous, current)

        self.assertEqual([a.id for a in changes.new], ['5', '4'])
        self.assertEqual([a.id for a in changes.updated], ['1', '3'])

    def test_empty_previous_makes_everything_new(self):
        changes = detect_changes([], [make('1'), make('2')])

        self.assertEqual([a.id for a in changes.new], ['1', '2'])


if __name__ == '__main__':
    unittest.main()
