from dataclasses import dataclass, field
from typing import Iterable, List

from .models.assignment import Assignment


@dataclass
class Changes:
    new: List[Assignment] = field(default_factory=list)
    updated: List[Assignment] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.new or self.updated)


def detect_changes(previous: Iterable[Assignment], current: Iterable[Assignment]) -> Changes:
    """
    Compares two assignment snapshots.

    An assignment is new when its id is absent from previous, and updated
    when its due date or points possible differ. Assignments only present
    in previous are not reported. Output follows the order of current.
    """
    previous_by_id = {assignment.id: assignment for assignment in previous}
    current_by_id = {assignment.id: assignment for assignment in current}

    changes = Changes()
    for assignment_id, assignment in current_by_id.items():
        before = previous_by_id.get(assignment_id)
        if before is None:
            changes.new.append(assignment)
        elif (before.due_at != assignment.due_at
              or before.points_possible != assignment.points_possible):
            changes.updated.append(assignment)
    return changes
