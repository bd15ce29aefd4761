import logging
from collections import defaultdict
from typing import Dict, Iterable, List

import pandas as pd

LOG = logging.getLogger(__name__)

STUDENT_ROLE = 'student'


class Student:
    """A seatable student: roll number plus branch label."""

    __slots__ = ('roll_no', 'branch')

    def __init__(self, roll_no: str, branch: str):
        self.roll_no = roll_no
        self.branch = branch

    def __eq__(self, other):
        if not isinstance(other, Student):
            return NotImplemented
        return self.roll_no == other.roll_no and self.branch == other.branch

    def __hash__(self):
        return hash((self.roll_no, self.branch))

    def __repr__(self):
        return f'Student({self.roll_no}, {self.branch})'


class UsedSet:
    """
    Roll numbers already seated in the current batch.
    Only ever grows; adding a roll number twice is an error.
    """

    def __init__(self, roll_numbers=()):
        self._seated = set()
        for roll_no in roll_numbers:
            self.add(roll_no)

    def add(self, roll_no):
        if roll_no in self._seated:
            raise ValueError(f"Roll number {roll_no} is already seated")
        self._seated.add(roll_no)

    def copy(self):
        clone = UsedSet()
        clone._seated = set(self._seated)
        return clone

    def update_from(self, other):
        """Absorb every roll number seated in other but not yet here."""
        for roll_no in other:
            if roll_no not in self._seated:
                self._seated.add(roll_no)

    def __contains__(self, roll_no):
        return roll_no in self._seated

    def __iter__(self):
        return iter(sorted(self._seated))

    def __len__(self):
        return len(self._seated)

    def __repr__(self):
        return f'UsedSet({len(self._seated)} seated)'


class BranchPool:
    """
    Students prepared for one branch in one room.

    The slice is consumed strictly in order; remaining tracks how much of the
    room's quota for this branch is still unplaced.
    """

    def __init__(self, branch: str, subject: str, students: List[Student]):
        self.branch = branch
        self.subject = subject
        self.students = list(students)
        self.requested = len(self.students)
        self.remaining = self.requested
        self.cursor = 0

    def take(self) -> Student:
        if self.remaining <= 0:
            raise IndexError(f"No students left in {self.branch} pool")
        student = self.students[self.cursor]
        self.cursor += 1
        self.remaining -= 1
        return student

    def __repr__(self):
        return f'BranchPool({self.branch}, {self.remaining}/{self.requested} left)'


def _is_missing(value):
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def group_by_branch(roster: Iterable[dict]) -> Dict[str, List[Student]]:
    """
    Group eligible students by branch, preserving roster order.

    Args:
        roster: Records with 'role', 'roll_no' and 'branch' keys

    Returns:
        Dict mapping branch label -> list of Student. Records that are not
        students, that lack a branch or roll number, or that repeat a roll
        number already seen are skipped; the first occurrence wins.
    """
    pool = defaultdict(list)
    seen = set()
    for record in roster:
        if record.get('role') != STUDENT_ROLE:
            continue
        roll_no, branch = record.get('roll_no'), record.get('branch')
        if _is_missing(roll_no) or _is_missing(branch):
            continue
        roll_no, branch = str(roll_no).strip(), str(branch).strip()
        if roll_no in seen:
            LOG.warning("[Roster] Skipping repeated roll number %s (%s)", roll_no, branch)
            continue
        seen.add(roll_no)
        pool[branch].append(Student(roll_no, branch))
    return dict(pool)


def available_count(pool: Dict[str, List[Student]], branch: str, used_set) -> int:
    """Count students of a branch that have not been seated yet."""
    return sum(1 for s in pool.get(branch, []) if s.roll_no not in used_set)


def take_available(pool: Dict[str, List[Student]], branch: str, used_set, count: int) -> List[Student]:
    """First `count` unseated students of a branch, in roster order."""
    chosen = []
    for student in pool.get(branch, []):
        if len(chosen) >= count:
            break
        if student.roll_no not in used_set:
            chosen.append(student)
    return chosen


def branch_totals(pool: Dict[str, List[Student]]) -> Dict[str, int]:
    return {branch: len(students) for branch, students in pool.items()}


def roster_from_frame(frame: pd.DataFrame) -> List[dict]:
    """Convert a roster DataFrame into plain records with None for missing cells."""
    if frame is None or frame.empty:
        return []
    cleaned = frame.astype(object).where(pd.notna(frame), None)
    return cleaned.to_dict('records')
