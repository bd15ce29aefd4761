import logging
from typing import Dict, List, Optional

import pandas as pd

from config import GRID_COLUMNS, GRID_ROWS
from exceptions import SeatingIntegrityError, SeatingValidationError
from seat_layout import allocate_room
from student_pool import (
    BranchPool, Student, UsedSet, available_count, branch_totals, take_available
)

LOG = logging.getLogger(__name__)


class BranchRequirement:
    """How many students of one branch, sitting one subject, a room needs."""

    def __init__(self, branch: str, subject: str, count: int):
        self.branch = branch
        self.subject = subject
        self.count = count

    def __repr__(self):
        return f'BranchRequirement({self.branch}, {self.subject}, {self.count})'


class RoomRequest:
    """One room of a batch and its ordered branch requirements (one entry per branch)."""

    def __init__(self, room: str, requirements: List[BranchRequirement]):
        branches = [r.branch for r in requirements]
        if len(branches) != len(set(branches)):
            raise ValueError(f"Room {room} lists a branch more than once")
        self.room = room
        self.requirements = list(requirements)

    @property
    def total_requested(self):
        return sum(r.count for r in self.requirements)

    def __repr__(self):
        return f'RoomRequest({self.room}, {self.total_requested} seats)'


class SeatingPlan:
    """Outcome of a successful batch."""

    def __init__(self, block, layouts, stats):
        self.block = block
        self.layouts = layouts
        self.assignments = [a for layout in layouts for a in layout.assignments]
        self.stats = stats

    @property
    def total_assigned(self):
        return len(self.assignments)

    def to_records(self):
        return [a.to_dict() for a in self.assignments]

    def to_frame(self):
        return pd.DataFrame(
            self.to_records(),
            columns=['roll_no', 'block', 'room', 'seat_no', 'branch', 'subject']
        )

    def __repr__(self):
        return f'SeatingPlan({self.block}, {self.total_assigned} seated in {len(self.layouts)} rooms)'


def validate_batch(
    rooms: List[RoomRequest],
    pool: Dict[str, List[Student]],
    used_set: UsedSet,
    capacity: int = GRID_ROWS * GRID_COLUMNS
):
    """
    Check every room before anything is seated.

    Students requested by an earlier room (or an earlier branch entry of the
    same room) are reserved in a scratch copy of the used set, so a later room
    only sees what would really be left for it. The caller's used set is not
    touched.

    Raises:
        SeatingValidationError: on the first room over capacity or the first
            requirement with fewer available students than requested
    """
    reserved = used_set.copy()

    for request in rooms:
        if request.total_requested > capacity:
            raise SeatingValidationError.capacity_exceeded(
                request.room, request.total_requested, capacity
            )

        for req in request.requirements:
            available = available_count(pool, req.branch, reserved)
            if available < req.count:
                raise SeatingValidationError.insufficient_students(
                    request.room, req.branch, req.count, available,
                    len(pool.get(req.branch, []))
                )
            for student in take_available(pool, req.branch, reserved, req.count):
                reserved.add(student.roll_no)

    LOG.info("[Validation] %d rooms passed, %d seats reserved",
             len(rooms), len(reserved) - len(used_set))


def build_plan_stats(pool: Dict[str, List[Student]], assignments) -> dict:
    """Aggregate totals: per roster branch, how many were seated and how many remain."""
    seated = pd.Series([a.branch for a in assignments], dtype=object).value_counts()
    distribution = {}
    for branch, total in branch_totals(pool).items():
        assigned = int(seated.get(branch, 0))
        distribution[branch] = {
            'total': total,
            'assigned': assigned,
            'available': total - assigned
        }
    return {
        'totalAssigned': len(assignments),
        'branchDistribution': distribution
    }


def generate_seating_plan(
    block: str,
    rooms: List[RoomRequest],
    pool: Dict[str, List[Student]],
    used_set: Optional[UsedSet] = None,
    rows: int = GRID_ROWS,
    columns: int = GRID_COLUMNS
) -> SeatingPlan:
    """
    Main entry point for seating a batch of rooms.

    All or nothing: validation runs for every room first, then rooms are
    seated in request order against a working copy of the used set. The
    caller's used set only receives the new roll numbers once every room has
    been filled completely.

    Args:
        block: Block label (already sanitized)
        rooms: Ordered RoomRequest list
        pool: Branch -> students, from group_by_branch
        used_set: Roll numbers already seated before this batch
        rows, columns: Grid dimensions of every room

    Returns:
        SeatingPlan with assignments ordered by room then seat number

    Raises:
        SeatingValidationError: capacity overflow or not enough students
        SeatingIntegrityError: a room's greedy scan left requested seats unfilled
    """
    if used_set is None:
        used_set = UsedSet()

    LOG.info("[Seating] Generating seating plan for block %s (%d rooms)", block, len(rooms))
    validate_batch(rooms, pool, used_set, capacity=rows * columns)

    working = used_set.copy()
    layouts = []

    for request in rooms:
        LOG.info("[Seating] Processing room %s", request.room)
        pools = [
            BranchPool(req.branch, req.subject,
                       take_available(pool, req.branch, working, req.count))
            for req in request.requirements
        ]
        layout = allocate_room(request.room, block, pools, working, rows, columns)
        if not layout.complete:
            raise SeatingIntegrityError(request.room, layout.shortfall, layout.requested)
        layouts.append(layout)

    used_set.update_from(working)

    assignments = [a for layout in layouts for a in layout.assignments]
    plan = SeatingPlan(block, layouts, build_plan_stats(pool, assignments))
    LOG.info("[Seating] Successfully assigned %d students", plan.total_assigned)
    return plan
