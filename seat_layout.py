import logging
from typing import Dict, List, Optional, Tuple

import networkx as nx

from config import GRID_COLUMNS, GRID_ROWS

LOG = logging.getLogger(__name__)

Cell = Tuple[int, int]


class SeatAssignment:
    """One seated student, the unit stored and returned to callers."""

    __slots__ = ('roll_no', 'block', 'room', 'seat_no', 'branch', 'subject', 'row', 'column')

    def __init__(self, roll_no, block, room, seat_no, branch, subject, row=None, column=None):
        self.roll_no = roll_no
        self.block = block
        self.room = room
        self.seat_no = seat_no
        self.branch = branch
        self.subject = subject
        self.row = row
        self.column = column

    def to_dict(self):
        return {
            'roll_no': self.roll_no,
            'block': self.block,
            'room': self.room,
            'seat_no': self.seat_no,
            'branch': self.branch,
            'subject': self.subject
        }

    def __eq__(self, other):
        if not isinstance(other, SeatAssignment):
            return NotImplemented
        return all(getattr(self, f) == getattr(other, f) for f in self.__slots__)

    def __repr__(self):
        return f'SeatAssignment({self.roll_no} -> {self.room} seat {self.seat_no})'


class SeatingGrid:
    """
    Fixed rows x columns hall. Cells are (row, column) nodes of a 2D grid graph,
    so graph neighbours are exactly the seats in front, behind, left and right.
    """

    def __init__(self, rows=GRID_ROWS, columns=GRID_COLUMNS):
        if rows <= 0 or columns <= 0:
            raise ValueError(f"Grid must have positive dimensions, got {rows}x{columns}")
        self.rows = rows
        self.columns = columns
        self.graph = nx.grid_2d_graph(rows, columns)
        self.cells: Dict[Cell, dict] = {}

    @property
    def capacity(self):
        return self.rows * self.columns

    def scan_order(self):
        """Cells in row-major order: row 0 left to right, then row 1, ..."""
        for row in range(self.rows):
            for col in range(self.columns):
                yield (row, col)

    def neighbours(self, cell: Cell):
        return self.graph.neighbors(cell)

    def branch_at(self, cell: Cell) -> Optional[str]:
        occupant = self.cells.get(cell)
        return occupant['branch'] if occupant else None

    def can_place(self, cell: Cell, branch: str) -> bool:
        """True if no orthogonal neighbour already holds the same branch."""
        return all(self.branch_at(adj) != branch for adj in self.neighbours(cell))

    def place(self, cell: Cell, student, branch: str, seat_no: int):
        if cell in self.cells:
            raise ValueError(f"Seat at row {cell[0]}, column {cell[1]} is already taken")
        self.cells[cell] = {'student': student, 'branch': branch, 'seat_no': seat_no}

    def occupied(self):
        return len(self.cells)

    def same_branch_neighbours(self):
        """Pairs of adjacent occupied cells sharing a branch (empty for a valid layout)."""
        return [
            (a, b) for a, b in self.graph.edges()
            if a in self.cells and b in self.cells
            and self.cells[a]['branch'] == self.cells[b]['branch']
        ]

    def as_matrix(self):
        """Branch labels per cell, None where the seat is empty."""
        return [
            [self.branch_at((row, col)) for col in range(self.columns)]
            for row in range(self.rows)
        ]


class RoomLayout:
    """Result of allocating one room."""

    def __init__(self, room, grid, assignments, pools):
        self.room = room
        self.grid = grid
        self.assignments: List[SeatAssignment] = assignments
        self.requested = {p.branch: p.requested for p in pools}
        self.shortfall = {p.branch: p.remaining for p in pools if p.remaining > 0}

    @property
    def complete(self):
        return not self.shortfall

    def __repr__(self):
        return f'RoomLayout({self.room}, {len(self.assignments)} seated)'


def _pick_branch(grid, cell, pools):
    """First pool in request order with quota left that may sit at this cell."""
    for pool in pools:
        if pool.remaining > 0 and grid.can_place(cell, pool.branch):
            return pool
    return None


def allocate_room(room, block, pools, used_set, rows=GRID_ROWS, columns=GRID_COLUMNS):
    """
    Seat one room's branch pools in a fixed grid.

    Walks cells row-major. Each cell goes to the first branch, in the order the
    pools were supplied, that still needs seats and has no same-branch student
    directly in front, behind, left or right. A cell nobody can take stays
    empty and does not use up a seat number. There is no backtracking, so a
    branch may finish the scan with quota left; that is reported through
    RoomLayout.shortfall.

    Args:
        room: Room identifier
        block: Block label copied onto every assignment
        pools: Ordered list of BranchPool, each holding its prepared students
        used_set: UsedSet of the batch; every placed roll number is added to it
        rows, columns: Grid dimensions

    Returns:
        RoomLayout with assignments in seat-number order
    """
    grid = SeatingGrid(rows, columns)
    requested = sum(p.remaining for p in pools)
    if requested > grid.capacity:
        raise ValueError(f"Room {room} asks for {requested} seats, grid holds {grid.capacity}")

    assignments = []
    seat_no = 1

    for cell in grid.scan_order():
        pool = _pick_branch(grid, cell, pools)
        if pool is None:
            continue

        student = pool.take()
        used_set.add(student.roll_no)
        grid.place(cell, student, pool.branch, seat_no)
        assignments.append(SeatAssignment(
            roll_no=student.roll_no,
            block=block,
            room=room,
            seat_no=seat_no,
            branch=student.branch,
            subject=pool.subject,
            row=cell[0],
            column=cell[1]
        ))
        seat_no += 1

    layout = RoomLayout(room, grid, assignments, pools)
    if layout.complete:
        LOG.info("[Seating] Room %s: %d students seated", room, len(assignments))
    else:
        LOG.warning("[Seating] Room %s: scan finished with unplaced students %s",
                    room, layout.shortfall)
    return layout
