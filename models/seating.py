"""
Stored seating assignments.
"""

import logging
from . import db

LOG = logging.getLogger(__name__)


class SeatingAssignment(db.Model):
    __tablename__ = 'seating_assignments'

    id = db.Column(db.Integer, primary_key=True)
    roll_no = db.Column(db.String(50), unique=True, nullable=False)
    block = db.Column(db.String(50), nullable=False)
    room = db.Column(db.String(50), nullable=False)
    seat_no = db.Column(db.Integer, nullable=False)
    branch = db.Column(db.String(50), nullable=False)
    subject = db.Column(db.String(100), nullable=False)

    __table_args__ = (
        db.Index('ix_seating_block_room_seat', 'block', 'room', 'seat_no'),
    )

    @classmethod
    def from_assignment(cls, assignment):
        return cls(
            roll_no=assignment.roll_no,
            block=assignment.block,
            room=assignment.room,
            seat_no=assignment.seat_no,
            branch=assignment.branch,
            subject=assignment.subject
        )

    @classmethod
    def replace_all(cls, assignments):
        """
        Replace the stored seating plan wholesale: delete every row, insert the
        new set, commit. Nothing changes if any step fails.
        """
        try:
            removed = cls.query.delete()
            db.session.add_all([cls.from_assignment(a) for a in assignments])
            db.session.commit()
        except Exception:
            db.session.rollback()
            LOG.exception("[Store] Could not replace seating plan")
            raise
        LOG.info("[Store] Replaced %d stored seats with %d new seats", removed, len(assignments))
        return len(assignments)

    @classmethod
    def ordered(cls):
        """All stored seats sorted by block, room and seat number."""
        return cls.query.order_by(cls.block, cls.room, cls.seat_no).all()

    @classmethod
    def find_by_roll_no(cls, roll_no):
        """Case-insensitive exact match on roll number."""
        if roll_no is None or not str(roll_no).strip():
            return None
        wanted = str(roll_no).strip().lower()
        return cls.query.filter(db.func.lower(cls.roll_no) == wanted).first()

    @classmethod
    def for_branch(cls, branch):
        return cls.query.filter_by(branch=branch).all()

    def to_dict(self, pad_seat=False):
        return {
            'roll_no': self.roll_no,
            'block': self.block,
            'room': self.room,
            'seat_no': f'{self.seat_no:02d}' if pad_seat else self.seat_no,
            'branch': self.branch,
            'subject': self.subject
        }

    def __repr__(self):
        return f'<SeatingAssignment {self.roll_no} room={self.room} seat={self.seat_no}>'
