"""
User model: the roster the seating generator draws students from.
"""

import enum
from . import db
from .base import TimestampMixin


class UserRole(enum.Enum):
    ADMIN = 'admin'
    STUDENT = 'student'


class User(db.Model, TimestampMixin):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    role = db.Column(db.String(20), nullable=False)
    username = db.Column(db.String(100))
    roll_no = db.Column(db.String(50))
    branch = db.Column(db.String(50))

    __table_args__ = (
        db.CheckConstraint("role IN ('student', 'admin')", name='ck_user_role'),
        db.Index('ix_users_role_branch_roll', 'role', 'branch', 'roll_no'),
    )

    @classmethod
    def roster_select(cls):
        """Select statement for the student roster, in insertion order."""
        return db.select(cls.role, cls.roll_no, cls.branch).where(
            cls.role == UserRole.STUDENT.value
        ).order_by(cls.id)

    @classmethod
    def students_in_branch(cls, branch):
        return cls.query.filter_by(role=UserRole.STUDENT.value, branch=branch).order_by(cls.roll_no).all()

    def is_student(self):
        return self.role == UserRole.STUDENT.value

    def __repr__(self):
        return f'<User {self.roll_no or self.username} ({self.role})>'
