import pytest

from app import create_app
from config import TestingConfig
from models import User, UserRole, db
from student_pool import group_by_branch


def make_roster(**branch_sizes):
    """Student records C01.., E01.. etc: make_roster(CSE=10, ECE=10)."""
    records = []
    for branch, size in branch_sizes.items():
        for i in range(1, size + 1):
            records.append({
                'role': 'student',
                'roll_no': f'{branch[0]}{i:02d}',
                'branch': branch
            })
    return records


@pytest.fixture
def pool():
    return group_by_branch(make_roster(CSE=10, ECE=10, MECH=10))


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def seeded_app(app):
    """Application whose users table holds 10 CSE, 10 ECE students and one admin."""
    db.session.add(User(role=UserRole.ADMIN.value, username='admin'))
    for record in make_roster(CSE=10, ECE=10):
        db.session.add(User(role=record['role'], roll_no=record['roll_no'], branch=record['branch']))
    db.session.commit()
    return app
