"""
SQLAlchemy ORM Models for the Seating Plan Generator

Usage:
    from models import db, User, UserRole, SeatingAssignment

    # Initialize with Flask app
    db.init_app(app)
"""

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

# Import all models to make them available from the package
from .user import User, UserRole
from .seating import SeatingAssignment

__all__ = [
    'db',
    # Roster
    'User', 'UserRole',
    # Seating
    'SeatingAssignment',
]
