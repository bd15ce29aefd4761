"""
Configuration for the seating plan generator.

Values come from the environment so the same code runs against a local SQLite
file or the PostgreSQL deployment.
"""

import os

DATABASE_URL = os.environ.get('DATABASE_URL', 'sqlite:///seating.db')

# Exam hall grid, 6 rows x 8 columns unless overridden
GRID_ROWS = int(os.environ.get('SEATING_GRID_ROWS', 6))
GRID_COLUMNS = int(os.environ.get('SEATING_GRID_COLUMNS', 8))
ROOM_CAPACITY = GRID_ROWS * GRID_COLUMNS

LOG_LEVEL = os.environ.get('SEATING_LOG_LEVEL', 'INFO')

# Branch codes used by the admin UI mapped to the labels stored on student records
BRANCH_ALIASES = {
    'AID': 'AIDS',
    'CSE': 'CSE',
    'AIML': 'AIML',
    'IT': 'INF',
    'CIC': 'CIC',
    'CSO': 'CSO',
    'CSM': 'CSM',
    'ECE': 'ECE',
    'EEE': 'EEE',
    'MECH': 'MECH',
    'CIVIL': 'CIVIL',
}

NOT_ASSIGNED = 'Not Assigned'


class Config:
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_TRACK_MODIFICATIONS = False


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
