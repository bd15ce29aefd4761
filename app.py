from flask import Flask

from config import Config
from models import db


def create_app(config_object=None):
    """
    Build the Flask application that owns the database session.

    Args:
        config_object: Config class or mapping; defaults to config.Config

    Returns:
        Flask app with SQLAlchemy initialised and tables created
    """
    app = Flask(__name__)
    if config_object is None:
        config_object = Config
    if isinstance(config_object, dict):
        app.config.from_object(Config)
        app.config.update(config_object)
    else:
        app.config.from_object(config_object)

    db.init_app(app)

    with app.app_context():
        db.create_all()

    return app
