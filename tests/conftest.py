import os
from datetime import datetime

import pytest

from stafftrack_api import create_app
from stafftrack_api.extensions import db
from stafftrack_api.repository import TrackerRepository

# Wednesday; the Monday-based week opened 2026-10-12 00:00
NOW = datetime(2026, 10, 14, 15, 0, 0)


@pytest.fixture(scope="function")
def app():
    os.environ["DATABASE_URL"] = "sqlite:///:memory:"
    app = create_app()
    app.config["TESTING"] = True
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope="function")
def session(app):
    return db.session


@pytest.fixture
def repo(session):
    return TrackerRepository(session)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def now():
    return NOW


def add_staff(repo, user_id, username=None, rank=5, rank_name="Moderator"):
    return repo.create_staff(str(user_id), username or f"user{user_id}", rank, rank_name)


def add_hours(repo, staff, when, hours, action="leave"):
    return repo.add_time_entry(staff.id, session_start=when, action=action, duration=hours, session_end=when)
