from datetime import datetime

import pytest

from expense_tracker import create_app
from expense_tracker.config import TestingConfig
from expense_tracker.models import Expense, User, db


@pytest.fixture
def app():
    # No app context stays pushed while requests run, so Flask-Login's
    # per-context user cache cannot leak between test clients.
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def register(client, username="alice", password="secret123"):
    res = client.post("/api/auth/register", json={"username": username, "password": password})
    assert res.status_code == 201, res.get_json()
    return res.get_json()["user"]["id"]


@pytest.fixture
def user_client(app):
    """A client already logged in, with ``user_id`` attached."""
    c = app.test_client()
    c.user_id = register(c)
    return c


def add_expense(app, user_id, amount, category="Other", date=None, description=None):
    with app.app_context():
        e = Expense(
            user_id=user_id,
            amount=amount,
            category=category,
            description=description,
            date=date or datetime.now(),
        )
        db.session.add(e)
        db.session.commit()
        return e.id


def set_user_budget(app, user_id, value):
    with app.app_context():
        user = db.session.get(User, user_id)
        user.monthly_budget = value
        db.session.commit()


def get_user(user_id):
    """Load a user inside an already pushed app context."""
    return db.session.get(User, user_id)
