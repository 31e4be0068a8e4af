"""Pytest configuration and fixtures."""

from datetime import timedelta
from decimal import Decimal

import pytest
from flask_jwt_extended import create_access_token

from server import create_app
from server.config import TestingConfig
from server.extension import db as _db
from server.models import Loan, User
from server.utils.helper import utc_today


@pytest.fixture
def app():
    """Application with a fresh in-memory database per test."""
    app = create_app(TestingConfig)
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture(autouse=True)
def pushes(monkeypatch):
    """Record push deliveries instead of calling Firebase."""
    sent = []

    def fake_send_push(user, title, body, data=None):
        sent.append({"user_id": user.id, "title": title, "body": body, "data": data})
        return True

    monkeypatch.setattr("server.service.notification_dispatch.send_push", fake_send_push)
    return sent


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(name=None, fcm_token=None):
        counter["n"] += 1
        name = name or f"User {counter['n']}"
        user = User(name=name, email=f"user{counter['n']}@example.com", fcm_token=fcm_token)
        db.session.add(user)
        db.session.commit()
        return user

    return _make_user


@pytest.fixture
def lender(make_user) -> User:
    return make_user("Lender", fcm_token="lender-device")


@pytest.fixture
def borrower(make_user) -> User:
    return make_user("Borrower", fcm_token="borrower-device")


@pytest.fixture
def stranger(make_user) -> User:
    return make_user("Stranger")


@pytest.fixture
def make_loan(db, lender, borrower):
    """Insert a loan row directly, bypassing creation rules (e.g. past due dates)."""

    def _make_loan(amount="50000", due_date=None, due_in=None, **kwargs):
        if due_in is not None:
            due_date = utc_today() + timedelta(days=due_in)
        amount = Decimal(str(amount))
        loan = Loan(
            lender_id=kwargs.pop("lender_id", lender.id),
            borrower_id=kwargs.pop("borrower_id", borrower.id),
            amount=amount,
            remaining_amount=kwargs.pop("remaining_amount", amount),
            currency=kwargs.pop("currency", "MMK"),
            due_date=due_date,
            status=kwargs.pop("status", "pending"),
            **kwargs,
        )
        db.session.add(loan)
        db.session.commit()
        return loan

    return _make_loan


@pytest.fixture
def auth_headers(app):
    def _auth_headers(user):
        token = create_access_token(identity=str(user.id))
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
