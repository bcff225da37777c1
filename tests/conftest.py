import itertools
import json
import os

# Ensure the app factory picks the Testing config & SQLite memory DB
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("TEST_DATABASE_URL", "sqlite:///:memory:")

import pytest
from zelene import create_app
from zelene.extensions import db
from zelene.models import User


@pytest.fixture(scope="session")
def app(tmp_path_factory):
    # Engine and attachment store are bound in init_app, so overrides go in up front
    app = create_app({
        "TESTING": True,
        "MAIL_SUPPRESS_SEND": True,
        "APP_BASE_URL": "http://example.test",
        "WTF_CSRF_ENABLED": False,
        "RATELIMIT_ENABLED": False,
        "RECAPTCHA_SECRET_KEY": "test-secret",
        "STORAGE_BACKEND": "local",
        "STORAGE_LOCAL_ROOT": str(tmp_path_factory.mktemp("attachments")),
    })
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture(autouse=True)
def _db_clean(app):
    # Clean BEFORE each test
    with app.app_context():
        db.session.rollback()
        for tbl in reversed(db.metadata.sorted_tables):
            db.session.execute(tbl.delete())
        db.session.commit()
    yield
    # And AFTER each test (keeps state hermetic even if a test fails mid-transaction)
    with app.app_context():
        db.session.rollback()
        for tbl in reversed(db.metadata.sorted_tables):
            db.session.execute(tbl.delete())
        db.session.commit()


@pytest.fixture(autouse=True)
def captcha_calls(monkeypatch):
    """reCAPTCHA is never called for real; 'bad-token' fails verification."""
    calls = []

    def fake_verify(token):
        calls.append(token)
        return bool(token) and token != "bad-token"

    monkeypatch.setattr("zelene.services.captcha.verify", fake_verify)
    return calls


_seq = itertools.count(1)


@pytest.fixture()
def make_user(app):
    def _make(role="MEMBER", username=None, password="secret123", email=None):
        n = next(_seq)
        with app.app_context():
            user = User(
                username=username or f"user{n}",
                email=email or f"user{n}@example.com",
                name=f"User {n}",
                role=role,
            )
            user.set_password(password)
            db.session.add(user)
            db.session.commit()
            return user.id
    return _make


@pytest.fixture()
def login(client):
    """Puts a user id in the Flask-Login session cookie."""
    def _login(user_id):
        with client.session_transaction() as sess:
            sess["_user_id"] = str(user_id)
            sess["_fresh"] = True
    return _login


@pytest.fixture()
def rpc_get(client):
    def _get(path, payload=None):
        qs = {"input": json.dumps(payload)} if payload is not None else None
        return client.get(path, query_string=qs)
    return _get
