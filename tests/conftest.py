# tests/conftest.py

from datetime import datetime, timedelta

import pytest
from flask_jwt_extended import create_access_token

from studyflow import create_app, db
from studyflow.config import TestConfig

PASSWORD = 'correct-horse'


class FakeClock:
    """Clock the managers read from; tests move it forward explicitly."""

    def __init__(self, start=None):
        self.now = start or datetime(2026, 1, 1, 12, 0, 0)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def app(clock):
    app = create_app(TestConfig, clock=clock)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def services(app):
    return app.extensions['studyflow']


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def alice(services):
    return services.credentials.register('alice@example.com', PASSWORD, 'Alice').id


@pytest.fixture()
def bob(services):
    return services.credentials.register('bob@example.com', 'bobs-password', 'Bob').id


@pytest.fixture()
def auth_headers(app):
    def _headers(identity_id):
        token = create_access_token(identity=identity_id)
        return {'Authorization': f'Bearer {token}'}
    return _headers
