# tests/test_credentials.py

import pytest

from studyflow.errors import Conflict, Unauthorized
from studyflow.models import User

from .conftest import PASSWORD


def test_register_stores_bcrypt_hash(services, alice):
    user = services.credentials.get(alice)
    assert user.email == 'alice@example.com'
    assert user.display_name == 'Alice'
    assert user.password_hash != PASSWORD
    assert user.password_hash.startswith('$2')
    assert 'password_hash' not in user.to_dict()


def test_register_normalizes_email_and_rejects_duplicates(services, alice):
    with pytest.raises(Conflict):
        services.credentials.register('  ALICE@example.com ', 'another-pass', 'Alice 2')
    assert User.query.count() == 1


def test_verify(services, alice):
    assert services.credentials.verify(alice, PASSWORD) is True
    assert services.credentials.verify(alice, 'wrong-password') is False


def test_verify_unknown_identity_fails_closed(services):
    assert services.credentials.verify('no-such-user', PASSWORD) is False
    assert services.credentials.verify(None, PASSWORD) is False


def test_authenticate(services, alice):
    assert services.credentials.authenticate('Alice@Example.com', PASSWORD).id == alice


@pytest.mark.parametrize('email, password', [
    ('alice@example.com', 'wrong-password'),
    ('nobody@example.com', PASSWORD),
])
def test_authenticate_failures_look_the_same(services, alice, email, password):
    with pytest.raises(Unauthorized) as excinfo:
        services.credentials.authenticate(email, password)
    assert excinfo.value.message == 'Invalid credentials'
