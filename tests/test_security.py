# tests/test_security.py

import base64
import logging

import pytest

from studyflow.errors import DecodeError
from studyflow.security import SecretCodec, check_password, hash_password


@pytest.fixture()
def codec():
    return SecretCodec('unit-test-passphrase', iterations=1_000)


@pytest.mark.parametrize('secret', [
    '',
    'S3cr3t!',
    'pässwörd ✓ 密码 🔐',
    '  leading and trailing spaces  ',
    'x' * 10_000,
])
def test_round_trip(codec, secret):
    assert codec.decode(codec.encode(secret)) == secret


def test_encoded_text_hides_the_secret(codec):
    encoded = codec.encode('S3cr3t!')
    assert encoded.startswith(SecretCodec.PREFIX)
    assert 'S3cr3t!' not in encoded
    assert base64.b64encode(b'S3cr3t!').decode() not in encoded


def test_each_encoding_uses_fresh_salt_and_nonce(codec):
    assert codec.encode('same') != codec.encode('same')


@pytest.mark.parametrize('cipher_text', [
    '',
    'S3cr3t!',
    'v2:AAAA',
    'v1:not base64!!',
    'v1:' + base64.urlsafe_b64encode(b'\x00' * 8).decode(),
    'v1:' + base64.urlsafe_b64encode(b'\x00\x00\x00\x10' * 3 + b'short').decode(),
])
def test_malformed_cipher_text_raises_decode_error(codec, cipher_text):
    with pytest.raises(DecodeError):
        codec.decode(cipher_text)


def test_tampered_cipher_text_fails_authentication(codec):
    frame = bytearray(base64.urlsafe_b64decode(codec.encode('S3cr3t!')[3:]))
    frame[-1] ^= 0x01
    tampered = 'v1:' + base64.urlsafe_b64encode(bytes(frame)).decode()
    with pytest.raises(DecodeError):
        codec.decode(tampered)


def test_other_passphrase_cannot_decode(codec):
    other = SecretCodec('another-passphrase', iterations=1_000)
    with pytest.raises(DecodeError):
        other.decode(codec.encode('S3cr3t!'))


def test_codec_requires_passphrase():
    with pytest.raises(ValueError):
        SecretCodec('')


def test_password_hashing():
    hashed = hash_password('correct-horse', rounds=4)
    assert hashed != 'correct-horse'
    assert check_password('correct-horse', hashed)
    assert not check_password('wrong-horse', hashed)


def test_check_password_rejects_non_bcrypt_hash():
    assert check_password('anything', 'plain-text-not-a-hash') is False


def test_overlong_candidate_is_rejected_without_touching_bcrypt(caplog):
    hashed = hash_password('correct-horse', rounds=4)
    with caplog.at_level(logging.DEBUG, logger='studyflow.security'):
        assert check_password('x' * 100, hashed) is False
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]
