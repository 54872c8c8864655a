# Request payload parsing and validation
import re
from dataclasses import dataclass
from typing import Optional

from .errors import ValidationError
from .security import BCRYPT_MAX_BYTES

EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_BYTES = BCRYPT_MAX_BYTES
TITLE_MAX_LENGTH = 200


def _payload(data):
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError({'body': 'Expected a JSON object'})
    return data


def _required_str(data, key, errors, max_length=None, strip=True):
    value = data.get(key)
    if value is None:
        errors[key] = 'This field is required'
        return None
    if not isinstance(value, str):
        errors[key] = 'Must be a string'
        return None
    if strip:
        value = value.strip()
    if not value:
        errors[key] = 'Must not be empty'
        return None
    if max_length is not None and len(value) > max_length:
        errors[key] = f'Must be at most {max_length} characters'
        return None
    return value


def _optional_str(data, key, errors, default=None, max_length=None):
    value = data.get(key, default)
    if value is None:
        return None
    if not isinstance(value, str):
        errors[key] = 'Must be a string'
        return None
    if max_length is not None and len(value) > max_length:
        errors[key] = f'Must be at most {max_length} characters'
        return None
    return value


def _optional_bool(data, key, errors, default=None):
    value = data.get(key, default)
    if value is not None and not isinstance(value, bool):
        errors[key] = 'Must be a boolean'
        return None
    return value


def _first_present(data, *keys):
    for key in keys:
        if key in data:
            return key
    return keys[0]


def _password(data, key, errors):
    value = _required_str(data, key, errors, strip=False)
    if value is None:
        return None
    if len(value) < PASSWORD_MIN_LENGTH:
        errors[key] = f'Must be at least {PASSWORD_MIN_LENGTH} characters'
        return None
    if len(value.encode('utf-8')) > PASSWORD_MAX_BYTES:
        errors[key] = f'Must be at most {PASSWORD_MAX_BYTES} bytes'
        return None
    return value


@dataclass(frozen=True)
class RegisterInput:
    email: str
    password: str
    display_name: str

    @classmethod
    def parse(cls, data):
        data = _payload(data)
        errors = {}
        email = _required_str(data, 'email', errors, max_length=255)
        if email is not None and not EMAIL_RE.match(email):
            errors['email'] = 'Invalid email address'
        password = _password(data, 'password', errors)
        name_key = _first_present(data, 'display_name', 'displayName')
        display_name = _required_str(data, name_key, errors, max_length=120)
        if errors:
            raise ValidationError(errors)
        return cls(email=email.lower(), password=password, display_name=display_name)


@dataclass(frozen=True)
class LoginInput:
    email: str
    password: str

    @classmethod
    def parse(cls, data):
        data = _payload(data)
        errors = {}
        email = _required_str(data, 'email', errors, max_length=255)
        if email is not None and not EMAIL_RE.match(email):
            errors['email'] = 'Invalid email address'
        password = _password(data, 'password', errors)
        if errors:
            raise ValidationError(errors)
        return cls(email=email.lower(), password=password)


@dataclass(frozen=True)
class VaultEntryInput:
    title: str
    description: str
    secret: str

    @classmethod
    def parse(cls, data):
        data = _payload(data)
        errors = {}
        title = _required_str(data, 'title', errors, max_length=TITLE_MAX_LENGTH)
        description = _optional_str(data, 'description', errors, default='')
        # secrets are stored exactly as given, surrounding whitespace included
        secret = _required_str(data, 'secret', errors, strip=False)
        if errors:
            raise ValidationError(errors)
        return cls(title=title, description=description or '', secret=secret)


@dataclass(frozen=True)
class RevealInput:
    account_password: str

    @classmethod
    def parse(cls, data):
        data = _payload(data)
        errors = {}
        key = _first_present(data, 'account_password', 'accountPassword', 'password')
        value = _required_str(data, key, errors, strip=False)
        if errors:
            raise ValidationError({'account_password': errors[key]})
        return cls(account_password=value)


@dataclass(frozen=True)
class NoteInput:
    title: str
    content: str
    pinned: bool

    @classmethod
    def parse(cls, data):
        data = _payload(data)
        errors = {}
        title = _required_str(data, 'title', errors, max_length=TITLE_MAX_LENGTH)
        content = _optional_str(data, 'content', errors, default='')
        pinned_key = _first_present(data, 'pinned', 'isBookmarked')
        pinned = _optional_bool(data, pinned_key, errors, default=False)
        if errors:
            raise ValidationError(errors)
        return cls(title=title, content=content or '', pinned=bool(pinned))


@dataclass(frozen=True)
class NoteUpdate:
    title: Optional[str] = None
    content: Optional[str] = None
    pinned: Optional[bool] = None

    @classmethod
    def parse(cls, data):
        data = _payload(data)
        errors = {}
        title = None
        if 'title' in data:
            title = _required_str(data, 'title', errors, max_length=TITLE_MAX_LENGTH)
        content = _optional_str(data, 'content', errors)
        pinned_key = _first_present(data, 'pinned', 'isBookmarked')
        pinned = _optional_bool(data, pinned_key, errors)
        if errors:
            raise ValidationError(errors)
        if title is None and content is None and pinned is None:
            raise ValidationError({'body': 'Nothing to update'})
        return cls(title=title, content=content, pinned=pinned)
