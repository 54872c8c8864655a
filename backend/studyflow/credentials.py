# Identity records and account password verification
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from .errors import Conflict, Unauthorized
from .models import User
from .security import check_password, hash_password

logger = logging.getLogger(__name__)


class CredentialStore:
    """Persists users and checks account passwords with bcrypt.

    Unknown identities and wrong passwords are indistinguishable to callers,
    and both paths run exactly one bcrypt comparison.
    """

    def __init__(self, session, bcrypt_rounds=12):
        self._session = session
        self._rounds = bcrypt_rounds
        # compared against when the identity does not exist
        self._dummy_hash = hash_password('studyflow-placeholder', bcrypt_rounds)

    def get(self, identity_id):
        if not identity_id:
            return None
        return self._session.get(User, identity_id)

    def get_by_email(self, email):
        stmt = select(User).where(User.email == email.strip().lower())
        return self._session.execute(stmt).scalar_one_or_none()

    def register(self, email, password, display_name):
        email = email.strip().lower()
        if self.get_by_email(email) is not None:
            raise Conflict('User already exists')
        user = User(
            email=email,
            password_hash=hash_password(password, self._rounds),
            display_name=display_name.strip(),
        )
        self._session.add(user)
        try:
            self._session.commit()
        except IntegrityError as exc:
            # lost a race against a concurrent registration
            self._session.rollback()
            raise Conflict('User already exists') from exc
        logger.info(f'Registered user id={user.id}')
        return user

    def authenticate(self, email, password):
        user = self.get_by_email(email)
        if user is None:
            check_password(password, self._dummy_hash)
            raise Unauthorized('Invalid credentials')
        if not check_password(password, user.password_hash):
            raise Unauthorized('Invalid credentials')
        return user

    def verify(self, identity_id, candidate_password) -> bool:
        user = self.get(identity_id)
        if user is None:
            check_password(candidate_password, self._dummy_hash)
            return False
        return check_password(candidate_password, user.password_hash)
