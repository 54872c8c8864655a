# Password vault: owner-scoped CRUD and the reveal flow
import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import delete, select

from .clock import utcnow
from .errors import DecodeError, NotFound, Unauthorized
from .models import VaultEntry

logger = logging.getLogger(__name__)

MASK_TOKEN = '********'


@dataclass(frozen=True)
class MaskedEntry:
    """A vault entry as it may leave the server outside of reveal."""

    id: str
    owner_id: str
    title: str
    description: str
    created_at: datetime
    updated_at: datetime
    secret: str = MASK_TOKEN

    @classmethod
    def from_model(cls, entry):
        return cls(
            id=entry.id,
            owner_id=entry.owner_id,
            title=entry.title,
            description=entry.description,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
        )

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'secret': self.secret,
            'created_at': self.created_at.isoformat() + 'Z',
            'updated_at': self.updated_at.isoformat() + 'Z',
        }


class VaultManager:
    def __init__(self, session, credentials, codec, clock=utcnow):
        self._session = session
        self._credentials = credentials
        self._codec = codec
        self._clock = clock

    def _load(self, owner_id, entry_id):
        # Absent and foreign entries are the same NotFound.
        stmt = select(VaultEntry).where(VaultEntry.id == entry_id, VaultEntry.owner_id == owner_id)
        entry = self._session.execute(stmt).scalar_one_or_none()
        if entry is None or entry.owner_id != owner_id:
            raise NotFound('Vault entry not found')
        return entry

    def list(self, owner_id):
        stmt = (
            select(VaultEntry)
            .where(VaultEntry.owner_id == owner_id)
            .order_by(VaultEntry.created_at.desc())
        )
        return [MaskedEntry.from_model(e) for e in self._session.execute(stmt).scalars()]

    def get(self, owner_id, entry_id):
        return MaskedEntry.from_model(self._load(owner_id, entry_id))

    def create(self, owner_id, title, description, secret_plaintext):
        now = self._clock()
        entry = VaultEntry(
            owner_id=owner_id,
            title=title,
            description=description,
            secret_cipher=self._codec.encode(secret_plaintext),
            created_at=now,
            updated_at=now,
        )
        self._session.add(entry)
        self._session.commit()
        logger.info(f'Created vault entry id={entry.id} owner={owner_id}')
        return MaskedEntry.from_model(entry)

    def delete(self, owner_id, entry_id):
        stmt = (
            delete(VaultEntry)
            .where(VaultEntry.id == entry_id, VaultEntry.owner_id == owner_id)
            .execution_options(synchronize_session=False)
        )
        result = self._session.execute(stmt)
        self._session.commit()
        if result.rowcount == 0:
            raise NotFound('Vault entry not found')
        logger.info(f'Deleted vault entry id={entry_id} owner={owner_id}')
        return True

    def reveal(self, owner_id, entry_id, account_password):
        """Return the plaintext secret once the owner's account password checks out.

        The credential is checked before the entry is looked up, so a wrong
        password never tells the caller whether the entry exists. Nothing in
        this path logs the plaintext.
        """
        if not self._credentials.verify(owner_id, account_password):
            logger.warning(f'Reveal denied: bad account password owner={owner_id} entry={entry_id}')
            raise Unauthorized('Invalid password')
        entry = self._load(owner_id, entry_id)
        try:
            plaintext = self._codec.decode(entry.secret_cipher)
        except DecodeError:
            logger.error(f'Stored secret could not be decoded entry={entry_id}')
            raise
        logger.info(f'Revealed vault entry id={entry_id} owner={owner_id}')
        return plaintext
