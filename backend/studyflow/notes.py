# Notes that expire unless pinned
import logging
from datetime import timedelta

from sqlalchemy import and_, delete, or_, select, update

from .clock import utcnow
from .errors import NotFound
from .models import Note

logger = logging.getLogger(__name__)

NOTE_TTL = timedelta(days=5)


class NoteManager:
    """Owner-scoped note CRUD plus the expiry sweep.

    An unpinned note lives for ``ttl`` from its creation or from the moment it
    was unpinned. A note that has passed ``expires_at`` is treated as gone by
    every read and write, whether or not a sweep has deleted its row yet.
    """

    def __init__(self, session, clock=utcnow, ttl=NOTE_TTL):
        self._session = session
        self._clock = clock
        self._ttl = ttl

    def _expiry_for(self, pinned, now):
        return None if pinned else now + self._ttl

    def _alive(self, now):
        return or_(Note.pinned.is_(True), Note.expires_at > now)

    def _load(self, owner_id, note_id, now):
        stmt = select(Note).where(Note.id == note_id, Note.owner_id == owner_id, self._alive(now))
        note = self._session.execute(stmt).scalar_one_or_none()
        if note is None or note.owner_id != owner_id:
            raise NotFound('Note not found')
        return note

    def sweep_expired(self):
        """Delete every unpinned note whose expiry has passed. Returns the row count."""
        now = self._clock()
        stmt = (
            delete(Note)
            .where(and_(Note.pinned.is_(False), Note.expires_at <= now))
            .execution_options(synchronize_session=False)
        )
        result = self._session.execute(stmt)
        self._session.commit()
        count = result.rowcount
        if count:
            logger.info(f'Swept {count} expired note(s)')
        return count

    def list_active(self, owner_id):
        self.sweep_expired()
        stmt = (
            select(Note)
            .where(Note.owner_id == owner_id)
            .order_by(Note.pinned.desc(), Note.created_at.desc())
        )
        return list(self._session.execute(stmt).scalars())

    def get(self, owner_id, note_id):
        return self._load(owner_id, note_id, self._clock())

    def create(self, owner_id, title, content, pinned=False):
        now = self._clock()
        note = Note(
            owner_id=owner_id,
            title=title,
            content=content,
            pinned=pinned,
            expires_at=self._expiry_for(pinned, now),
            created_at=now,
            updated_at=now,
        )
        self._session.add(note)
        self._session.commit()
        logger.info(f'Created note id={note.id} owner={owner_id} pinned={pinned}')
        return note

    def update(self, owner_id, note_id, title=None, content=None, pinned=None):
        now = self._clock()
        note = self._load(owner_id, note_id, now)
        values = {'updated_at': now}
        if title is not None:
            values['title'] = title
        if content is not None:
            values['content'] = content
        if pinned is not None and pinned != note.pinned:
            # expiry restarts from the moment of unpinning
            values['pinned'] = pinned
            values['expires_at'] = self._expiry_for(pinned, now)

        stmt = (
            update(Note)
            .where(Note.id == note_id, Note.owner_id == owner_id, self._alive(now))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = self._session.execute(stmt)
        self._session.commit()
        if result.rowcount == 0:
            raise NotFound('Note not found')
        self._session.refresh(note)
        return note

    def set_pinned(self, owner_id, note_id, pinned):
        return self.update(owner_id, note_id, pinned=pinned)

    def delete(self, owner_id, note_id):
        now = self._clock()
        stmt = (
            delete(Note)
            .where(Note.id == note_id, Note.owner_id == owner_id, self._alive(now))
            .execution_options(synchronize_session=False)
        )
        result = self._session.execute(stmt)
        self._session.commit()
        if result.rowcount == 0:
            raise NotFound('Note not found')
        logger.info(f'Deleted note id={note_id} owner={owner_id}')
        return True
