# Database models (User, VaultEntry, Note)
import uuid
from . import db
from .clock import utcnow


def _new_id():
    return str(uuid.uuid4())


def _iso(value):
    return value.isoformat() + 'Z' if value else None


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(128), nullable=False)
    display_name = db.Column(db.String(120), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    vault_entries = db.relationship('VaultEntry', backref='owner', lazy=True,
                                    cascade='all, delete-orphan', passive_deletes=True)
    notes = db.relationship('Note', backref='owner', lazy=True,
                            cascade='all, delete-orphan', passive_deletes=True)

    def to_dict(self):
        # password_hash never leaves the store
        return {
            'id': self.id,
            'email': self.email,
            'display_name': self.display_name,
            'created_at': _iso(self.created_at),
        }

    def __repr__(self):
        return f'<User {self.email}>'


class VaultEntry(db.Model):
    __tablename__ = 'vault_entries'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    owner_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE'),
                         nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False, default='')
    secret_cipher = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f'<VaultEntry {self.id} owner={self.owner_id}>'


class Note(db.Model):
    __tablename__ = 'notes'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    owner_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE'),
                         nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    content = db.Column(db.Text, nullable=False, default='')
    pinned = db.Column(db.Boolean, nullable=False, default=False)
    # NULL exactly when pinned
    expires_at = db.Column(db.DateTime, nullable=True, index=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'owner_id': self.owner_id,
            'title': self.title,
            'content': self.content,
            'pinned': self.pinned,
            'expires_at': _iso(self.expires_at),
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }

    def __repr__(self):
        return f'<Note {self.id} pinned={self.pinned}>'
