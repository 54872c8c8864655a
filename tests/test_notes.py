# tests/test_notes.py

from datetime import timedelta

import pytest

from studyflow import db
from studyflow.errors import NotFound
from studyflow.models import Note

TTL = timedelta(days=5)


@pytest.fixture()
def notes(services):
    return services.notes


def test_unpinned_note_expires_five_days_after_creation(notes, alice, clock):
    note = notes.create(alice, 'Groceries', 'milk', pinned=False)
    assert note.pinned is False
    assert note.expires_at == clock.now + TTL


def test_pinned_note_never_expires(notes, alice):
    note = notes.create(alice, 'Keep', 'forever', pinned=True)
    assert note.expires_at is None


def test_pin_then_unpin_restarts_expiry(notes, alice, clock):
    note_id = notes.create(alice, 'Draft', '', pinned=False).id

    clock.advance(days=3)
    pinned = notes.set_pinned(alice, note_id, True)
    assert pinned.pinned is True
    assert pinned.expires_at is None

    clock.advance(days=10)
    unpinned = notes.set_pinned(alice, note_id, False)
    assert unpinned.pinned is False
    assert unpinned.expires_at == clock.now + TTL


def test_editing_text_keeps_expiry(notes, alice, clock):
    note = notes.create(alice, 'Draft', 'v1')
    expires_at = note.expires_at

    clock.advance(days=2)
    updated = notes.update(alice, note.id, title='Final', content='v2')

    assert (updated.title, updated.content) == ('Final', 'v2')
    assert updated.expires_at == expires_at
    assert updated.updated_at == clock.now


def test_list_active_drops_expired_notes(notes, alice, clock):
    expired_id = notes.create(alice, 'Old', '').id
    clock.advance(days=2)
    fresh_id = notes.create(alice, 'New', '').id
    pinned_id = notes.create(alice, 'Pinned', '', pinned=True).id

    clock.advance(days=4)
    active = notes.list_active(alice)

    assert {n.id for n in active} == {fresh_id, pinned_id}
    with pytest.raises(NotFound):
        notes.get(alice, expired_id)
    assert db.session.get(Note, expired_id) is None


def test_expiry_boundary_is_inclusive(notes, alice, clock):
    notes.create(alice, 'Edge', '')
    clock.advance(days=5)
    assert notes.list_active(alice) == []


def test_expired_note_is_gone_before_any_sweep(notes, alice, clock):
    note_id = notes.create(alice, 'Stale', '').id
    clock.advance(days=6)

    with pytest.raises(NotFound):
        notes.get(alice, note_id)
    with pytest.raises(NotFound):
        notes.set_pinned(alice, note_id, True)
    with pytest.raises(NotFound):
        notes.delete(alice, note_id)
    # the row is only removed by a sweep
    assert notes.sweep_expired() == 1


def test_sweep_counts_each_note_once(notes, alice, bob, clock):
    notes.create(alice, 'A', '')
    notes.create(bob, 'B', '')
    notes.create(bob, 'Pinned', '', pinned=True)

    clock.advance(days=6)
    assert notes.list_active(alice) == []

    # alice's list already swept both owners' expired notes
    assert notes.sweep_expired() == 0
    assert [n.title for n in notes.list_active(bob)] == ['Pinned']


def test_sweep_scenario(notes, alice, clock):
    notes.create(alice, 'Temporary', '', pinned=False)
    clock.advance(days=6)

    assert notes.sweep_expired() == 1
    assert notes.sweep_expired() == 0
    assert notes.list_active(alice) == []


def test_other_owner_gets_not_found(notes, alice, bob):
    note_id = notes.create(alice, 'Private', 'diary').id

    assert notes.list_active(bob) == []
    with pytest.raises(NotFound):
        notes.get(bob, note_id)
    with pytest.raises(NotFound):
        notes.update(bob, note_id, content='overwritten')
    with pytest.raises(NotFound):
        notes.set_pinned(bob, note_id, True)
    with pytest.raises(NotFound):
        notes.delete(bob, note_id)

    note = notes.get(alice, note_id)
    assert (note.content, note.pinned) == ('diary', False)


def test_delete(notes, alice):
    note_id = notes.create(alice, 'Bye', '').id
    assert notes.delete(alice, note_id) is True
    with pytest.raises(NotFound):
        notes.get(alice, note_id)
    with pytest.raises(NotFound):
        notes.delete(alice, note_id)
