import os
import threading
import time
import uuid

import pytest

from syncnotes.storage.notes_store import Note, NotesStore
from syncnotes.storage.requests_cache import RequestsCache


def test_save_and_get_note(tmp_path):
    store = NotesStore(tmp_path)
    nid = uuid.uuid4()

    assert store.get_note(nid) is None
    assert not store.exists(nid)

    store.save_note(Note(id=nid, data="hello"))
    assert store.exists(nid)
    assert store.get_note(nid) == Note(id=nid, data="hello")

    # file holds the raw data
    assert (tmp_path / str(nid)).read_text(encoding="utf-8") == "hello"


def test_non_uuid_id_is_rejected(tmp_path):
    store = NotesStore(tmp_path)
    with pytest.raises(ValueError):
        store.get_note("../etc/passwd")


def test_gc_removes_only_stale_notes(tmp_path):
    store = NotesStore(tmp_path)
    old_id, fresh_id = uuid.uuid4(), uuid.uuid4()
    store.save_note(Note(id=old_id, data="old"))
    store.save_note(Note(id=fresh_id, data="fresh"))
    (tmp_path / "stray.tmp").write_text("x", encoding="utf-8")

    now = time.time()
    old_path = tmp_path / str(old_id)
    os.utime(old_path, (now - 7200, now - 7200))

    expired = store.gc(now=now, max_age_seconds=3600)

    assert expired == [old_id]
    assert not old_path.exists()
    assert store.exists(fresh_id)
    assert (tmp_path / "stray.tmp").exists()


def test_gc_on_missing_dir_is_noop(tmp_path):
    assert NotesStore(tmp_path / "missing").gc() == []


def test_requests_cache_issue_and_consume():
    cache = RequestsCache(ttl_seconds=60)
    req = cache.issue()

    assert cache.is_pending(req.id)
    assert cache.consume(req.id) is True
    assert not cache.is_pending(req.id)
    assert cache.consume(req.id) is False


def test_requests_cache_expires_stale_entries():
    cache = RequestsCache(ttl_seconds=60)
    stale = cache.issue(now=1000.0)
    fresh = cache.issue(now=1050.0)

    assert cache.expire(now=1070.0) == [stale.id]
    assert not cache.is_pending(stale.id)
    assert cache.is_pending(fresh.id)
    assert len(cache) == 1


def test_collect_garbage_logs_expired_notes(client, notes_api):
    r = client.post("/v1/create-note-request")
    note_id = r.json()["id"]
    client.post("/v1/note", json={"id": note_id, "data": "x"})

    path = notes_api.store.base_dir / note_id
    past = time.time() - 2 * 3600
    os.utime(path, (past, past))

    notes_api.collect_garbage()

    assert client.get(f"/v1/note/{note_id}").status_code == 404
    types = [e["event_type"] for e in notes_api.event_log.read()]
    assert types[-1] == "NOTE_EXPIRED"


def test_consume_with_runs_write_once_and_consumes():
    cache = RequestsCache(ttl_seconds=60)
    req = cache.issue()
    writes = []

    assert cache.consume_with(req.id, lambda: writes.append("a") or "saved") == "saved"
    assert cache.consume_with(req.id, lambda: writes.append("b") or "saved") is None
    assert writes == ["a"]
    assert not cache.is_pending(req.id)


def test_consume_with_keeps_request_when_write_fails():
    cache = RequestsCache(ttl_seconds=60)
    req = cache.issue()

    def failing_write():
        raise OSError("disk full")

    with pytest.raises(OSError):
        cache.consume_with(req.id, failing_write)
    assert cache.is_pending(req.id)


def test_consume_with_blocks_a_concurrent_create():
    cache = RequestsCache(ttl_seconds=60)
    req = cache.issue()
    results = []

    def second_create():
        results.append(cache.consume_with(req.id, lambda: "second"))

    other = threading.Thread(target=second_create)

    def first_write():
        other.start()
        # the other thread cannot get past the lock while this write runs
        other.join(timeout=0.2)
        assert other.is_alive()
        return "first"

    assert cache.consume_with(req.id, first_write) == "first"
    other.join(timeout=5)
    assert results == [None]
