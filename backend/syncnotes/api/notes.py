import logging
import uuid

from fastapi import APIRouter, HTTPException

from syncnotes import config
from syncnotes.models.notes import NoteIn, NotePayload, NoteRequestOut
from syncnotes.storage.event_log import EventLog, NoteEvent
from syncnotes.storage.notes_store import Note, NotesStore
from syncnotes.storage.requests_cache import RequestsCache

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1", tags=["notes"])

DATA_DIR = config.data_dir()
store = NotesStore(DATA_DIR / "notes")
event_log = EventLog(DATA_DIR)
requests_cache = RequestsCache(ttl_seconds=config.request_ttl_seconds())

NOTE_TTL_SECONDS = config.note_ttl_seconds()


def _parse_note_id(raw: str) -> uuid.UUID:
    # unknown and malformed ids look the same to the caller
    try:
        return uuid.UUID(raw)
    except ValueError:
        raise HTTPException(status_code=404, detail="Note not found")


def collect_garbage() -> None:
    for note_id in store.gc(max_age_seconds=NOTE_TTL_SECONDS):
        event_log.record(NoteEvent.EXPIRED, note_id)
    requests_cache.expire()


@router.post("/create-note-request", response_model=NoteRequestOut, status_code=201)
def create_note_request() -> NoteRequestOut:
    req = requests_cache.issue()
    logger.info("Issued note id %s", req.id)

    event_log.record(NoteEvent.REQUESTED, req.id)

    return NoteRequestOut(**req.to_dict())


@router.post("/note", response_model=NotePayload, status_code=201)
def create_note(payload: NoteIn) -> NotePayload:
    note = requests_cache.consume_with(
        payload.id,
        lambda: store.save_note(Note(id=payload.id, data=payload.data)),
    )
    if note is None:
        raise HTTPException(status_code=403, detail="Unknown note request")
    logger.info("Created note %s", note.id)

    event_log.record(NoteEvent.CREATED, note.id, size=len(note.data))

    return NotePayload(**note.to_dict())


@router.get("/note/{note_id}", response_model=NotePayload)
def get_note(note_id: str) -> NotePayload:
    note = store.get_note(_parse_note_id(note_id))
    if note is None:
        raise HTTPException(status_code=404, detail="Note not found")
    return NotePayload(**note.to_dict())


@router.put("/note/{note_id}", response_model=NotePayload)
def update_note(note_id: str, payload: NoteIn) -> NotePayload:
    nid = _parse_note_id(note_id)

    if nid != payload.id or not store.exists(nid):
        raise HTTPException(status_code=404, detail="Note not found")

    note = store.save_note(Note(id=nid, data=payload.data))
    logger.info("Updated note %s", note.id)

    event_log.record(NoteEvent.UPDATED, note.id, size=len(note.data))

    return NotePayload(**note.to_dict())
