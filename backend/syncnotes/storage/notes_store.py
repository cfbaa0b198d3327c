import logging
import os
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def _note_path(base_dir: Path, note_id: uuid.UUID) -> Path:
    # only canonical UUIDs reach the filesystem
    if not isinstance(note_id, uuid.UUID):
        raise ValueError("Invalid note_id")
    return base_dir / str(note_id)


def _atomic_write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        f.write(text)
        f.flush()
        os.fsync(f.fileno())
    tmp_path.replace(path)


@dataclass(frozen=True)
class Note:
    id: uuid.UUID
    data: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "data": self.data,
        }


class NotesStore:
    def __init__(self, base_dir: Path):
        self.base_dir = base_dir

    def init(self) -> None:
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def exists(self, note_id: uuid.UUID) -> bool:
        return _note_path(self.base_dir, note_id).is_file()

    def save_note(self, note: Note) -> Note:
        _atomic_write_text(_note_path(self.base_dir, note.id), note.data)
        return note

    def get_note(self, note_id: uuid.UUID) -> Note | None:
        path = _note_path(self.base_dir, note_id)
        if not path.is_file():
            return None
        return Note(id=note_id, data=path.read_text(encoding="utf-8"))

    def gc(self, now: float | None = None, max_age_seconds: int = 28 * 24 * 3600) -> list[uuid.UUID]:
        """
        Delete notes whose last access is older than `max_age_seconds`.
        Returns the ids of the removed notes.
        """
        if not self.base_dir.exists():
            return []
        now = time.time() if now is None else now

        expired: list[uuid.UUID] = []
        for p in sorted(self.base_dir.iterdir()):
            if not p.is_file():
                continue
            try:
                note_id = uuid.UUID(p.name)
            except ValueError:
                # leftover .tmp files
                continue
            try:
                atime = p.stat().st_atime
            except OSError as e:
                logger.warning("Error reading file %s: %s", p.name, e)
                continue
            if atime + max_age_seconds > now:
                continue

            logger.info("Expiring note file: %s", p.name)
            try:
                p.unlink()
            except OSError as e:
                logger.warning("Error removing file %s: %s", p.name, e)
                continue
            expired.append(note_id)
        return expired
