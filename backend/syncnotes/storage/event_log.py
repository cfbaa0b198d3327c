import json
import os
import uuid
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from threading import Lock
from typing import Any, Optional


class NoteEvent(str, Enum):
    REQUESTED = "NOTE_REQUESTED"
    CREATED = "NOTE_CREATED"
    UPDATED = "NOTE_UPDATED"
    EXPIRED = "NOTE_EXPIRED"


class EventLog:
    """
    Audit trail of a note's lifecycle on the service, one JSON object per
    line under `<data>/events/events.log`.
    """

    def __init__(self, base_dir: Path):
        self.path = base_dir / "events" / "events.log"
        self._lock = Lock()

    def record(self, kind: NoteEvent, note_id: uuid.UUID, **meta: Any) -> dict[str, Any]:
        entry = {
            "event_id": str(uuid.uuid4()),
            "event_type": kind.value,
            "ts": datetime.now(timezone.utc).isoformat(),
            "note_id": str(note_id),
            "meta": meta,
        }
        line = json.dumps(entry, ensure_ascii=False)

        # concurrent routes append to the same file
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
                f.flush()
                os.fsync(f.fileno())
        return entry

    def read(self, note_id: Optional[uuid.UUID] = None) -> list[dict[str, Any]]:
        if not self.path.exists():
            return []
        entries = [
            json.loads(line)
            for line in self.path.read_text(encoding="utf-8").splitlines()
            if line.strip()
        ]
        if note_id is None:
            return entries
        return [e for e in entries if e["note_id"] == str(note_id)]
