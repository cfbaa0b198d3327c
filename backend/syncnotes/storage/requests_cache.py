import logging
import time
import uuid
from dataclasses import dataclass
from threading import RLock
from typing import Any, Callable, Optional, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NoteRequest:
    id: uuid.UUID
    created_at: float

    def to_dict(self) -> dict[str, Any]:
        return {"id": str(self.id)}


class RequestsCache:
    """
    Identities handed out by the service that have not been used to create a
    note yet. An entry is consumed by the first successful create and dropped
    by `expire` once it is older than the ttl.
    """

    def __init__(self, ttl_seconds: int = 3600):
        self.ttl_seconds = ttl_seconds
        self._lock = RLock()
        self._pending: dict[uuid.UUID, float] = {}

    def issue(self, now: float | None = None) -> NoteRequest:
        req = NoteRequest(id=uuid.uuid4(), created_at=time.time() if now is None else now)
        with self._lock:
            self._pending[req.id] = req.created_at
        return req

    def is_pending(self, note_id: uuid.UUID) -> bool:
        with self._lock:
            return note_id in self._pending

    def consume(self, note_id: uuid.UUID) -> bool:
        with self._lock:
            return self._pending.pop(note_id, None) is not None

    def consume_with(self, note_id: uuid.UUID, write: Callable[[], T]) -> Optional[T]:
        """
        Run `write` and consume the request, both under the cache lock.
        Returns None without calling `write` when the id is not pending; if
        `write` raises, the request stays pending.
        """
        with self._lock:
            if note_id not in self._pending:
                return None
            result = write()
            del self._pending[note_id]
            return result

    def expire(self, now: float | None = None) -> list[uuid.UUID]:
        now = time.time() if now is None else now
        with self._lock:
            stale = [rid for rid, created in self._pending.items() if created + self.ttl_seconds < now]
            for rid in stale:
                logger.info("Deleting cached request %s", rid)
                del self._pending[rid]
        return stale

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)
