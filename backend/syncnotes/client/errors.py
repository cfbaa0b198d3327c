from __future__ import annotations

from typing import Optional


class SyncNotesError(Exception):
    pass


class TransportError(SyncNotesError):
    """A remote call failed: bad status, unparsable body, timeout or connection error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class InitializationFailed(SyncNotesError):
    pass


class SaveFailed(SyncNotesError):
    def __init__(self, cause: TransportError):
        super().__init__(f"Save failed: {cause}")
        self.cause = cause


class SessionStateError(SyncNotesError):
    pass


class SaveInProgress(SessionStateError):
    pass
