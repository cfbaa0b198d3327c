from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from syncnotes.client.editor import Editor
from syncnotes.client.errors import (
    InitializationFailed,
    SaveFailed,
    SaveInProgress,
    SessionStateError,
    TransportError,
)
from syncnotes.client.remote import RemoteNoteClient
from syncnotes.models.notes import NotePayload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Unidentified:
    pass


@dataclass(frozen=True)
class IdentifiedUnsaved:
    id: str


@dataclass(frozen=True)
class IdentifiedSaved:
    id: str
    content: str


NoteState = Union[Unidentified, IdentifiedUnsaved, IdentifiedSaved]


class NoteSessionController:
    """
    Owns the single note of an editing session.

    The note moves Unidentified -> IdentifiedUnsaved -> IdentifiedSaved and
    never back. The first save of a note goes through create, every later
    one through update. A failed save leaves the held state untouched so the
    caller can retry.
    """

    def __init__(self, remote: RemoteNoteClient):
        self.remote = remote
        self._state: NoteState = Unidentified()
        self._initialize_attempted = False
        self._saving = False

    @property
    def state(self) -> NoteState:
        return self._state

    @property
    def note_id(self) -> Optional[str]:
        if isinstance(self._state, Unidentified):
            return None
        return self._state.id

    @property
    def content(self) -> Optional[str]:
        if isinstance(self._state, IdentifiedSaved):
            return self._state.content
        return None

    @property
    def is_ready(self) -> bool:
        return not isinstance(self._state, Unidentified)

    @property
    def is_saving(self) -> bool:
        return self._saving

    async def initialize(self) -> IdentifiedUnsaved:
        # one identity per session, even when the first attempt failed
        if self._initialize_attempted:
            raise SessionStateError("Session was already initialized")
        self._initialize_attempted = True

        try:
            req = await self.remote.request_new_note()
        except TransportError as e:
            logger.error("Could not obtain a note id: %s", e)
            raise InitializationFailed(str(e)) from e

        state = IdentifiedUnsaved(id=req.id)
        self._state = state
        logger.info("Session ready with note %s", state.id)
        return state

    async def save(self, current_content: str) -> IdentifiedSaved:
        if not isinstance(current_content, str):
            raise TypeError("current_content must be a str")
        if isinstance(self._state, Unidentified):
            raise SessionStateError("Session is not initialized")
        if self._saving:
            raise SaveInProgress("A save is already in progress")

        state = self._state
        payload = NotePayload(id=state.id, data=current_content)

        self._saving = True
        try:
            if isinstance(state, IdentifiedUnsaved):
                echo = await self.remote.create_note(payload)
            else:
                echo = await self.remote.update_note(state.id, payload)
            # the id is fixed once issued
            if echo.id != state.id:
                raise TransportError(f"Server answered for note {echo.id} instead of {state.id}")
        except TransportError as e:
            logger.error("Saving note %s failed: %s", state.id, e)
            raise SaveFailed(e) from e
        finally:
            self._saving = False

        saved = IdentifiedSaved(id=state.id, content=echo.data)
        self._state = saved
        return saved

    async def save_from(self, editor: Editor) -> IdentifiedSaved:
        return await self.save(editor.get_content())
