from __future__ import annotations

import logging
from typing import Optional, Type, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from syncnotes import config
from syncnotes.client.errors import TransportError
from syncnotes.models.notes import NotePayload, NoteRequestOut

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class RemoteNoteClient:
    """Client for the three note endpoints of the Sync Notes API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if client is not None and transport is not None:
            raise ValueError("Pass either client or transport, not both")
        self.base_url = (base_url or config.base_url()).rstrip("/")
        self.timeout = httpx.Timeout(
            config.timeout_seconds() if timeout_seconds is None else timeout_seconds
        )
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=self.timeout, transport=transport)

    async def __aenter__(self) -> "RemoteNoteClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _call(self, method: str, path: str, model: Type[M], json: Optional[dict] = None) -> M:
        url = f"{self.base_url}{path}"
        try:
            response = await self._client.request(method, url, json=json, timeout=self.timeout)
        except httpx.TimeoutException as e:
            logger.warning("%s %s timed out", method, url)
            raise TransportError(f"{method} {url} timed out") from e
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise TransportError(f"{method} {url} failed: {e}") from e

        if not response.is_success:
            logger.warning("%s %s returned %s", method, url, response.status_code)
            raise TransportError(
                f"{method} {url} returned {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise TransportError(
                f"{method} {url} returned an invalid body",
                status_code=response.status_code,
            ) from e

    async def request_new_note(self) -> NoteRequestOut:
        return await self._call("POST", "/v1/create-note-request", NoteRequestOut)

    async def create_note(self, payload: NotePayload) -> NotePayload:
        return await self._call("POST", "/v1/note", NotePayload, json=payload.model_dump())

    async def update_note(self, note_id: str, payload: NotePayload) -> NotePayload:
        # ids are opaque; keep them a single path segment
        path = f"/v1/note/{quote(note_id, safe='')}"
        return await self._call("PUT", path, NotePayload, json=payload.model_dump())
