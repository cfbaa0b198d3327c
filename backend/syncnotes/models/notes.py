from uuid import UUID

from pydantic import BaseModel


class NoteRequestOut(BaseModel):
    id: str


class NotePayload(BaseModel):
    id: str
    data: str


class NoteIn(BaseModel):
    id: UUID
    data: str
