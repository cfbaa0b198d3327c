from __future__ import annotations

from typing import Optional, Protocol


class Editor(Protocol):
    def get_content(self) -> str:
        ...


class TextBuffer:
    """Plain in-memory editor buffer. Reads return a snapshot of the text."""

    def __init__(self, content: Optional[str] = None):
        self._text = content or ""

    def get_content(self) -> str:
        return self._text

    def set_content(self, text: str) -> None:
        self._text = text
