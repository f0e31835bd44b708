from __future__ import annotations

import re
from typing import Annotated, Literal

from pydantic import BaseModel, Field, TypeAdapter, field_validator

# Editors number lines by these breaks only, unlike str.splitlines()
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class SelectionEvent(BaseModel):
    """Cursor moved in a document. ``text`` is the full document text."""

    event: Literal["selection"]
    document: str
    line: int
    text: str

    @field_validator("line")
    @classmethod
    def validate_line(cls, v: int) -> int:
        if v < 0:
            raise ValueError("line must be >= 0")
        return v

    def line_at(self, number: int) -> str:
        lines = _LINE_BREAK.split(self.text)
        if number >= len(lines):
            return ""
        return lines[number]


class LineEvent(BaseModel):
    """A completed line delivered directly by the host."""

    event: Literal["line"]
    text: str


class ManifestCreatedEvent(BaseModel):
    event: Literal["manifest_created"]


class ManifestDeletedEvent(BaseModel):
    event: Literal["manifest_deleted"]


EditorEvent = Annotated[
    SelectionEvent | LineEvent | ManifestCreatedEvent | ManifestDeletedEvent,
    Field(discriminator="event"),
]

_event_adapter: TypeAdapter[EditorEvent] = TypeAdapter(EditorEvent)


def parse_event(raw: str) -> EditorEvent:
    """Validate one JSON line from the host. Raises ``pydantic.ValidationError``."""
    return _event_adapter.validate_json(raw)
