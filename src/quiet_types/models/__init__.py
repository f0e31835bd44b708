from __future__ import annotations

from quiet_types.models.events import (
    EditorEvent,
    LineEvent,
    ManifestCreatedEvent,
    ManifestDeletedEvent,
    SelectionEvent,
    parse_event,
)
from quiet_types.models.npm import CommandResult
from quiet_types.models.outcome import InstallOutcome

__all__ = [
    # events
    "EditorEvent",
    "SelectionEvent",
    "LineEvent",
    "ManifestCreatedEvent",
    "ManifestDeletedEvent",
    "parse_event",
    # npm
    "CommandResult",
    # outcome
    "InstallOutcome",
]
