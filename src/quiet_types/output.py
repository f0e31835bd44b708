"""User-visible output: the named log channel and the status-bar message.

Records are written to the host as JSON lines::

    {"channel": "Quiet-Types", "message": "Installing <lodash> to global."}
    {"status": "Installing @types/<lodash>..."}
    {"status": null}
"""

from __future__ import annotations

import json
from typing import TextIO

CHANNEL_NAME = "Quiet-Types"


class OutputChannel:
    def __init__(self, stream: TextIO, name: str = CHANNEL_NAME) -> None:
        self._stream = stream
        self.name = name

    def append_line(self, message: str) -> None:
        self._write({"channel": self.name, "message": message})

    def set_status(self, message: str | None) -> None:
        """Show a transient status message; ``None`` clears it."""
        self._write({"status": message})

    def _write(self, record: dict[str, str | None]) -> None:
        self._stream.write(json.dumps(record) + "\n")
        self._stream.flush()
