from __future__ import annotations

from pydantic import BaseModel


class CommandResult(BaseModel):
    """Captured output of a successful package-manager invocation."""

    command: list[str]
    returncode: int
    stdout: str  # Raw text, one dependency per line for ``npm list``
    stderr: str = ""
