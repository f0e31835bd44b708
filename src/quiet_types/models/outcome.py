from __future__ import annotations

from enum import StrEnum


class InstallOutcome(StrEnum):
    """How a single completed line was resolved."""

    IGNORED = "ignored"  # No module reference on the line
    KNOWN_MISSING = "known_missing"  # No @types package exists upstream
    ALREADY_PRESENT = "already_present"
    NO_TARGET = "no_target"  # Chosen target unavailable (no workspace open)
    INSTALLED = "installed"
    FAILED = "failed"
