from __future__ import annotations

from collections.abc import Callable


class LineTracker:
    """Turns cursor movement into "line completed" notifications.

    A line counts as completed once the cursor leaves it, either to another
    line or to another document. The text is read through the accessor of
    the event that moved the cursor away.
    """

    def __init__(self) -> None:
        self._document: str | None = None
        self._line: int | None = None

    def on_selection_changed(
        self,
        document: str,
        line: int,
        line_at: Callable[[int], str],
    ) -> str | None:
        """Record the new cursor position; return the completed line's text, if any."""
        if self._document is None or self._line is None:
            self._document, self._line = document, line
            return None
        if self._document == document and self._line == line:
            return None

        completed = line_at(self._line)
        self._document, self._line = document, line
        return completed
