"""Unit tests for quiet_types.tracker."""

from __future__ import annotations

from quiet_types.tracker import LineTracker

DOC_A = ["import * as lodash from 'lodash';", "", "const x = require('foo');"]
DOC_B = ["const y = 1;", "import fs from 'fs';"]


def _lines(doc: list[str]):
    return lambda number: doc[number]


class TestLineTracker:
    def test_first_event_only_primes(self) -> None:
        tracker = LineTracker()
        assert tracker.on_selection_changed("a.ts", 0, _lines(DOC_A)) is None

    def test_same_line_is_not_completed(self) -> None:
        tracker = LineTracker()
        tracker.on_selection_changed("a.ts", 0, _lines(DOC_A))
        assert tracker.on_selection_changed("a.ts", 0, _lines(DOC_A)) is None

    def test_leaving_line_completes_it(self) -> None:
        tracker = LineTracker()
        tracker.on_selection_changed("a.ts", 0, _lines(DOC_A))
        assert tracker.on_selection_changed("a.ts", 1, _lines(DOC_A)) == DOC_A[0]

    def test_each_move_completes_previous_line(self) -> None:
        tracker = LineTracker()
        tracker.on_selection_changed("a.ts", 0, _lines(DOC_A))
        completed = [
            tracker.on_selection_changed("a.ts", 2, _lines(DOC_A)),
            tracker.on_selection_changed("a.ts", 1, _lines(DOC_A)),
            tracker.on_selection_changed("a.ts", 1, _lines(DOC_A)),
            tracker.on_selection_changed("a.ts", 0, _lines(DOC_A)),
        ]
        assert completed == [DOC_A[0], DOC_A[2], None, DOC_A[1]]

    def test_switching_documents_reads_from_new_document(self) -> None:
        tracker = LineTracker()
        tracker.on_selection_changed("a.ts", 1, _lines(DOC_A))
        # Same line number, different document
        assert tracker.on_selection_changed("b.ts", 1, _lines(DOC_B)) == DOC_B[1]
