"""Module-name extraction from a single line of JavaScript/TypeScript.

Two shapes are recognised, in order:

    const x = require('lodash');
    import * as lodash from 'lodash';

Only bare names made of word characters qualify; relative paths, scoped
packages and sub-paths are ignored.
"""

from __future__ import annotations

import re

_NAME = r"(\w+)"

_REQUIRE_PATTERNS = (
    re.compile(rf"require\('{_NAME}'\);?\Z", re.ASCII),
    re.compile(rf'require\("{_NAME}"\);?\Z', re.ASCII),
)

_IMPORT_PATTERNS = (
    re.compile(rf"^import .+ from '{_NAME}';\Z", re.ASCII),
    re.compile(rf'^import .+ from "{_NAME}";\Z', re.ASCII),
)


def _first_match(patterns: tuple[re.Pattern[str], ...], line: str) -> re.Match[str] | None:
    for pattern in patterns:
        match = pattern.search(line)
        if match:
            return match
    return None


def extract_module_name(line: str) -> str | None:
    """Return the module a line imports, or ``None``.

    A line that looks like a ``require`` call never falls through to the
    import check.
    """
    match = _first_match(_REQUIRE_PATTERNS, line)
    if match:
        return match.group(1)

    match = _first_match(_IMPORT_PATTERNS, line)
    if match:
        return match.group(1)

    return None
