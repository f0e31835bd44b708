"""Integration test fixtures.

``fake_npm`` is an executable stand-in for npm: it appends every invocation
to a JSON-lines log, reports ``@types/foo`` as globally installed and fails
``@types/bar`` with E404.
"""

from __future__ import annotations

import json
import os
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

_FAKE_NPM = """\
#!{python}
import json, os, sys

args = sys.argv[1:]
with open(os.environ["FAKE_NPM_LOG"], "a", encoding="utf-8") as fh:
    fh.write(json.dumps({{"args": args, "cwd": os.getcwd()}}) + "\\n")

if args[0] == "list":
    print("/usr/local/lib")
    if "-g" in args:
        print("+-- @types/foo@1.0.0")
    print("`-- npm@10.8.2")
    sys.exit(0)

if args[-1] == "@types/bar":
    sys.stderr.write("npm ERR! code E404\\nnpm ERR! 404 Not Found\\n")
    sys.exit(1)

print("added 1 package in 1s")
"""


@pytest.fixture()
def fake_npm(tmp_path: Path) -> Path:
    if os.name == "nt":
        pytest.skip("Shebang executables are POSIX-only.")
    script = tmp_path / "bin" / "npm"
    script.parent.mkdir()
    script.write_text(_FAKE_NPM.format(python=sys.executable), encoding="utf-8")
    script.chmod(0o755)
    return script


@pytest.fixture()
def npm_log(tmp_path: Path) -> Path:
    return tmp_path / "npm-calls.jsonl"


@pytest.fixture()
def read_npm_log(npm_log: Path) -> Callable[[], list[list[str]]]:
    def _read() -> list[list[str]]:
        if not npm_log.exists():
            return []
        lines = npm_log.read_text(encoding="utf-8").splitlines()
        return [json.loads(line)["args"] for line in lines]

    return _read


@pytest.fixture()
def subprocess_env(fake_npm: Path, npm_log: Path) -> dict[str, str]:
    env = {k: v for k, v in os.environ.items() if not k.startswith("QUIET_TYPES__")}
    env["QUIET_TYPES__NPM__COMMAND"] = str(fake_npm)
    env["FAKE_NPM_LOG"] = str(npm_log)
    return env
