# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Work out whether a cursor sits where a local workflow or action may be referenced.

The text around the cursor is usually mid-edit and rarely parses, so instead
of building a tree this walks upward over the lines above the cursor, keeping
only the ancestors (lines indented less than the last one kept).  The chain
of ancestors decides the context:

  jobs: / <job>: / uses:                 -> WORKFLOW (reusable workflow call)
  jobs: / <job>: / steps: / - uses:      -> ACTION
  runs: / steps: / - uses:               -> ACTION (composite action)

An ancestor ``with:`` or ``env:`` means the cursor is inside step inputs or
environment values, which never hold references.
"""

import logging
from typing import Optional, Tuple

from .document import Position, TextDocument
from .parser import ACTION, ENV, JOBS, RUNS, STEPS, WITH, WORKFLOW

LOGGER = logging.getLogger(__name__)


def _indentation(text: str) -> int:
    """Column of the first character that is not whitespace or a ``- `` marker."""
    i = len(text) - len(text.lstrip())
    while text.startswith("-", i) and (i + 1 == len(text) or text[i + 1] in " \t"):
        i += 1
        while i < len(text) and text[i] in " \t":
            i += 1
    return i


def _parse_key_value(line: str) -> Tuple[Optional[str], Optional[str]]:
    colon = line.find(":")
    if colon == -1:
        return None, None
    key = line[:colon].strip()
    value = line[colon + 1:].strip()
    return key, value or None


def _is_array_start(value: Optional[str]) -> bool:
    return value is None or value == "" or value == "[]"


def find_context(document: TextDocument, position: Position) -> Optional[str]:
    """Return ``WORKFLOW``, ``ACTION`` or ``None`` for the line at *position*."""
    current_indent = _indentation(document.line_at(position.line).text)

    found_jobs = False
    found_runs = False
    inside_job = False
    inside_steps = False
    # The most recent ancestor was a bare ``name:`` key; it is a job once
    # ``jobs:`` turns out to be its parent.
    job_candidate = False
    depth = 0

    for line_num in range(position.line - 1, -1, -1):
        text = document.line_at(line_num).text
        stripped = text.strip()
        if not stripped or stripped.startswith("#"):
            continue

        indent = _indentation(text)
        if indent >= current_indent:
            continue

        key, value = _parse_key_value(text[indent:].strip())

        if key in (WITH, ENV):
            return None

        if key == STEPS and _is_array_start(value):
            inside_steps = True
            job_candidate = False
            current_indent = indent
            depth += 1
            continue

        if indent == 0:
            if key == JOBS:
                found_jobs = True
                inside_job = job_candidate
                if inside_steps and inside_job:
                    return ACTION
                if inside_job and depth == 1:
                    return WORKFLOW
            elif key == RUNS:
                found_runs = True
                if inside_steps:
                    return ACTION
            # Nothing above a top-level key can enclose the cursor.
            break

        job_candidate = bool(key) and value is None and not any(c.isspace() for c in key)
        current_indent = indent
        depth += 1

    LOGGER.debug(
        "No reference context at line %d (jobs=%s, runs=%s)",
        position.line, found_jobs, found_runs,
    )
    return None


class ContextCache:
    """Remembers the last classification for a ``(document, line)`` pair."""

    def __init__(self):
        self._key: Optional[Tuple[str, int]] = None
        self._value: Optional[str] = None

    def get(self, uri: str, line: int) -> Tuple[bool, Optional[str]]:
        if self._key == (uri, line):
            return True, self._value
        return False, None

    def put(self, uri: str, line: int, value: Optional[str]) -> None:
        self._key = (uri, line)
        self._value = value

    def clear(self) -> None:
        self._key = None
        self._value = None

    def classify(self, document: TextDocument, position: Position) -> Optional[str]:
        hit, value = self.get(document.uri, position.line)
        if hit:
            return value
        value = find_context(document, position)
        self.put(document.uri, position.line, value)
        return value

