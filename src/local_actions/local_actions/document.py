# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Minimal text-document and workspace model used by the providers.

Positions are 0-based, like the editor protocol they are handed to.  The
CLI reports them 1-based.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union


@dataclass(frozen=True, order=True)
class Position:
    line: int
    character: int


@dataclass(frozen=True)
class Range:
    start: Position
    end: Position

    @classmethod
    def empty(cls) -> "Range":
        """Zero-length range at the top of the document."""
        return cls(Position(0, 0), Position(0, 0))

    @property
    def is_empty(self) -> bool:
        return self.start == self.end


@dataclass(frozen=True)
class TextLine:
    line_number: int
    text: str

    @property
    def first_non_whitespace_character_index(self) -> int:
        return len(self.text) - len(self.text.lstrip())

    @property
    def range(self) -> Range:
        return Range(Position(self.line_number, 0), Position(self.line_number, len(self.text)))


class TextDocument:
    """In-memory document text with offset/position conversion."""

    def __init__(self, path: Union[str, Path], text: str):
        self.path = Path(path).resolve()
        self._text = text
        self._lines = text.splitlines()
        if not self._lines or text.endswith(("\n", "\r")):
            self._lines.append("")
        # Start offset of every line, used by position_at.
        self._line_offsets: List[int] = []
        offset = 0
        for raw in text.splitlines(keepends=True):
            self._line_offsets.append(offset)
            offset += len(raw)
        if len(self._line_offsets) < len(self._lines):
            self._line_offsets.append(offset)

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "TextDocument":
        with open(path, encoding="utf-8") as fh:
            return cls(path, fh.read())

    @property
    def uri(self) -> str:
        return str(self.path)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def get_text(self) -> str:
        return self._text

    def line_at(self, line: int) -> TextLine:
        if line < 0 or line >= len(self._lines):
            raise IndexError(f"line {line} out of range for {self.uri}")
        return TextLine(line, self._lines[line])

    def position_at(self, offset: int) -> Position:
        offset = max(0, min(offset, len(self._text)))
        line = 0
        lo, hi = 0, len(self._line_offsets) - 1
        while lo <= hi:
            mid = (lo + hi) // 2
            if self._line_offsets[mid] <= offset:
                line = mid
                lo = mid + 1
            else:
                hi = mid - 1
        character = min(offset - self._line_offsets[line], len(self._lines[line]))
        return Position(line, character)


class Workspace:
    """Filesystem services rooted at a workspace folder."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root).resolve()

    def find_files(self, *patterns: str) -> List[Path]:
        """Return files under the root matching any of the glob *patterns*."""
        found = set()
        for pattern in patterns:
            for path in self.root.glob(pattern):
                if path.is_file():
                    found.add(path)
        return sorted(found)

    @staticmethod
    def exists(path: Union[str, Path]) -> bool:
        try:
            return os.path.exists(path)
        except (OSError, ValueError):
            return False

    def as_relative_path(self, path: Union[str, Path]) -> str:
        path = Path(path)
        try:
            return path.resolve().relative_to(self.root).as_posix()
        except ValueError:
            return path.as_posix()
