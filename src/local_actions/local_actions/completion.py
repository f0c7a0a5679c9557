# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Completion of local workflow and action paths after ``uses:``."""

import logging
import re
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import List, Optional, Tuple

from .context import ContextCache
from .document import Position, Range, TextDocument, Workspace
from .parser import LOCAL_START, USES, WORKFLOW

LOGGER = logging.getLogger(__name__)

WORKFLOW_PATTERNS = (".github/workflows/**/*.yml", ".github/workflows/**/*.yaml")
ACTION_PATTERNS = (".github/actions/**/action.yml", ".github/actions/**/action.yaml")
_MANIFEST_SUFFIX = re.compile(r"/action\.ya?ml$", re.IGNORECASE)
_LOCAL_PREFIXES = ("./", "../")


@dataclass(frozen=True)
class CompletionItem:
    label: str
    detail: str
    range: Range
    kind: str = "file"


def _is_local_prefix(current: str) -> bool:
    """True while *current* could still become a local reference."""
    if not current or LOCAL_START.match(current):
        return True
    return any(prefix.startswith(current) for prefix in _LOCAL_PREFIXES)


class AutoCompleteProvider:
    def __init__(self, workspace: Workspace):
        self.workspace = workspace
        self._contexts = ContextCache()
        self._files_key: Optional[Tuple[str, int, Optional[str]]] = None
        self._files: List[str] = []

    def clear(self) -> None:
        self._contexts.clear()
        self._files_key = None
        self._files = []

    def _list_files(self, context: str) -> List[str]:
        if context == WORKFLOW:
            return sorted(
                f"./{self.workspace.as_relative_path(f)}"
                for f in self.workspace.find_files(*WORKFLOW_PATTERNS)
            )
        return sorted(
            "./" + _MANIFEST_SUFFIX.sub("", self.workspace.as_relative_path(f))
            for f in self.workspace.find_files(*ACTION_PATTERNS)
        )

    @staticmethod
    def _detail(context: str, file: str) -> str:
        path = PurePosixPath(file)
        if context == WORKFLOW:
            return f"Local workflow `{path.stem}`"
        return f"Local action `{path.name}`"

    def provide_completion_items(
        self, document: TextDocument, position: Position
    ) -> List[CompletionItem]:
        line = document.line_at(position.line)
        key = line.text.strip().split(":")[0].strip()
        if key.startswith("-"):
            key = key[1:].strip()
        if key != USES:
            return []

        before_cursor = line.text[: position.character]
        if ":" not in before_cursor:
            return []
        current = before_cursor.split(":", 1)[1].lstrip()
        if not _is_local_prefix(current):
            return []

        context = self._contexts.classify(document, position)
        if context is None:
            self.clear()
            return []

        files_key = (document.uri, position.line, context)
        if self._files_key != files_key:
            self._files = self._list_files(context)
            self._files_key = files_key

        replace = Range(
            Position(position.line, position.character - len(current)),
            Position(position.line, len(line.text)),
        )
        suggestions = [
            CompletionItem(file, self._detail(context, file), replace)
            for file in self._files
            if file.startswith(current)
        ]
        LOGGER.debug(
            "%d %s candidate(s) for %r", len(suggestions), context, current
        )
        return suggestions

