# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Resolution and validation of local ``uses:`` references.

References are resolved against the *base directory*: the parent of the
nearest ``.github`` directory above the document.  A workflow reference
points at a file; an action reference points at a directory holding
``action.yml`` (or, failing that, ``action.yaml``).

Diagnostics are kept per document in a :class:`DiagnosticCollection` and are
replaced wholesale on every pass.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple, Union

from .config import LocalActionsConfig, get_config
from .document import Range, TextDocument, Workspace
from .parser import ACTION, WORKFLOW, UsesReference

LOGGER = logging.getLogger(__name__)

GITHUB_DIR = ".github"
ACTION_MANIFESTS = ("action.yml", "action.yaml")
DIAGNOSTIC_SOURCE = "local-github-actions"

_UNDER_WORKFLOWS = re.compile(r".*\.github/workflows/.*")
_UNDER_ACTIONS = re.compile(r".*\.github/actions/.*")


class DiagnosticSeverity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """A problem attached to a source range."""

    range: Range
    message: str
    severity: DiagnosticSeverity = DiagnosticSeverity.ERROR
    source: str = DIAGNOSTIC_SOURCE

    def __str__(self) -> str:
        start = self.range.start
        return f"{start.line + 1}:{start.character + 1}: {self.severity.value}: {self.message}"


class DiagnosticCollection:
    """Current diagnostics for each document, keyed by document URI."""

    def __init__(self, name: str = DIAGNOSTIC_SOURCE):
        self.name = name
        self._entries: Dict[str, List[Diagnostic]] = {}

    def set(self, uri: str, diagnostics: Sequence[Diagnostic]) -> None:
        self._entries[uri] = list(diagnostics)

    def get(self, uri: str) -> List[Diagnostic]:
        return list(self._entries.get(uri, []))

    def delete(self, uri: str) -> None:
        self._entries.pop(uri, None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, uri: str) -> bool:
        return uri in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Tuple[str, List[Diagnostic]]]:
        for uri, diagnostics in list(self._entries.items()):
            yield uri, list(diagnostics)


@dataclass
class ValidationResult:
    """Outcome of one validation pass over a document.

    Truthy when the pass ran (a base directory was found), whatever the
    number of diagnostics.  ``resolved`` maps the index of each reference
    whose target exists to that target.
    """

    ran: bool
    diagnostics: List[Diagnostic] = field(default_factory=list)
    resolved: Dict[int, Path] = field(default_factory=dict)
    base_path: Optional[Path] = None

    def __bool__(self) -> bool:
        return self.ran

    @property
    def has_errors(self) -> bool:
        return any(d.severity == DiagnosticSeverity.ERROR for d in self.diagnostics)

    def target_for(self, index: int) -> Optional[Path]:
        return self.resolved.get(index)


def find_base_path(document_path: Union[str, Path]) -> Optional[Path]:
    """Return the parent of the nearest ``.github`` directory above *document_path*."""
    for parent in Path(document_path).parents:
        if parent.name == GITHUB_DIR:
            return parent.parent
    return None


class Validator:
    """Checks that local references exist and sit in the conventional place."""

    def __init__(
        self,
        collection: DiagnosticCollection,
        config: Optional[LocalActionsConfig] = None,
        exists: Optional[Callable[[Union[str, Path]], bool]] = None,
    ):
        self.collection = collection
        self._config = config
        self._exists = exists or Workspace.exists

    @property
    def config(self) -> LocalActionsConfig:
        return self._config if self._config is not None else get_config()

    def _resolve(self, base_path: Path, ref: UsesReference) -> Tuple[Path, bool]:
        file_name = Path(os.path.normpath(base_path / ref.content))
        if ref.type == ACTION:
            for manifest in ACTION_MANIFESTS:
                candidate = file_name / manifest
                if self._exists(candidate):
                    return candidate, True
            return file_name / ACTION_MANIFESTS[-1], False
        return file_name, self._exists(file_name)

    def validate(self, document: TextDocument, refs: Sequence[UsesReference]) -> ValidationResult:
        base_path = find_base_path(document.path)
        if base_path is None:
            LOGGER.warning("No %s directory above %s; skipping validation", GITHUB_DIR, document.uri)
            return ValidationResult(ran=False)

        config = self.config
        check_files = config.get("file-exist-errors", True)
        check_file_placement = config.get("file-placement-errors", True)

        result = ValidationResult(ran=True, base_path=base_path)
        for index, ref in enumerate(refs):
            file_name, exists = self._resolve(base_path, ref)

            if check_file_placement and ref.type == ACTION and _UNDER_WORKFLOWS.match(ref.content):
                result.diagnostics.append(
                    Diagnostic(
                        ref.range,
                        f'The referenced local action "{ref.content}" is under '
                        "`.github/workflows`. Consider storing local actions under "
                        "`.github/actions` or another folder outside of `.github/workflows`.",
                    )
                )
            if check_file_placement and ref.type == WORKFLOW and _UNDER_ACTIONS.match(ref.content):
                result.diagnostics.append(
                    Diagnostic(
                        ref.range,
                        f'The referenced local workflow "{ref.content}" is under '
                        "`.github/actions`. Consider storing local workflows under "
                        "`.github/workflows`.",
                    )
                )

            if not exists:
                if check_files:
                    result.diagnostics.append(
                        Diagnostic(
                            ref.range,
                            f'The referenced local {ref.type} "{ref.content}" does not exist.',
                        )
                    )
                continue
            result.resolved[index] = file_name

        self.collection.set(document.uri, result.diagnostics)
        LOGGER.debug(
            "Validated %d reference(s): %d diagnostic(s), %d resolved",
            len(refs), len(result.diagnostics), len(result.resolved),
        )
        return result
