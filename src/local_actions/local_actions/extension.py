# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Wiring of the providers behind the events an editor host delivers."""

import logging
import re
from pathlib import Path
from typing import List, Optional, Union

from .completion import AutoCompleteProvider, CompletionItem
from .config import LocalActionsConfig
from .document import Position, TextDocument, Workspace
from .links import DocumentLink, LocalFileDocumentLinkProvider
from .logconfig import DocumentContext
from .parser import LocalFileUsesParser
from .validator import DIAGNOSTIC_SOURCE, DiagnosticCollection, ValidationResult, Validator

LOGGER = logging.getLogger(__name__)

DOCUMENT_SELECTOR = "**/.github/{workflows,actions}/**/*.{yml,yaml}"
_SELECTOR_RE = re.compile(r"(^|/)\.github/(workflows|actions)/(.+/)?[^/]+\.ya?ml$")


class LocalActionsExtension:
    """Owns the diagnostic collection and the providers for one workspace."""

    def __init__(self, workspace: Workspace, config: Optional[LocalActionsConfig] = None):
        self.workspace = workspace
        self.config = config
        self.collection: Optional[DiagnosticCollection] = None
        self.validator: Optional[Validator] = None
        self.link_provider: Optional[LocalFileDocumentLinkProvider] = None
        self.completion_provider = AutoCompleteProvider(workspace)

    @staticmethod
    def matches(path: Union[str, Path]) -> bool:
        return bool(_SELECTOR_RE.search(Path(path).as_posix()))

    @property
    def active(self) -> bool:
        return self.collection is not None

    def activate(self) -> None:
        self.collection = DiagnosticCollection(DIAGNOSTIC_SOURCE)
        self.validator = Validator(self.collection, self.config, self.workspace.exists)
        self.link_provider = LocalFileDocumentLinkProvider(self.validator)

    def deactivate(self) -> None:
        if self.collection is not None:
            self.collection.clear()
        self.collection = None
        self.validator = None
        self.link_provider = None
        self.completion_provider.clear()

    def on_document_changed(self, document: TextDocument) -> Optional[ValidationResult]:
        """Re-validate *document* on open, change or save."""
        if self.validator is None or not self.matches(document.path):
            return None
        with DocumentContext.bind(document.uri):
            refs = LocalFileUsesParser.parse(document)
            return self.validator.validate(document, refs)

    def provide_document_links(self, document: TextDocument) -> List[DocumentLink]:
        if self.link_provider is None or not self.matches(document.path):
            return []
        with DocumentContext.bind(document.uri):
            return self.link_provider.provide_document_links(document)

    def provide_completion_items(
        self, document: TextDocument, position: Position
    ) -> List[CompletionItem]:
        if not self.active or not self.matches(document.path):
            return []
        with DocumentContext.bind(document.uri):
            return self.completion_provider.provide_completion_items(document, position)
