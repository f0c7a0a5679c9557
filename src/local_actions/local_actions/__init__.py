# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Links, completion and validation for local references in GitHub workflow and action files.

Public API
----------
LocalFileUsesParser            Extract local ``uses:`` references from a document.
find_context                   Classify a cursor as a workflow or action reference site.
Validator                      Resolve references and report missing or misplaced targets.
LocalFileDocumentLinkProvider  Turn resolved references into document links.
AutoCompleteProvider           Suggest local workflows and actions after ``uses:``.
LocalActionsExtension          Wire the providers to editor events.
"""

from .completion import AutoCompleteProvider, CompletionItem
from .context import ContextCache, find_context
from .document import Position, Range, TextDocument, Workspace
from .extension import LocalActionsExtension
from .links import DocumentLink, LocalFileDocumentLinkProvider
from .parser import ACTION, WORKFLOW, LocalFileUsesParser, UsesReference
from .validator import (
    Diagnostic,
    DiagnosticCollection,
    DiagnosticSeverity,
    ValidationResult,
    Validator,
    find_base_path,
)

__all__ = [
    "ACTION",
    "WORKFLOW",
    "AutoCompleteProvider",
    "CompletionItem",
    "ContextCache",
    "find_context",
    "Position",
    "Range",
    "TextDocument",
    "Workspace",
    "LocalActionsExtension",
    "DocumentLink",
    "LocalFileDocumentLinkProvider",
    "LocalFileUsesParser",
    "UsesReference",
    "Diagnostic",
    "DiagnosticCollection",
    "DiagnosticSeverity",
    "ValidationResult",
    "Validator",
    "find_base_path",
]
