# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Clickable links from local ``uses:`` values to the files they reference."""

from dataclasses import dataclass
from pathlib import Path
from typing import List

from .document import Range, TextDocument
from .parser import LocalFileUsesParser
from .validator import Validator


@dataclass(frozen=True)
class DocumentLink:
    range: Range
    target: Path


class LocalFileDocumentLinkProvider:
    def __init__(self, validator: Validator):
        self.validator = validator

    def provide_document_links(self, document: TextDocument) -> List[DocumentLink]:
        uses_references = LocalFileUsesParser.parse(document)
        result = self.validator.validate(document, uses_references)
        if not result:
            return []
        links: List[DocumentLink] = []
        for index, ref in enumerate(uses_references):
            target = result.target_for(index)
            if target is not None:
                links.append(DocumentLink(ref.range, target))
        return links
