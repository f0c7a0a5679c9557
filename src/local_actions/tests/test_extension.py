# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

import logging

import pytest

from local_actions.config import LocalActionsConfig
from local_actions.document import Position, Workspace
from local_actions.extension import LocalActionsExtension
from local_actions.logconfig import DocumentContextFilter


@pytest.fixture
def extension(repo):
    ext = LocalActionsExtension(Workspace(repo), LocalActionsConfig())
    ext.activate()
    yield ext
    ext.deactivate()


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/r/.github/workflows/ci.yml", True),
        ("/r/.github/workflows/ci.yaml", True),
        ("/r/.github/actions/setup/action.yml", True),
        ("/r/.github/actions/deep/nested/action.yaml", True),
        (".github/workflows/ci.yml", True),
        ("/r/.github/workflows/README.md", False),
        ("/r/.github/dependabot.yml", False),
        ("/r/workflows/ci.yml", False),
        ("/r/.github/workflows-old/ci.yml", False),
    ],
)
def test_document_selector(path, expected):
    assert LocalActionsExtension.matches(path) is expected


def test_inactive_extension_does_nothing(repo, make_document):
    ext = LocalActionsExtension(Workspace(repo), LocalActionsConfig())
    document = make_document("jobs:\n  call:\n    uses: ./missing.yml\n")
    assert ext.on_document_changed(document) is None
    assert ext.provide_document_links(document) == []
    assert ext.provide_completion_items(document, Position(2, 10)) == []


def test_document_change_updates_collection(extension, make_document):
    document = make_document("jobs:\n  call:\n    uses: ./missing.yml\n")
    result = extension.on_document_changed(document)
    assert result
    assert len(extension.collection.get(document.uri)) == 1


def test_non_matching_document_is_ignored(extension, make_document):
    document = make_document("jobs:\n  call:\n    uses: ./missing.yml\n", "docs/example.yml")
    assert extension.on_document_changed(document) is None
    assert document.uri not in extension.collection


def test_links_and_completion_are_delegated(repo, extension, make_document):
    document = make_document("jobs:\n  call:\n    uses: ./.github/workflows/reusable.yml\n")
    links = extension.provide_document_links(document)
    assert [link.target for link in links] == [repo / ".github" / "workflows" / "reusable.yml"]

    items = extension.provide_completion_items(document, Position(2, 31))
    assert [item.label for item in items] == ["./.github/workflows/reusable.yml"]


def test_deactivate_drops_diagnostics(repo, make_document):
    ext = LocalActionsExtension(Workspace(repo), LocalActionsConfig())
    ext.activate()
    collection = ext.collection
    ext.on_document_changed(make_document("jobs:\n  call:\n    uses: ./missing.yml\n"))
    ext.deactivate()
    assert len(collection) == 0
    assert not ext.active


def test_log_records_carry_the_document(extension, make_document):
    records = []

    class Capture(logging.Handler):
        def emit(self, record: logging.LogRecord):
            records.append(record)

    logger = logging.getLogger("local_actions.validator")
    handler = Capture()
    handler.addFilter(DocumentContextFilter())
    logger.addHandler(handler)
    old_level = logger.level
    logger.setLevel(logging.DEBUG)
    document = make_document("jobs:\n  call:\n    uses: ./missing.yml\n")
    try:
        extension.on_document_changed(document)
    finally:
        logger.removeHandler(handler)
        logger.setLevel(old_level)

    assert records
    assert all(r.document == document.uri for r in records)
