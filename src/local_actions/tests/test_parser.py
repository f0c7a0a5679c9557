# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Tests for local_actions.parser (reference extraction)."""

import pytest
import yaml

from local_actions.document import Position, Range, TextDocument
from local_actions.parser import ACTION, WORKFLOW, LocalFileUsesParser


def _parse(text: str):
    return LocalFileUsesParser.parse(TextDocument("/repo/.github/workflows/ci.yml", text))


_WORKFLOW = """\
name: CI
on: push
jobs:
  reusable:
    uses: ./.github/workflows/reusable.yml
  build:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v4
      - uses: ./local-action
      - name: Lint
        uses: ../shared/lint
        with:
          uses: ./not-a-reference
  remote:
    uses: octo-org/repo/.github/workflows/ci.yml@main
"""

_COMPOSITE = """\
name: Setup
runs:
  using: composite
  steps:
    - run: echo hello
      shell: bash
    - uses: ./.github/actions/inner
    - uses: actions/setup-python@v5
"""


class TestWorkflowPass:
    def test_job_and_step_references_are_extracted_in_order(self):
        refs = _parse(_WORKFLOW)
        assert [(r.content, r.type) for r in refs] == [
            ("./.github/workflows/reusable.yml", WORKFLOW),
            ("./local-action", ACTION),
            ("../shared/lint", ACTION),
        ]

    def test_registry_references_are_skipped(self):
        contents = [r.content for r in _parse(_WORKFLOW)]
        assert "actions/checkout@v4" not in contents
        assert not any("@" in c for c in contents)

    def test_with_inputs_are_not_references(self):
        assert "./not-a-reference" not in [r.content for r in _parse(_WORKFLOW)]

    def test_step_reference_is_action_and_job_reference_is_workflow(self):
        text = "jobs:\n  build:\n    steps:\n      - uses: ./a\n  call:\n    uses: ./b.yml\n"
        kinds = {r.content: r.type for r in _parse(text)}
        assert kinds == {"./a": ACTION, "./b.yml": WORKFLOW}

    def test_job_that_is_not_a_mapping_is_ignored(self):
        assert _parse("jobs:\n  build: ./x\n") == []

    def test_steps_that_are_not_a_sequence_are_ignored(self):
        assert _parse("jobs:\n  build:\n    steps:\n      uses: ./x\n") == []

    def test_structured_uses_value_is_ignored(self):
        text = "jobs:\n  build:\n    steps:\n      - uses:\n          path: ./x\n"
        assert _parse(text) == []

    def test_first_uses_key_wins(self):
        text = "jobs:\n  call:\n    uses: ./first.yml\n    uses: ./second.yml\n"
        assert [r.content for r in _parse(text)] == ["./first.yml"]


class TestActionPass:
    def test_composite_steps_are_extracted(self):
        refs = _parse(_COMPOSITE)
        assert [(r.content, r.type) for r in refs] == [("./.github/actions/inner", ACTION)]

    def test_non_composite_action_is_ignored(self):
        text = "runs:\n  using: node20\n  steps:\n    - uses: ./x\n"
        assert _parse(text) == []

    def test_missing_using_is_ignored(self):
        assert _parse("runs:\n  steps:\n    - uses: ./x\n") == []

    def test_both_passes_fire_on_the_same_document(self):
        text = (
            "jobs:\n  call:\n    uses: ./w.yml\n"
            "runs:\n  using: composite\n  steps:\n    - uses: ./a\n"
        )
        assert [(r.content, r.type) for r in _parse(text)] == [
            ("./w.yml", WORKFLOW),
            ("./a", ACTION),
        ]


class TestLocalPattern:
    @pytest.mark.parametrize(
        "value, kept",
        [
            ("./action", True),
            ("../action", True),
            ("./", True),
            (".../action", False),
            ("action", False),
            ("/abs/action", False),
            ("docker://alpine:3", False),
            ("owner/repo@v1", False),
        ],
    )
    def test_only_locally_prefixed_values_are_kept(self, value, kept):
        refs = _parse(f"jobs:\n  build:\n    steps:\n      - uses: {value}\n")
        assert (len(refs) == 1) is kept


class TestRobustness:
    @pytest.mark.parametrize(
        "text",
        [
            "",
            "name: nothing here\n",
            "on: push\nenv:\n  uses: ./x\n",
        ],
    )
    def test_documents_without_jobs_or_runs_yield_nothing(self, text):
        assert _parse(text) == []

    def test_invalid_yaml_yields_nothing(self):
        assert _parse("jobs: [\n  - uses: ./x\n") == []

    def test_multiple_documents_yield_nothing(self):
        assert _parse("jobs: {}\n---\njobs: {}\n") == []

    def test_top_level_sequence_yields_nothing(self):
        assert _parse("- jobs\n- runs\n") == []


class TestRanges:
    def test_range_covers_the_value(self):
        text = "jobs:\n  build:\n    steps:\n      - uses: ./local-action\n"
        (ref,) = _parse(text)
        assert ref.range == Range(Position(3, 14), Position(3, 28))

    def test_node_without_marks_degrades_to_empty_range(self):
        node = yaml.ScalarNode("tag:yaml.org,2002:str", "./x")
        document = TextDocument("/repo/.github/workflows/ci.yml", "")
        assert LocalFileUsesParser._get_node_range(node, document) == Range.empty()

    def test_references_are_immutable(self):
        (ref,) = _parse("jobs:\n  call:\n    uses: ./w.yml\n")
        with pytest.raises(AttributeError):
            ref.type = "action"
