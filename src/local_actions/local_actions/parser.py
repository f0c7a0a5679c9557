# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Extraction of local ``uses:`` references from workflow and action files.

Two independent passes run over the composed YAML node tree:

- workflow pass: ``jobs.<job>.uses`` (a reusable workflow) and
  ``jobs.<job>.steps[*].uses`` (an action);
- action pass: ``runs.steps[*].uses`` when ``runs.using`` is ``composite``.

Only scalar values starting with ``./`` or ``../`` are kept.  Registry
references such as ``actions/checkout@v4`` are skipped silently.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

import yaml

from .document import Range, TextDocument

LOGGER = logging.getLogger(__name__)

ACTION = "action"
WORKFLOW = "workflow"
JOBS = "jobs"
STEPS = "steps"
USES = "uses"
RUNS = "runs"
USING = "using"
WITH = "with"
ENV = "env"
COMPOSITE = "composite"
LOCAL_START = re.compile(r"^\.{1,2}/.*")


@dataclass(frozen=True)
class UsesReference:
    """A local ``uses:`` value and where it sits in the document."""

    content: str
    type: str  # WORKFLOW | ACTION
    range: Range


def _get(node: yaml.Node, key: str) -> Optional[yaml.Node]:
    """Return the value node for *key* in a mapping node (first occurrence)."""
    if not isinstance(node, yaml.MappingNode):
        return None
    for key_node, value_node in node.value:
        if isinstance(key_node, yaml.ScalarNode) and key_node.value == key:
            return value_node
    return None


def _local_uses(node: yaml.Node) -> Optional[yaml.ScalarNode]:
    uses = _get(node, USES)
    if isinstance(uses, yaml.ScalarNode) and LOCAL_START.match(uses.value):
        return uses
    return None


class LocalFileUsesParser:
    @classmethod
    def parse(cls, document: TextDocument) -> List[UsesReference]:
        try:
            root = yaml.compose(document.get_text())
        except yaml.YAMLError as exc:
            LOGGER.warning("Could not parse %s: %s", document.uri, exc)
            return []
        if root is None:
            return []

        refs = cls._extract_uses_from_workflow(root, document)
        refs += cls._extract_uses_from_action(root, document)
        LOGGER.debug("Found %d local reference(s)", len(refs))
        return refs

    @classmethod
    def _extract_uses_from_workflow(
        cls, root: yaml.Node, document: TextDocument
    ) -> List[UsesReference]:
        refs: List[UsesReference] = []

        jobs = _get(root, JOBS)
        if not isinstance(jobs, yaml.MappingNode):
            return refs

        for _job_key, job in jobs.value:
            if not isinstance(job, yaml.MappingNode):
                continue

            job_uses = _local_uses(job)
            if job_uses is not None:
                refs.append(
                    UsesReference(job_uses.value, WORKFLOW, cls._get_node_range(job_uses, document))
                )

            steps = _get(job, STEPS)
            if not isinstance(steps, yaml.SequenceNode):
                continue
            refs += cls._extract_uses_from_steps(steps, document)

        return refs

    @classmethod
    def _extract_uses_from_action(
        cls, root: yaml.Node, document: TextDocument
    ) -> List[UsesReference]:
        runs = _get(root, RUNS)
        if not isinstance(runs, yaml.MappingNode):
            return []

        using = _get(runs, USING)
        if not isinstance(using, yaml.ScalarNode) or using.value != COMPOSITE:
            return []

        steps = _get(runs, STEPS)
        if not isinstance(steps, yaml.SequenceNode):
            return []
        return cls._extract_uses_from_steps(steps, document)

    @classmethod
    def _extract_uses_from_steps(
        cls, steps: yaml.SequenceNode, document: TextDocument
    ) -> List[UsesReference]:
        refs: List[UsesReference] = []
        for step in steps.value:
            step_uses = _local_uses(step)
            if step_uses is not None:
                refs.append(
                    UsesReference(step_uses.value, ACTION, cls._get_node_range(step_uses, document))
                )
        return refs

    @staticmethod
    def _get_node_range(node: yaml.Node, document: TextDocument) -> Range:
        start_mark = getattr(node, "start_mark", None)
        end_mark = getattr(node, "end_mark", None)
        if start_mark is None or end_mark is None:
            return Range.empty()
        return Range(document.position_at(start_mark.index), document.position_at(end_mark.index))
