"""Sequential plan parser: plan markup in, validated ``Plan`` out."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict

from planner.errors import (
    EmptyPlanError,
    FunctionNotFoundError,
    PlanParseError,
    UnrecognizedElementError,
)
from planner.execution_plan import (
    DEFAULT_FUNCTION_TAG_PREFIX,
    DEFAULT_OUTPUT_ATTRIBUTE,
    DEFAULT_RESULT_ATTRIBUTE,
    Plan,
    Step,
)
from planner.markup_tokenizer import Element, ElementTree, tokenize_document
from planner.registry_adapter import FunctionRegistryAdapter
from planner.step_binder import bind_step

logger = logging.getLogger("sp.plan_parser")


class ParserSettings(BaseModel):
    """Reserved names and policy for one parser instance."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    function_tag_prefix: str = DEFAULT_FUNCTION_TAG_PREFIX
    output_attribute: str = DEFAULT_OUTPUT_ATTRIBUTE
    result_attribute: str = DEFAULT_RESULT_ATTRIBUTE
    allow_empty_plan: bool = True

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> ParserSettings:
        """Build settings from the ``parser`` section of the effective config."""
        section = config.get("parser", {})
        if not isinstance(section, dict):
            raise ValueError("Config section 'parser' must be a mapping.")
        return cls.model_validate(section)


def assemble_plan(goal: str, steps: Sequence[Step]) -> Plan:
    """Wrap already-validated steps into a Plan described by ``goal``."""
    outputs: list[str] = []
    for step in steps:
        outputs.extend(step.result_outputs)
    return Plan(description=goal, steps=tuple(steps), outputs=tuple(outputs))


class SequentialPlanParser:
    """Turns generator-produced plan markup into a validated Plan."""

    def __init__(self, settings: ParserSettings | None = None) -> None:
        self.settings = settings or ParserSettings()
        self._step_tag = re.compile(
            rf"{re.escape(self.settings.function_tag_prefix)}\.(?P<skill>\w+)\.(?P<name>\w+)",
            flags=re.ASCII,
        )

    def parse(self, document: str, goal: str, registry: FunctionRegistryAdapter) -> Plan:
        """Parse ``document`` against ``registry``; raises ``PlanParseError``."""
        logger.info("Parsing plan for goal: %s", goal)
        try:
            tree = tokenize_document(document)
            steps = self._interpret(tree, registry)
            plan = assemble_plan(goal, steps)
            if plan.is_empty:
                if not self.settings.allow_empty_plan:
                    raise EmptyPlanError("Plan document contains no steps.")
                logger.warning("Parsed plan has no steps for goal: %s", goal)
        except PlanParseError as exc:
            logger.warning("Plan rejected [%s]: %s", exc.kind.value, exc)
            raise

        logger.info("Parsed plan with %d step(s)", len(plan.steps))
        return plan

    def _interpret(self, tree: ElementTree, registry: FunctionRegistryAdapter) -> list[Step]:
        plan_element = tree.plan
        if plan_element.text.strip():
            logger.debug("Ignoring free text inside <plan>")
        return [self._step(child, tree, registry) for child in tree.children_of(plan_element)]

    def _step(self, element: Element, tree: ElementTree, registry: FunctionRegistryAdapter) -> Step:
        match = self._step_tag.fullmatch(element.tag)
        if match is None:
            raise UnrecognizedElementError(
                f"<{element.tag}> is not a <{self.settings.function_tag_prefix}.SKILL.NAME> step.",
                line=element.line,
                column=element.column,
            )
        if element.children:
            nested = tree.nodes[element.children[0]]
            raise UnrecognizedElementError(
                f"<{nested.tag}> nested inside <{element.tag}> is not supported.",
                line=nested.line,
                column=nested.column,
            )

        skill_name, name = match.group("skill"), match.group("name")
        if not registry.exists(skill_name, name):
            raise FunctionNotFoundError(
                f"Failed to find function '{name}' in skill '{skill_name}'.",
                line=element.line,
                column=element.column,
            )

        binding = bind_step(
            element,
            output_attribute=self.settings.output_attribute,
            result_attribute=self.settings.result_attribute,
        )
        logger.debug(
            "Bound %s.%s: parameters=%s outputs=%s",
            skill_name,
            name,
            sorted(binding.named_parameters),
            list(binding.named_outputs),
        )
        return Step(
            skill_name=skill_name,
            name=name,
            parameters=tuple(binding.named_parameters.items()),
            named_outputs=binding.named_outputs,
            result_outputs=binding.result_outputs,
        )


def parse_plan(
    document: str,
    goal: str,
    registry: FunctionRegistryAdapter,
    *,
    settings: ParserSettings | None = None,
) -> Plan:
    """Parse a plan document with a one-off ``SequentialPlanParser``."""
    return SequentialPlanParser(settings).parse(document, goal, registry)
