"""Execution plan models produced by the plan parser."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from planner.markup_tokenizer import escape_attribute

VARIABLE_PREFIX = "$"
DEFAULT_FUNCTION_TAG_PREFIX = "function"
DEFAULT_OUTPUT_ATTRIBUTE = "setContextVariable"
DEFAULT_RESULT_ATTRIBUTE = "appendToResult"


class ParameterValue(str):
    """Raw attribute text tagged as a literal or a variable reference."""

    __slots__ = ()

    is_variable = False

    @staticmethod
    def from_raw(raw: str) -> ParameterValue:
        if raw.startswith(VARIABLE_PREFIX):
            return VariableReference(raw)
        return LiteralValue(raw)

    @property
    def raw(self) -> str:
        return str.__str__(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.raw!r})"


class LiteralValue(ParameterValue):
    """Value passed to the function as written."""

    __slots__ = ()


class VariableReference(ParameterValue):
    """`$NAME` placeholder bound by the execution runtime, never at parse time."""

    __slots__ = ()

    is_variable = True

    @property
    def variable_name(self) -> str:
        return self.raw[len(VARIABLE_PREFIX):]


def _parameter_pairs(
    values: Mapping[str, ParameterValue] | Iterable[tuple[str, ParameterValue]],
) -> tuple[tuple[str, ParameterValue], ...]:
    pairs = values.items() if isinstance(values, Mapping) else values
    return tuple((key, value) for key, value in pairs)


def _unique(names: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(names))


@dataclass(frozen=True)
class Step:
    """One skill function invocation."""

    skill_name: str
    name: str
    parameters: tuple[tuple[str, ParameterValue], ...] = ()
    named_outputs: tuple[str, ...] = ()
    result_outputs: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.skill_name or not self.name:
            raise ValueError("Step requires a non-empty skill name and function name.")
        object.__setattr__(self, "parameters", _parameter_pairs(self.parameters))
        object.__setattr__(self, "named_outputs", _unique(self.named_outputs))
        object.__setattr__(self, "result_outputs", _unique(self.result_outputs))

    @property
    def named_parameters(self) -> Mapping[str, ParameterValue]:
        """Read-only view of ``parameters`` keyed by attribute name."""
        return MappingProxyType(dict(self.parameters))

    @property
    def function_name(self) -> str:
        return f"{self.skill_name}.{self.name}"

    def variable_references(self) -> list[str]:
        """Names of context variables this step reads, without the `$`."""
        return [
            value.variable_name
            for value in self.named_parameters.values()
            if isinstance(value, VariableReference)
        ]

    def to_markup(
        self,
        tag_prefix: str = DEFAULT_FUNCTION_TAG_PREFIX,
        output_attribute: str = DEFAULT_OUTPUT_ATTRIBUTE,
        result_attribute: str = DEFAULT_RESULT_ATTRIBUTE,
    ) -> str:
        """Serialize back to a self-closing step element."""
        attributes = [(key, value.raw) for key, value in self.named_parameters.items()]
        attributes.extend(
            (output_attribute, output)
            for output in self.named_outputs
            if output not in self.result_outputs
        )
        attributes.extend((result_attribute, output) for output in self.result_outputs)
        rendered = "".join(f' {key}="{escape_attribute(value)}"' for key, value in attributes)
        return f"<{tag_prefix}.{self.skill_name}.{self.name}{rendered}/>"

    def to_dict(self) -> dict[str, Any]:
        return {
            "skill_name": self.skill_name,
            "name": self.name,
            "named_parameters": {key: value.raw for key, value in self.named_parameters.items()},
            "variable_references": self.variable_references(),
            "named_outputs": list(self.named_outputs),
            "result_outputs": list(self.result_outputs),
        }


@dataclass(frozen=True)
class Plan:
    """Validated, ordered steps for a goal."""

    description: str
    steps: tuple[Step, ...] = ()
    outputs: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "steps", tuple(self.steps))
        object.__setattr__(self, "outputs", _unique(self.outputs))

    @property
    def is_empty(self) -> bool:
        return not self.steps

    def to_markup(self, **step_options: str) -> str:
        if not self.steps:
            return "<plan/>"
        body = "".join(f"\n  {step.to_markup(**step_options)}" for step in self.steps)
        return f"<plan>{body}\n</plan>"

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "steps": [step.to_dict() for step in self.steps],
            "outputs": list(self.outputs),
        }
