"""Plan document parsing."""

from planner.errors import (
    ConditionKind,
    DuplicateAttributeError,
    EmptyPlanError,
    FunctionNotFoundError,
    MalformedDocumentError,
    PlanParseError,
    UnrecognizedElementError,
)
from planner.execution_plan import LiteralValue, ParameterValue, Plan, Step, VariableReference
from planner.plan_parser import ParserSettings, SequentialPlanParser, assemble_plan, parse_plan
from planner.registry_adapter import FunctionRegistryAdapter

__all__ = [
    "ConditionKind",
    "DuplicateAttributeError",
    "EmptyPlanError",
    "FunctionNotFoundError",
    "FunctionRegistryAdapter",
    "LiteralValue",
    "MalformedDocumentError",
    "ParameterValue",
    "ParserSettings",
    "Plan",
    "PlanParseError",
    "SequentialPlanParser",
    "Step",
    "UnrecognizedElementError",
    "VariableReference",
    "assemble_plan",
    "parse_plan",
]
