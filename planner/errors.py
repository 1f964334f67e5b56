"""Plan parsing failure conditions."""

from __future__ import annotations

from enum import Enum


class ConditionKind(str, Enum):
    """Distinguishable reasons a plan document was rejected."""

    MALFORMED_DOCUMENT = "MalformedDocument"
    UNRECOGNIZED_ELEMENT = "UnrecognizedElement"
    FUNCTION_NOT_FOUND = "FunctionNotFound"
    DUPLICATE_ATTRIBUTE = "DuplicateAttribute"
    EMPTY_PLAN = "EmptyPlan"


class PlanParseError(ValueError):
    """Raised when a plan document cannot be turned into a Plan."""

    kind: ConditionKind = ConditionKind.MALFORMED_DOCUMENT

    def __init__(self, message: str, line: int | None = None, column: int | None = None) -> None:
        self.message = message
        self.line = line
        self.column = column
        location = f" (line {line}, column {column})" if line is not None else ""
        super().__init__(f"{message}{location}")


class MalformedDocumentError(PlanParseError):
    kind = ConditionKind.MALFORMED_DOCUMENT


class UnrecognizedElementError(PlanParseError):
    kind = ConditionKind.UNRECOGNIZED_ELEMENT


class FunctionNotFoundError(PlanParseError):
    kind = ConditionKind.FUNCTION_NOT_FOUND


class DuplicateAttributeError(PlanParseError):
    kind = ConditionKind.DUPLICATE_ATTRIBUTE


class EmptyPlanError(PlanParseError):
    """Only raised when the caller asked for empty plans to be rejected."""

    kind = ConditionKind.EMPTY_PLAN
