"""Step binder tests."""

from __future__ import annotations

import pytest

from planner.errors import DuplicateAttributeError
from planner.execution_plan import LiteralValue, VariableReference
from planner.markup_tokenizer import Element
from planner.step_binder import bind_step


def _element(*attributes: tuple[str, str]) -> Element:
    return Element(index=2, tag="function.email.SendEmailAsync", attributes=attributes, parent=1)


def test_partitions_parameters_and_outputs() -> None:
    binding = bind_step(
        _element(
            ("input", "$TRANSLATED_SUMMARY"),
            ("email_address", "john@example.com"),
            ("setContextVariable", "RECEIPT"),
        )
    )

    assert list(binding.named_parameters) == ["input", "email_address"]
    assert isinstance(binding.named_parameters["input"], VariableReference)
    assert isinstance(binding.named_parameters["email_address"], LiteralValue)
    assert binding.named_outputs == ("RECEIPT",)
    assert binding.result_outputs == ()


def test_dollar_in_the_middle_is_a_literal() -> None:
    binding = bind_step(_element(("input", "costs $5")))
    assert isinstance(binding.named_parameters["input"], LiteralValue)


def test_result_attribute_binds_output_and_result() -> None:
    binding = bind_step(_element(("appendToResult", "RESULT__EMAIL")))
    assert binding.named_outputs == ("RESULT__EMAIL",)
    assert binding.result_outputs == ("RESULT__EMAIL",)
    assert binding.named_parameters == {}


def test_custom_output_attribute_leaves_default_as_parameter() -> None:
    binding = bind_step(
        _element(("output", "OUT"), ("setContextVariable", "X")),
        output_attribute="output",
    )
    assert binding.named_outputs == ("OUT",)
    assert binding.named_parameters == {"setContextVariable": "X"}


def test_duplicate_parameter_fails() -> None:
    with pytest.raises(DuplicateAttributeError) as excinfo:
        bind_step(_element(("input", "a"), ("input", "b")))
    assert "input" in str(excinfo.value)
