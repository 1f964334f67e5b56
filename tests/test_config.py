"""Configuration loading tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from core.orchestrator import Orchestrator
from core.runtime_config import load_effective_config, load_yaml, merge_dicts
from planner.plan_parser import ParserSettings


def _write_config(root: Path, default: str, skills: str) -> None:
    config_dir = root / "config"
    config_dir.mkdir()
    (config_dir / "default.yaml").write_text(default, encoding="utf-8")
    (config_dir / "skills.yaml").write_text(skills, encoding="utf-8")


def test_missing_yaml_is_empty(tmp_path: Path) -> None:
    assert load_yaml(tmp_path / "absent.yaml") == {}


def test_non_mapping_yaml_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_yaml(path)


def test_merge_dicts_is_recursive() -> None:
    merged = merge_dicts({"parser": {"a": 1, "b": 2}, "x": 1}, {"parser": {"b": 3}})
    assert merged == {"parser": {"a": 1, "b": 3}, "x": 1}


def test_effective_config_combines_parser_and_skills(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        "parser:\n  output_attribute: bindTo\n",
        "skills:\n  email:\n    functions:\n      SendEmailAsync:\n        parameters: [input]\n",
    )
    config = load_effective_config(tmp_path)
    assert config["parser"]["output_attribute"] == "bindTo"
    assert "email" in config["skills"]

    settings = ParserSettings.from_config(config)
    assert settings.output_attribute == "bindTo"
    assert settings.result_attribute == "appendToResult"


def test_parser_settings_are_frozen_and_validated() -> None:
    settings = ParserSettings()
    with pytest.raises(ValidationError):
        settings.allow_empty_plan = False  # type: ignore[misc]
    with pytest.raises(ValidationError):
        ParserSettings.from_config({"parser": {"allow_empty_plan": "sometimes"}})


def test_orchestrator_wires_registry_and_parser(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        "parser:\n  allow_empty_plan: true\n",
        "skills:\n  email:\n    functions:\n      SendEmailAsync:\n        parameters: [input]\n",
    )
    bundle = Orchestrator(root=tmp_path).build(allow_empty_plan=False)

    assert bundle.registry.exists("email", "SendEmailAsync")
    assert bundle.parser.settings.allow_empty_plan is False
    plan = bundle.parser.parse("<plan><function.email.SendEmailAsync/></plan>", "goal", bundle.registry)
    assert plan.steps[0].name == "SendEmailAsync"
