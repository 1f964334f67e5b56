"""CLI tests."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from ui.cli.cli import app

runner = CliRunner()

SKILLS_YAML = """\
skills:
  WriterSkill:
    functions:
      Translate:
        parameters: [input, language]
  email:
    functions:
      SendEmailAsync:
        parameters: [input, email_address]
"""


def _files(tmp_path: Path, document: str) -> tuple[Path, Path]:
    plan_path = tmp_path / "plan.xml"
    plan_path.write_text(document, encoding="utf-8")
    skills_path = tmp_path / "skills.yaml"
    skills_path.write_text(SKILLS_YAML, encoding="utf-8")
    return plan_path, skills_path


def test_plan_parse_prints_json(tmp_path: Path) -> None:
    plan_path, skills_path = _files(
        tmp_path,
        '<plan><function.WriterSkill.Translate language="French" setContextVariable="OUT"/>'
        '<function.email.SendEmailAsync input="$OUT"/></plan>',
    )
    result = runner.invoke(
        app,
        ["plan", "parse", str(plan_path), "--goal", "translate and send", "--skills", str(skills_path)],
    )

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["description"] == "translate and send"
    assert [step["name"] for step in data["steps"]] == ["Translate", "SendEmailAsync"]
    assert data["steps"][1]["named_parameters"] == {"input": "$OUT"}
    assert data["steps"][1]["variable_references"] == ["OUT"]


def test_plan_parse_reports_condition_kind(tmp_path: Path) -> None:
    plan_path, skills_path = _files(tmp_path, "<plan><function.email.Fax/></plan>")
    result = runner.invoke(app, ["plan", "parse", str(plan_path), "--skills", str(skills_path)])

    assert result.exit_code == 1
    assert "FunctionNotFound" in result.output


def test_plan_parse_reports_undecodable_file(tmp_path: Path) -> None:
    plan_path, skills_path = _files(tmp_path, "")
    plan_path.write_bytes(b"\xff\xfe<plan/>")
    result = runner.invoke(app, ["plan", "parse", str(plan_path), "--skills", str(skills_path)])

    assert result.exit_code == 1
    assert "MalformedDocument" in result.output
    assert not isinstance(result.exception, UnicodeDecodeError)


def test_strict_rejects_empty_plan(tmp_path: Path) -> None:
    plan_path, skills_path = _files(tmp_path, "Nothing to do: <plan></plan>")
    lenient = runner.invoke(app, ["plan", "parse", str(plan_path), "--skills", str(skills_path)])
    strict = runner.invoke(
        app, ["plan", "parse", str(plan_path), "--skills", str(skills_path), "--strict"]
    )

    assert lenient.exit_code == 0
    assert json.loads(lenient.stdout)["steps"] == []
    assert strict.exit_code == 1
    assert "EmptyPlan" in strict.output


def test_skills_list(tmp_path: Path) -> None:
    _, skills_path = _files(tmp_path, "")
    result = runner.invoke(app, ["skills", "list", "--skills", str(skills_path)])

    assert result.exit_code == 0
    assert "WriterSkill.Translate(input, language): enabled" in result.output
    assert "email.SendEmailAsync(input, email_address): enabled" in result.output
