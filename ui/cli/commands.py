"""Typer command handlers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer

from core.orchestrator import Orchestrator, RuntimeBundle
from core.runtime_config import configure_logging
from planner.errors import ConditionKind, PlanParseError


def _runtime(skills: Path | None = None, **parser_overrides: Any) -> RuntimeBundle:
    bundle = Orchestrator(skills_path=skills).build(**parser_overrides)
    configure_logging(bundle.config)
    return bundle


def plan_parse(document: Path, goal: str, skills: Path | None = None, strict: bool = False) -> None:
    """Parse one plan document against the configured registry."""
    overrides = {"allow_empty_plan": False} if strict else {}
    bundle = _runtime(skills, **overrides)
    try:
        text = document.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        typer.echo(
            f"{ConditionKind.MALFORMED_DOCUMENT.value}: Plan document is not valid UTF-8 ({exc.reason}).",
            err=True,
        )
        raise typer.Exit(code=1) from exc
    try:
        plan = bundle.parser.parse(text, goal, bundle.registry.snapshot())
    except PlanParseError as exc:
        typer.echo(f"{exc.kind.value}: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(json.dumps(plan.to_dict(), indent=2))


def skills_list(skills: Path | None = None) -> None:
    """List functions and enabled flags."""
    bundle = _runtime(skills)
    for entry in bundle.registry.list_functions():
        view = entry.view
        status = "enabled" if entry.enabled else "disabled"
        params = ", ".join(view.parameters)
        typer.echo(f"{view.skill_name}.{view.name}({params}): {status}")


def config_show() -> None:
    """Show effective runtime config."""
    bundle = _runtime()
    typer.echo(json.dumps(bundle.config, indent=2))
