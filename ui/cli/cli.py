"""CLI entrypoint for the sequential plan parser."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from ui.cli import commands

app = typer.Typer(help="Sequential plan parser")
plan_app = typer.Typer(help="Plan commands")
skills_app = typer.Typer(help="Skill registry commands")
config_app = typer.Typer(help="Configuration commands")


@plan_app.command("parse")
def plan_parse_cmd(
    document: Path = typer.Argument(..., exists=True, dir_okay=False, help="Plan markup file"),
    goal: str = typer.Option("", "--goal", "-g", help="Goal the plan satisfies"),
    skills: Optional[Path] = typer.Option(None, "--skills", help="Skill manifest YAML"),
    strict: bool = typer.Option(False, "--strict", help="Reject plans with no steps"),
) -> None:
    """Parse a plan document and print it as JSON."""
    commands.plan_parse(document=document, goal=goal, skills=skills, strict=strict)


@skills_app.command("list")
def skills_list_cmd(
    skills: Optional[Path] = typer.Option(None, "--skills", help="Skill manifest YAML"),
) -> None:
    """List registered skill functions."""
    commands.skills_list(skills=skills)


@config_app.command("show")
def config_show_cmd() -> None:
    """Show effective configuration."""
    commands.config_show()


app.add_typer(plan_app, name="plan")
app.add_typer(skills_app, name="skills")
app.add_typer(config_app, name="config")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
