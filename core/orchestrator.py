"""Top-level application wiring."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from core.runtime_config import load_effective_config
from planner.plan_parser import ParserSettings, SequentialPlanParser
from skills.function_registry import FunctionRegistry, build_default_registry


@dataclass
class RuntimeBundle:
    """Holds initialized runtime components."""

    config: dict[str, Any]
    registry: FunctionRegistry
    parser: SequentialPlanParser


class Orchestrator:
    """Creates and wires runtime components for CLI use."""

    def __init__(self, root: Path | None = None, skills_path: Path | None = None) -> None:
        default_root = Path(__file__).resolve().parents[1]
        self.root = (root or default_root).resolve()
        self.skills_path = skills_path

    def build(self, **parser_overrides: Any) -> RuntimeBundle:
        config = load_effective_config(self.root, self.skills_path)
        settings = ParserSettings.from_config(config)
        if parser_overrides:
            settings = settings.model_copy(update=parser_overrides)
        return RuntimeBundle(
            config=config,
            registry=build_default_registry(config),
            parser=SequentialPlanParser(settings),
        )
