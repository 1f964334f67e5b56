"""Skill function registry and default registry wiring."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from skills.manifest import SkillManifest

logger = logging.getLogger("sp.registry")

FunctionKey = tuple[str, str]


@dataclass(frozen=True)
class FunctionView:
    """Metadata for one registered function."""

    skill_name: str
    name: str
    description: str = ""
    parameters: tuple[str, ...] = ()


@dataclass
class RegisteredFunction:
    """A function entry and whether its skill is enabled."""

    view: FunctionView
    handler: Callable[..., Any] | None = None
    enabled: bool = True


def _check_identifier(kind: str, value: str) -> None:
    if not value or "." in value:
        raise ValueError(f"Invalid {kind} {value!r}: must be non-empty and contain no '.'.")


def signature_parameters(handler: Callable[..., Any]) -> tuple[str, ...]:
    """Named parameters a callable accepts, ignoring ``*args``/``**kwargs``."""
    skipped = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
    return tuple(
        name
        for name, param in inspect.signature(handler).parameters.items()
        if param.kind not in skipped
    )


@dataclass(frozen=True)
class RegistrySnapshot:
    """Immutable view of the enabled functions at one point in time."""

    functions: tuple[FunctionView, ...] = ()
    _index: dict[FunctionKey, FunctionView] = field(
        init=False, repr=False, compare=False, hash=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        views = tuple(self.functions)
        object.__setattr__(self, "functions", views)
        object.__setattr__(self, "_index", {(view.skill_name, view.name): view for view in views})

    def exists(self, skill_name: str, name: str) -> bool:
        return (skill_name, name) in self._index

    def describe(self, skill_name: str, name: str) -> FunctionView | None:
        return self._index.get((skill_name, name))


class FunctionRegistry:
    """Simple in-memory skill function registry."""

    def __init__(self) -> None:
        self._functions: dict[FunctionKey, RegisteredFunction] = {}

    def register(
        self,
        skill_name: str,
        name: str,
        handler: Callable[..., Any] | None = None,
        *,
        description: str = "",
        parameters: list[str] | tuple[str, ...] | None = None,
        enabled: bool = True,
    ) -> FunctionView:
        _check_identifier("skill name", skill_name)
        _check_identifier("function name", name)
        if parameters is None:
            parameters = signature_parameters(handler) if handler is not None else ()
        view = FunctionView(
            skill_name=skill_name,
            name=name,
            description=description,
            parameters=tuple(parameters),
        )
        if (skill_name, name) in self._functions:
            logger.info("Replacing function %s.%s", skill_name, name)
        self._functions[(skill_name, name)] = RegisteredFunction(
            view=view, handler=handler, enabled=enabled
        )
        return view

    def get(self, skill_name: str, name: str) -> RegisteredFunction | None:
        entry = self._functions.get((skill_name, name))
        if entry and entry.enabled:
            return entry
        return None

    def exists(self, skill_name: str, name: str) -> bool:
        return self.get(skill_name, name) is not None

    def describe(self, skill_name: str, name: str) -> FunctionView | None:
        entry = self.get(skill_name, name)
        return entry.view if entry else None

    def list_functions(self) -> list[RegisteredFunction]:
        return [entry for _, entry in sorted(self._functions.items())]

    def snapshot(self) -> RegistrySnapshot:
        return RegistrySnapshot(
            functions=tuple(entry.view for _, entry in sorted(self._functions.items()) if entry.enabled)
        )


def build_default_registry(config: dict[str, Any]) -> FunctionRegistry:
    """Build a registry from the ``skills`` section of the config."""
    manifest = SkillManifest.from_config(config)
    registry = FunctionRegistry()
    for skill_name, skill in manifest.skills.items():
        for function_name, entry in skill.functions.items():
            registry.register(
                skill_name,
                function_name,
                description=entry.description,
                parameters=entry.parameters,
                enabled=skill.enabled,
            )
    logger.debug("Loaded %d skill(s) from manifest", len(manifest.skills))
    return registry
