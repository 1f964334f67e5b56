"""Import the methods of a Python object as a skill."""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any, TypeVar

from skills.function_registry import FunctionRegistry, FunctionView

F = TypeVar("F", bound=Callable[..., Any])

_MARKER = "__skill_function__"


def skill_function(name: str | None = None, description: str = "") -> Callable[[F], F]:
    """Mark a method for import; unmarked methods are skipped when any are marked."""

    def deco(fn: F) -> F:
        setattr(fn, _MARKER, {"name": name or fn.__name__, "description": description})
        return fn

    return deco


def import_native_skill(
    registry: FunctionRegistry, instance: object, skill_name: str
) -> list[FunctionView]:
    """Register the functions of ``instance`` under ``skill_name``.

    Methods decorated with ``skill_function`` are imported when present;
    otherwise every public method is.
    """
    members = [
        (attr, member)
        for attr, member in inspect.getmembers(instance, callable)
        if not attr.startswith("_")
    ]
    marked = [(attr, member) for attr, member in members if hasattr(member, _MARKER)]

    views: list[FunctionView] = []
    for attr, member in marked or members:
        meta = getattr(member, _MARKER, {})
        description = meta.get("description") or (inspect.getdoc(member) or "").split("\n")[0]
        views.append(
            registry.register(
                skill_name,
                meta.get("name", attr),
                member,
                description=description,
            )
        )
    return views
