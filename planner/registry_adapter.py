"""Read-only function lookup consumed by the plan parser."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class FunctionRegistryAdapter(Protocol):
    """Answers whether ``skill_name.name`` is a callable function.

    Lookups are case-sensitive. The parser queries once per step and never
    invokes the function.
    """

    def exists(self, skill_name: str, name: str) -> bool:
        ...
