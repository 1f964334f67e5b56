"""Skill manifest models loaded from ``config/skills.yaml``."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class FunctionEntry(BaseModel):
    """A function declared by a skill."""

    description: str = ""
    parameters: list[str] = Field(default_factory=list)


class SkillEntry(BaseModel):
    """A named group of functions."""

    enabled: bool = True
    description: str = ""
    functions: dict[str, FunctionEntry] = Field(default_factory=dict)


class SkillManifest(BaseModel):
    """All skills known to the host application."""

    skills: dict[str, SkillEntry] = Field(default_factory=dict)

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> SkillManifest:
        skills = config.get("skills") or {}
        if not isinstance(skills, dict):
            raise ValueError("Config section 'skills' must be a mapping.")
        return cls.model_validate({"skills": skills})
