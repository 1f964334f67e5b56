"""Configuration loading and logging bootstrap."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

DEFAULT_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML from file, returning empty mapping when missing."""
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge dictionaries."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_effective_config(root: Path, skills_path: Path | None = None) -> dict[str, Any]:
    """Load and merge parser settings with the skill manifest.

    ``skills_path`` replaces ``config/skills.yaml`` when given.
    """
    config_dir = root / "config"
    default_cfg = load_yaml(config_dir / "default.yaml")
    skills_cfg = load_yaml(skills_path or config_dir / "skills.yaml")
    return merge_dicts(default_cfg, {"skills": skills_cfg.get("skills", {})})


def configure_logging(config: dict[str, Any]) -> None:
    """Apply the ``logging`` config section to the root logger."""
    logging_cfg = config.get("logging", {})
    level = str(logging_cfg.get("level", "WARNING")).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format=str(logging_cfg.get("format", DEFAULT_LOG_FORMAT)),
    )
