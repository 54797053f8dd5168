"""Load optional CLI configuration from `.task_engine/config.yaml`."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import yaml

from .constants import (
    CONFIG_FILE,
    DEFAULT_DUE_SOON_DAYS,
    DEFAULT_LOG_LEVEL,
    STATE_DIR_NAME,
    VALID_LOG_LEVELS,
)
from .task_engine import SortingStrategy, ValidationError


def default_config_path(project_dir: Path) -> Path:
    return project_dir.resolve() / STATE_DIR_NAME / CONFIG_FILE


def load_engine_config(path: Path) -> tuple[dict[str, Any], str | None]:
    """Load the optional config file.

    Args:
        path: Location of the YAML config file.

    Returns:
        A tuple of `(config, error_message)`. If the file is missing, returns `({}, None)`.
    """
    if not path.exists():
        return {}, None
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except OSError as exc:
        return {}, f"{path.name}: {exc.__class__.__name__}: {exc}"
    except yaml.YAMLError as exc:
        return {}, f"{path.name}: YAMLError: {exc}"
    if data is None:
        return {}, None
    if not isinstance(data, dict):
        return {}, f"{path.name}: expected mapping, got {type(data).__name__}"
    return data, None


def get_default_strategy(config: dict[str, Any]) -> Optional[SortingStrategy]:
    """Extract the initial sorting strategy.

    Returns:
        The configured strategy, or None if not set or not recognised.
    """
    raw = config.get("strategy")
    if raw is None:
        return None
    try:
        return SortingStrategy.parse(raw)
    except ValidationError:
        return None


def get_due_soon_days(config: dict[str, Any]) -> int:
    """Window used by the statistics view for "due soon" tasks."""
    raw = config.get("due_soon_days")
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
        return DEFAULT_DUE_SOON_DAYS
    return raw


def get_log_level(config: dict[str, Any]) -> str:
    raw = config.get("log_level")
    if isinstance(raw, str) and raw.upper() in VALID_LOG_LEVELS:
        return raw.upper()
    return DEFAULT_LOG_LEVEL
