"""Config loading utilities for idslicer."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from idslicer.core.models import ToolConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "idslicer.yaml"


def load_config_file(path: Path | None = None) -> dict[str, Any]:
    """Load the YAML configuration as a dict.

    With no *path*, ``idslicer.yaml`` in the working directory is used.
    Returns an empty dict if the file doesn't exist.
    """
    if path is None:
        path = Path.cwd() / CONFIG_FILENAME
    if not path.exists():
        logger.debug("No config found at %s; using defaults", path)
        return {}

    logger.info("Loading config from %s", path)
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        logger.warning("%s did not contain a mapping; using defaults", path)
        return {}

    return data


def make_tool_config(data: dict[str, Any]) -> ToolConfig:
    """Build a ToolConfig from configuration values.

    Only fields present in *data* override the defaults defined in
    :class:`ToolConfig`.
    """
    valid_fields = ToolConfig.model_fields
    filtered = {k: v for k, v in data.items() if k in valid_fields}

    if dropped := set(data) - set(filtered):
        logger.warning("Ignoring unknown config keys: %s", sorted(dropped))

    return ToolConfig(**filtered)


def load_tool_config(path: Path | None = None) -> ToolConfig:
    return make_tool_config(load_config_file(path))
