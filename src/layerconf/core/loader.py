"""Layout loader.

Loads the :class:`LayoutConfigModel` describing which files make up the
configuration layers from a ``layerconf.yml`` file.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .models import LayoutConfigModel

logger = logging.getLogger(__name__)

__all__ = ["load_layout_config", "LAYOUT_ENV_VAR", "DEFAULT_LAYOUT_FILENAME"]

LAYOUT_ENV_VAR = "LAYERCONF_LAYOUT"
DEFAULT_LAYOUT_FILENAME = "layerconf.yml"


def load_layout_config(config_path: Path | None = None, legacy: bool = False) -> LayoutConfigModel:
    """Load the file layout from a YAML file.

    Args:
        config_path: Optional path to the layout file.
                    If not provided, looks for:
                    1. LAYERCONF_LAYOUT environment variable
                    2. ./layerconf.yml
        legacy: Start from the legacy ``configuration*.properties`` naming
                instead of the default one

    Returns:
        LayoutConfigModel with the layout settings

    Raises:
        FileNotFoundError: If an explicitly requested layout file doesn't exist
        ValueError: If the layout file is invalid
    """
    base: dict[str, Any] = (
        LayoutConfigModel.legacy().model_dump() if legacy else LayoutConfigModel().model_dump()
    )

    if config_path is None:
        env_path = os.environ.get(LAYOUT_ENV_VAR)
        if env_path:
            config_path = Path(env_path)
        else:
            candidate = Path.cwd() / DEFAULT_LAYOUT_FILENAME
            if not candidate.exists():
                logger.debug("No layout file found, using default layout")
                return LayoutConfigModel.model_validate(base)
            config_path = candidate

    if not config_path.exists():
        raise FileNotFoundError(f"Layout file not found at {config_path}")

    logger.debug(f"Loading layout from: {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            raw_config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ValueError(f"Failed to parse YAML layout file {config_path}: {e}") from e

    if not raw_config:
        logger.info(f"Empty layout file {config_path}, using default layout")
        return LayoutConfigModel.model_validate(base)

    if not isinstance(raw_config, dict):
        raise ValueError(f"Layout file {config_path} must contain a mapping")

    section = raw_config.get("layout") or {}
    if not isinstance(section, dict):
        raise ValueError(f"'layout' section in {config_path} must be a mapping")

    try:
        layout = LayoutConfigModel.model_validate({**base, **section})
    except ValidationError as e:
        raise ValueError(f"Invalid layout config: {e}") from e

    logger.debug(f"Loaded layout: {layout}")
    return layout
