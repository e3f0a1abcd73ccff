"""TOML loader for TerrainConfig.

Example file::

    resolution = 0.01
    resolutionMode = "degrees"      # or resolution_mode
    longitudeCorrection = false
    elevationScale = 0.01
    resampleStrategy = "nearest"

    [bounds]
    north = 35.397
    south = 35.33
    east = 138.78
    west = 138.69
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import tomlkit
from pydantic import ValidationError
from tomlkit.exceptions import ParseError

from domain.terrain.config import TerrainConfig
from domain.terrain.errors import InvalidBoundsError, InvalidConfigError

logger = logging.getLogger(__name__)


def config_from_mapping(data: Mapping[str, Any]) -> TerrainConfig:
    """Validate a plain mapping into a TerrainConfig.

    Raises:
        InvalidBoundsError: If the ``bounds`` table is missing or invalid
        InvalidConfigError: For any other validation problem
    """
    try:
        return TerrainConfig.model_validate(dict(data))
    except ValidationError as e:
        if any(err["loc"] and err["loc"][0] == "bounds" for err in e.errors()):
            raise InvalidBoundsError(f"Invalid bounds: {e}") from e
        raise InvalidConfigError(f"Invalid terrain config: {e}") from e


def load_config(file_path: Path | str) -> TerrainConfig:
    """Load and validate a TOML terrain configuration file."""
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(str(path))

    try:
        document = tomlkit.parse(path.read_text(encoding="utf-8"))
    except ParseError as e:
        raise InvalidConfigError(f"{path.name}: not valid TOML ({e})") from e

    config = config_from_mapping(document.unwrap())
    logger.debug(
        "Config %s: resolution=%s %s, strategy=%s",
        path.name,
        config.resolution,
        config.resolution_mode.value,
        config.resample_strategy.value,
    )
    return config
