"""Project configuration for the stache command line.

Settings live in `stache.yaml`, found in the working directory or one of
its parents:

    templates: templates      # partial directory, relative to the file
    extension: mustache       # template file extension
    strict: false             # fail on templates that do not parse
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from stache.exceptions import ConfigError

CONFIG_FILENAME = "stache.yaml"


class StacheConfig(BaseModel):
    """Contents of `stache.yaml`."""

    model_config = {"extra": "forbid"}

    templates: Optional[Path] = Field(
        default=None, description="Directory of templates usable as partials"
    )
    extension: str = Field(default="mustache", description="Template file extension")
    strict: bool = Field(
        default=False, description="Raise on templates that fail to parse"
    )


def find_config_file(start: Optional[Path] = None) -> Optional[Path]:
    """Find stache.yaml in `start` (default: cwd) or its parents."""
    cwd = start or Path.cwd()
    for parent in [cwd] + list(cwd.parents):
        candidate = parent / CONFIG_FILENAME
        if candidate.exists():
            return candidate
    return None


def load_config(path: Path) -> StacheConfig:
    """Load stache.yaml from path.

    A relative `templates` directory is resolved against the directory
    holding the config file.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")

    try:
        config = StacheConfig(**data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {path}: {exc}") from exc

    if config.templates is not None and not config.templates.is_absolute():
        config.templates = path.parent / config.templates
    return config
