"""Shared utilities for the stache CLI"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any, Optional

import msgspec
import yaml
from rich.console import Console
from rich.logging import RichHandler

from stache.config import StacheConfig, find_config_file, load_config
from stache.exceptions import ConfigError

# stdout carries the rendered output only
console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the stache CLI.

    Log levels:
    - Normal: Only warnings/errors shown (skipped templates, bad lambdas)
    - Verbose (-v): INFO level - shows which library and context were loaded
    - Debug (STACHE_DEBUG=1): DEBUG level - shows every template and partial lookup
    """
    debug = bool(os.environ.get("STACHE_DEBUG"))
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console,
        show_time=verbose,
        show_path=debug,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("stache")
    logger.setLevel(level)
    logger.handlers = [handler]
    logger.propagate = False


def load_project_config() -> StacheConfig:
    """Load stache.yaml from cwd or parents, or defaults if there is none."""
    path = find_config_file()
    if path is None:
        return StacheConfig()
    return load_config(path)


def load_context(source: Optional[str]) -> Any:
    """Load the render context.

    `.json` files are decoded as JSON; any other file, and stdin (`-`, or
    no source with piped input), is read as YAML, which also accepts JSON.
    """
    if source is None and sys.stdin.isatty():
        return {}
    if source is None or source == "-":
        return parse_yaml(sys.stdin.read(), "<stdin>")

    path = Path(source)
    if not path.is_file():
        raise ConfigError(f"Context file not found: {path}")
    if path.suffix == ".json":
        try:
            return msgspec.json.decode(path.read_bytes())
        except msgspec.DecodeError as exc:
            raise ConfigError(f"Failed to parse {path}: {exc}") from exc
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    return parse_yaml(text, str(path))


def parse_yaml(source: str, name: str) -> Any:
    try:
        data = yaml.safe_load(source)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {name}: {exc}") from exc
    return {} if data is None else data
