from __future__ import annotations

import logging
from pathlib import Path
import tomllib
from typing import Any

from clipsense import __version__

CLIPSENSE_VERSION = __version__
CONFIG_FILENAME = "clipsense.toml"

logger = logging.getLogger("clipsense.config")


def find_project_root(start_path: Path | None = None) -> Path:
    """
    Find the project root by looking for clipsense.toml or a .git/ directory.
    """
    if start_path is None:
        start_path = Path(".")
    current = start_path.resolve()
    for parent in [current, *current.parents]:
        if (parent / CONFIG_FILENAME).is_file():
            return parent
        if (parent / ".git").is_dir():
            return parent

    # No marker found: settings fall back to defaults
    return current


def load_config(project_root: Path | None = None) -> dict[str, Any]:
    """
    Load clipsense.toml from the project root.
    """
    if project_root is None:
        project_root = find_project_root()

    config_path = project_root / CONFIG_FILENAME
    if not config_path.exists():
        return {}

    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning("ignoring unreadable %s: %s", config_path, exc)
        return {}
