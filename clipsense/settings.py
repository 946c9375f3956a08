"""
Settings for suggestion surfacing.

Loads from the [suggestions] section of clipsense.toml, with environment
overrides for the host process. The detection core never reads these; they
only gate what the host shows.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Any

from .core import load_config

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

DEFAULT_DEBOUNCE_MS = 500


@dataclass(frozen=True)
class SuggestionSettings:
    """Flags the host consults before surfacing a detection result."""

    auto_detect_language: bool = True
    show_intelligent_suggestions: bool = True
    debounce_ms: int = DEFAULT_DEBOUNCE_MS


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return max(0, int(raw.strip()))
    except ValueError:
        return default


def _coerce_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
    return default


def get_suggestion_settings(project_root: Path | None = None) -> SuggestionSettings:
    """Load suggestion settings from clipsense.toml and the environment."""
    cfg = load_config(project_root)
    section = cfg.get("suggestions", {})
    if not isinstance(section, dict):
        section = {}

    auto_detect = _coerce_bool(section.get("auto_detect_language"), True)
    show = _coerce_bool(section.get("show_intelligent_suggestions"), True)
    debounce = section.get("debounce_ms", DEFAULT_DEBOUNCE_MS)
    if not isinstance(debounce, int) or isinstance(debounce, bool) or debounce < 0:
        debounce = DEFAULT_DEBOUNCE_MS

    return SuggestionSettings(
        auto_detect_language=_env_bool("CLIPSENSE_AUTO_DETECT_LANGUAGE", auto_detect),
        show_intelligent_suggestions=_env_bool(
            "CLIPSENSE_SHOW_INTELLIGENT_SUGGESTIONS", show
        ),
        debounce_ms=_env_int("CLIPSENSE_DEBOUNCE_MS", debounce),
    )
