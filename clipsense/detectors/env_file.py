from __future__ import annotations

import re

from clipsense.masking import mask_secrets

from . import common
from .types import Detector, DetectorAction

ENV_LINE_RE = re.compile(r"^[A-Z_][A-Z0-9_]*=.+")


def _is_comment_or_blank(line: str) -> bool:
    stripped = line.strip()
    return not stripped or stripped.startswith("#")


def is_env_file(text: str) -> bool:
    lines = [l for l in text.strip().split("\n") if not _is_comment_or_blank(l)]
    env_lines = [l for l in lines if ENV_LINE_RE.match(l)]
    return len(env_lines) >= 2 and len(env_lines) / len(lines) > 0.5


def sort_env_keys(text: str) -> str:
    """Sort entries alphabetically; comments and blank lines stay on top."""
    pinned: list[str] = []
    entries: list[str] = []
    for line in text.strip().split("\n"):
        (pinned if _is_comment_or_blank(line) else entries).append(line)
    entries.sort()
    return "\n".join(pinned + entries)


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def env_to_json(text: str) -> str:
    data: dict[str, str] = {}
    for line in text.strip().split("\n"):
        stripped = line.strip()
        if _is_comment_or_blank(stripped):
            continue
        key, sep, value = stripped.partition("=")
        if sep and key:
            data[key] = _unquote(value)
    return common.dump_json(data)


env_file_detector = Detector(
    id="env-file",
    priority=6,
    detect=is_env_file,
    toast_message=".env file detected",
    actions=(
        DetectorAction(id="sort-env-keys", label="Sort Keys", execute=sort_env_keys),
        DetectorAction(id="mask-env-secrets", label="Mask Values", execute=mask_secrets),
        DetectorAction(id="env-to-json", label="To JSON", execute=env_to_json),
    ),
)
