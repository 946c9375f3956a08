from __future__ import annotations

import re

from .types import Detector, DetectorAction

CSS_PATTERNS = [
    re.compile(r"^\s*[.#][a-zA-Z][\w-]*\s*\{", re.MULTILINE),
    re.compile(r"^\s*@media\b", re.MULTILINE),
    re.compile(r"^\s*@import\b", re.MULTILINE),
    re.compile(r"^\s*@keyframes\b", re.MULTILINE),
    re.compile(r"^\s*@font-face\b", re.MULTILINE),
    re.compile(r":\s*\d+(?:px|rem|em|vh|vw|%)\s*;"),
    re.compile(
        r"\b(?:margin|padding|display|color|background|font-size|border|width|height)\s*:"
    ),
]

RULE_BLOCK_RE = re.compile(r"\{([^}]+)\}")
MIN_SIGNALS = 2


def is_css(text: str) -> bool:
    return sum(1 for p in CSS_PATTERNS if p.search(text)) >= MIN_SIGNALS


def _sort_block(match: re.Match[str]) -> str:
    lines = [line.strip() for line in match.group(1).split("\n")]
    lines = [line for line in lines if line]
    declarations = sorted(line for line in lines if ":" in line)
    others = [line for line in lines if ":" not in line]
    body = "\n".join(f"    {line}" for line in others + declarations)
    return f"{{\n{body}\n}}"


def sort_properties(text: str) -> str:
    """Sort declarations alphabetically inside every rule block."""
    return RULE_BLOCK_RE.sub(_sort_block, text)


css_detector = Detector(
    id="css",
    priority=3,
    detect=is_css,
    toast_message="CSS detected",
    suggested_language="css",
    actions=(
        DetectorAction(id="sort-css-properties", label="Sort Properties", execute=sort_properties),
    ),
)
