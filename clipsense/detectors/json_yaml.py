from __future__ import annotations

from collections.abc import Callable
import json
import re
from typing import Any

from . import common
from .types import ActionOutput, ActionResult, Detector, DetectorAction

YAML_LINE_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*:\s*.+")


def looks_like_json(text: str) -> bool:
    trimmed = text.strip()
    return (trimmed.startswith("{") and trimmed.endswith("}")) or (
        trimmed.startswith("[") and trimmed.endswith("]")
    )


def try_parse_json(text: str) -> tuple[bool, Any]:
    """Return (ok, value) for bracket-delimited JSON text.

    Nesting deeper than the interpreter's recursion limit counts as invalid.
    """
    if not looks_like_json(text):
        return False, None
    try:
        return True, common.parse_json(text.strip())
    except (ValueError, RecursionError):
        return False, None


def is_valid_json(text: str) -> bool:
    return try_parse_json(text)[0]


def is_invalid_json(text: str) -> bool:
    return looks_like_json(text) and not is_valid_json(text)


def is_yaml(text: str) -> bool:
    lines = text.strip().split("\n")
    if len(lines) < 2:
        return False
    return sum(1 for line in lines if YAML_LINE_RE.match(line.strip())) >= 2


def is_json_or_yaml(text: str) -> bool:
    return looks_like_json(text) or is_yaml(text)


def sort_keys_deep(value: Any) -> Any:
    """Sort object keys at every nesting level; arrays keep their order."""
    if isinstance(value, list):
        return [sort_keys_deep(item) for item in value]
    if isinstance(value, dict):
        return {key: sort_keys_deep(value[key]) for key in sorted(value)}
    return value


def _rewrite(text: str, render: Callable[[Any], str]) -> str:
    ok, value = try_parse_json(text)
    if not ok:
        return text
    try:
        return render(value)
    except RecursionError:
        return text


def format_json(text: str) -> str:
    return _rewrite(text, common.dump_json)


def minify_json(text: str) -> str:
    return _rewrite(text, lambda value: common.dump_json(value, indent=None))


def sort_keys(text: str) -> str:
    return _rewrite(text, lambda value: common.dump_json(sort_keys_deep(value)))


def _error_position(text: str, exc: json.JSONDecodeError) -> tuple[int, int]:
    """Map an error in the stripped text back onto the original buffer."""
    leading = text[: len(text) - len(text.lstrip())]
    line = exc.lineno + leading.count("\n")
    column = exc.colno
    if exc.lineno == 1:
        column += len(leading) - (leading.rfind("\n") + 1)
    return line, column


def validate_json(text: str) -> ActionOutput:
    if not looks_like_json(text):
        return text
    try:
        common.parse_json(text.strip())
    except json.JSONDecodeError as exc:
        line, column = _error_position(text, exc)
        return ActionResult(
            text=text,
            validation_message=f"{exc.msg} (line {line}, column {column})",
            validation_type="error",
            error_line=line,
            error_column=column,
        )
    except ValueError as exc:
        return ActionResult(text=text, validation_message=str(exc), validation_type="error")
    except RecursionError:
        return ActionResult(
            text=text, validation_message="JSON nesting is too deep", validation_type="error"
        )
    return ActionResult(text=text, validation_message="Valid JSON", validation_type="success")


def _toast(text: str) -> str:
    if is_invalid_json(text):
        return "Invalid JSON detected"
    if is_valid_json(text):
        return "JSON detected"
    return "YAML detected"


def _language(text: str) -> str | None:
    if looks_like_json(text):
        return "json"
    if is_yaml(text):
        return "yaml"
    return None


json_yaml_detector = Detector(
    id="json-yaml",
    priority=4,
    detect=is_json_or_yaml,
    toast_message="JSON/YAML detected",
    get_toast_message=_toast,
    get_suggested_language=_language,
    actions=(
        DetectorAction(id="format-json", label="Format", execute=format_json),
        DetectorAction(id="minify-json", label="Minify", execute=minify_json),
        DetectorAction(id="sort-keys", label="Sort Keys", execute=sort_keys),
        DetectorAction(id="validate-json", label="Validate", execute=validate_json),
    ),
)
