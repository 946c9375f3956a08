from __future__ import annotations

from datetime import datetime, timezone
import json
import math
from typing import Any

MINUTE_MS = 60_000
HOUR_MS = 3_600_000
DAY_MS = 86_400_000


def now() -> datetime:
    """Current UTC time. Tests patch this to pin relative-time output."""
    return datetime.now(timezone.utc)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_duration(abs_diff_ms: float) -> str:
    """Compact single-unit duration: 42s, 5m, 3h, 12d."""
    if abs_diff_ms < MINUTE_MS:
        return f"{round_half_up(abs_diff_ms / 1000)}s"
    if abs_diff_ms < HOUR_MS:
        return f"{round_half_up(abs_diff_ms / MINUTE_MS)}m"
    if abs_diff_ms < DAY_MS:
        return f"{round_half_up(abs_diff_ms / HOUR_MS)}h"
    return f"{round_half_up(abs_diff_ms / DAY_MS)}d"


def diff_ms(moment: datetime, reference: datetime | None = None) -> float:
    """Milliseconds from ``moment`` to ``reference`` (positive = past)."""
    ref = reference or now()
    return (ref - moment).total_seconds() * 1000


def relative_time(moment: datetime) -> str:
    """'5m ago' for past moments, 'in 5m' for future ones."""
    delta = diff_ms(moment)
    if delta < 0:
        return f"in {format_duration(abs(delta))}"
    return f"{format_duration(delta)} ago"


def format_local(moment: datetime) -> str:
    """Render an aware datetime in the local timezone."""
    return moment.astimezone().strftime("%Y-%m-%d %H:%M:%S %Z").strip()


def iso_utc(moment: datetime) -> str:
    """UTC ISO timestamp with millisecond precision and a Z suffix."""
    return (
        moment.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant: {name}")


def parse_json(text: str) -> Any:
    """Strict JSON parse: NaN/Infinity are rejected like in browsers."""
    return json.loads(text, parse_constant=_reject_constant)


def dump_json(value: Any, indent: int | None = 2) -> str:
    if indent is None:
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return json.dumps(value, ensure_ascii=False, indent=indent)
