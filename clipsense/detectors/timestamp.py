from __future__ import annotations

from datetime import datetime, timezone
import re

from . import common
from .types import Detector, DetectorAction

EPOCH_RE = re.compile(r"\b(\d{10}|\d{13})\b")
ISO_RE = re.compile(
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:Z|[+-]\d{2}:?\d{2})?"
)

MIN_YEAR = 2000
MAX_YEAR = 2100


def epoch_to_datetime(value: str) -> datetime | None:
    """Seconds (10 digits) or milliseconds (13 digits) since the epoch."""
    seconds = int(value) / 1000 if len(value) == 13 else int(value)
    try:
        moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None
    if not MIN_YEAR <= moment.year <= MAX_YEAR:
        return None
    return moment


def parse_iso(value: str) -> datetime | None:
    """Parse an ISO-8601 datetime; naive values are taken as local time."""
    try:
        moment = datetime.fromisoformat(value)
        if moment.tzinfo is None:
            moment = moment.astimezone()
        # Both renderings must stay inside datetime's year range
        moment.astimezone(timezone.utc)
        moment.astimezone()
    except (OverflowError, OSError, ValueError):
        return None
    return moment


def has_timestamp(text: str) -> bool:
    if ISO_RE.search(text):
        return True
    match = EPOCH_RE.search(text)
    return bool(match) and epoch_to_datetime(match.group(1)) is not None


def _convert(text: str, render) -> str:
    def _epoch(match: re.Match[str]) -> str:
        moment = epoch_to_datetime(match.group(0))
        return match.group(0) if moment is None else render(match.group(0), moment)

    def _iso(match: re.Match[str]) -> str:
        moment = parse_iso(match.group(0))
        return match.group(0) if moment is None else render(match.group(0), moment)

    # ISO first: rendered epochs are ISO-shaped and must not be converted twice
    result = ISO_RE.sub(_iso, text)
    return _replace_outside(result, EPOCH_RE, _epoch, ISO_RE)


def _replace_outside(text: str, pattern: re.Pattern[str], repl, protected: re.Pattern[str]) -> str:
    """Apply ``pattern.sub`` only to the spans not matched by ``protected``."""
    pieces: list[str] = []
    last = 0
    for match in protected.finditer(text):
        pieces.append(pattern.sub(repl, text[last:match.start()]))
        pieces.append(match.group(0))
        last = match.end()
    pieces.append(pattern.sub(repl, text[last:]))
    return "".join(pieces)


def to_local(text: str) -> str:
    return _convert(text, lambda _raw, moment: common.format_local(moment))


def to_utc(text: str) -> str:
    return _convert(text, lambda _raw, moment: common.iso_utc(moment))


def append_relative_time(text: str) -> str:
    return _convert(text, lambda raw, moment: f"{raw} ({common.relative_time(moment)})")


timestamp_detector = Detector(
    id="timestamp",
    priority=14,
    detect=has_timestamp,
    toast_message="Timestamp detected",
    actions=(
        DetectorAction(id="to-local", label="To Local", execute=to_local),
        DetectorAction(id="to-utc", label="To UTC", execute=to_utc),
        DetectorAction(id="relative-time", label="Relative", execute=append_relative_time),
    ),
)
