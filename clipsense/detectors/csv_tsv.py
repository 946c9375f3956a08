from __future__ import annotations

from . import common
from .types import Detector, DetectorAction

DELIMITERS = [",", "\t", "|", ";"]
DELIMITER_NAMES = {",": "comma", "\t": "tab", "|": "pipe", ";": "semicolon"}
SAMPLE_LINES = 5
MIN_LINES = 3


def _non_blank_lines(text: str) -> list[str]:
    return [line for line in text.strip().split("\n") if line.strip()]


def detect_delimiter(text: str) -> str | None:
    """First delimiter giving >1 and equal column counts over the sample lines."""
    lines = _non_blank_lines(text)
    if len(lines) < MIN_LINES:
        return None
    sample = lines[:SAMPLE_LINES]
    for delim in DELIMITERS:
        counts = [len(line.split(delim)) for line in sample]
        if counts[0] > 1 and all(c == counts[0] for c in counts):
            return delim
    return None


def parse_rows(text: str, delim: str) -> list[list[str]]:
    return [[cell.strip() for cell in line.split(delim)] for line in _non_blank_lines(text)]


def csv_to_json(text: str) -> str:
    delim = detect_delimiter(text)
    if delim is None:
        return text
    rows = parse_rows(text, delim)
    if len(rows) < 2:
        return text
    headers = rows[0]
    records = [
        {header: (row[i] if i < len(row) else "") for i, header in enumerate(headers)}
        for row in rows[1:]
    ]
    return common.dump_json(records)


def pretty_table(text: str) -> str:
    delim = detect_delimiter(text)
    if delim is None:
        return text
    rows = parse_rows(text, delim)
    width_count = max(len(row) for row in rows)
    widths = [
        max(len(row[i]) if i < len(row) else 0 for row in rows) for i in range(width_count)
    ]
    out: list[str] = []
    for index, row in enumerate(rows):
        out.append(" | ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)))
        if index == 0:
            out.append("-+-".join("-" * w for w in widths))
    return "\n".join(out)


def dedupe_rows(text: str) -> str:
    """Drop repeated lines, keeping the first occurrence."""
    return "\n".join(dict.fromkeys(text.strip().split("\n")))


def _toast(text: str) -> str:
    delim = detect_delimiter(text)
    if delim is None:
        return "CSV/TSV data detected"
    kind = "TSV" if delim == "\t" else "CSV"
    return f"{kind} data detected ({DELIMITER_NAMES[delim]}-separated)"


csv_tsv_detector = Detector(
    id="csv-tsv",
    priority=10,
    detect=lambda text: detect_delimiter(text) is not None,
    toast_message="CSV/TSV data detected",
    get_toast_message=_toast,
    actions=(
        DetectorAction(id="csv-to-json", label="To JSON", execute=csv_to_json),
        DetectorAction(id="csv-pretty-table", label="Pretty Table", execute=pretty_table),
        DetectorAction(id="csv-dedup", label="Dedup Rows", execute=dedupe_rows),
    ),
)
