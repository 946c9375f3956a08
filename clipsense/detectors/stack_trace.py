from __future__ import annotations

import re

from .types import Detector, DetectorAction

STACK_PATTERNS = [
    re.compile(r"^\s+at\s+", re.MULTILINE),
    re.compile(r"Traceback \(most recent call last\)"),
    re.compile(r"^\w+Error:", re.MULTILINE),
    re.compile(r"^\w+Exception:", re.MULTILINE),
    re.compile(r"Exception in thread"),
    re.compile(r"panic:"),
    re.compile(r"goroutine \d+"),
]

ERROR_LINE_RE = re.compile(r"(?:Error|Exception|panic|FATAL|FAILED):", re.IGNORECASE)
ISSUE_ERROR_RE = re.compile(r"(?:Error|Exception|panic|FATAL):", re.IGNORECASE)
FRAME_RE = re.compile(r"^\s+at\s+|^\s+File\s+\"")

MAX_FRAMES_PER_RUN = 3
COLLAPSED_MARKER = "    ... (more frames collapsed)"


def is_stack_trace(text: str) -> bool:
    if text.count("\n") < 2:
        return False
    return any(p.search(text) for p in STACK_PATTERNS)


def extract_error_lines(text: str) -> str:
    lines = [line for line in text.split("\n") if ERROR_LINE_RE.search(line)]
    return "\n".join(lines) if lines else text


def collapse_frames(text: str) -> str:
    """Keep the first frames of every contiguous frame run."""
    result: list[str] = []
    run = 0
    for line in text.split("\n"):
        if not FRAME_RE.match(line):
            run = 0
            result.append(line)
            continue
        run += 1
        if run <= MAX_FRAMES_PER_RUN:
            result.append(line)
        elif run == MAX_FRAMES_PER_RUN + 1:
            result.append(COLLAPSED_MARKER)
    return "\n".join(result)


def issue_template(text: str) -> str:
    lines = text.split("\n")
    error_line = next((line for line in lines if ISSUE_ERROR_RE.search(line)), lines[0])
    return (
        "## Bug Report\n\n"
        f"**Error:**\n{error_line}\n\n"
        f"**Stack Trace:**\n```\n{text}\n```\n\n"
        "**Steps to Reproduce:**\n1. \n\n"
        "**Expected Behavior:**\n\n"
    )


stack_trace_detector = Detector(
    id="stack-trace",
    priority=12,
    detect=is_stack_trace,
    toast_message="Stack trace detected",
    actions=(
        DetectorAction(id="extract-error", label="Extract Error", execute=extract_error_lines),
        DetectorAction(id="collapse-frames", label="Collapse Frames", execute=collapse_frames),
        DetectorAction(id="github-issue", label="Issue Template", execute=issue_template),
    ),
)
