from __future__ import annotations

import re

from .types import Detector, DetectorAction

UNIX_PATH_RE = re.compile(r"(?:^|\s)(/(?:[\w.-]+/)+[\w.-]+)", re.MULTILINE)
WIN_PATH_RE = re.compile(r"(?:^|\s)([A-Z]:\\(?:[\w.-]+\\)+[\w.-]+)", re.MULTILINE | re.IGNORECASE)


def has_path(text: str) -> bool:
    return UNIX_PATH_RE.search(text) is not None or WIN_PATH_RE.search(text) is not None


def to_unix_slashes(text: str) -> str:
    return text.replace("\\", "/")


def to_windows_slashes(text: str) -> str:
    return text.replace("/", "\\")


def extract_filenames(text: str) -> str:
    names = [m.group(1).rsplit("/", 1)[-1] for m in UNIX_PATH_RE.finditer(text)]
    names += [m.group(1).rsplit("\\", 1)[-1] for m in WIN_PATH_RE.finditer(text)]
    return "\n".join(names) if names else text


file_path_detector = Detector(
    id="file-path",
    priority=13,
    detect=has_path,
    toast_message="File paths detected",
    actions=(
        DetectorAction(id="to-unix-slashes", label="Unix Slashes", execute=to_unix_slashes),
        DetectorAction(
            id="to-windows-slashes", label="Windows Slashes", execute=to_windows_slashes
        ),
        DetectorAction(
            id="extract-filenames", label="Extract Filenames", execute=extract_filenames
        ),
    ),
)
