from __future__ import annotations

import re

from .types import Detector, DetectorAction

UUID_RE = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.IGNORECASE
)


def lowercase_uuids(text: str) -> str:
    return UUID_RE.sub(lambda m: m.group(0).lower(), text)


def uppercase_uuids(text: str) -> str:
    return UUID_RE.sub(lambda m: m.group(0).upper(), text)


def strip_uuid_hyphens(text: str) -> str:
    return UUID_RE.sub(lambda m: m.group(0).replace("-", ""), text)


uuid_detector = Detector(
    id="uuid",
    priority=5,
    detect=lambda text: UUID_RE.search(text) is not None,
    toast_message="UUID detected",
    actions=(
        DetectorAction(id="normalize-uuid", label="Lowercase", execute=lowercase_uuids),
        DetectorAction(id="uppercase-uuid", label="Uppercase", execute=uppercase_uuids),
        DetectorAction(id="strip-hyphens", label="Strip Hyphens", execute=strip_uuid_hyphens),
    ),
)
