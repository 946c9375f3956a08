from __future__ import annotations

import base64
import binascii
import re

from . import common
from .types import Detector, DetectorAction

BASE64_LINE_RE = re.compile(r"^[A-Za-z0-9+/]{20,}={0,2}$", re.MULTILINE)


def decode_base64(value: str) -> str | None:
    """Decode a base64 run to UTF-8 text, or None when it is not decodable."""
    padded = value + "=" * (-len(value) % 4)
    try:
        raw = base64.b64decode(padded, validate=True)
        return raw.decode("utf-8")
    except (binascii.Error, ValueError):
        return None


def has_base64(text: str) -> bool:
    match = BASE64_LINE_RE.search(text)
    if not match:
        return False
    return decode_base64(match.group(0)) is not None


def decode_in_place(text: str) -> str:
    def _decode(match: re.Match[str]) -> str:
        decoded = decode_base64(match.group(0))
        return match.group(0) if decoded is None else decoded

    return BASE64_LINE_RE.sub(_decode, text)


def encode_text(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_pretty_json(text: str) -> str:
    def _decode(match: re.Match[str]) -> str:
        decoded = decode_base64(match.group(0))
        if decoded is None:
            return match.group(0)
        try:
            return common.dump_json(common.parse_json(decoded))
        except (ValueError, RecursionError):
            return decoded

    return BASE64_LINE_RE.sub(_decode, text)


base64_detector = Detector(
    id="base64",
    priority=9,
    detect=has_base64,
    toast_message="Base64 content detected",
    actions=(
        DetectorAction(id="decode-base64", label="Decode", execute=decode_in_place),
        DetectorAction(id="encode-base64", label="Encode", execute=encode_text),
        DetectorAction(
            id="decode-pretty-json", label="Decode + Format JSON", execute=decode_pretty_json
        ),
    ),
)
