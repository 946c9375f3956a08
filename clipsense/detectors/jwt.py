from __future__ import annotations

import base64
import binascii
from datetime import datetime, timezone
import math
import re
from typing import Any

from . import common
from .types import ActionOutput, ActionResult, Detector, DetectorAction

JWT_RE = re.compile(r"\beyJ[A-Za-z0-9_-]+\.eyJ[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\b")

STANDARD_CLAIMS = {
    "iss": "Issuer",
    "sub": "Subject",
    "aud": "Audience",
    "exp": "Expiration",
    "nbf": "Not Before",
    "iat": "Issued At",
    "jti": "JWT ID",
}
TIME_CLAIMS = {"exp", "iat", "nbf"}


def decode_segment(segment: str) -> Any | None:
    """Decode one base64url JWT segment into its JSON value."""
    standard = segment.replace("-", "+").replace("_", "/")
    padded = standard + "=" * (-len(standard) % 4)
    try:
        raw = base64.b64decode(padded, validate=True)
        return common.parse_json(raw.decode("utf-8"))
    except (binascii.Error, ValueError, RecursionError):
        return None


def extract_jwt(text: str) -> str | None:
    match = JWT_RE.search(text)
    return match.group(0) if match else None


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def _epoch(value: float) -> datetime | None:
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def format_expiration(exp: float) -> str:
    """'Expired 3d ago' or 'Expires in 2h' for an epoch-seconds claim."""
    delta = (common.now().timestamp() - exp) * 1000
    duration = common.format_duration(abs(delta))
    return f"Expired {duration} ago" if delta > 0 else f"Expires in {duration}"


def _payload(text: str) -> Any | None:
    token = extract_jwt(text)
    if token is None:
        return None
    return decode_segment(token.split(".")[1])


def decode_jwt(text: str) -> str:
    token = extract_jwt(text)
    if token is None:
        return text
    header, payload, signature = token.split(".")
    try:
        header_json = common.dump_json(decode_segment(header))
        payload_json = common.dump_json(decode_segment(payload))
    except RecursionError:
        return text
    return "\n".join(
        [
            "=== JWT Header ===",
            header_json,
            "",
            "=== JWT Payload ===",
            payload_json,
            "",
            "=== Signature ===",
            signature,
        ]
    )


def check_expiration(text: str) -> ActionOutput:
    if extract_jwt(text) is None:
        return text
    payload = _payload(text)
    if not isinstance(payload, dict):
        return ActionResult(
            text=text, validation_message="Invalid JWT payload", validation_type="error"
        )
    if "exp" not in payload:
        return ActionResult(
            text=text,
            validation_message="No expiration claim (exp) found",
            validation_type="error",
        )
    exp = payload["exp"]
    expires_at = _epoch(exp) if _is_number(exp) else None
    if expires_at is None:
        return ActionResult(
            text=text,
            validation_message=f"Expiration claim (exp) is not a valid timestamp: {exp!r}",
            validation_type="error",
        )
    expired = expires_at < common.now()
    return ActionResult(
        text=text,
        validation_message=f"{format_expiration(exp)} ({common.format_local(expires_at)})",
        validation_type="error" if expired else "success",
    )


def _claim_value(key: str, value: Any) -> str:
    if key in TIME_CLAIMS and _is_number(value):
        moment = _epoch(value)
        if moment is not None:
            return common.format_local(moment)
    if isinstance(value, (dict, list)):
        return common.dump_json(value, indent=None)
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def extract_claims(text: str) -> str:
    payload = _payload(text)
    if not isinstance(payload, dict):
        return text
    try:
        return "\n".join(
            f"{STANDARD_CLAIMS.get(key, key)}: {_claim_value(key, value)}"
            for key, value in payload.items()
        )
    except RecursionError:
        return text


def _toast(text: str) -> str:
    payload = _payload(text)
    if isinstance(payload, dict) and _is_number(payload.get("exp")):
        if _epoch(payload["exp"]) is not None:
            return f"JWT detected - {format_expiration(payload['exp'])}"
    return "JWT token detected"


jwt_detector = Detector(
    id="jwt",
    priority=1,
    detect=lambda text: JWT_RE.search(text) is not None,
    toast_message="JWT token detected",
    get_toast_message=_toast,
    actions=(
        DetectorAction(id="decode-jwt", label="Decode", execute=decode_jwt),
        DetectorAction(id="check-expiration", label="Check Expiry", execute=check_expiration),
        DetectorAction(id="extract-claims", label="Extract Claims", execute=extract_claims),
    ),
)
