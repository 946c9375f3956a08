from __future__ import annotations

import re

from clipsense.masking import mask_secrets

from .types import Detector, DetectorAction

SECRET_PATTERNS = [
    re.compile(r"-----BEGIN [A-Z ]+-----"),
    re.compile(
        r"(?:postgres|mysql|mongodb|redis|amqp|mssql)(?:\+\w+)?://[^:/\s]+:[^\s]+@",
        re.IGNORECASE,
    ),
    re.compile(
        r"(?:Authorization:\s*Bearer\s+|bearer\s+)[A-Za-z0-9\-_.=+/]{8,}", re.IGNORECASE
    ),
    re.compile(r"(?:sk_live_|rk_live_|ghp_|github_pat_|sk-)[A-Za-z0-9_]{8,}"),
    re.compile(
        r"(?:SECRET|PASSWORD|TOKEN|API[_.]?KEY|PRIVATE[_.]?KEY|ACCESS[_.]?KEY)\s*[=:]\s*[^\s\"',;]{4,}",
        re.IGNORECASE,
    ),
]

REDACT_PEM_RE = re.compile(r"(-----BEGIN [A-Z ]+-----\n)([\s\S]*?)(\n-----END [A-Z ]+-----)")
REDACT_ASSIGNMENT_RE = re.compile(
    r"((?:SECRET|PASSWORD|TOKEN|API[_.]?KEY|PRIVATE[_.]?KEY|ACCESS[_.]?KEY)\s*[=:]\s*)[^\s\"',;]{4,}",
    re.IGNORECASE,
)
REDACT_VENDOR_RE = re.compile(r"((?:sk_live_|rk_live_|ghp_|github_pat_|sk-))[A-Za-z0-9_]{8,}")
REDACT_JWT_RE = re.compile(r"\beyJ[A-Za-z0-9_-]+\.eyJ[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\b")

REDACTED = "[REDACTED]"


def has_secret(text: str) -> bool:
    return any(p.search(text) for p in SECRET_PATTERNS)


def redact_secrets(text: str) -> str:
    """Replace secret values with [REDACTED], keeping keys and delimiters."""
    result = REDACT_PEM_RE.sub(rf"\1{REDACTED}\3", text)
    result = REDACT_ASSIGNMENT_RE.sub(rf"\1{REDACTED}", result)
    result = REDACT_VENDOR_RE.sub(rf"\1{REDACTED}", result)
    result = REDACT_JWT_RE.sub("[REDACTED_JWT]", result)
    return result


secrets_detector = Detector(
    id="secrets",
    priority=2,
    detect=has_secret,
    toast_message="Secrets or tokens detected",
    actions=(
        DetectorAction(id="mask-secrets", label="Mask", execute=mask_secrets),
        DetectorAction(id="redact-secrets", label="Redact", execute=redact_secrets),
    ),
)
