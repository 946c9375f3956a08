"""
Secret masking for arbitrary text.

Partially masks credentials in place (keeping a short prefix/suffix so the
value stays recognizable) while leaving the surrounding text untouched.
Shared by the secrets and env-file detectors.
"""

from __future__ import annotations

import re

MASK_CHAR = "*"

PEM_BLOCK_RE = re.compile(
    r"(-----BEGIN [A-Z ]+-----\n)([\s\S]*?)(\n-----END [A-Z ]+-----)"
)
CONNECTION_STRING_RE = re.compile(
    r"\b((?:postgres|mysql|mongodb|redis|amqp|mssql)(?:\+\w+)?://[^:/\s]+:)(\S+)",
    re.IGNORECASE,
)
JWT_RE = re.compile(r"\b(eyJ[A-Za-z0-9_-]+)\.(eyJ[A-Za-z0-9_-]+)\.([A-Za-z0-9_-]+)\b")
BEARER_RE = re.compile(
    r"((?:Authorization:\s*Bearer\s+|bearer\s+))([A-Za-z0-9\-_.=+/]{8,})",
    re.IGNORECASE,
)

# (pattern, prefix chars kept, suffix chars kept)
PREFIXED_KEY_PATTERNS: list[tuple[re.Pattern[str], int, int]] = [
    (re.compile(r"(sk_live_)([A-Za-z0-9]{8,})"), 4, 4),
    (re.compile(r"(rk_live_)([A-Za-z0-9]{8,})"), 4, 4),
    (re.compile(r"(ghp_)([A-Za-z0-9]{8,})"), 4, 4),
    (re.compile(r"(github_pat_)([A-Za-z0-9_]{8,})"), 4, 4),
    (re.compile(r"(sk-)([A-Za-z0-9]{8,})"), 4, 4),
    (re.compile(r"((?:anon_|service_role_))([A-Za-z0-9\-_.]{8,})"), 4, 4),
    (re.compile(r"((?:api_key|apiKey)=)([^\s&\"']{8,})"), 4, 3),
]

SECRET_ASSIGNMENT_RE = re.compile(
    r"((?:^|[\s,;])(?:[A-Z_]*(?:SECRET|PASSWORD|PASSWD|PWD|TOKEN|CREDENTIAL|AUTH_[A-Z_]+"
    r"|[A-Z_]+_AUTH|PRIVATE[_.]?KEY|ACCESS[_.]?KEY|API[_.]?KEY|APP[_.]?KEY|MASTER[_.]?KEY"
    r"|ENCRYPTION[_.]?KEY|SIGNING[_.]?KEY|CLIENT[_.]?SECRET|SESSION[_.]?SECRET|JWT[_.]?SECRET"
    r"|DB[_.]?PASS|DATABASE[_.]?PASSWORD)[A-Z_]*)\s*[=:]\s*)([^\s\"',;]{4,})",
    re.IGNORECASE | re.MULTILINE,
)
ALREADY_MASKED_RE = re.compile(r"\*{3,}")
NON_SECRET_VALUE_RE = re.compile(r"^(?:Bearer|Basic|true|false|null|none)$", re.IGNORECASE)

HEX_RUN_RE = re.compile(r"\b([a-f0-9]{32,128})\b", re.IGNORECASE)
HASH_LENGTHS = {32, 40, 64, 128}

QUOTED_RUN_RE = re.compile(
    r"(?<=[\"'`])([A-Za-z0-9!@#$%^&*()_+\-=\[\]{};:,.<>?/\\|~]{24,})(?=[\"'`])"
)


def mask(value: str, prefix_len: int, suffix_len: int) -> str:
    """Mask the middle of ``value``, keeping ``prefix_len``/``suffix_len`` chars."""
    if len(value) <= prefix_len + suffix_len:
        return MASK_CHAR * len(value)
    suffix = value[-suffix_len:] if suffix_len > 0 else ""
    hidden = len(value) - prefix_len - suffix_len
    return value[:prefix_len] + MASK_CHAR * hidden + suffix


def is_high_entropy(value: str) -> bool:
    if len(value) < 24:
        return False
    return (
        any(c.isupper() for c in value)
        and any(c.islower() for c in value)
        and any(c.isdigit() for c in value)
        and any(not c.isalnum() for c in value)
    )


def _mask_connection_string(match: re.Match[str]) -> str:
    pre, rest = match.group(1), match.group(2)
    last_at = rest.rfind("@")
    if last_at == -1:
        return match.group(0)
    return f"{pre}{mask(rest[:last_at], 0, 0)}{rest[last_at:]}"


def _mask_bearer(match: re.Match[str]) -> str:
    prefix, token = match.group(1), match.group(2)
    # JWTs were already handled with payload-only masking
    if token.startswith("eyJ"):
        return match.group(0)
    return f"{prefix}{mask(token, 4, 4)}"


def _mask_assignment(match: re.Match[str]) -> str:
    prefix, value = match.group(1), match.group(2)
    if ALREADY_MASKED_RE.search(value) or NON_SECRET_VALUE_RE.match(value):
        return match.group(0)
    return f"{prefix}{mask(value, 4, 3)}"


def _mask_hex_run(match: re.Match[str]) -> str:
    value = match.group(0)
    if len(value) in HASH_LENGTHS or len(value) >= 48:
        return mask(value, 6, 4)
    return value


def _mask_quoted(match: re.Match[str]) -> str:
    value = match.group(0)
    return mask(value, 5, 4) if is_high_entropy(value) else value


def mask_secrets(text: str) -> str:
    """Return ``text`` with recognizable credentials partially masked."""
    result = PEM_BLOCK_RE.sub(lambda m: f"{m.group(1)}[REDACTED]{m.group(3)}", text)
    result = CONNECTION_STRING_RE.sub(_mask_connection_string, result)
    # JWT before bearer so bearer-wrapped JWTs keep header and signature
    result = JWT_RE.sub(
        lambda m: f"{m.group(1)}.{mask(m.group(2), 3, 3)}.{m.group(3)}", result
    )
    result = BEARER_RE.sub(_mask_bearer, result)

    for pattern, prefix_len, suffix_len in PREFIXED_KEY_PATTERNS:
        result = pattern.sub(
            lambda m, p=prefix_len, s=suffix_len: f"{m.group(1)}{mask(m.group(2), p, s)}",
            result,
        )

    result = SECRET_ASSIGNMENT_RE.sub(_mask_assignment, result)
    result = HEX_RUN_RE.sub(_mask_hex_run, result)
    result = QUOTED_RUN_RE.sub(_mask_quoted, result)
    return result
