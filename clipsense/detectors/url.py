from __future__ import annotations

import re
from urllib.parse import SplitResult, parse_qsl, quote, unquote, urlencode, urlsplit

from .types import Detector, DetectorAction

URL_RE = re.compile(r"https?://[^\s<>\"{}|\\^`\[\]]+")


def extract_url(text: str) -> str | None:
    match = URL_RE.search(text)
    return match.group(0) if match else None


def split_url(url: str) -> SplitResult | None:
    """Split ``url``, or None when the host or port does not parse."""
    try:
        parts = urlsplit(url)
        # .port raises on an out-of-range or non-numeric port
        parts.port
    except ValueError:
        return None
    if not parts.hostname:
        return None
    return parts


def is_url(text: str) -> bool:
    url = extract_url(text)
    return url is not None and split_url(url) is not None


def parse_url(text: str) -> str:
    url = extract_url(text)
    parts = split_url(url) if url else None
    if parts is None:
        return text

    lines = [f"Protocol: {parts.scheme}", f"Host: {parts.hostname}"]
    if parts.port is not None:
        lines.append(f"Port: {parts.port}")
    if parts.path and parts.path != "/":
        lines.append(f"Path: {parts.path}")
    if parts.query:
        lines.append("Query Parameters:")
        for key, value in parse_qsl(parts.query, keep_blank_values=True):
            lines.append(f"  - {key}: {value}")
    if parts.fragment:
        lines.append(f"Fragment: {parts.fragment}")
    lines.append(f"Full URL: {parts.geturl()}")
    return "\n".join(lines)


def decode_url(text: str) -> str:
    return unquote(text)


def encode_url(text: str) -> str:
    """Re-encode the query string of the URL in place; bare text is fully quoted."""
    url = extract_url(text)
    parts = split_url(url) if url else None
    if parts is None:
        return quote(text, safe="")
    query = urlencode(parse_qsl(parts.query, keep_blank_values=True))
    return text.replace(url, parts._replace(query=query).geturl())


def to_markdown_link(text: str) -> str:
    url = extract_url(text)
    if url is None:
        return text
    parts = split_url(url)
    if parts is None:
        return f"[link]({url})"
    return text.replace(url, f"[{parts.hostname}]({url})")


def _toast(text: str) -> str:
    url = extract_url(text)
    parts = split_url(url) if url else None
    return f"URL detected ({parts.hostname})" if parts else "URL detected"


url_detector = Detector(
    id="url",
    priority=16,
    detect=is_url,
    toast_message="URL detected",
    get_toast_message=_toast,
    actions=(
        DetectorAction(id="parse-url", label="Parse", execute=parse_url),
        DetectorAction(id="decode-url", label="Decode", execute=decode_url),
        DetectorAction(id="encode-url", label="Encode", execute=encode_url),
        DetectorAction(id="to-markdown-link", label="To Markdown", execute=to_markdown_link),
    ),
)
