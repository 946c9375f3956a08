"""
Markdown detection, a one-pass markdown -> HTML renderer, and inverse
helpers (link extraction, formatting stripping, heading outline).

The renderer is a fixed sequence of regex substitutions. Order matters:
headers run h6 -> h1 so shorter markers never eat longer ones, and images
run before links because image syntax is link syntax prefixed with "!".
"""

from __future__ import annotations

import re

from .types import Detector, DetectorAction

MARKDOWN_PATTERNS = [
    re.compile(r"^#{1,6}\s+\S", re.MULTILINE),      # headers
    re.compile(r"^\s*[-*+]\s+\S", re.MULTILINE),    # unordered lists
    re.compile(r"^\s*\d+\.\s+\S", re.MULTILINE),    # ordered lists
    re.compile(r"\[.+?\]\(.+?\)"),                  # links
    re.compile(r"!\[.*?\]\(.+?\)"),                 # images
    re.compile(r"```[\s\S]*?```"),                  # fenced code
    re.compile(r"^\s*>\s+\S", re.MULTILINE),        # blockquotes
    re.compile(r"\*\*[^*]+\*\*"),                   # bold
    re.compile(r"\*[^*]+\*"),                       # italic
    re.compile(r"__[^_]+__"),                       # bold (underscores)
    re.compile(r"_[^_]+_"),                         # italic (underscores)
    re.compile(r"`[^`]+`"),                         # inline code
    re.compile(r"^\s*[-*_]{3,}\s*$", re.MULTILINE), # horizontal rules
    re.compile(r"^\s*\|.+\|", re.MULTILINE),        # table rows
]
MIN_SIGNALS = 2

FENCED_CODE_RE = re.compile(r"```(\w*)\n([\s\S]*?)```")
HEADER_RES = [
    (level, re.compile(rf"^{'#' * level}\s+(.+)$", re.MULTILINE)) for level in range(6, 0, -1)
]
BOLD_STAR_RE = re.compile(r"\*\*([^*\n]+)\*\*")
BOLD_UNDERSCORE_RE = re.compile(r"__([^_\n]+)__")
ITALIC_STAR_RE = re.compile(r"\*(?!\s)([^*\n]+?)(?<!\s)\*")
ITALIC_UNDERSCORE_RE = re.compile(r"(?<!\w)_(?!\s)([^_\n]+?)(?<!\s)_(?!\w)")
INLINE_CODE_RE = re.compile(r"`([^`\n]+)`")
IMAGE_RE = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")
LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
BLOCKQUOTE_RE = re.compile(r"^&gt;\s+(.+)$", re.MULTILINE)
HR_RE = re.compile(r"^\s*[-*_]{3,}\s*$", re.MULTILINE)
UNORDERED_ITEM_RE = re.compile(r"^[-*+]\s+(.+)$", re.MULTILINE)
ORDERED_ITEM_RE = re.compile(r"^\d+\.\s+(.+)$", re.MULTILINE)
URL_RE = re.compile(r"https?://[^\s<>\"{}|\\^`\[\]]+")

_CODE_PLACEHOLDER = "\x00CODE{}\x00"
_CODE_PLACEHOLDER_RE = re.compile(r"\x00CODE(\d+)\x00")


def is_markdown(text: str) -> bool:
    return sum(1 for p in MARKDOWN_PATTERNS if p.search(text)) >= MIN_SIGNALS


def _escape_html(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def markdown_to_html(text: str) -> str:
    # NUL delimits code placeholders; like HTML parsers, render it as U+FFFD
    html = _escape_html(text.replace("\x00", "\ufffd"))

    # Fenced blocks are rendered now and parked so later steps leave them alone
    blocks: list[str] = []

    def _park(match: re.Match[str]) -> str:
        lang = match.group(1)
        attr = f' class="language-{lang}"' if lang else ""
        blocks.append(f"<pre><code{attr}>{match.group(2)}</code></pre>")
        return _CODE_PLACEHOLDER.format(len(blocks) - 1)

    html = FENCED_CODE_RE.sub(_park, html)

    for level, pattern in HEADER_RES:
        html = pattern.sub(rf"<h{level}>\1</h{level}>", html)

    html = BOLD_STAR_RE.sub(r"<strong>\1</strong>", html)
    html = BOLD_UNDERSCORE_RE.sub(r"<strong>\1</strong>", html)
    html = ITALIC_STAR_RE.sub(r"<em>\1</em>", html)
    html = ITALIC_UNDERSCORE_RE.sub(r"<em>\1</em>", html)
    html = INLINE_CODE_RE.sub(r"<code>\1</code>", html)
    html = IMAGE_RE.sub(r'<img src="\2" alt="\1">', html)
    html = LINK_RE.sub(r'<a href="\2">\1</a>', html)
    html = BLOCKQUOTE_RE.sub(r"<blockquote>\1</blockquote>", html)
    html = HR_RE.sub("<hr>", html)
    html = UNORDERED_ITEM_RE.sub(r"<li>\1</li>", html)
    html = ORDERED_ITEM_RE.sub(r"<li>\1</li>", html)

    wrapped = []
    for line in html.split("\n"):
        stripped = line.strip()
        if not stripped:
            wrapped.append("")
        elif stripped.startswith("<") or _CODE_PLACEHOLDER_RE.fullmatch(stripped):
            wrapped.append(line)
        else:
            wrapped.append(f"<p>{line}</p>")
    html = "\n".join(wrapped)

    return _CODE_PLACEHOLDER_RE.sub(lambda m: blocks[int(m.group(1))], html)


def extract_links(text: str) -> str:
    links = [f"{m.group(1)}: {m.group(2)}" for m in LINK_RE.finditer(text)]
    for match in URL_RE.finditer(LINK_RE.sub(" ", text)):
        url = match.group(0)
        if not any(url in link for link in links):
            links.append(url)
    return "\n".join(links) if links else "No links found"


def _unfence(match: re.Match[str]) -> str:
    return "\n".join(match.group(0).split("\n")[1:-1])


def strip_formatting(text: str) -> str:
    result = re.sub(r"```[\s\S]*?```", _unfence, text)
    result = re.sub(r"^#{1,6}\s+", "", result, flags=re.MULTILINE)
    result = BOLD_STAR_RE.sub(r"\1", result)
    result = BOLD_UNDERSCORE_RE.sub(r"\1", result)
    result = ITALIC_STAR_RE.sub(r"\1", result)
    result = ITALIC_UNDERSCORE_RE.sub(r"\1", result)
    result = INLINE_CODE_RE.sub(r"\1", result)
    result = IMAGE_RE.sub("", result)
    result = LINK_RE.sub(r"\1", result)
    result = re.sub(r"^>\s+", "", result, flags=re.MULTILINE)
    result = re.sub(r"^[-*+]\s+", "", result, flags=re.MULTILINE)
    result = re.sub(r"^\d+\.\s+", "", result, flags=re.MULTILINE)
    result = HR_RE.sub("", result)
    return result.strip()


def extract_headings(text: str) -> str:
    """Indented outline built from the document's headers."""
    headings = [
        f"{'  ' * (len(m.group(1)) - 1)}- {m.group(2)}"
        for m in re.finditer(r"^(#{1,6})\s+(.+)$", text, flags=re.MULTILINE)
    ]
    return "\n".join(headings) if headings else "No headings found"


markdown_detector = Detector(
    id="markdown",
    priority=15,
    detect=is_markdown,
    toast_message="Markdown detected",
    suggested_language="markdown",
    actions=(
        DetectorAction(id="md-to-html", label="To HTML", execute=markdown_to_html),
        DetectorAction(id="extract-links", label="Extract Links", execute=extract_links),
        DetectorAction(id="strip-formatting", label="Strip Formatting", execute=strip_formatting),
        DetectorAction(id="extract-headings", label="TOC", execute=extract_headings),
    ),
)
