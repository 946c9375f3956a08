from __future__ import annotations

from dataclasses import dataclass, field
import re
from typing import Any

from . import common
from .types import Detector, DetectorAction

# At least one balanced tag pair or a self-closing tag
XML_TAG_RE = re.compile(
    r"<([a-zA-Z][a-zA-Z0-9-]*)[^>]*>[\s\S]*?</\1>|<([a-zA-Z][a-zA-Z0-9-]*)[^>]*/>"
)
HTML_DOCTYPE_RE = re.compile(r"<!DOCTYPE\s+html", re.IGNORECASE)
HTML_TAGS_RE = re.compile(
    r"<(?:html|head|body|div|span|p|a|img|script|style|link|meta|form|input|button)\b",
    re.IGNORECASE,
)
INLINE_CONTENT_RE = re.compile(r"<[^>]+>[^<]+</[^>]+>")

SCRIPT_RE = re.compile(r"<script[^>]*>[\s\S]*?</script>", re.IGNORECASE)
STYLE_RE = re.compile(r"<style[^>]*>[\s\S]*?</style>", re.IGNORECASE)
COMMENT_RE = re.compile(r"<!--[\s\S]*?-->")
ANY_TAG_RE = re.compile(r"<[^>]+>")

# HTML elements that never take a closing tag
VOID_TAGS = {
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "source", "track", "wbr",
}

TOKEN_RE = re.compile(
    r"<!--[\s\S]*?-->"
    r"|<\?[\s\S]*?\?>"
    r"|<![^>]*>"
    r"|<(?P<close>/)?(?P<tag>[a-zA-Z][\w:.-]*)(?P<attrs>[^>]*?)(?P<selfclose>/)?>"
)


def is_xml_or_html(text: str) -> bool:
    trimmed = text.strip()
    if HTML_DOCTYPE_RE.search(trimmed):
        return True
    if trimmed.startswith("<?xml"):
        return True
    return XML_TAG_RE.search(trimmed) is not None


def detect_markup_type(text: str) -> str:
    if HTML_DOCTYPE_RE.search(text):
        return "html"
    if text.strip().lower().startswith("<?xml"):
        return "xml"
    if HTML_TAGS_RE.search(text):
        return "html"
    return "xml"


def format_xml(text: str, indent_size: int = 2) -> str:
    """Re-indent markup one tag per line using a depth counter."""
    lines = re.sub(r">\s*<", ">\n<", text.strip()).split("\n")
    formatted: list[str] = []
    depth = 0
    for raw in lines:
        line = raw.strip()
        if not line:
            continue
        if line.startswith("</"):
            depth = max(0, depth - 1)
        formatted.append(" " * (depth * indent_size) + line)
        opens_element = (
            line.startswith("<")
            and not line.startswith(("</", "<?", "<!"))
            and not line.endswith("/>")
            and not INLINE_CONTENT_RE.search(line)
        )
        if opens_element:
            depth += 1
    return "\n".join(formatted)


def minify_xml(text: str) -> str:
    result = re.sub(r">\s+<", "><", text)
    result = re.sub(r"\s+", " ", result)
    result = re.sub(r">\s+", ">", result)
    result = re.sub(r"\s+<", "<", result)
    return result.strip()


def extract_text(text: str) -> str:
    result = SCRIPT_RE.sub("", text)
    result = STYLE_RE.sub("", result)
    result = COMMENT_RE.sub("", result)
    result = ANY_TAG_RE.sub("", result)
    return re.sub(r"\s+", " ", result).strip()


@dataclass
class _Element:
    tag: str
    children: list[_Element] = field(default_factory=list)
    text: list[str] = field(default_factory=list)


def _parse_elements(text: str) -> list[_Element]:
    """Tolerant tag-stack parse; unmatched closing tags are ignored."""
    root = _Element(tag="")
    stack = [root]
    last = 0
    for match in TOKEN_RE.finditer(text):
        stack[-1].text.append(text[last:match.start()])
        last = match.end()
        tag = match.group("tag")
        if tag is None:
            continue
        if match.group("close"):
            names = [el.tag for el in stack[1:]]
            if tag in names:
                while stack[-1].tag != tag:
                    stack.pop()
                stack.pop()
            continue
        element = _Element(tag=tag)
        stack[-1].children.append(element)
        if not match.group("selfclose") and tag.lower() not in VOID_TAGS:
            stack.append(element)
    stack[-1].text.append(text[last:])
    return root.children


def _element_value(element: _Element) -> Any:
    if not element.children:
        content = "".join(element.text).strip()
        return content or None
    return _group_children(element.children)


def _group_children(children: list[_Element]) -> dict[str, Any]:
    """Repeated sibling tags collapse into arrays."""
    grouped: dict[str, Any] = {}
    for child in children:
        value = _element_value(child)
        if child.tag not in grouped:
            grouped[child.tag] = value
        elif isinstance(grouped[child.tag], list):
            grouped[child.tag].append(value)
        else:
            grouped[child.tag] = [grouped[child.tag], value]
    return grouped


def xml_to_json(text: str) -> str:
    """Best-effort conversion of markup into nested JSON (attributes dropped).

    Markup nested past the recursion limit is returned unchanged.
    """
    try:
        return common.dump_json(_group_children(_parse_elements(text)))
    except RecursionError:
        return text


xml_html_detector = Detector(
    id="xml-html",
    priority=7,
    detect=is_xml_or_html,
    toast_message="XML/HTML detected",
    get_toast_message=lambda text: (
        "HTML detected" if detect_markup_type(text) == "html" else "XML detected"
    ),
    get_suggested_language=detect_markup_type,
    actions=(
        DetectorAction(id="format-xml", label="Format", execute=format_xml),
        DetectorAction(id="minify-xml", label="Minify", execute=minify_xml),
        DetectorAction(id="extract-text", label="Extract Text", execute=extract_text),
        DetectorAction(id="xml-to-json", label="To JSON", execute=xml_to_json),
    ),
)
