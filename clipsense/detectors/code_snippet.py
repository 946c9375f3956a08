"""
Source-code snippet detection with a coarse language guess.

The guess only has to be good enough to pick a fence tag and an editor
mode; anything ambiguous falls back to the generic ``code``.
"""

from __future__ import annotations

import re

from .types import Detector, DetectorAction

CODE_PATTERNS = [
    re.compile(r"\bfunction\s+\w+\s*\("),
    re.compile(r"\bclass\s+\w+"),
    re.compile(r"\bimport\s+.*\bfrom\b"),
    re.compile(r"\bconst\s+\w+\s*="),
    re.compile(r"\bdef\s+\w+\s*\("),
    re.compile(r"\bpub\s+fn\s+\w+"),
    re.compile(r"\bfunc\s+\w+"),
    re.compile(r"\bpackage\s+\w+"),
    re.compile(
        r"\b(?:public|private|protected)\s+(?:static\s+)?(?:void|int|string|boolean)\s+\w+",
        re.IGNORECASE,
    ),
    re.compile(r"=>\s*\{"),
]

GENERIC_LANGUAGE = "code"

# (language, patterns that must all match); first hit wins
_LANGUAGE_RULES: list[tuple[str, list[list[re.Pattern[str]]]]] = [
    (
        "typescript",
        [
            [re.compile(r"\bimport\s+.*\bfrom\b")],
            [re.compile(r"\bconst\s+\w+\s*=")],
            [re.compile(r"=>\s*\{")],
        ],
    ),
    ("python", [[re.compile(r"\bdef\s+\w+\s*\(")]]),
    ("rust", [[re.compile(r"\bpub\s+fn\s+")], [re.compile(r"\blet\s+mut\s+")]]),
    ("go", [[re.compile(r"\bfunc\s+\w+"), re.compile(r"\bpackage\s+")]]),
    ("java", [[re.compile(r"\bpublic\s+(?:static\s+)?(?:void|int|String)\s+")]]),
]


def is_code(text: str) -> bool:
    return any(p.search(text) for p in CODE_PATTERNS)


def guess_language(text: str) -> str:
    for language, alternatives in _LANGUAGE_RULES:
        if any(all(p.search(text) for p in required) for required in alternatives):
            return language
    return GENERIC_LANGUAGE


def wrap_markdown(text: str, language: str | None = None) -> str:
    lang = language or guess_language(text)
    return f"```{lang}\n{text}\n```"


def code_actions(text: str) -> list[DetectorAction]:
    lang = guess_language(text)
    return [
        DetectorAction(
            id="wrap-markdown",
            label="Wrap in Markdown",
            execute=lambda t: wrap_markdown(t, lang),
        ),
        # The host switches its editor mode from the id; the text is untouched
        DetectorAction(
            id=f"switch-language:{lang}",
            label=f"Switch to {lang.upper()}",
            execute=lambda t: t,
        ),
    ]


def _suggested_language(text: str) -> str | None:
    lang = guess_language(text)
    return None if lang == GENERIC_LANGUAGE else lang


code_snippet_detector = Detector(
    id="code-snippet",
    priority=17,
    detect=is_code,
    toast_message="Code snippet detected",
    get_actions=code_actions,
    get_suggested_language=_suggested_language,
)
