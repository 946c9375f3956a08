"""
Fallback detector for text nothing else claimed.

Always matches. The offered actions are picked from the full catalogue by
looking at the text's casing and line shape, then topped up with general
utilities until ``MAX_ACTIONS`` are offered.
"""

from __future__ import annotations

import re

from .types import Detector, DetectorAction

MAX_ACTIONS = 5


def word_count(text: str) -> str:
    words = text.split()
    line_count = len(text.split("\n"))
    non_space = re.sub(r"\s", "", text)
    sentences = [s for s in re.split(r"[.!?]+", text) if s.strip()]
    paragraphs = [p for p in re.split(r"\n\s*\n", text) if p.strip()]
    return "\n".join(
        [
            f"Words: {len(words)}",
            f"Characters: {len(text)}",
            f"Characters (no spaces): {len(non_space)}",
            f"Lines: {line_count}",
            f"Sentences: {len(sentences)}",
            f"Paragraphs: {len(paragraphs)}",
        ]
    )


def to_title_case(text: str) -> str:
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), text)


def to_sentence_case(text: str) -> str:
    return re.sub(r"(^\s*\w|[.!?]\s+\w)", lambda m: m.group(0).upper(), text.lower())


def sort_lines(text: str) -> str:
    return "\n".join(sorted(text.split("\n"), key=str.casefold))


def sort_lines_reverse(text: str) -> str:
    return "\n".join(sorted(text.split("\n"), key=str.casefold, reverse=True))


def dedupe_lines(text: str) -> str:
    return "\n".join(dict.fromkeys(text.split("\n")))


def reverse_lines(text: str) -> str:
    return "\n".join(reversed(text.split("\n")))


def trim_lines(text: str) -> str:
    return "\n".join(line.strip() for line in text.split("\n"))


def remove_empty_lines(text: str) -> str:
    return "\n".join(line for line in text.split("\n") if line.strip())


def number_lines(text: str) -> str:
    lines = text.split("\n")
    width = len(str(len(lines)))
    return "\n".join(f"{i:>{width}}. {line}" for i, line in enumerate(lines, start=1))


PLAIN_TEXT_ACTIONS: dict[str, DetectorAction] = {
    action.id: action
    for action in (
        DetectorAction(id="word-count", label="Word Count", execute=word_count),
        DetectorAction(id="uppercase", label="UPPER", execute=str.upper),
        DetectorAction(id="lowercase", label="lower", execute=str.lower),
        DetectorAction(id="titlecase", label="Title", execute=to_title_case),
        DetectorAction(id="sentencecase", label="Sentence", execute=to_sentence_case),
        DetectorAction(id="sort-lines", label="Sort A-Z", execute=sort_lines),
        DetectorAction(id="sort-lines-reverse", label="Sort Z-A", execute=sort_lines_reverse),
        DetectorAction(id="dedupe-lines", label="Dedupe", execute=dedupe_lines),
        DetectorAction(id="reverse-lines", label="Reverse", execute=reverse_lines),
        DetectorAction(id="trim-lines", label="Trim", execute=trim_lines),
        DetectorAction(id="remove-empty", label="No Empty", execute=remove_empty_lines),
        DetectorAction(id="number-lines", label="Number", execute=number_lines),
    )
}

BACKFILL_ORDER = (
    "word-count",
    "sentencecase",
    "titlecase",
    "uppercase",
    "lowercase",
    "number-lines",
    "reverse-lines",
)
_CASE_ACTIONS = {"uppercase", "lowercase", "titlecase", "sentencecase"}


def _casing_ids(text: str) -> list[str]:
    if not any(c.isalpha() for c in text):
        return []
    if text == text.upper():
        return ["lowercase", "titlecase"]
    if text == text.lower():
        return ["uppercase", "titlecase"]
    return ["titlecase"]


def _shape_ids(text: str) -> list[str]:
    lines = text.split("\n")
    ids = []
    non_blank = [line for line in lines if line.strip()]
    if len(set(non_blank)) < len(non_blank):
        ids.append("dedupe-lines")
    if len(lines) > 1 and len(non_blank) < len(lines):
        ids.append("remove-empty")
    if any(line != line.strip() for line in lines):
        ids.append("trim-lines")
    if len(lines) >= 3:
        ids.append("sort-lines")
    return ids


def plain_text_actions(text: str) -> list[DetectorAction]:
    chosen: list[str] = []
    for action_id in _casing_ids(text) + _shape_ids(text):
        if action_id not in chosen:
            chosen.append(action_id)
    for action_id in BACKFILL_ORDER:
        if len(chosen) >= MAX_ACTIONS:
            break
        if action_id in chosen:
            continue
        if action_id in _CASE_ACTIONS and PLAIN_TEXT_ACTIONS[action_id].execute(text) == text:
            continue
        chosen.append(action_id)
    return [PLAIN_TEXT_ACTIONS[action_id] for action_id in chosen[:MAX_ACTIONS]]


plain_text_detector = Detector(
    id="plain-text",
    priority=99,
    detect=lambda text: True,
    toast_message="Plain text",
    actions=tuple(PLAIN_TEXT_ACTIONS.values()),
    get_actions=plain_text_actions,
)
