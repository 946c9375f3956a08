"""
Detector registry and dispatch.

``DETECTORS`` is fixed at import time and ordered by ascending priority;
``detect_content`` returns the first match, so later detectors never see
text that an earlier one claimed. ``plain-text`` matches everything, which
makes classification total for any non-trivial input.
"""

from __future__ import annotations

from collections.abc import Iterable

from .base64_text import base64_detector
from .code_snippet import code_snippet_detector
from .color import color_detector
from .css import css_detector
from .csv_tsv import csv_tsv_detector
from .env_file import env_file_detector
from .file_path import file_path_detector
from .json_yaml import json_yaml_detector
from .jwt import jwt_detector
from .markdown import markdown_detector
from .plain_text import plain_text_detector
from .secrets import secrets_detector
from .sql import sql_detector
from .stack_trace import stack_trace_detector
from .timestamp import timestamp_detector
from .types import (
    ActionOutput,
    ActionResult,
    Detector,
    DetectorAction,
    DetectorResult,
    UnknownActionError,
    ValidationType,
)
from .url import url_detector
from .uuid_text import uuid_detector
from .xml_html import xml_html_detector

__all__ = [
    "ActionOutput",
    "ActionResult",
    "DETECTORS",
    "Detector",
    "DetectorAction",
    "DetectorResult",
    "MIN_TEXT_LENGTH",
    "UnknownActionError",
    "ValidationType",
    "detect_content",
    "find_action",
    "get_detector",
    "run_action",
]

MIN_TEXT_LENGTH = 5


def _build_registry(detectors: Iterable[Detector]) -> tuple[Detector, ...]:
    ordered = tuple(sorted(detectors, key=lambda d: d.priority))
    seen_ids: set[str] = set()
    seen_priorities: dict[int, str] = {}
    for detector in ordered:
        if detector.id in seen_ids:
            raise ValueError(f"duplicate detector id: {detector.id}")
        if detector.priority in seen_priorities:
            raise ValueError(
                f"detectors '{seen_priorities[detector.priority]}' and '{detector.id}' "
                f"share priority {detector.priority}"
            )
        seen_ids.add(detector.id)
        seen_priorities[detector.priority] = detector.id
    return ordered


DETECTORS: tuple[Detector, ...] = _build_registry(
    [
        jwt_detector,
        secrets_detector,
        css_detector,
        json_yaml_detector,
        uuid_detector,
        env_file_detector,
        xml_html_detector,
        sql_detector,
        base64_detector,
        csv_tsv_detector,
        color_detector,
        stack_trace_detector,
        file_path_detector,
        timestamp_detector,
        markdown_detector,
        url_detector,
        code_snippet_detector,
        plain_text_detector,
    ]
)


def detect_content(text: str) -> DetectorResult | None:
    """Classify ``text``; None for empty or near-empty input."""
    if not text or len(text.strip()) < MIN_TEXT_LENGTH:
        return None
    for detector in DETECTORS:
        if detector.detect(text):
            return detector.materialize(text)
    return None


def get_detector(detector_id: str) -> Detector | None:
    for detector in DETECTORS:
        if detector.id == detector_id:
            return detector
    return None


def find_action(result: DetectorResult, action_id: str) -> DetectorAction | None:
    for action in result.actions:
        if action.id == action_id:
            return action
    return None


def run_action(text: str, action_id: str) -> ActionResult:
    """Re-classify ``text`` and run one of the actions offered for it.

    Plain ``str`` outputs are wrapped so callers always get an ActionResult.
    Raises UnknownActionError when the action is not offered for this text.
    """
    result = detect_content(text)
    if result is None:
        raise UnknownActionError(action_id)
    action = find_action(result, action_id)
    if action is None:
        raise UnknownActionError(action_id, result.detector_id)
    output = action.execute(text)
    if isinstance(output, ActionResult):
        return output
    return ActionResult(text=output)
