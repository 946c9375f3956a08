"""
Host-side suggestion surfacing.

Wraps ``detect_content`` with the user's settings, logs each surfaced
decision, and provides the restart-on-edit debounce the editor uses so a
buffer is only classified once typing pauses.
"""

from __future__ import annotations

from collections.abc import Callable
import dataclasses
import json
import logging
import threading

from .detectors import DetectorResult, detect_content
from .settings import SuggestionSettings, get_suggestion_settings

logger = logging.getLogger("clipsense.detectors")

SWITCH_LANGUAGE_PREFIX = "switch-language:"


def record_detection(result: DetectorResult, text_length: int) -> None:
    payload = {
        "event": "content_detection",
        "detector_id": result.detector_id,
        "toast_message": result.toast_message,
        "actions": [action.id for action in result.actions],
        "suggested_language": result.suggested_language,
        "text_length": text_length,
    }
    logger.info("content_detection %s", json.dumps(payload, ensure_ascii=False))


def suggest(text: str, settings: SuggestionSettings | None = None) -> DetectorResult | None:
    """Classify ``text`` unless suggestions are switched off.

    With ``auto_detect_language`` disabled the language hint and the
    language-switch actions are removed from the result.
    """
    settings = settings or get_suggestion_settings()
    if not settings.show_intelligent_suggestions:
        return None

    result = detect_content(text)
    if result is None:
        return None

    if not settings.auto_detect_language:
        result = dataclasses.replace(
            result,
            suggested_language=None,
            actions=tuple(
                a for a in result.actions if not a.id.startswith(SWITCH_LANGUAGE_PREFIX)
            ),
        )

    record_detection(result, len(text))
    return result


class SuggestionDebouncer:
    """Restart-on-edit timer around ``suggest``.

    Every ``touch`` supersedes whatever was pending. A classification that
    was superseded while it ran is dropped instead of delivered.
    """

    def __init__(
        self,
        on_result: Callable[[DetectorResult | None], None],
        settings: SuggestionSettings | None = None,
    ):
        self.settings = settings or get_suggestion_settings()
        self.on_result = on_result
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._pending: str | None = None
        self._generation = 0

    @property
    def delay_seconds(self) -> float:
        return self.settings.debounce_ms / 1000

    def touch(self, text: str) -> None:
        """Record a buffer change and restart the countdown."""
        with self._lock:
            self._generation += 1
            self._cancel_timer()
            self._pending = text
            self._timer = threading.Timer(
                self.delay_seconds, self._fire, args=(self._generation,)
            )
            self._timer.daemon = True
            self._timer.start()

    def flush(self) -> DetectorResult | None:
        """Run the pending classification now; None when nothing is pending."""
        with self._lock:
            self._cancel_timer()
            text = self._pending
            self._pending = None
            generation = self._generation
        if text is None:
            return None
        return self._run(text, generation)

    def cancel(self) -> None:
        with self._lock:
            self._generation += 1
            self._cancel_timer()
            self._pending = None

    def has_pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._pending is None:
                return
            text = self._pending
            self._pending = None
            self._timer = None
        self._run(text, generation)

    def _run(self, text: str, generation: int) -> DetectorResult | None:
        result = suggest(text, self.settings)
        with self._lock:
            if generation != self._generation:
                logger.debug("dropping superseded detection (generation %d)", generation)
                return None
        self.on_result(result)
        return result
