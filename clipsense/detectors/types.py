from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Literal, Union

ValidationType = Literal["success", "error"]


@dataclass(frozen=True)
class ActionResult:
    """Replacement text plus an optional validation outcome.

    ``error_line``/``error_column`` are 1-based and point into the buffer the
    action was run on.
    """

    text: str
    validation_message: str | None = None
    validation_type: ValidationType | None = None
    error_line: int | None = None
    error_column: int | None = None


ActionOutput = Union[str, ActionResult]


@dataclass(frozen=True)
class DetectorAction:
    id: str
    label: str
    execute: Callable[[str], ActionOutput] = field(repr=False, compare=False)


@dataclass(frozen=True)
class DetectorResult:
    detector_id: str
    toast_message: str
    actions: tuple[DetectorAction, ...]
    suggested_language: str | None = None


@dataclass(frozen=True)
class Detector:
    """A priority-ranked content classifier with its actions.

    The static ``toast_message``/``actions``/``suggested_language`` are always
    present; the ``get_*`` hooks, when set, take precedence for a given text.
    """

    id: str
    priority: int
    detect: Callable[[str], bool] = field(repr=False, compare=False)
    toast_message: str
    actions: tuple[DetectorAction, ...] = ()
    suggested_language: str | None = None
    get_toast_message: Callable[[str], str] | None = field(
        default=None, repr=False, compare=False
    )
    get_actions: Callable[[str], Sequence[DetectorAction]] | None = field(
        default=None, repr=False, compare=False
    )
    get_suggested_language: Callable[[str], str | None] | None = field(
        default=None, repr=False, compare=False
    )

    def materialize(self, text: str) -> DetectorResult:
        toast = self.get_toast_message(text) if self.get_toast_message else self.toast_message
        actions = tuple(self.get_actions(text)) if self.get_actions else self.actions
        language = (
            self.get_suggested_language(text)
            if self.get_suggested_language
            else self.suggested_language
        )
        return DetectorResult(
            detector_id=self.id,
            toast_message=toast,
            actions=actions,
            suggested_language=language,
        )


class UnknownActionError(LookupError):
    """Raised when an action id is not offered for the current text."""

    def __init__(self, action_id: str, detector_id: str | None = None):
        self.action_id = action_id
        self.detector_id = detector_id
        where = f" for detector '{detector_id}'" if detector_id else ""
        super().__init__(f"unknown action '{action_id}'{where}")
