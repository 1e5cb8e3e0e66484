from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .prompts import Prompt


class KeyAction(str, Enum):
    CHARACTER = "character"
    BACKSPACE = "backspace"
    WORD_BACKSPACE = "word_backspace"


class Classification(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    NONE = "none"  # control actions and no-ops


class TrackerOutcome(str, Enum):
    ADVANCED = "advanced"
    BACKED_UP = "backed_up"
    MISMATCHED = "mismatched"
    PROMPT_COMPLETED = "prompt_completed"
    NO_OP = "no_op"


class CharState(str, Enum):
    PENDING = "pending"
    CORRECT = "correct"
    INCORRECT = "incorrect"


@dataclass(frozen=True, slots=True)
class KeyInput:
    """A raw keystroke as delivered by the event loop."""

    action: KeyAction
    char: str | None = None

    @classmethod
    def character(cls, char: str) -> KeyInput:
        return cls(KeyAction.CHARACTER, char)

    @classmethod
    def backspace(cls) -> KeyInput:
        return cls(KeyAction.BACKSPACE)

    @classmethod
    def word_backspace(cls) -> KeyInput:
        return cls(KeyAction.WORD_BACKSPACE)


@dataclass(frozen=True, slots=True)
class KeystrokeEvent:
    seq: int
    target_index: int  # cursor position before the event
    action: KeyAction
    char: str | None
    timestamp: float
    classification: Classification
    outcome: TrackerOutcome

    @property
    def is_char(self) -> bool:
        return self.classification is not Classification.NONE

    @property
    def is_no_op(self) -> bool:
        return self.outcome is TrackerOutcome.NO_OP


class InputTracker:
    """Tracks typed input against a prompt.

    The cursor counts settled (correctly typed) characters. A mismatch leaves
    the cursor in place and records the typed character as an error marker
    for that position. History is append-only: every event is recorded,
    including no-ops.
    """

    def __init__(self, prompt: Prompt) -> None:
        self._prompt = prompt
        self._cursor = 0
        self._marks: dict[int, str] = {}
        self._events: list[KeystrokeEvent] = []

    @property
    def prompt(self) -> Prompt:
        return self._prompt

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def complete(self) -> bool:
        return self._cursor == len(self._prompt)

    @property
    def events(self) -> tuple[KeystrokeEvent, ...]:
        return tuple(self._events)

    @property
    def error_marks(self) -> dict[int, str]:
        return dict(self._marks)

    def char_states(self) -> tuple[CharState, ...]:
        states = []
        for i in range(len(self._prompt)):
            if i < self._cursor:
                states.append(CharState.CORRECT)
            elif i in self._marks:
                states.append(CharState.INCORRECT)
            else:
                states.append(CharState.PENDING)
        return tuple(states)

    def apply(self, key: KeyInput, *, timestamp: float) -> KeystrokeEvent:
        target_index = self._cursor
        if key.action is KeyAction.CHARACTER:
            classification, outcome = self._type(key.char)
        elif key.action is KeyAction.BACKSPACE:
            classification, outcome = Classification.NONE, self._backspace()
        else:
            classification, outcome = Classification.NONE, self._word_backspace()

        event = KeystrokeEvent(
            seq=len(self._events),
            target_index=target_index,
            action=key.action,
            char=key.char,
            timestamp=float(timestamp),
            classification=classification,
            outcome=outcome,
        )
        self._events.append(event)
        return event

    def _type(self, char: str | None) -> tuple[Classification, TrackerOutcome]:
        if char is None or len(char) != 1 or not char.isprintable() or self.complete:
            return Classification.NONE, TrackerOutcome.NO_OP

        if char != self._prompt.char_at(self._cursor):
            self._marks[self._cursor] = char
            return Classification.INCORRECT, TrackerOutcome.MISMATCHED

        self._marks.pop(self._cursor, None)
        self._cursor += 1
        if self.complete:
            return Classification.CORRECT, TrackerOutcome.PROMPT_COMPLETED
        return Classification.CORRECT, TrackerOutcome.ADVANCED

    def _backspace(self) -> TrackerOutcome:
        if self._cursor == 0:
            return TrackerOutcome.NO_OP
        self._retreat()
        return TrackerOutcome.BACKED_UP

    def _word_backspace(self) -> TrackerOutcome:
        if self._cursor == 0:
            return TrackerOutcome.NO_OP
        text = self._prompt.text
        if text[self._cursor - 1] == " ":
            self._retreat()
        while self._cursor > 0 and text[self._cursor - 1] != " ":
            self._retreat()
        return TrackerOutcome.BACKED_UP

    def _retreat(self) -> None:
        self._marks.pop(self._cursor, None)
        self._cursor -= 1
        self._marks.pop(self._cursor, None)
