from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from .metrics import SessionResult
from .prompts import PromptPolicy
from .tracker import KeystrokeEvent

if TYPE_CHECKING:
    from .controller import TestController


@dataclass(frozen=True, slots=True)
class SessionRecord:
    """Persistable summary + keystroke log for a finished session.

    This is what the controller hands to a result sink; the sink decides how
    and where it is stored.
    """

    word_count: int
    time_limit_s: int | None
    sentence_count: int | None
    death_mode: bool
    pace_wpm: int | None

    prompt_policy: PromptPolicy
    prompt_text: str

    result: SessionResult
    events: tuple[KeystrokeEvent, ...]


class ResultSink(Protocol):
    def record(self, record: SessionRecord) -> None:
        """Store one finished session. Raise ResultsLogError on failure."""
        ...


def session_record_from_controller(controller: TestController) -> SessionRecord:
    """Build a SessionRecord from a finished TestController."""

    result = controller.result
    if result is None:
        raise ValueError("session has not finished")

    cfg = controller.config
    prompt = controller.prompt
    return SessionRecord(
        word_count=int(cfg.word_count),
        time_limit_s=cfg.time_limit_s,
        sentence_count=cfg.sentence_count,
        death_mode=bool(cfg.death_mode),
        pace_wpm=cfg.pace_wpm,
        prompt_policy=prompt.policy,
        prompt_text=prompt.text,
        result=result,
        events=controller.events,
    )
