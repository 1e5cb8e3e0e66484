from __future__ import annotations

import math
from dataclasses import dataclass

CHARS_PER_WORD = 5


def pace_position(elapsed_s: float, target_wpm: float, prompt_length: int) -> int:
    """Index a typist at ``target_wpm`` would have reached after ``elapsed_s``."""

    if elapsed_s <= 0.0 or target_wpm <= 0.0:
        return 0
    index = math.floor(elapsed_s * target_wpm / 60.0 * CHARS_PER_WORD)
    return max(0, min(prompt_length, int(index)))


@dataclass(frozen=True, slots=True)
class PaceCursor:
    """Display-only cursor moving at a fixed words-per-minute rate.

    It never feeds back into scoring, mismatch detection or completion.
    """

    target_wpm: float
    prompt_length: int

    def __post_init__(self) -> None:
        if self.target_wpm <= 0:
            raise ValueError("target_wpm must be > 0")
        if self.prompt_length < 0:
            raise ValueError("prompt_length must be >= 0")

    def position_at(self, elapsed_s: float) -> int:
        return pace_position(elapsed_s, self.target_wpm, self.prompt_length)

    def seconds_to_finish(self) -> float:
        return self.prompt_length * 60.0 / (self.target_wpm * CHARS_PER_WORD)
