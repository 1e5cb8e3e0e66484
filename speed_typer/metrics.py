"""Speed and accuracy statistics for a finished typing session.

Everything here is a pure function of the keystroke history and the start/end
timestamps. Degenerate input (no keystrokes, zero elapsed time) yields zeros
rather than errors.
"""

from __future__ import annotations

import math
import statistics
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from .pace import CHARS_PER_WORD
from .tracker import Classification, KeystrokeEvent

DEFAULT_INTERVAL_S = 1.0
_EPS = 1e-9


class FinishReason(str, Enum):
    COMPLETED = "completed"
    TIME_UP = "time_up"
    DEATH = "death"
    ABORTED = "aborted"


@dataclass(frozen=True, slots=True)
class IntervalSample:
    start_s: float  # offsets from session start
    end_s: float
    correct_chars: int
    total_chars: int
    wpm: float
    raw_wpm: float
    cumulative_wpm: float


@dataclass(frozen=True, slots=True)
class SessionResult:
    elapsed_s: float
    wpm: float
    raw_wpm: float
    accuracy: float
    samples: tuple[IntervalSample, ...]
    death_triggered: bool
    reason: FinishReason
    correct_chars: int
    total_chars: int
    keystrokes: int
    std_dev: float


def words_per_minute(chars: int, elapsed_s: float) -> float:
    """(chars / 5) / minutes, or 0.0 when no time has passed."""

    if elapsed_s <= 0.0:
        return 0.0
    return (chars / float(CHARS_PER_WORD)) / (elapsed_s / 60.0)


def ratio(part: int, whole: int) -> float:
    return 0.0 if whole == 0 else part / whole


def interval_samples(
    events: Sequence[KeystrokeEvent],
    *,
    started_at_s: float,
    elapsed_s: float,
    interval_s: float = DEFAULT_INTERVAL_S,
) -> tuple[IntervalSample, ...]:
    """Bucket character events into fixed-width windows from start to end.

    The last window may be shorter than ``interval_s``; its rates use the width
    it actually covers. Empty windows are kept with zero rates.
    """

    if interval_s <= 0.0:
        raise ValueError("interval_s must be > 0")
    if elapsed_s <= 0.0:
        return ()

    n = max(1, math.ceil(elapsed_s / interval_s - _EPS))
    correct = [0] * n
    total = [0] * n
    for e in events:
        if not e.is_char:
            continue
        idx = int((e.timestamp - started_at_s) // interval_s)
        idx = max(0, min(n - 1, idx))
        total[idx] += 1
        if e.classification is Classification.CORRECT:
            correct[idx] += 1

    samples: list[IntervalSample] = []
    running_correct = 0
    for i in range(n):
        start = i * interval_s
        end = min(elapsed_s, start + interval_s)
        width = end - start
        running_correct += correct[i]
        samples.append(
            IntervalSample(
                start_s=start,
                end_s=end,
                correct_chars=correct[i],
                total_chars=total[i],
                wpm=words_per_minute(correct[i], width),
                raw_wpm=words_per_minute(total[i], width),
                cumulative_wpm=words_per_minute(running_correct, end),
            )
        )
    return tuple(samples)


def consistency_std_dev(samples: Sequence[IntervalSample], interval_s: float = DEFAULT_INTERVAL_S) -> float:
    # Only full-width windows; a trailing partial window would skew the spread.
    counts = [s.correct_chars for s in samples if (s.end_s - s.start_s) >= interval_s - _EPS]
    if not counts:
        return 0.0
    return float(statistics.pstdev(counts))


def compute(
    *,
    events: Sequence[KeystrokeEvent],
    started_at_s: float | None,
    ended_at_s: float,
    death_triggered: bool,
    reason: FinishReason,
    interval_s: float = DEFAULT_INTERVAL_S,
) -> SessionResult:
    elapsed_s = 0.0 if started_at_s is None else max(0.0, ended_at_s - started_at_s)

    chars = [e for e in events if e.is_char]
    correct = sum(1 for e in chars if e.classification is Classification.CORRECT)
    total = len(chars)

    samples: tuple[IntervalSample, ...] = ()
    if started_at_s is not None:
        samples = interval_samples(events, started_at_s=started_at_s, elapsed_s=elapsed_s, interval_s=interval_s)

    return SessionResult(
        elapsed_s=elapsed_s,
        wpm=words_per_minute(correct, elapsed_s),
        raw_wpm=words_per_minute(total, elapsed_s),
        accuracy=ratio(correct, total),
        samples=samples,
        death_triggered=bool(death_triggered),
        reason=reason,
        correct_chars=correct,
        total_chars=total,
        keystrokes=len(events),
        std_dev=consistency_std_dev(samples, interval_s),
    )
