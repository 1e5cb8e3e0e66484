from __future__ import annotations

import pytest

from speed_typer.metrics import FinishReason, compute, consistency_std_dev, interval_samples, words_per_minute
from speed_typer.prompts import Prompt, PromptPolicy
from speed_typer.tracker import InputTracker, KeyInput, KeystrokeEvent


def _events(text: str, keys: list[tuple[float, KeyInput]]) -> tuple[KeystrokeEvent, ...]:
    tr = InputTracker(Prompt(text=text, policy=PromptPolicy.CUSTOM))
    for t, key in keys:
        tr.apply(key, timestamp=t)
    return tr.events


def _chars(s: str, times: list[float]) -> list[tuple[float, KeyInput]]:
    return [(t, KeyInput.character(ch)) for t, ch in zip(times, s)]


def test_all_correct_over_one_minute() -> None:
    text = "the cat sat"
    times = [i * 6.0 for i in range(11)]  # last keystroke at 60s
    events = _events(text, _chars(text, times))

    r = compute(events=events, started_at_s=0.0, ended_at_s=60.0, death_triggered=False, reason=FinishReason.COMPLETED)

    assert r.elapsed_s == pytest.approx(60.0)
    assert r.wpm == pytest.approx(2.2)
    assert r.raw_wpm == pytest.approx(2.2)
    assert r.wpm == r.raw_wpm
    assert r.accuracy == 1.0
    assert r.correct_chars == 11
    assert r.total_chars == 11
    assert r.keystrokes == 11


def test_raw_counts_incorrect_and_accuracy_ratio() -> None:
    events = _events("abcd", _chars("axbcd", [0.0, 1.0, 2.0, 3.0, 4.0]))
    r = compute(events=events, started_at_s=0.0, ended_at_s=6.0, death_triggered=False, reason=FinishReason.COMPLETED)

    assert r.correct_chars == 4
    assert r.total_chars == 5
    assert r.accuracy == pytest.approx(0.8)
    assert r.wpm == pytest.approx((4 / 5) / 0.1)
    assert r.raw_wpm == pytest.approx((5 / 5) / 0.1)


def test_control_events_count_as_keystrokes_not_characters() -> None:
    keys = [(0.0, KeyInput.backspace())] + _chars("ab", [1.0, 2.0]) + [(3.0, KeyInput.backspace())]
    events = _events("abc", keys)
    r = compute(events=events, started_at_s=1.0, ended_at_s=4.0, death_triggered=False, reason=FinishReason.ABORTED)

    assert r.keystrokes == 4
    assert r.total_chars == 2
    assert r.accuracy == 1.0


def test_no_start_means_zero_everything() -> None:
    events = _events("abc", [(0.0, KeyInput.backspace())])
    r = compute(events=events, started_at_s=None, ended_at_s=10.0, death_triggered=False, reason=FinishReason.ABORTED)

    assert r.elapsed_s == 0.0
    assert r.wpm == 0.0
    assert r.raw_wpm == 0.0
    assert r.accuracy == 0.0
    assert r.samples == ()
    assert r.std_dev == 0.0
    assert r.keystrokes == 1


def test_zero_elapsed_does_not_divide_by_zero() -> None:
    events = _events("abc", _chars("a", [5.0]))
    r = compute(events=events, started_at_s=5.0, ended_at_s=5.0, death_triggered=False, reason=FinishReason.ABORTED)

    assert r.elapsed_s == 0.0
    assert r.wpm == 0.0
    assert r.accuracy == 1.0
    assert words_per_minute(10, 0.0) == 0.0


def test_interval_samples_keep_empty_windows_and_partial_tail() -> None:
    events = _events("abcdef", _chars("abcx", [0.2, 0.7, 2.1, 2.4]))
    samples = interval_samples(events, started_at_s=0.0, elapsed_s=3.5, interval_s=1.0)

    assert [(s.start_s, s.end_s) for s in samples] == [(0.0, 1.0), (1.0, 2.0), (2.0, 3.0), (3.0, 3.5)]
    assert [s.correct_chars for s in samples] == [2, 0, 1, 0]
    assert [s.total_chars for s in samples] == [2, 0, 2, 0]
    assert samples[1].wpm == 0.0
    assert samples[0].wpm == pytest.approx((2 / 5) / (1 / 60))
    assert samples[2].raw_wpm == pytest.approx((2 / 5) / (1 / 60))
    assert samples[2].cumulative_wpm == pytest.approx((3 / 5) / (3 / 60))


def test_event_at_end_lands_in_last_window() -> None:
    events = _events("ab", _chars("ab", [0.0, 2.0]))
    samples = interval_samples(events, started_at_s=0.0, elapsed_s=2.0)
    assert len(samples) == 2
    assert [s.correct_chars for s in samples] == [1, 1]


def test_consistency_std_dev_ignores_partial_tail() -> None:
    events = _events("abcdefgh", _chars("abcdefg", [0.1, 0.2, 1.1, 1.2, 1.3, 1.4, 2.05]))
    r = compute(events=events, started_at_s=0.0, ended_at_s=2.1, death_triggered=False, reason=FinishReason.ABORTED)

    # Full windows hold 2 and 4 correct chars; population sd = 1.
    assert r.std_dev == pytest.approx(1.0)
    assert consistency_std_dev(r.samples[:1]) == 0.0
    assert consistency_std_dev(()) == 0.0


def test_accuracy_stays_in_unit_interval() -> None:
    events = _events("aaaa", _chars("bbbbbbba", [float(i) for i in range(8)]))
    r = compute(events=events, started_at_s=0.0, ended_at_s=8.0, death_triggered=False, reason=FinishReason.ABORTED)
    assert 0.0 <= r.accuracy <= 1.0
    assert r.accuracy == pytest.approx(1 / 8)
