from __future__ import annotations

import pytest

from speed_typer.pace import PaceCursor, pace_position


def test_linear_advance_five_chars_per_word() -> None:
    # 60 wpm = 5 chars per second
    assert pace_position(0.0, 60, 100) == 0
    assert pace_position(1.0, 60, 100) == 5
    assert pace_position(12.0, 60, 100) == 60
    assert pace_position(1.1, 60, 100) == 5


def test_clamped_to_prompt_length() -> None:
    assert pace_position(1000.0, 120, 42) == 42
    assert pace_position(-3.0, 120, 42) == 0


def test_cursor_object_matches_function() -> None:
    pc = PaceCursor(target_wpm=90, prompt_length=200)
    for t in (0.0, 0.5, 2.0, 7.25, 30.0):
        assert pc.position_at(t) == pace_position(t, 90, 200)
    assert pc.seconds_to_finish() == pytest.approx(200 * 60 / (90 * 5))


def test_invalid_rate_rejected() -> None:
    with pytest.raises(ValueError):
        PaceCursor(target_wpm=0, prompt_length=10)


def test_whole_character_boundaries_land_exactly() -> None:
    # elapsed * wpm / 60, then five characters per word
    assert pace_position(6.0, 50, 1000) == 25
    assert pace_position(12.0, 60, 1000) == 60
    assert pace_position(30.0, 120, 1000) == 300
    assert pace_position(10.0, 7, 1000) == 5
