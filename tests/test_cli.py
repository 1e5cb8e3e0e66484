from __future__ import annotations

import pytest

from speed_typer.__main__ import build_parser, config_from_args, main
from speed_typer.controller import TestMode
from speed_typer.prompts import PromptPolicy


def test_flags_map_onto_config() -> None:
    args = build_parser().parse_args(["-w", "30", "-s", "45", "-d", "-p", "70", "-l", "english200"])
    cfg = config_from_args(args)

    assert cfg.word_count == 30
    assert cfg.time_limit_s == 45
    assert cfg.death_mode is True
    assert cfg.pace_wpm == 70
    assert cfg.mode is TestMode.TIME
    assert cfg.policy is PromptPolicy.WORDS
    assert args.word_list == "english200"


def test_sentences_and_custom_text() -> None:
    cfg = config_from_args(build_parser().parse_args(["-f", "3"]))
    assert cfg.policy is PromptPolicy.SENTENCES
    assert cfg.prompt_parameter == 3

    cfg = config_from_args(build_parser().parse_args(["-t", "type me"]))
    assert cfg.policy is PromptPolicy.CUSTOM
    assert cfg.custom_text == "type me"


def test_invalid_numbers_exit_with_status_2(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["-w", "0"]) == 2
    assert "word_count" in capsys.readouterr().err


def test_unknown_word_list_is_rejected_by_parser() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["-l", "nope"])
