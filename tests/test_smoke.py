"""Smoke tests for the pygame UI.

These verify the typing screen's main loop can initialise, accept injected
keystrokes and run to a finished result without crashing under the SDL dummy
video driver. Rendering correctness is not checked.
"""

from __future__ import annotations

import os
from pathlib import Path

# Use the dummy drivers before importing pygame or the application
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")


def test_app_runs_headless() -> None:
    """Ensure the application can start and run a few frames headlessly."""
    from speed_typer.app import run

    assert run(max_frames=3, seed=1) == 0


def test_app_types_custom_prompt_to_completion(tmp_path: Path) -> None:
    import pygame

    from speed_typer.app import run
    from speed_typer.controller import TestConfig
    from speed_typer.persistence import recent_results

    db = tmp_path / "results.sqlite3"

    def inject(frame: int) -> None:
        if frame == 1:
            pygame.event.post(pygame.event.Event(pygame.KEYDOWN, {"key": pygame.K_BACKSPACE, "mod": 0, "unicode": ""}))
        elif frame == 2:
            pygame.event.post(pygame.event.Event(pygame.TEXTINPUT, {"text": "hi"}))
        elif frame == 4:
            pygame.event.post(pygame.event.Event(pygame.KEYDOWN, {"key": pygame.K_TAB, "mod": 0, "unicode": "\t"}))
        elif frame == 5:
            pygame.event.post(pygame.event.Event(pygame.KEYDOWN, {"key": pygame.K_r, "mod": 0, "unicode": "r"}))

    assert run(config=TestConfig(custom_text="hi"), db_path=db, max_frames=8, event_injector=inject) == 0

    rows = recent_results(db)
    assert len(rows) == 1
    assert rows[0]["prompt_text"] == "hi"


def test_retry_key_does_not_type_into_the_new_session() -> None:
    import pygame

    from speed_typer.app import App, TypingScreen
    from speed_typer.clock import ManualClock
    from speed_typer.controller import Phase, TestConfig, TestController

    pygame.init()
    try:
        surface = pygame.display.set_mode((320, 200))
        clock = ManualClock(0.0)
        controller = TestController(config=TestConfig(custom_text="hi"), word_pool=("x",), clock=clock)
        app = App(surface=surface)
        app.show(TypingScreen(app, controller=controller))

        controller.type_char("h")
        clock.advance(0.5)
        controller.type_char("i")
        assert controller.phase is Phase.FINISHED

        # SDL delivers the retry key as a KEYDOWN followed by its TEXTINPUT.
        pygame.event.clear()
        pygame.event.post(pygame.event.Event(pygame.KEYDOWN, {"key": pygame.K_r, "mod": 0, "unicode": "r"}))
        pygame.event.post(pygame.event.Event(pygame.TEXTINPUT, {"text": "r"}))
        for event in pygame.event.get():
            app.handle_event(event)

        assert controller.phase is Phase.IDLE
        assert controller.events == ()
        assert controller.cursor == 0

        pygame.event.post(pygame.event.Event(pygame.TEXTINPUT, {"text": "h"}))
        for event in pygame.event.get():
            app.handle_event(event)
        assert controller.phase is Phase.RUNNING
        assert controller.cursor == 1
    finally:
        pygame.quit()
