"""Pygame shell for the typing test.

Deterministic timing/scoring/prompt state lives in speed_typer/* (core modules);
this module only turns pygame events into controller calls and draws snapshots.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

import pygame

from .clock import RealClock
from .controller import Phase, TestConfig, TestController, TypingSnapshot
from .metrics import FinishReason
from .persistence import SqliteResultsLog
from .tracker import CharState
from .word_pools import DEFAULT_POOL, word_pool

logger = logging.getLogger(__name__)

WINDOW_SIZE = (960, 540)
TARGET_FPS = 60

BG = (3, 9, 78)
TEXT_MAIN = (238, 245, 255)
TEXT_MUTED = (120, 136, 176)
TEXT_GOOD = (96, 214, 120)
TEXT_BAD = (236, 84, 84)
PACE = (214, 96, 214)


class Screen(Protocol):
    def handle_event(self, event: pygame.event.Event) -> None: ...
    def update(self) -> None: ...
    def render(self, surface: pygame.Surface) -> None: ...


class App:
    def __init__(self, surface: pygame.Surface) -> None:
        self._surface = surface
        self._screen: Screen | None = None
        self._running = True

    @property
    def running(self) -> bool:
        return self._running

    def show(self, screen: Screen) -> None:
        self._screen = screen

    def quit(self) -> None:
        self._running = False

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.quit()
            return
        if self._screen is not None:
            self._screen.handle_event(event)

    def update(self) -> None:
        if self._screen is not None:
            self._screen.update()

    def render(self) -> None:
        if self._screen is not None:
            self._screen.render(self._surface)


class TypingScreen:
    def __init__(self, app: App, *, controller: TestController) -> None:
        self._app = app
        self._controller = controller
        self._tabbed = False
        # SDL follows a KEYDOWN with a TEXTINPUT for the same key.
        self._drop_text = False

        self._prompt_font = pygame.font.Font(None, 40)
        self._big_font = pygame.font.Font(None, 72)
        self._small_font = pygame.font.Font(None, 24)

    def handle_event(self, event: pygame.event.Event) -> None:
        finished = self._controller.phase is Phase.FINISHED

        if event.type == pygame.TEXTINPUT:
            if self._drop_text:
                self._drop_text = False
                return
            if self._tabbed or finished:
                return
            for ch in event.text:
                self._controller.type_char(ch)
            return

        if event.type != pygame.KEYDOWN:
            return
        self._drop_text = False

        if event.key == pygame.K_TAB:
            self._tabbed = not self._tabbed
            return

        if self._tabbed or finished:
            if event.key == pygame.K_r:
                self._controller.restart()
                self._tabbed = False
                self._drop_text = True
            elif event.key == pygame.K_n:
                self._controller.new_prompt()
                self._tabbed = False
                self._drop_text = True
            elif event.key == pygame.K_ESCAPE:
                self._app.quit()
            return

        if event.key == pygame.K_BACKSPACE:
            if event.mod & pygame.KMOD_CTRL:
                self._controller.word_backspace()
            else:
                self._controller.backspace()
        elif event.key == pygame.K_ESCAPE:
            if self._controller.phase is Phase.RUNNING:
                self._controller.abort()
            else:
                self._app.quit()

    def update(self) -> None:
        self._controller.tick()

    def render(self, surface: pygame.Surface) -> None:
        surface.fill(BG)
        snap = self._controller.snapshot()
        if snap.phase is Phase.FINISHED:
            self._render_finished(surface, snap)
        else:
            self._render_prompt(surface, snap)

        if snap.phase is Phase.FINISHED:
            legend = "(r)etry / (n)ew / (esc)ape"
        elif self._tabbed:
            legend = "(r)etry / (n)ew / (esc)ape / (tab) return"
        else:
            legend = "Press tab for options"
        w, h = surface.get_size()
        foot = self._small_font.render(legend, True, TEXT_MUTED)
        surface.blit(foot, foot.get_rect(midbottom=(w // 2, h - 12)))

    def _render_prompt(self, surface: pygame.Surface, snap: TypingSnapshot) -> None:
        w, h = surface.get_size()
        margin = max(24, w // 12)
        line_h = self._prompt_font.get_linesize()

        lines = _wrap(snap.prompt, self._prompt_font, w - margin * 2)
        y = max(margin, (h - line_h * len(lines)) // 2)
        index = 0
        for line in lines:
            x = margin
            for ch in line:
                state = snap.char_states[index]
                shown = snap.error_marks.get(index, ch) if state is CharState.INCORRECT else ch
                if state is CharState.INCORRECT and shown == " ":
                    shown = "_"
                if state is CharState.CORRECT:
                    color = TEXT_GOOD
                elif state is CharState.INCORRECT:
                    color = TEXT_BAD
                else:
                    color = TEXT_MUTED
                glyph = self._prompt_font.render(shown, True, color)
                surface.blit(glyph, (x, y))
                adv = glyph.get_width()
                if index == snap.cursor:
                    pygame.draw.line(surface, TEXT_MAIN, (x, y + line_h - 4), (x + adv, y + line_h - 4), 2)
                if snap.pace_position is not None and index == snap.pace_position:
                    pygame.draw.line(surface, PACE, (x, y), (x, y + line_h - 6), 2)
                x += adv
                index += 1
            y += line_h

        if snap.time_remaining_s is not None:
            timer = self._small_font.render(f"{snap.time_remaining_s:.1f}", True, TEXT_MAIN)
            surface.blit(timer, (margin, margin // 2))

    def _render_finished(self, surface: pygame.Surface, snap: TypingSnapshot) -> None:
        w, h = surface.get_size()
        result = snap.result
        if result is None:
            return

        if result.reason is FinishReason.DEATH:
            title = self._big_font.render("you died", True, TEXT_BAD)
            surface.blit(title, title.get_rect(center=(w // 2, h // 3)))
            return

        stats = (
            f"{result.wpm:.0f} wpm   {result.raw_wpm:.0f} raw   "
            f"{result.accuracy * 100:.0f}% acc   {result.std_dev:.2f} sd   {result.elapsed_s:.1f}s"
        )
        text = self._small_font.render(stats, True, TEXT_MAIN)
        surface.blit(text, text.get_rect(midbottom=(w // 2, h - 48)))

        chart = pygame.Rect(w // 10, h // 10, w * 8 // 10, h * 6 // 10)
        pygame.draw.rect(surface, TEXT_MUTED, chart, 1)
        samples = result.samples
        if len(samples) < 2:
            return
        top = max(1.0, max(s.cumulative_wpm for s in samples))
        span = samples[-1].end_s or 1.0
        points = [
            (
                chart.x + int(chart.w * s.end_s / span),
                chart.bottom - int(chart.h * s.cumulative_wpm / top),
            )
            for s in samples
        ]
        pygame.draw.lines(surface, TEXT_GOOD, False, points, 2)


def _wrap(text: str, font: pygame.font.Font, max_width: int) -> list[str]:
    # Keeps trailing spaces on each line so character indices stay aligned.
    lines: list[str] = []
    current = ""
    for word in text.split(" "):
        candidate = f"{current}{word} "
        if current and font.size(candidate.rstrip())[0] > max_width:
            lines.append(current)
            current = f"{word} "
        else:
            current = candidate
    lines.append(current[:-1])
    return lines


def run(
    *,
    config: TestConfig | None = None,
    pool_name: str = DEFAULT_POOL,
    db_path: Path | None = None,
    seed: int | None = None,
    max_frames: int | None = None,
    event_injector: Callable[[int], None] | None = None,
) -> int:
    controller = TestController(
        config=config or TestConfig(),
        word_pool=word_pool(pool_name),
        clock=RealClock(),
        rng=random.Random(seed),
        sink=None if db_path is None else SqliteResultsLog(db_path),
    )

    pygame.init()
    pygame.display.set_caption("speed_typer")
    surface = pygame.display.set_mode(WINDOW_SIZE, pygame.RESIZABLE)
    pygame.key.start_text_input()
    clock = pygame.time.Clock()

    logger.debug("starting test: %s", controller.config)

    app = App(surface=surface)
    app.show(TypingScreen(app, controller=controller))

    frame = 0
    try:
        while app.running:
            if event_injector is not None:
                event_injector(frame)

            for event in pygame.event.get():
                app.handle_event(event)

            app.update()
            app.render()

            pygame.display.flip()

            frame += 1
            if max_frames is not None and frame >= max_frames:
                break

            clock.tick(TARGET_FPS)
    finally:
        pygame.quit()

    return 0
