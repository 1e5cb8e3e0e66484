"""Lifecycle state machine for a single typing test.

Idle -> Running -> Finished, with restart / new-prompt returning to Idle from
any state. The controller owns the one active session; the event loop calls
into it sequentially with keystrokes and periodic ticks.

- Deterministic: prompts come from an injectable RNG.
- Time is entirely via the injected Clock.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from .clock import Clock
from .errors import ConfigurationError, ResultsLogError
from .metrics import DEFAULT_INTERVAL_S, FinishReason, SessionResult, compute
from .pace import pace_position
from .prompts import Prompt, PromptPolicy, PromptSource, RandomSource
from .results import ResultSink, session_record_from_controller
from .tracker import CharState, InputTracker, KeyInput, KeystrokeEvent, TrackerOutcome

logger = logging.getLogger(__name__)

_MAX_REDRAWS = 3


class TestMode(str, Enum):
    __test__ = False

    WORDS = "words"
    TIME = "time"
    SENTENCES = "sentences"


class Phase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    FINISHED = "finished"


class SinkFailurePolicy(str, Enum):
    RAISE = "raise"
    WARN = "warn"


@dataclass(frozen=True, slots=True)
class TestConfig:
    __test__ = False

    word_count: int = 15
    time_limit_s: int | None = None
    sentence_count: int | None = None
    death_mode: bool = False
    pace_wpm: int | None = None
    custom_text: str | None = None

    def __post_init__(self) -> None:
        if self.word_count <= 0:
            raise ConfigurationError("word_count must be > 0")
        if self.time_limit_s is not None and self.time_limit_s <= 0:
            raise ConfigurationError("time_limit_s must be > 0")
        if self.sentence_count is not None and self.sentence_count <= 0:
            raise ConfigurationError("sentence_count must be > 0")
        if self.pace_wpm is not None and self.pace_wpm <= 0:
            raise ConfigurationError("pace_wpm must be > 0")
        if self.custom_text is not None and self.custom_text == "":
            raise ConfigurationError("custom_text must not be empty")
        if self.custom_text is not None and not self.custom_text.isprintable():
            raise ConfigurationError("custom_text must not contain tabs, newlines or control characters")

    @property
    def mode(self) -> TestMode:
        # Only one setting drives the finish condition.
        if self.time_limit_s is not None:
            return TestMode.TIME
        if self.sentence_count is not None:
            return TestMode.SENTENCES
        return TestMode.WORDS

    @property
    def policy(self) -> PromptPolicy:
        if self.custom_text is not None:
            return PromptPolicy.CUSTOM
        if self.sentence_count is not None:
            return PromptPolicy.SENTENCES
        return PromptPolicy.WORDS

    @property
    def prompt_parameter(self) -> int:
        if self.sentence_count is not None:
            return self.sentence_count
        return self.word_count


@dataclass(frozen=True, slots=True)
class Idle:
    pass


@dataclass(frozen=True, slots=True)
class Running:
    started_at_s: float


@dataclass(frozen=True, slots=True)
class Finished:
    started_at_s: float | None  # None when finished before any keystroke
    ended_at_s: float
    reason: FinishReason
    result: SessionResult


SessionState = Idle | Running | Finished


@dataclass(slots=True)
class TestSession:
    prompt: Prompt
    config: TestConfig
    tracker: InputTracker
    state: SessionState


@dataclass(frozen=True, slots=True)
class TypingSnapshot:
    """View model for the renderer (pure data)."""

    phase: Phase
    prompt: str
    cursor: int
    char_states: tuple[CharState, ...]
    error_marks: dict[int, str]
    elapsed_s: float
    time_remaining_s: float | None
    pace_position: int | None
    death_mode: bool
    result: SessionResult | None = None


class TestController:
    __test__ = False

    def __init__(
        self,
        *,
        config: TestConfig,
        word_pool: Sequence[str],
        clock: Clock,
        rng: RandomSource | None = None,
        sink: ResultSink | None = None,
        sink_failure: SinkFailurePolicy = SinkFailurePolicy.WARN,
        interval_s: float = DEFAULT_INTERVAL_S,
    ) -> None:
        if interval_s <= 0:
            raise ConfigurationError("interval_s must be > 0")

        self._config = config
        self._word_pool = tuple(word_pool)
        self._clock = clock
        self._source = PromptSource(rng)
        self._sink = sink
        self._sink_failure = sink_failure
        self._interval_s = float(interval_s)

        self._session = self._new_session(self._generate())

    @property
    def config(self) -> TestConfig:
        return self._config

    @property
    def prompt(self) -> Prompt:
        return self._session.prompt

    @property
    def state(self) -> SessionState:
        return self._session.state

    @property
    def phase(self) -> Phase:
        state = self._session.state
        if isinstance(state, Running):
            return Phase.RUNNING
        if isinstance(state, Finished):
            return Phase.FINISHED
        return Phase.IDLE

    @property
    def cursor(self) -> int:
        return self._session.tracker.cursor

    @property
    def events(self) -> tuple[KeystrokeEvent, ...]:
        return self._session.tracker.events

    @property
    def result(self) -> SessionResult | None:
        state = self._session.state
        return state.result if isinstance(state, Finished) else None

    # Input

    def type_char(self, char: str) -> KeystrokeEvent | None:
        return self.handle_key(KeyInput.character(char))

    def backspace(self) -> KeystrokeEvent | None:
        return self.handle_key(KeyInput.backspace())

    def word_backspace(self) -> KeystrokeEvent | None:
        return self.handle_key(KeyInput.word_backspace())

    def handle_key(self, key: KeyInput) -> KeystrokeEvent | None:
        """Apply one keystroke. Returns None once the session has finished.

        Keys are expected before the tick of the same frame, so a key that
        completes the prompt inside the limit wins over that tick.
        """

        state = self._session.state
        if isinstance(state, Finished):
            return None

        now = self._clock.now()
        # A key arriving after the deadline ends the test without being recorded.
        if isinstance(state, Running) and self._limit_reached(state, now):
            self._finish(FinishReason.TIME_UP, self._limit_end(state))
            return None

        event = self._session.tracker.apply(key, timestamp=now)

        if isinstance(state, Idle):
            if event.is_no_op:
                return event
            state = Running(started_at_s=now)
            self._session.state = state
            logger.debug("test started at %.3f", now)

        if event.outcome is TrackerOutcome.PROMPT_COMPLETED:
            self._finish(FinishReason.COMPLETED, now)
        elif self._config.death_mode and event.outcome is TrackerOutcome.MISMATCHED:
            self._finish(FinishReason.DEATH, now)
        return event

    def tick(self) -> None:
        state = self._session.state
        if isinstance(state, Running) and self._limit_reached(state, self._clock.now()):
            self._finish(FinishReason.TIME_UP, self._limit_end(state))

    # Navigation

    def abort(self) -> None:
        if isinstance(self._session.state, Finished):
            return
        self._finish(FinishReason.ABORTED, self._clock.now())

    def restart(self) -> None:
        """Back to Idle with the same prompt and config."""

        self._session = self._new_session(self._session.prompt)
        logger.debug("test restarted")

    def new_prompt(self) -> None:
        """Back to Idle with a freshly generated prompt (same as restart for custom text)."""

        if self._config.policy is PromptPolicy.CUSTOM:
            self.restart()
            return
        previous = self._session.prompt.text
        prompt = self._generate()
        for _ in range(_MAX_REDRAWS):
            if prompt.text != previous:
                break
            prompt = self._generate()
        self._session = self._new_session(prompt)
        logger.debug("new prompt generated (%d chars)", len(prompt))

    def reconfigure(self, config: TestConfig) -> None:
        """Start over under a new config; the current session is discarded."""

        previous = self._config
        self._config = config
        try:
            prompt = self._generate()
        except ConfigurationError:
            self._config = previous
            raise
        self._session = self._new_session(prompt)

    # Views

    def elapsed_s(self) -> float:
        state = self._session.state
        if isinstance(state, Running):
            return max(0.0, self._clock.now() - state.started_at_s)
        if isinstance(state, Finished):
            return state.result.elapsed_s
        return 0.0

    def time_remaining_s(self) -> float | None:
        limit = self._config.time_limit_s
        if limit is None:
            return None
        return max(0.0, float(limit) - self.elapsed_s())

    def pace_position(self) -> int | None:
        if self._config.pace_wpm is None:
            return None
        return pace_position(self.elapsed_s(), self._config.pace_wpm, len(self._session.prompt))

    def snapshot(self) -> TypingSnapshot:
        tracker = self._session.tracker
        return TypingSnapshot(
            phase=self.phase,
            prompt=self._session.prompt.text,
            cursor=tracker.cursor,
            char_states=tracker.char_states(),
            error_marks=tracker.error_marks,
            elapsed_s=self.elapsed_s(),
            time_remaining_s=self.time_remaining_s(),
            pace_position=self.pace_position(),
            death_mode=self._config.death_mode,
            result=self.result,
        )

    # Internals

    def _generate(self) -> Prompt:
        cfg = self._config
        return self._source.generate(
            policy=cfg.policy,
            parameter=cfg.prompt_parameter,
            word_pool=self._word_pool,
            custom_text=cfg.custom_text,
        )

    def _new_session(self, prompt: Prompt) -> TestSession:
        return TestSession(prompt=prompt, config=self._config, tracker=InputTracker(prompt), state=Idle())

    def _limit_reached(self, state: Running, now: float) -> bool:
        limit = self._config.time_limit_s
        return limit is not None and now - state.started_at_s >= limit

    def _limit_end(self, state: Running) -> float:
        assert self._config.time_limit_s is not None
        return state.started_at_s + float(self._config.time_limit_s)

    def _finish(self, reason: FinishReason, ended_at_s: float) -> None:
        state = self._session.state
        started_at_s = state.started_at_s if isinstance(state, Running) else None

        result = compute(
            events=self._session.tracker.events,
            started_at_s=started_at_s,
            ended_at_s=ended_at_s,
            death_triggered=reason is FinishReason.DEATH,
            reason=reason,
            interval_s=self._interval_s,
        )
        self._session.state = Finished(
            started_at_s=started_at_s,
            ended_at_s=ended_at_s,
            reason=reason,
            result=result,
        )
        logger.debug(
            "test finished (%s): wpm=%.1f raw=%.1f acc=%.3f",
            reason.value,
            result.wpm,
            result.raw_wpm,
            result.accuracy,
        )
        self._emit()

    def _emit(self) -> None:
        if self._sink is None:
            return
        record = session_record_from_controller(self)
        try:
            self._sink.record(record)
        except ResultsLogError as exc:
            if self._sink_failure is SinkFailurePolicy.RAISE:
                raise
            logger.warning("could not save result: %s", exc)
