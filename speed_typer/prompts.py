from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from .errors import ConfigurationError


class RandomSource(Protocol):
    """The subset of random.Random the prompt source draws from."""

    def choice(self, seq: Sequence[str]) -> str: ...

    def randint(self, a: int, b: int) -> int: ...

    def random(self) -> float: ...


class PromptPolicy(str, Enum):
    WORDS = "words"
    SENTENCES = "sentences"
    CUSTOM = "custom"


@dataclass(frozen=True, slots=True)
class Prompt:
    text: str
    policy: PromptPolicy

    def __len__(self) -> int:
        return len(self.text)

    def char_at(self, index: int) -> str:
        return self.text[index]

    @property
    def words(self) -> tuple[str, ...]:
        return tuple(self.text.split())


SENTENCE_MIN_WORDS = 4
SENTENCE_MAX_WORDS = 12
_COMMA_CHANCE = 0.15
_TERMINALS = (".", ".", ".", ".", "?", "!")


class PromptSource:
    """Generates challenge text from a word pool.

    - Deterministic: the same seeded RNG produces the same prompt sequence.
    - Re-invocable: each call to generate() draws fresh words.
    """

    def __init__(self, rng: RandomSource | None = None) -> None:
        self._rng: RandomSource = rng if rng is not None else random.Random()

    def generate(
        self,
        *,
        policy: PromptPolicy,
        parameter: int,
        word_pool: Sequence[str],
        custom_text: str | None = None,
    ) -> Prompt:
        if policy is PromptPolicy.CUSTOM:
            if not custom_text:
                raise ConfigurationError("custom prompt text must not be empty")
            if not custom_text.isprintable():
                raise ConfigurationError("custom prompt text must be typeable (no tabs, newlines or control characters)")
            return Prompt(text=custom_text, policy=policy)

        if parameter <= 0:
            raise ConfigurationError(f"{policy.value} count must be > 0")
        pool = [w for w in word_pool if w.strip()]
        if not pool:
            raise ConfigurationError("word pool is empty")

        if policy is PromptPolicy.WORDS:
            text = " ".join(self._sample(pool, parameter))
        else:
            text = " ".join(self._sentence(pool) for _ in range(parameter))
        return Prompt(text=text, policy=policy)

    def _sample(self, pool: Sequence[str], count: int) -> list[str]:
        return [self._rng.choice(pool).strip() for _ in range(count)]

    def _sentence(self, pool: Sequence[str]) -> str:
        n = self._rng.randint(SENTENCE_MIN_WORDS, SENTENCE_MAX_WORDS)
        words = self._sample(pool, n)
        words[0] = words[0][:1].upper() + words[0][1:]

        # Commas only after inner words, never before the terminal word.
        for i in range(1, n - 1):
            if self._rng.random() < _COMMA_CHANCE:
                words[i] += ","
        return " ".join(words) + self._rng.choice(_TERMINALS)
