"""Built-in word pools.

Pools are plain tuples of lowercase words. The engine treats them as opaque
candidate lists; only the names are part of the configuration surface.
"""

from __future__ import annotations

from .errors import ConfigurationError

DEFAULT_POOL = "english100"

_ENGLISH_100 = (
    "the", "be", "of", "and", "a", "to", "in", "he", "have", "it",
    "that", "for", "they", "with", "as", "not", "on", "she", "at", "by",
    "this", "we", "you", "do", "but", "from", "or", "which", "one", "would",
    "all", "will", "there", "say", "who", "make", "when", "can", "more", "if",
    "no", "man", "out", "other", "so", "what", "time", "up", "go", "about",
    "than", "into", "could", "state", "only", "new", "year", "some", "take", "come",
    "these", "know", "see", "use", "get", "like", "then", "first", "any", "work",
    "now", "may", "such", "give", "over", "think", "most", "even", "find", "day",
    "also", "after", "way", "many", "must", "look", "before", "great", "back", "through",
    "long", "where", "much", "should", "well", "people", "down", "own", "just", "because",
)

_ENGLISH_200_EXTRA = (
    "good", "same", "tell", "each", "follow", "point", "house", "world", "still", "hand",
    "high", "place", "small", "turn", "last", "child", "between", "under", "never", "again",
    "thing", "part", "might", "course", "large", "number", "group", "problem", "while", "system",
    "order", "open", "seem", "both", "play", "show", "school", "move", "right", "feel",
    "leave", "help", "begin", "around", "life", "against", "however", "another", "present", "line",
    "hold", "write", "early", "without", "water", "city", "since", "across", "become", "word",
    "local", "public", "family", "during", "always", "away", "friend", "often", "keep", "read",
    "change", "night", "study", "later", "light", "ground", "nation", "young", "letter", "sound",
    "story", "paper", "carry", "river", "began", "plant", "close", "music", "color", "watch",
    "north", "south", "simple", "travel", "fast", "slow", "quiet", "loud", "answer", "question",
)

_POOLS: dict[str, tuple[str, ...]] = {
    "english100": _ENGLISH_100,
    "english200": _ENGLISH_100 + _ENGLISH_200_EXTRA,
}


def available_pools() -> list[str]:
    return sorted(_POOLS)


def word_pool(name: str) -> tuple[str, ...]:
    """Return the named pool, or raise ConfigurationError for unknown names."""

    try:
        return _POOLS[name]
    except KeyError:
        known = ", ".join(available_pools())
        raise ConfigurationError(f"unknown word list {name!r} (expected one of: {known})") from None
