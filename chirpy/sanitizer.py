"""Profanity masking and length checks for chirp bodies."""
from __future__ import annotations

from typing import FrozenSet

MAX_CHIRP_LENGTH = 140
MASK = "****"
BANNED_WORDS: FrozenSet[str] = frozenset({"kerfuffle", "sharbert", "fornax"})


class ChirpTooLongError(ValueError):
    """Raised when a chirp body exceeds :data:`MAX_CHIRP_LENGTH` characters."""

    def __init__(self, length: int) -> None:
        super().__init__(f"Chirp is {length} characters long (limit {MAX_CHIRP_LENGTH})")
        self.length = length


def clean_word(word: str) -> str:
    """Return :data:`MASK` if ``word`` is banned, ignoring case, else ``word``."""

    if word.lower() in BANNED_WORDS:
        return MASK
    return word


def clean_body(body: str) -> str:
    """Mask banned words in ``body``.

    Tokens are split on single spaces only, so punctuation stays attached to
    its word ("fornax!" is left alone) and runs of spaces survive unchanged.
    """

    return " ".join(clean_word(word) for word in body.split(" "))


def validate_length(body: str) -> str:
    """Return ``body`` unchanged or raise :class:`ChirpTooLongError`."""

    if len(body) > MAX_CHIRP_LENGTH:
        raise ChirpTooLongError(len(body))
    return body


__all__ = [
    "BANNED_WORDS",
    "ChirpTooLongError",
    "MASK",
    "MAX_CHIRP_LENGTH",
    "clean_body",
    "clean_word",
    "validate_length",
]
