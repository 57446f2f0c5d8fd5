from __future__ import annotations

import pytest

from chirpy.sanitizer import (
    MAX_CHIRP_LENGTH,
    ChirpTooLongError,
    clean_body,
    validate_length,
)


@pytest.mark.parametrize(
    ("body", "expected"),
    [
        ("I had a kerfuffle today", "I had a **** today"),
        ("Sharbert and FORNAX", "**** and ****"),
        ("nothing to see here", "nothing to see here"),
        ("kerfuffle! is punctuated", "kerfuffle! is punctuated"),
        ("", ""),
    ],
)
def test_clean_body_masks_banned_words(body: str, expected: str) -> None:
    assert clean_body(body) == expected


def test_clean_body_preserves_repeated_spaces() -> None:
    assert clean_body("hello  kerfuffle   world ") == "hello  ****   world "


def test_clean_body_does_not_mask_substrings() -> None:
    assert clean_body("fornaxes kerfuffled") == "fornaxes kerfuffled"


def test_validate_length_accepts_limit() -> None:
    body = "a" * MAX_CHIRP_LENGTH
    assert validate_length(body) == body


def test_validate_length_rejects_longer_bodies() -> None:
    with pytest.raises(ChirpTooLongError) as excinfo:
        validate_length("a" * (MAX_CHIRP_LENGTH + 1))
    assert excinfo.value.length == MAX_CHIRP_LENGTH + 1
