"""Tests for text normalisation and fingerprinting."""

from __future__ import annotations

import pytest

from semsearch.indexing import fingerprint, normalize_text


def test_normalize_collapses_whitespace_and_trims() -> None:
    assert normalize_text("  hello \t\n  world  ", 10) == "hello world"


def test_normalize_empty_input_yields_empty_output() -> None:
    assert normalize_text("", 5) == ""
    assert normalize_text(" \n\t ", 5) == ""


def test_normalize_truncates_to_max_tokens() -> None:
    k = 7
    text = " ".join(f"w{i}" for i in range(k + 5))

    normalized = normalize_text(text, k)

    assert normalized.split(" ") == [f"w{i}" for i in range(k)]


def test_normalize_keeps_text_at_exact_cap() -> None:
    assert normalize_text("a b c", 3) == "a b c"


@pytest.mark.parametrize(
    "text",
    [
        "",
        "single",
        "  lots   of\n\nspace  here ",
        "one two three four five six seven eight nine ten",
        "tabs\tand\r\nnewlines and nbsp",
    ],
)
@pytest.mark.parametrize("cap", [1, 3, 100])
def test_normalize_is_idempotent(text: str, cap: int) -> None:
    once = normalize_text(text, cap)
    assert normalize_text(once, cap) == once


def test_normalize_rejects_non_positive_cap() -> None:
    with pytest.raises(ValueError):
        normalize_text("anything", 0)


def test_fingerprint_is_lowercase_sha256_hex() -> None:
    digest = fingerprint("")

    assert digest == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
    assert len(fingerprint("hello")) == 64
    assert fingerprint("hello") == fingerprint("hello").lower()


def test_fingerprint_is_deterministic_and_distinguishes_texts() -> None:
    assert fingerprint("same text") == fingerprint("same text")
    assert fingerprint("same text") != fingerprint("same text ")
    assert fingerprint("café") != fingerprint("cafe")
