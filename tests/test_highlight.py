"""Tests for query-term highlighting."""

from __future__ import annotations

from semsearch.search import highlight, query_terms


def test_highlight_marks_matching_term() -> None:
    assert highlight("The quick fox", "quick") == "The <mark>quick</mark> fox"


def test_highlight_is_case_insensitive_and_preserves_case() -> None:
    assert highlight("The Quick fox", "QUICK") == "The <mark>Quick</mark> fox"


def test_highlight_ignores_single_letter_terms() -> None:
    assert highlight("a quick fox", "a quick") == "a <mark>quick</mark> fox"
    assert highlight("a quick fox", "a") == "a quick fox"


def test_highlight_marks_every_occurrence_of_every_term() -> None:
    result = highlight("fox and dog, fox again", "fox dog")

    assert result == "<mark>fox</mark> and <mark>dog</mark>, <mark>fox</mark> again"


def test_highlight_escapes_pattern_characters() -> None:
    assert highlight("price is $4.50 (approx)", "$4.50 (approx)") == (
        "price is <mark>$4.50</mark> <mark>(approx)</mark>"
    )
    assert highlight("a4x50", "4.50") == "a4x50"


def test_highlight_noop_for_empty_query() -> None:
    assert highlight("text stays", "") == "text stays"
    assert highlight("text stays", "   ") == "text stays"


def test_highlight_custom_markers() -> None:
    assert highlight("hot coffee", "coffee", open_tag="[", close_tag="]") == "hot [coffee]"


def test_query_terms_drops_short_terms() -> None:
    assert query_terms("  a bb  c ddd ") == ["bb", "ddd"]
