"""Slug Derivation — verifies natural keys derived from titles and key list hygiene."""

import pytest

from app.core.slugs import dedupe_keys, generate_slug


@pytest.mark.parametrize("text, expected", [
    ("Task Manager", "task-manager"),
    ("Task Manager 2.0", "task-manager-2-0"),
    ("  E-Commerce   Platform!  ", "e-commerce-platform"),
    ("Frontend Dev", "frontend-dev"),
    ("frontend---dev", "frontend-dev"),
    ("Café", "caf"),
])
def test_generate_slug(text, expected):
    assert generate_slug(text) == expected


def test_generate_slug_is_deterministic():
    assert generate_slug("Portfolio CMS") == generate_slug("Portfolio CMS")


@pytest.mark.parametrize("text", ["!!!", "日本語", "中文", "   ", ""])
def test_generate_slug_rejects_text_without_ascii_alnum(text):
    with pytest.raises(ValueError):
        generate_slug(text)


def test_generate_slug_keeps_ascii_part_of_mixed_text():
    assert generate_slug("日本語 Guide 2") == "guide-2"


def test_dedupe_keys_keeps_first_occurrence_order():
    assert dedupe_keys(["Vue", "React", "Vue", "Go"]) == ["Vue", "React", "Go"]


def test_dedupe_keys_strips_and_drops_blanks():
    assert dedupe_keys([" React ", "", "   ", "React"]) == ["React"]


def test_dedupe_keys_empty():
    assert dedupe_keys([]) == []
