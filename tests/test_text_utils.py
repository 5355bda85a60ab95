"""Tests for text utility functions."""

from datetime import datetime, timezone

from blog_explorer.utils.text_utils import (
    collation_key,
    count_words,
    effective_timestamp,
    estimate_read_time,
    extract_text,
    format_date,
    parse_timestamp,
    pluralize,
)

from conftest import rich_text

JAN_1_2024 = 1704067200000


class TestExtractText:
    def test_text_leaf(self):
        assert extract_text({"text": "hello"}) == "hello"

    def test_children_joined_with_spaces(self):
        node = {"children": [{"text": "hello"}, {"text": "world"}]}
        assert extract_text(node) == "hello world"

    def test_text_and_children_both_contribute(self):
        node = {"text": "intro", "children": [{"text": "body"}]}
        assert extract_text(node) == "intro body"

    def test_list_members(self):
        assert extract_text([{"text": "a"}, "b", {"children": [{"text": "c"}]}]) == "a b c"

    def test_unknown_shapes_are_empty(self):
        assert extract_text(42) == ""
        assert extract_text(None) == ""
        assert extract_text({"type": "horizontalrule"}) == ""

    def test_deeply_nested_document(self):
        node = {"text": "deep"}
        for _ in range(5000):
            node = {"children": [node]}
        assert extract_text(node).strip() == "deep"


class TestCountWords:
    def test_basic_count(self):
        assert count_words("Hello world test") == 3

    def test_extra_whitespace(self):
        assert count_words("  Hello \n\t world  ") == 2

    def test_empty_string(self):
        assert count_words("") == 0
        assert count_words("   ") == 0


class TestReadTime:
    def test_four_hundred_words(self):
        assert estimate_read_time(rich_text(400)) == 2

    def test_no_words(self):
        assert estimate_read_time(rich_text(0)) is None

    def test_short_post_is_at_least_one_minute(self):
        assert estimate_read_time(rich_text(10)) == 1

    def test_half_rounds_up(self):
        assert estimate_read_time(rich_text(500)) == 3
        assert estimate_read_time(rich_text(499)) == 2

    def test_document_without_root(self):
        assert estimate_read_time({"children": [{"text": "just three words"}]}) == 1

    def test_malformed_documents(self):
        assert estimate_read_time(None) is None
        assert estimate_read_time({"root": None}) is None
        assert estimate_read_time(12) is None
        assert estimate_read_time({"root": {"children": "not a list"}}) is None


class TestTimestamps:
    def test_iso_with_z(self):
        assert parse_timestamp("2024-01-01T00:00:00.000Z") == JAN_1_2024

    def test_date_only_is_utc(self):
        assert parse_timestamp("2024-01-01") == JAN_1_2024

    def test_datetime_object(self):
        assert parse_timestamp(datetime(2024, 1, 1, tzinfo=timezone.utc)) == JAN_1_2024

    def test_invalid_values(self):
        assert parse_timestamp("not a date") == 0
        assert parse_timestamp("") == 0
        assert parse_timestamp(None) == 0
        assert parse_timestamp(12345) == 0

    def test_published_takes_precedence(self):
        assert effective_timestamp("2024-01-01", "2023-01-01") == JAN_1_2024

    def test_falls_back_to_created(self):
        assert effective_timestamp(None, "2024-01-01") == JAN_1_2024
        assert effective_timestamp("garbage", "2024-01-01") == JAN_1_2024

    def test_no_dates(self):
        assert effective_timestamp(None, None) == 0


class TestFormatDate:
    def test_format(self):
        assert format_date("2024-01-05T10:00:00Z") == "Jan 5, 2024"

    def test_invalid(self):
        assert format_date("soon") is None
        assert format_date(None) is None


class TestCollation:
    def test_case_insensitive(self):
        titles = ["Bravo", "alpha", "Charlie"]
        assert sorted(titles, key=collation_key) == ["alpha", "Bravo", "Charlie"]

    def test_lowercase_first_on_ties(self):
        assert sorted(["A", "a"], key=collation_key) == ["a", "A"]

    def test_accents_fold(self):
        assert sorted(["Éclair", "Eagle"], key=collation_key) == ["Eagle", "Éclair"]

    def test_missing_sorts_first(self):
        assert sorted(["b", None, "a"], key=collation_key) == [None, "a", "b"]


def test_pluralize():
    assert pluralize(1, "post") == "1 post"
    assert pluralize(0, "post") == "0 posts"
    assert pluralize(3, "post") == "3 posts"
