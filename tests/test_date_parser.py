"""Tests for free-text date expression parsing."""

import datetime
from unittest.mock import patch
from zoneinfo import ZoneInfo

import pytest

from voice_planner.dialogs.nlp.date_parser import find_date_expression, remove_spans
from voice_planner.dialogs.nlp.task_parser import parse_task

# A Sunday.
NOW = datetime.datetime(2026, 3, 1, 10, 0, tzinfo=datetime.UTC)

_SEARCH_DATES = "voice_planner.dialogs.nlp.date_parser.search_dates"


class TestRelativeDays:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("today", datetime.date(2026, 3, 1)),
            ("tomorrow", datetime.date(2026, 3, 2)),
            ("the day after tomorrow", datetime.date(2026, 3, 3)),
            ("in 3 days", datetime.date(2026, 3, 4)),
            ("in two weeks", datetime.date(2026, 3, 15)),
            ("in a month", datetime.date(2026, 4, 1)),
            ("next week", datetime.date(2026, 3, 8)),
            ("next month", datetime.date(2026, 4, 1)),
        ],
    )
    def test_relative(self, text: str, expected: datetime.date) -> None:
        result = find_date_expression(text, now=NOW)
        assert result is not None
        assert result.value == expected

    def test_tonight(self) -> None:
        result = find_date_expression("tonight", now=NOW)
        assert result is not None
        assert result.value == datetime.datetime(2026, 3, 1, 20, 0, tzinfo=datetime.UTC)


class TestWeekdays:
    def test_friday(self) -> None:
        result = find_date_expression("friday", now=NOW)
        assert result is not None
        assert result.value == datetime.date(2026, 3, 6)

    def test_same_weekday_is_next_week(self) -> None:
        result = find_date_expression("sunday", now=NOW)
        assert result is not None
        assert result.value == datetime.date(2026, 3, 8)

    def test_next_monday(self) -> None:
        result = find_date_expression("next monday", now=NOW)
        assert result is not None
        assert result.value == datetime.date(2026, 3, 2)


class TestAbsoluteDates:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("march 15", datetime.date(2026, 3, 15)),
            ("15th of april", datetime.date(2026, 4, 15)),
            ("2026-06-15", datetime.date(2026, 6, 15)),
            ("3/20", datetime.date(2026, 3, 20)),
            ("dec 25, 2027", datetime.date(2027, 12, 25)),
            ("15.03.2026", datetime.date(2026, 3, 15)),
        ],
    )
    def test_absolute(self, text: str, expected: datetime.date) -> None:
        result = find_date_expression(text, now=NOW)
        assert result is not None
        assert result.value == expected

    def test_past_date_rolls_to_next_year(self) -> None:
        result = find_date_expression("january 10", now=NOW)
        assert result is not None
        assert result.value == datetime.date(2027, 1, 10)


class TestTimes:
    def test_day_and_time(self) -> None:
        result = find_date_expression("call mom tomorrow at 5pm", now=NOW)
        assert result is not None
        assert result.value == datetime.datetime(2026, 3, 2, 17, 0, tzinfo=datetime.UTC)
        assert result.spans == ((9, 17), (18, 24))

    def test_time_only_is_today(self) -> None:
        result = find_date_expression("at 14:30", now=NOW)
        assert result is not None
        assert result.value == datetime.datetime(2026, 3, 1, 14, 30, tzinfo=datetime.UTC)

    def test_noon(self) -> None:
        result = find_date_expression("lunch at noon", now=NOW)
        assert result is not None
        assert result.value == datetime.datetime(2026, 3, 1, 12, 0, tzinfo=datetime.UTC)

    def test_twelve_am(self) -> None:
        result = find_date_expression("tomorrow 12am", now=NOW)
        assert result is not None
        assert result.value == datetime.datetime(2026, 3, 2, 0, 0, tzinfo=datetime.UTC)

    def test_in_hours(self) -> None:
        result = find_date_expression("in 2 hours", now=NOW)
        assert result is not None
        assert result.value == datetime.datetime(2026, 3, 1, 12, 0, tzinfo=datetime.UTC)

    def test_naive_now_uses_default_timezone(self) -> None:
        result = find_date_expression("tonight", now=datetime.datetime(2026, 3, 1, 10, 0))
        assert result is not None
        assert result.value == datetime.datetime(2026, 3, 1, 20, 0, tzinfo=ZoneInfo("UTC"))


class TestSpans:
    def test_preposition_included(self) -> None:
        text = "submit report by friday"
        result = find_date_expression(text, now=NOW)
        assert result is not None
        assert result.spans == ((14, 23),)
        assert remove_spans(text, result.spans) == "submit report"

    def test_remove_trims_edge_words(self) -> None:
        assert remove_spans("move report to friday", ((15, 21),)) == "move report"

    def test_remove_nothing(self) -> None:
        assert remove_spans("buy milk", ()) == "buy milk"

    def test_dotted_date_removed(self) -> None:
        text = "meet john 15.03.2026"
        result = find_date_expression(text, now=NOW)
        assert result is not None
        assert remove_spans(text, result.spans) == "meet john"


class TestFallback:
    def test_no_date(self) -> None:
        with patch(_SEARCH_DATES, return_value=None):
            assert find_date_expression("buy milk", now=NOW) is None

    def test_empty(self) -> None:
        assert find_date_expression("", now=NOW) is None

    def test_dateparser_date(self) -> None:
        found = [("the 3rd", datetime.datetime(2026, 3, 3, 0, 0))]
        with patch(_SEARCH_DATES, return_value=found):
            result = find_date_expression("pay rent the 3rd", now=NOW)
        assert result is not None
        assert result.value == datetime.date(2026, 3, 3)
        assert result.spans == ((9, 16),)

    def test_dateparser_time_keeps_timezone(self) -> None:
        found = [("in half an hour", datetime.datetime(2026, 3, 1, 10, 30))]
        with patch(_SEARCH_DATES, return_value=found):
            result = find_date_expression("stretch in half an hour", now=NOW)
        assert result is not None
        assert result.value == datetime.datetime(2026, 3, 1, 10, 30, tzinfo=datetime.UTC)

    def test_ambiguous_word_skipped(self) -> None:
        found = [("may", datetime.datetime(2026, 5, 1, 0, 0))]
        with patch(_SEARCH_DATES, return_value=found):
            assert find_date_expression("you may call", now=NOW) is None

    def test_dateparser_error(self) -> None:
        with patch(_SEARCH_DATES, side_effect=ValueError("bad")):
            assert find_date_expression("some words", now=NOW) is None

    def test_number_without_date_word_skipped(self) -> None:
        found = [
            ("5", datetime.datetime(2026, 3, 5, 0, 0)),
            ("half past 5", datetime.datetime(2026, 3, 1, 17, 30)),
        ]
        with patch(_SEARCH_DATES, return_value=found):
            result = find_date_expression("read 5 pages half past 5", now=NOW)
        assert result is not None
        assert result.spans == ((13, 24),)

    def test_only_numbers_found(self) -> None:
        found = [("2025", datetime.datetime(2025, 3, 1, 0, 0))]
        with patch(_SEARCH_DATES, return_value=found):
            assert find_date_expression("file 2025 taxes", now=NOW) is None


class TestDateparserIntegration:
    def test_ordinal_day(self) -> None:
        text = "pay rent on the 15th"
        result = find_date_expression(text, now=NOW)
        assert result is not None
        assert result.value == datetime.date(2026, 3, 15)
        assert remove_spans(text, result.spans) == "pay rent"

    @pytest.mark.parametrize(
        "text", ["file 2025 taxes", "order 100 chairs", "buy milk", "pay the rent"]
    )
    def test_no_date(self, text: str) -> None:
        assert find_date_expression(text, now=NOW) is None

    @pytest.mark.parametrize("text", ["file 2025 taxes", "order 100 chairs"])
    def test_numbers_stay_in_name(self, text: str) -> None:
        result = parse_task(text, now=NOW)
        assert result.due is None
        assert result.cleaned_name == text
        assert result.task_name == text
