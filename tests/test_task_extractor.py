"""Tests for the heuristic task extractor."""

from datetime import date

import pytest

from better_projects_ai.models.domain import TaskPriority
from better_projects_ai.services import task_extractor
from better_projects_ai.services.task_extractor import Rule, apply_rules, extract, parse_date

TODAY = date(2024, 5, 1)  # a Wednesday


class TestExtract:
    """Free text -> draft."""

    def test_urgent_bug(self):
        draft = extract("Fix login bug urgent")

        assert draft.title == "Fix login bug urgent"
        assert draft.description is None
        assert draft.priority == TaskPriority.HIGHEST
        assert draft.tags == ["bug"]
        assert draft.estimated_hours is None
        assert draft.due_date is None

    def test_title_splits_at_first_period(self):
        draft = extract("Design the new icon set. Needs about 3 hours.")

        assert draft.title == "Design the new icon set."
        assert draft.description == "Needs about 3 hours."
        assert draft.estimated_hours == 3
        assert draft.priority == TaskPriority.MEDIUM
        assert draft.tags == ["design"]

    def test_multiline_text_uses_first_line_as_title(self):
        draft = extract("Refactor login form\nMove validation to the frontend\nAdd tests")

        assert draft.title == "Refactor login form"
        assert draft.description == "Move validation to the frontend\nAdd tests"
        assert "frontend" in draft.tags

    def test_low_priority_with_tags(self):
        draft = extract("Write API documentation, low priority")

        assert draft.priority == TaskPriority.LOW
        assert draft.tags == ["api", "documentation"]

    def test_takes_n_hours(self):
        draft = extract("Important: update the backend, takes 5 hours")

        assert draft.priority == TaskPriority.HIGH
        assert draft.estimated_hours == 5
        assert draft.tags == ["backend"]

    def test_iso_due_date(self):
        draft = extract("Ship release notes due 2024-06-01")

        assert draft.due_date == date(2024, 6, 1)

    @pytest.mark.parametrize("text", ["", "   ", "\n\n", None])
    def test_empty_text_gets_placeholder_title(self, text):
        draft = extract(text)

        assert draft.title == task_extractor.UNTITLED
        assert draft.priority == TaskPriority.MEDIUM
        assert draft.tags is None

    def test_long_title_is_truncated(self):
        draft = extract("A" * 80)

        assert draft.title == "A" * 57 + "…"
        assert len(draft.title) == 58

    def test_decimal_hours_are_not_misread(self):
        draft = extract("Pair on the release for 2.5 hours")

        assert draft.estimated_hours is None


class TestRules:
    """Rule ordering: the first matching rule per field wins."""

    def test_highest_beats_low(self):
        fields = apply_rules("urgent, though low priority otherwise")

        assert fields["priority"] == TaskPriority.HIGHEST

    def test_custom_rules_are_evaluated_in_order(self):
        rules = [
            Rule("first", "priority", lambda t: True, lambda t: TaskPriority.LOWEST),
            Rule("second", "priority", lambda t: True, lambda t: TaskPriority.HIGHEST),
        ]

        assert apply_rules("anything", rules) == {"priority": TaskPriority.LOWEST}

    def test_rule_raising_value_error_is_skipped(self):
        def broken(_):
            raise ValueError("bad input")

        rules = [
            Rule("broken", "estimated_hours", lambda t: True, broken),
            Rule("fallback", "estimated_hours", lambda t: True, lambda t: 2),
        ]

        assert apply_rules("anything", rules) == {"estimated_hours": 2}

    def test_rule_returning_none_leaves_field_open(self):
        rules = [
            Rule("nothing", "tags", lambda t: True, lambda t: None),
            Rule("something", "tags", lambda t: True, lambda t: ["ui"]),
        ]

        assert apply_rules("anything", rules) == {"tags": ["ui"]}


class TestParseDate:
    @pytest.mark.parametrize(
        "phrase,expected",
        [
            ("today", date(2024, 5, 1)),
            ("tomorrow", date(2024, 5, 2)),
            ("friday", date(2024, 5, 3)),
            ("next monday", date(2024, 5, 6)),
            ("Wednesday", date(2024, 5, 8)),
            ("2024-06-01", date(2024, 6, 1)),
            ("12/25/2024", date(2024, 12, 25)),
            ("June 1", date(2024, 6, 1)),
            ("March 5th", date(2025, 3, 5)),
            ("July 4, 2025", date(2025, 7, 4)),
        ],
    )
    def test_phrases(self, phrase, expected):
        assert parse_date(phrase, today=TODAY) == expected

    @pytest.mark.parametrize("phrase", ["", "the weekend", "5 hours", "2024-13-40"])
    def test_not_a_date(self, phrase):
        assert parse_date(phrase, today=TODAY) is None

    def test_due_phrase_stops_at_longest_date_prefix(self):
        assert task_extractor._due_date("Finish by June 3rd, please", today=TODAY) == "2024-06-03"

    def test_first_due_phrase_wins(self):
        text = "Sync on the roadmap. Due tomorrow, then by friday"

        assert task_extractor._due_date(text, today=TODAY) == "2024-05-02"
