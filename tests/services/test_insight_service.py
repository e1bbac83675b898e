"""
Tests for AI suggestions.

The OpenAI client is replaced by a small fake exposing
chat.completions.create, so no network call is made.
"""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import httpx
import openai
import pytest

from finance_tracker.errors import InsightError
from finance_tracker.events import ACCOUNTS_CHANGED, EXPENSES_CHANGED
from finance_tracker.models.enums import CategoryType
from finance_tracker.services.insight_service import (
    InsightService,
    Suggestion,
    build_prompt,
    parse_suggestions,
)
from finance_tracker.services.report_service import summarise


class FakeCompletions:

    def __init__(self, content="1. Cook at home\n2. Cancel unused subscriptions", error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_client(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def transactions():
    food = SimpleNamespace(name="Food", category_type=CategoryType.EXPENSE)
    return [
        SimpleNamespace(
            amount=Decimal("12.50"),
            description="Lunch",
            category=food,
            date=date(2024, 3, 2),
        ),
        SimpleNamespace(
            amount=Decimal("30.00"),
            description="",
            category=food,
            date=date(2024, 3, 1),
        ),
    ]


@pytest.fixture
def report():
    return summarise(transactions(), date(2024, 2, 1), date(2024, 3, 31))


class TestParseSuggestions:

    def test_one_per_line_numbering_removed(self):
        suggestions = parse_suggestions("1. Spend less\n\n2.  Save more \n")
        assert suggestions == [
            Suggestion(id="suggestion-0", text="Spend less"),
            Suggestion(id="suggestion-1", text="Save more"),
        ]

    def test_unnumbered_lines_kept(self):
        assert [s.text for s in parse_suggestions("Track daily spend")] == [
            "Track daily spend"
        ]

    def test_empty(self):
        assert parse_suggestions("") == []


class TestBuildPrompt:

    def test_includes_totals_and_recent(self, report):
        prompt = build_prompt(report, transactions())
        assert "Total Expenses: $42.50" in prompt
        assert "Average Expense: $21.25" in prompt
        assert "- Food: $42.50" in prompt
        assert "- $12.50 on Lunch (Food)" in prompt
        assert "- $30.00 on unspecified (Food)" in prompt


class TestInsightService:

    def test_generate_calls_model(self, report):
        completions = FakeCompletions()
        service = InsightService(fake_client(completions), model="gpt-4", max_tokens=123)

        suggestions = service.generate(report, transactions())

        assert [s.text for s in suggestions] == [
            "Cook at home",
            "Cancel unused subscriptions",
        ]
        call = completions.calls[0]
        assert call["model"] == "gpt-4"
        assert call["max_tokens"] == 123
        assert call["messages"][0]["role"] == "system"

    def test_no_client_raises(self, report):
        with pytest.raises(InsightError, match="not initialized"):
            InsightService(None).generate(report, transactions())

    def test_client_failure_raises(self, report):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        completions = FakeCompletions(error=openai.APIConnectionError(request=request))
        with pytest.raises(InsightError, match="Failed to generate suggestions"):
            InsightService(fake_client(completions)).generate(report, transactions())

    def test_no_transactions_skips_model(self):
        completions = FakeCompletions()
        service = InsightService(fake_client(completions))
        empty = summarise([], date(2024, 2, 1), date(2024, 3, 31))

        assert service.suggestions(1, empty, []) == []
        assert completions.calls == []

    def test_cached_until_expenses_change(self, report, events):
        completions = FakeCompletions()
        service = InsightService(fake_client(completions), events=events)

        first = service.suggestions(1, report, transactions(), cache_key=("march",))
        second = service.suggestions(1, report, transactions(), cache_key=("march",))
        assert first == second
        assert len(completions.calls) == 1

        # Other owners and other events leave the cache alone.
        events.publish(EXPENSES_CHANGED, {"owner_id": 2})
        events.publish(ACCOUNTS_CHANGED, {"owner_id": 1})
        service.suggestions(1, report, transactions(), cache_key=("march",))
        assert len(completions.calls) == 1

        events.publish(EXPENSES_CHANGED, {"owner_id": 1})
        service.suggestions(1, report, transactions(), cache_key=("march",))
        assert len(completions.calls) == 2

    def test_cache_keyed_by_query(self, report):
        completions = FakeCompletions()
        service = InsightService(fake_client(completions))

        service.suggestions(1, report, transactions(), cache_key=("march",))
        service.suggestions(1, report, transactions(), cache_key=("april",))
        assert len(completions.calls) == 2

    def test_only_latest_query_kept(self, report):
        completions = FakeCompletions()
        service = InsightService(fake_client(completions))

        service.suggestions(1, report, transactions(), cache_key=("march",))
        service.suggestions(1, report, transactions(), cache_key=("april",))
        service.suggestions(1, report, transactions(), cache_key=("march",))
        assert len(completions.calls) == 3

    def test_change_during_generation_is_not_cached(self, report, events):
        class ChangingCompletions(FakeCompletions):
            def create(self, **kwargs):
                response = super().create(**kwargs)
                if len(self.calls) == 1:
                    # A transaction is saved while the model is answering.
                    events.publish(EXPENSES_CHANGED, {"owner_id": 1})
                    self.content = "fresh advice"
                return response

        completions = ChangingCompletions(content="stale advice")
        service = InsightService(fake_client(completions), events=events)

        first = service.suggestions(1, report, transactions())
        second = service.suggestions(1, report, transactions())

        assert [s.text for s in first] == ["stale advice"]
        assert [s.text for s in second] == ["fresh advice"]
        assert len(completions.calls) == 2
