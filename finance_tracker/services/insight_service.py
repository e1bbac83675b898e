"""
Insight service — AI spending suggestions.

Builds an advisor prompt from a report and the most recent
transactions, sends it to a chat-completions model and turns
the answer into one suggestion per line.

The OpenAI client is created once at application start and
passed in. Each owner's latest suggestions are cached by
query; the entry is dropped as soon as that owner's
transactions change, so the next request asks the model again.
"""

import re
import threading
from dataclasses import dataclass

import openai
import structlog

from finance_tracker.errors import InsightError
from finance_tracker.events import Event, EventBus, EXPENSES_CHANGED
from finance_tracker.models.transaction import Transaction
from finance_tracker.services.report_service import Report

logger = structlog.get_logger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful financial advisor providing specific, actionable "
    "advice based on expense data analysis."
)

RECENT_TRANSACTION_COUNT = 5

_NUMBERING = re.compile(r"^\d+\.\s*")


@dataclass(frozen=True)
class Suggestion:
    id: str
    text: str
    kind: str = "tip"


def build_prompt(report: Report, recent: list[Transaction]) -> str:
    top = "\n".join(
        f"- {item.name}: ${item.amount:.2f}" for item in report.top_categories
    )
    trend = "\n".join(
        f"- {item.name}: ${item.amount:.2f}" for item in report.monthly_trend
    )
    excerpts = "\n".join(
        f"- ${txn.amount:.2f} on {txn.description or 'unspecified'} "
        f"({txn.category.name if txn.category else 'Uncategorized'})"
        for txn in recent[:RECENT_TRANSACTION_COUNT]
    )
    return (
        "As a financial advisor, analyze this expense data and provide "
        "actionable insights:\n\n"
        f"Total Expenses: ${report.total_expenses:.2f}\n"
        f"Average Expense: ${report.average_expense:.2f}\n\n"
        f"Top spending categories:\n{top}\n\n"
        f"Monthly trend:\n{trend}\n\n"
        f"Recent expenses:\n{excerpts}\n\n"
        "Provide 3-5 specific, actionable recommendations to help optimize "
        "spending, including:\n"
        "1. Identify potential areas of overspending\n"
        "2. Suggest specific ways to reduce expenses\n"
        "3. Point out any concerning patterns or trends\n"
        "4. Recommend budgeting strategies\n"
        "Keep each recommendation concise but specific."
    )


def parse_suggestions(content: str) -> list[Suggestion]:
    """One suggestion per non-blank line, list numbering removed."""
    lines = [line.strip() for line in content.splitlines() if line.strip()]
    return [
        Suggestion(id=f"suggestion-{index}", text=_NUMBERING.sub("", line).strip())
        for index, line in enumerate(lines)
    ]


class InsightService:

    def __init__(
        self,
        client: openai.OpenAI | None,
        model: str = "gpt-4",
        temperature: float = 0.7,
        max_tokens: int = 500,
        events: EventBus | None = None,
    ):
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        # Only the latest query per owner is kept.
        self._cache: dict[int, tuple[tuple, list[Suggestion]]] = {}
        # Bumped on every change; a result generated under an older
        # generation is returned but never cached.
        self._generation: dict[int, int] = {}
        self._lock = threading.Lock()
        if events is not None:
            events.subscribe(EXPENSES_CHANGED, self._on_expenses_changed)

    def _on_expenses_changed(self, event: Event) -> None:
        owner_id = event.payload.get("owner_id")
        with self._lock:
            self._cache.pop(owner_id, None)
            self._generation[owner_id] = self._generation.get(owner_id, 0) + 1

    def suggestions(
        self,
        owner_id: int,
        report: Report,
        recent: list[Transaction],
        cache_key: tuple = (),
    ) -> list[Suggestion]:
        """
        Suggestions for a report, from cache when nothing changed.

        No transactions means nothing to analyse: an empty list is
        returned without calling the model.
        """
        if not report.transaction_count:
            return []

        with self._lock:
            entry = self._cache.get(owner_id)
            generation = self._generation.get(owner_id, 0)
        if entry is not None and entry[0] == cache_key:
            return entry[1]

        result = self.generate(report, recent)
        with self._lock:
            if self._generation.get(owner_id, 0) == generation:
                self._cache[owner_id] = (cache_key, result)
            else:
                logger.info("insight_discarded_stale", owner_id=owner_id)
        return result

    def generate(self, report: Report, recent: list[Transaction]) -> list[Suggestion]:
        if self.client is None:
            raise InsightError("AI service not initialized")

        prompt = build_prompt(report, recent)
        logger.info("insight_request", model=self.model, prompt_chars=len(prompt))
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except openai.OpenAIError as e:
            logger.error("insight_request_failed", error=str(e))
            raise InsightError(f"Failed to generate suggestions: {e}") from e

        content = response.choices[0].message.content or ""
        return parse_suggestions(content)
