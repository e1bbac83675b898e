"""
Tests for the report and insight endpoints.
"""

from datetime import date

import pytest

from finance_tracker.api.deps import get_insight_service
from finance_tracker.api.reports import default_range
from finance_tracker.errors import InsightError
from finance_tracker.services.insight_service import Suggestion


@pytest.fixture
def headers(owner):
    return {"X-Owner-Id": str(owner.id)}


WINDOW = {"start_date": "2024-03-01", "end_date": "2024-03-31"}


def record(client, headers, amount, category, day="2024-03-10"):
    response = client.post(
        "/transactions",
        json={"amount": amount, "category_id": category.id, "date": day},
        headers=headers,
    )
    assert response.status_code == 201


class StubInsights:

    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def suggestions(self, owner_id, report, recent, cache_key=()):
        self.calls.append((owner_id, report.transaction_count, len(recent), cache_key))
        if self.error is not None:
            raise self.error
        return [Suggestion(id="suggestion-0", text="Cook at home")]


class TestDefaultRange:

    def test_mid_year(self):
        assert default_range(date(2024, 3, 15)) == (date(2024, 2, 1), date(2024, 3, 31))

    def test_january(self):
        assert default_range(date(2024, 1, 31)) == (date(2023, 12, 1), date(2024, 1, 31))

    def test_december(self):
        assert default_range(date(2023, 12, 1)) == (date(2023, 11, 1), date(2023, 12, 31))


class TestReport:

    def test_totals(self, client, headers, make_account, expense_category, income_category):
        make_account(balance="10.00")
        record(client, headers, "12.00", expense_category)
        record(client, headers, "8.00", expense_category, day="2024-03-11")
        record(client, headers, "100.00", income_category)
        record(client, headers, "99.00", expense_category, day="2024-04-01")

        response = client.get("/reports", params=WINDOW, headers=headers)

        assert response.status_code == 200
        data = response.json()
        assert data["transaction_count"] == 3
        assert float(data["total_expenses"]) == 20.00
        assert float(data["total_income"]) == 100.00
        assert float(data["average_expense"]) == 10.00
        assert float(data["accounts_total"]) == 10.00
        assert [c["name"] for c in data["top_categories"]] == ["Groceries"]
        assert [m["name"] for m in data["monthly_trend"]] == ["2024-03"]

    def test_inverted_range(self, client, headers):
        response = client.get(
            "/reports",
            params={"start_date": "2024-04-01", "end_date": "2024-03-01"},
            headers=headers,
        )
        assert response.status_code == 400

    def test_default_window(self, client, headers):
        response = client.get("/reports", headers=headers)
        start, end = default_range(date.today())
        assert response.json()["start_date"] == start.isoformat()
        assert response.json()["end_date"] == end.isoformat()


class TestInsights:

    def test_suggestions(self, client, headers, expense_category, override_dependency):
        stub = StubInsights()
        override_dependency(get_insight_service, stub)
        record(client, headers, "12.00", expense_category)

        response = client.get("/reports/insights", params=WINDOW, headers=headers)

        assert response.status_code == 200
        assert response.json() == {
            "suggestions": [
                {"id": "suggestion-0", "text": "Cook at home", "kind": "tip"}
            ]
        }
        owner_id, count, recent, cache_key = stub.calls[0]
        assert (count, recent) == (1, 1)
        assert cache_key == (date(2024, 3, 1), date(2024, 3, 31), None)

    def test_service_unavailable(self, client, headers, expense_category, override_dependency):
        override_dependency(
            get_insight_service, StubInsights(error=InsightError("AI service not initialized"))
        )
        record(client, headers, "12.00", expense_category)

        response = client.get("/reports/insights", params=WINDOW, headers=headers)

        assert response.status_code == 502
        assert response.json()["detail"] == "AI service not initialized"
