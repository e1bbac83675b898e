"""
Pydantic schemas for reports and AI suggestions.
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel


class NamedAmount(BaseModel):
    name: str
    amount: Decimal


class ReportResponse(BaseModel):
    start_date: dt.date
    end_date: dt.date
    transaction_count: int
    total_income: Decimal
    total_expenses: Decimal
    average_expense: Decimal
    accounts_total: Decimal
    income_by_category: list[NamedAmount]
    expenses_by_category: list[NamedAmount]
    top_categories: list[NamedAmount]
    daily_totals: list[NamedAmount]
    monthly_trend: list[NamedAmount]


class SuggestionResponse(BaseModel):
    id: str
    text: str
    kind: str = "tip"


class InsightsResponse(BaseModel):
    suggestions: list[SuggestionResponse]
