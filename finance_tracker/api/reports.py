"""
Report and AI-suggestion endpoints.

Both default to the window the reports view opens with: from
the start of last month to the end of this month.
"""

from datetime import date, timedelta

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from finance_tracker.api.deps import get_insight_service, get_owner_id, http_error
from finance_tracker.errors import FinanceTrackerError, ValidationError
from finance_tracker.models.base import get_db
from finance_tracker.schemas.report import (
    InsightsResponse,
    ReportResponse,
    SuggestionResponse,
)
from finance_tracker.services.insight_service import InsightService
from finance_tracker.services.report_service import ReportService

router = APIRouter(prefix="/reports", tags=["Reports"])


def default_range(today: date) -> tuple[date, date]:
    """Start of the previous month to the end of the current month."""
    this_month = today.replace(day=1)
    start = (this_month - timedelta(days=1)).replace(day=1)
    next_month = (this_month + timedelta(days=32)).replace(day=1)
    return start, next_month - timedelta(days=1)


def _resolve_range(start_date: date | None, end_date: date | None) -> tuple[date, date]:
    default_start, default_end = default_range(date.today())
    start = start_date or default_start
    end = end_date or default_end
    if start > end:
        raise ValidationError("start_date must not be after end_date")
    return start, end


@router.get("", response_model=ReportResponse)
def get_report(
    start_date: date | None = None,
    end_date: date | None = None,
    category_id: int | None = None,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """Totals, category breakdown, daily and monthly spending."""
    try:
        start, end = _resolve_range(start_date, end_date)
        report = ReportService(db).build(owner_id, start, end, category_id)
    except FinanceTrackerError as e:
        raise http_error(e)
    return ReportResponse.model_validate(report, from_attributes=True)


@router.get("/insights", response_model=InsightsResponse)
def get_insights(
    start_date: date | None = None,
    end_date: date | None = None,
    category_id: int | None = None,
    owner_id: int = Depends(get_owner_id),
    db: Session = Depends(get_db),
    insights: InsightService = Depends(get_insight_service),
):
    """AI suggestions for the same window as the report."""
    try:
        start, end = _resolve_range(start_date, end_date)
        service = ReportService(db)
        transactions = service.transactions(owner_id, start, end, category_id)
        report = service.build(
            owner_id, start, end, category_id, transactions=transactions
        )
        suggestions = insights.suggestions(
            owner_id,
            report,
            transactions,
            cache_key=(start, end, category_id),
        )
    except FinanceTrackerError as e:
        raise http_error(e)

    return InsightsResponse(
        suggestions=[
            SuggestionResponse(id=s.id, text=s.text, kind=s.kind)
            for s in suggestions
        ]
    )
