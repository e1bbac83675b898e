"""Business logic services."""

from finance_tracker.services.profile_service import ProfileService
from finance_tracker.services.account_service import AccountService
from finance_tracker.services.category_service import CategoryService
from finance_tracker.services.transaction_service import TransactionService
from finance_tracker.services.report_service import ReportService
from finance_tracker.services.insight_service import InsightService

__all__ = [
    "ProfileService",
    "AccountService",
    "CategoryService",
    "TransactionService",
    "ReportService",
    "InsightService",
]
