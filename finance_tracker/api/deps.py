"""
Shared endpoint dependencies and error mapping.

Long-lived collaborators (event bus, receipt reader, insight
service) are created once in create_app() and stored on
app.state; endpoints receive them through these functions so
tests can override them.
"""

from fastapi import Header, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from finance_tracker.errors import (
    CollaboratorError,
    ConcurrentModificationError,
    FinanceTrackerError,
    NotFoundError,
    ValidationError,
)
from finance_tracker.events import EventBus
from finance_tracker.extraction.reader import ReceiptReader
from finance_tracker.services.insight_service import InsightService


def get_owner_id(x_owner_id: int = Header()) -> int:
    """The profile a request acts for."""
    return x_owner_id


def get_events(request: Request) -> EventBus:
    return request.app.state.events


def get_receipt_reader(request: Request) -> ReceiptReader:
    return request.app.state.receipt_reader


def get_insight_service(request: Request) -> InsightService:
    return request.app.state.insight_service


def commit(db: Session) -> None:
    """Commit, reporting database failures as application errors."""
    try:
        db.commit()
    except StaleDataError as e:
        raise ConcurrentModificationError(
            "Account was changed by another request; please retry"
        ) from e
    except SQLAlchemyError as e:
        raise CollaboratorError(f"Database write failed: {e}") from e


def http_error(error: FinanceTrackerError) -> HTTPException:
    """Map an application error to the HTTP status it is reported with."""
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, ValidationError):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, ConcurrentModificationError):
        return HTTPException(status_code=409, detail=str(error))
    if isinstance(error, CollaboratorError):
        return HTTPException(status_code=502, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))
