"""
Finance Tracker — FastAPI application.

This is the entry point for the application. All routers are
registered here, and the long-lived collaborators (event bus,
receipt reader, OpenAI client) are built once and attached to
app.state.
"""

import openai
from fastapi import FastAPI

from finance_tracker.config import Settings, get_settings
from finance_tracker.logging_config import configure_logging
from finance_tracker.events import EventBus
from finance_tracker.extraction.reader import ReceiptReader
from finance_tracker.services.insight_service import InsightService
from finance_tracker.api.health import router as health_router
from finance_tracker.api.profiles import router as profiles_router
from finance_tracker.api.accounts import router as accounts_router
from finance_tracker.api.categories import router as categories_router
from finance_tracker.api.transactions import router as transactions_router
from finance_tracker.api.receipts import router as receipts_router
from finance_tracker.api.reports import router as reports_router


def build_insight_service(settings: Settings, events: EventBus) -> InsightService:
    """Without an API key the service exists but reports itself uninitialised."""
    client = (
        openai.OpenAI(api_key=settings.OPENAI_API_KEY)
        if settings.OPENAI_API_KEY
        else None
    )
    return InsightService(
        client,
        model=settings.OPENAI_MODEL,
        temperature=settings.OPENAI_TEMPERATURE,
        max_tokens=settings.OPENAI_MAX_TOKENS,
        events=events,
    )


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Personal finance tracker with balance-consistent accounts",
    )

    events = EventBus()
    app.state.events = events
    app.state.receipt_reader = ReceiptReader.from_settings()
    app.state.insight_service = build_insight_service(settings, events)

    # Register routers
    app.include_router(health_router)
    app.include_router(profiles_router)
    app.include_router(accounts_router)
    app.include_router(categories_router)
    app.include_router(transactions_router)
    app.include_router(receipts_router)
    app.include_router(reports_router)
    return app


app = create_app()
