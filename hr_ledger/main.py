"""
HR Ledger Service: FastAPI application.

create_app() is the entry point. It validates settings, builds
the database engine and session factory, probes the database
once to choose the posting strategy, and registers all routers.
Run with:

    uvicorn hr_ledger.main:create_app --factory
"""

import logging

from fastapi import FastAPI
from sqlalchemy import Engine

from hr_ledger.config import Settings, get_settings
from hr_ledger.logging_config import setup_logging
from hr_ledger.models.base import build_engine, build_session_factory
from hr_ledger.services.numbering import select_number_generator
from hr_ledger.services.posting import select_poster
from hr_ledger.api.health import router as health_router
from hr_ledger.api.ledger import router as ledger_router
from hr_ledger.api.reference import router as reference_router

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    engine: Engine | None = None,
) -> FastAPI:
    """
    Build the application.

    Raises ConfigurationError on invalid settings, before any
    request is served.
    """
    settings = (settings or get_settings()).validate()
    setup_logging(settings.LOG_LEVEL)

    if engine is None:
        engine = build_engine(settings)

    numbers = select_number_generator(engine)
    poster = select_poster(engine, settings, numbers)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Double-entry accounting for the HR/payroll application",
        debug=settings.DEBUG,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.poster = poster

    # Register routers
    app.include_router(health_router)
    app.include_router(reference_router)
    app.include_router(ledger_router)

    logger.info(
        "%s %s started (%s, posting=%s)",
        settings.APP_NAME, settings.APP_VERSION,
        settings.ENVIRONMENT, poster.mode,
    )
    return app
