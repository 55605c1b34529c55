"""
Health check endpoint.

Used by load balancers, monitoring systems, and humans
to verify the application is running and responsive.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hr_ledger.api.dependencies import get_poster
from hr_ledger.models.base import get_db
from hr_ledger.services.posting import TransactionPoster

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(
    db: Session = Depends(get_db),
    poster: TransactionPoster = Depends(get_poster),
):
    """
    Return application health status including database connectivity.

    posting_mode tells operators whether transactions are written
    atomically or with the sequential fallback.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError as e:
        logger.warning("Health check database probe failed: %s", e)
        db_status = "unhealthy"

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "service": "hr-ledger",
        "database": db_status,
        "posting_mode": poster.mode,
        "transaction_numbers": poster.numbers.name,
    }
