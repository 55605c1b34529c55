"""
Ledger API endpoints: transactions, monthly summary, integrity.

The API layer is thin. It handles HTTP concerns (status codes,
response formatting) and delegates all business logic to the
LedgerService.

Money amounts (totalAmount, debit, credit, category totals) are
JSON strings with two decimal places, e.g. "1000.00", so clients
never round-trip them through binary floats.
"""

from datetime import date

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from sqlalchemy.orm import Session

from hr_ledger.api.dependencies import get_app_settings, get_poster
from hr_ledger.config import Settings
from hr_ledger.exceptions import (
    ValidationFailed,
    PersistenceFailed,
    PartialWriteFailed,
)
from hr_ledger.models.base import get_db
from hr_ledger.models.enums import TransactionStatus
from hr_ledger.services.ledger_service import LedgerService
from hr_ledger.services.posting import TransactionPoster
from hr_ledger.schemas.ledger import (
    TransactionCreate,
    CreateTransactionResponse,
    TransactionResponse,
    SummaryResponse,
    IntegrityReport,
)

router = APIRouter(prefix="/accounting", tags=["Ledger"])


@router.post(
    "/transactions",
    response_model=CreateTransactionResponse,
    status_code=201,
)
def create_transaction(
    request: TransactionCreate,
    actor_id: int | None = Header(default=None, alias="X-Actor-Id"),
    db: Session = Depends(get_db),
    poster: TransactionPoster = Depends(get_poster),
):
    """
    Create a transaction with its entries.

    Entries must balance and each must be either a debit or a
    credit. Nothing is written when validation fails.
    """
    service = LedgerService(db, poster)
    try:
        txn = service.create_transaction(request, created_by=actor_id)
    except ValidationFailed as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except PartialWriteFailed as e:
        raise HTTPException(status_code=500, detail=str(e))
    except PersistenceFailed as e:
        raise HTTPException(status_code=503, detail=str(e))

    return CreateTransactionResponse(
        transaction_id=txn.id,
        transaction_number=txn.transaction_number,
    )


@router.get("/transactions", response_model=list[TransactionResponse])
def get_transactions(
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    status: TransactionStatus | None = Query(default=None),
    limit: int | None = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """List transactions newest first, each with nested entries."""
    if limit is None:
        limit = settings.DEFAULT_PAGE_SIZE
    limit = min(limit, settings.MAX_PAGE_SIZE)

    service = LedgerService(db)
    return service.get_transactions(
        start_date=start_date,
        end_date=end_date,
        status=status,
        limit=limit,
        offset=offset,
    )


@router.get(
    "/transactions/{transaction_id}",
    response_model=TransactionResponse,
)
def get_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
):
    """Get one transaction with its entries."""
    service = LedgerService(db)
    try:
        return service.get_transaction(transaction_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/summary", response_model=SummaryResponse)
def get_summary(
    month: int = Query(ge=1, le=12),
    year: int = Query(ge=1900, le=9999),
    db: Session = Depends(get_db),
):
    """
    Summarize posted transactions for a calendar month.

    Draft transactions are not counted.
    """
    service = LedgerService(db)
    return service.get_summary(month, year)


@router.get("/integrity", response_model=IntegrityReport)
def check_integrity(db: Session = Depends(get_db)):
    """
    Check that the ledger balances and has no orphaned headers.
    """
    service = LedgerService(db)
    return service.check_integrity()
