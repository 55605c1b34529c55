"""
Reference data API endpoints: accounts, categories, vendors.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from hr_ledger.models.base import get_db
from hr_ledger.services.reference_service import ReferenceService
from hr_ledger.schemas.reference import (
    AccountCreate,
    AccountResponse,
    CategoryCreate,
    CategoryResponse,
    VendorCreate,
    VendorResponse,
)

router = APIRouter(prefix="/accounting", tags=["Reference data"])


# --- Account Endpoints ---

@router.post("/accounts", response_model=AccountResponse, status_code=201)
def create_account(
    request: AccountCreate,
    db: Session = Depends(get_db),
):
    """
    Create a new account.

    Every account in the chart of accounts must be created
    before entries can be posted to it.
    """
    service = ReferenceService(db)
    try:
        account = service.create_account(request)
        db.commit()
        return account
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/accounts", response_model=list[AccountResponse])
def get_accounts(db: Session = Depends(get_db)):
    """Active accounts, ordered by code."""
    return ReferenceService(db).get_accounts()


# --- Category Endpoints ---

@router.post("/categories", response_model=CategoryResponse, status_code=201)
def create_category(
    request: CategoryCreate,
    db: Session = Depends(get_db),
):
    service = ReferenceService(db)
    try:
        category = service.create_category(request)
        db.commit()
        return category
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/categories", response_model=list[CategoryResponse])
def get_categories(db: Session = Depends(get_db)):
    """Active categories, ordered by name."""
    return ReferenceService(db).get_categories()


# --- Vendor Endpoints ---

@router.post("/vendors", response_model=VendorResponse, status_code=201)
def create_vendor(
    request: VendorCreate,
    db: Session = Depends(get_db),
):
    service = ReferenceService(db)
    try:
        vendor = service.create_vendor(request)
        db.commit()
        return vendor
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/vendors", response_model=list[VendorResponse])
def get_vendors(db: Session = Depends(get_db)):
    """Active vendors, ordered by name."""
    return ReferenceService(db).get_vendors()
