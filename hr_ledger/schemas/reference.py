"""
Pydantic schemas for reference data: accounts, categories, vendors.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import Field

from hr_ledger.models.enums import AccountType
from hr_ledger.schemas.common import CamelModel


# --- Account Schemas ---

class AccountCreate(CamelModel):
    """Request to create a new account in the chart of accounts."""
    code: str = Field(min_length=1, max_length=20)
    name: str = Field(min_length=1, max_length=100)
    account_type: AccountType = Field(alias="type")
    parent_id: int | None = Field(default=None, gt=0)
    balance: Decimal = Field(
        default=Decimal("0"), max_digits=15, decimal_places=2
    )


class AccountResponse(CamelModel):
    id: int
    code: str
    name: str
    account_type: AccountType = Field(alias="type")
    parent_id: int | None
    balance: Decimal
    is_active: bool
    created_at: datetime


# --- Category Schemas ---

class CategoryCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=255)


class CategoryResponse(CamelModel):
    id: int
    name: str
    description: str | None
    is_active: bool
    created_at: datetime


# --- Vendor Schemas ---

class VendorCreate(CamelModel):
    name: str = Field(min_length=1, max_length=150)
    contact_email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=30)


class VendorResponse(CamelModel):
    id: int
    name: str
    contact_email: str | None
    phone: str | None
    is_active: bool
    created_at: datetime
