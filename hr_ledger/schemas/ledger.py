"""
Pydantic schemas for transactions, entries and summaries.

These define the API contract: what data comes in, what data
goes out. They are separate from the database models because
the API shape and the storage shape are often different.

Amounts are Decimal everywhere. A float never reaches the
validator.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import Field

from hr_ledger.models.enums import TransactionStatus
from hr_ledger.schemas.common import CamelModel


# --- Request Schemas ---

class EntryInput(CamelModel):
    """
    One line of a proposed transaction.

    The sign and debit/credit rules are checked by the validator,
    not here, so that they surface as ledger errors.
    """
    account_id: int = Field(gt=0)
    category_id: int | None = Field(default=None, gt=0)
    vendor_id: int | None = Field(default=None, gt=0)
    description: str | None = Field(default=None, max_length=255)
    debit: Decimal = Field(
        default=Decimal("0"), max_digits=15, decimal_places=2
    )
    credit: Decimal = Field(
        default=Decimal("0"), max_digits=15, decimal_places=2
    )


class TransactionCreate(CamelModel):
    """A complete transaction: header fields plus its entries."""
    date: date
    description: str | None = Field(default=None, max_length=500)
    reference: str | None = Field(default=None, max_length=100)
    status: TransactionStatus = TransactionStatus.DRAFT
    entries: list[EntryInput]


# --- Response Schemas ---

class EntryResponse(CamelModel):
    id: int
    transaction_id: int
    account_id: int
    category_id: int | None
    vendor_id: int | None
    description: str | None
    debit: Decimal
    credit: Decimal


class TransactionResponse(CamelModel):
    id: int
    transaction_number: str
    date: date
    description: str | None
    reference: str | None
    status: TransactionStatus
    total_amount: Decimal
    created_by: int | None
    created_at: datetime
    entries: list[EntryResponse]


class CreateTransactionResponse(CamelModel):
    """Response after creating a transaction."""
    success: bool = True
    transaction_id: int
    transaction_number: str


class CategoryTotal(CamelModel):
    id: int
    name: str
    total: Decimal


class SummaryResponse(CamelModel):
    """Posted activity for one calendar month."""
    total_transactions: int
    total_amount: Decimal
    categories: list[CategoryTotal]
    top_categories: list[CategoryTotal]


class IntegrityReport(CamelModel):
    total_debits: Decimal
    total_credits: Decimal
    difference: Decimal
    is_balanced: bool
    unbalanced_transaction_ids: list[int]
    orphaned_transaction_ids: list[int]
