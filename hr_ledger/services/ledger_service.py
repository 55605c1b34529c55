"""
Ledger service: transactions, their entries, and summaries.

This service enforces the fundamental rules:
1. Every transaction must balance (debits = credits)
2. Each entry is either a debit or a credit, never both or neither
3. Referenced accounts must exist and be active
4. Referenced categories and vendors must exist

Validation happens before any write. Writing is delegated to the
poster chosen at startup (see services/posting.py).
"""

import calendar
import logging
from datetime import date
from decimal import Decimal

from sqlalchemy import select, func, case
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from hr_ledger.exceptions import (
    InvalidEntry,
    PersistenceFailed,
    ValidationFailed,
)
from hr_ledger.models.account import Account
from hr_ledger.models.category import Category
from hr_ledger.models.entry import Entry
from hr_ledger.models.enums import TransactionStatus
from hr_ledger.models.transaction import Transaction
from hr_ledger.models.vendor import Vendor
from hr_ledger.schemas.ledger import TransactionCreate
from hr_ledger.services.posting import TransactionHeader, TransactionPoster
from hr_ledger.services.validation import CENT, validate_entries

logger = logging.getLogger(__name__)

TOP_CATEGORY_COUNT = 10


def month_bounds(month: int, year: int) -> tuple[date, date]:
    """First and last calendar day of a month, both inclusive."""
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def _to_amount(value) -> Decimal:
    """Normalize a SUM() result, which may be None, float or Decimal."""
    if value is None:
        return Decimal("0").quantize(CENT)
    return Decimal(str(value)).quantize(CENT)


class LedgerService:
    """
    All transaction operations pass through this service.

    The service takes a database session as a constructor argument.
    Reads never commit. create_transaction commits through the poster,
    which owns the write boundary.
    """

    def __init__(self, db: Session, poster: TransactionPoster | None = None):
        self.db = db
        self.poster = poster

    def create_transaction(
        self, request: TransactionCreate, created_by: int | None = None
    ) -> Transaction:
        """
        Validate and post a transaction with its entries.

        If any check fails, nothing is written and a ValidationFailed
        subclass is raised. Store failures raise PersistenceFailed.
        """
        if self.poster is None:
            raise RuntimeError("LedgerService was built without a poster")

        try:
            validated = validate_entries(request.entries)
            self._check_references(request)
        except ValidationFailed as e:
            logger.info("Rejected transaction dated %s: %s", request.date, e)
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to look up transaction references: %s", e)
            raise PersistenceFailed(
                f"Failed to create transaction: {e}"
            ) from e

        txn = self.poster.post(
            self.db,
            TransactionHeader(
                date=request.date,
                description=request.description,
                reference=request.reference,
                status=request.status,
                created_by=created_by,
            ),
            validated,
        )
        logger.info(
            "Created transaction %s (id=%s, %s, total=%s, entries=%d)",
            txn.transaction_number, txn.id, txn.status.value,
            txn.total_amount, len(request.entries),
        )
        return txn

    def _check_references(self, request: TransactionCreate) -> None:
        """Every referenced account, category and vendor must exist."""
        account_ids = {e.account_id for e in request.entries}
        accounts = self.db.execute(
            select(Account).where(Account.id.in_(account_ids))
        ).scalars().all()
        accounts_by_id = {a.id: a for a in accounts}

        missing = account_ids - set(accounts_by_id)
        if missing:
            raise InvalidEntry(f"Accounts not found: {sorted(missing)}")

        inactive = sorted(a.code for a in accounts if not a.is_active)
        if inactive:
            raise InvalidEntry(f"Accounts not active: {inactive}")

        self._check_exist(
            Category, {e.category_id for e in request.entries}, "Categories"
        )
        self._check_exist(
            Vendor, {e.vendor_id for e in request.entries}, "Vendors"
        )

    def _check_exist(self, model, ids: set, label: str) -> None:
        ids.discard(None)
        if not ids:
            return
        found = set(self.db.execute(
            select(model.id).where(model.id.in_(ids))
        ).scalars().all())
        missing = ids - found
        if missing:
            raise InvalidEntry(f"{label} not found: {sorted(missing)}")

    def get_transaction(self, transaction_id: int) -> Transaction:
        """Get a transaction and its entries by ID."""
        txn = self.db.execute(
            select(Transaction)
            .options(selectinload(Transaction.entries))
            .where(Transaction.id == transaction_id)
        ).scalar_one_or_none()
        if not txn:
            raise ValueError(f"Transaction {transaction_id} not found")
        return txn

    def get_transactions(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
        status: TransactionStatus | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Transaction]:
        """
        List transactions newest first, each with its entries loaded.

        Both date bounds are inclusive.
        """
        if limit < 1:
            raise ValueError("limit must be positive")
        if offset < 0:
            raise ValueError("offset cannot be negative")

        query = select(Transaction).options(
            selectinload(Transaction.entries)
        )
        if start_date is not None:
            query = query.where(Transaction.date >= start_date)
        if end_date is not None:
            query = query.where(Transaction.date <= end_date)
        if status is not None:
            query = query.where(Transaction.status == status)

        query = (
            query.order_by(
                Transaction.date.desc(),
                Transaction.created_at.desc(),
                Transaction.id.desc(),
            )
            .limit(limit)
            .offset(offset)
        )
        return list(self.db.execute(query).scalars().all())

    def get_summary(self, month: int, year: int) -> dict:
        """
        Summarize posted transactions for one calendar month.

        Returns counts and totals plus per-category spend, where an
        entry contributes its nonzero side. Drafts are ignored. A month
        with no activity returns a zero-valued summary.
        """
        first_day, last_day = month_bounds(month, year)
        in_month = (
            Transaction.status == TransactionStatus.POSTED,
            Transaction.date >= first_day,
            Transaction.date <= last_day,
        )

        count, total = self.db.execute(
            select(
                func.count(Transaction.id),
                func.sum(Transaction.total_amount),
            ).where(*in_month)
        ).one()

        if not count:
            return {
                "total_transactions": 0,
                "total_amount": _to_amount(None),
                "categories": [],
                "top_categories": [],
            }

        entry_amount = case(
            (Entry.debit > 0, Entry.debit),
            else_=Entry.credit,
        )
        rows = self.db.execute(
            select(
                Entry.category_id,
                Category.name,
                func.sum(entry_amount),
            )
            .join(Transaction, Entry.transaction_id == Transaction.id)
            .outerjoin(Category, Entry.category_id == Category.id)
            .where(*in_month, Entry.category_id.is_not(None))
            .group_by(Entry.category_id, Category.name)
            .order_by(Entry.category_id)
        ).all()

        categories = [
            {"id": category_id, "name": name or "", "total": _to_amount(sum_)}
            for category_id, name, sum_ in rows
        ]
        # Stable sort: equal totals keep category id order
        categories.sort(key=lambda c: c["total"], reverse=True)

        return {
            "total_transactions": count,
            "total_amount": _to_amount(total),
            "categories": categories,
            "top_categories": categories[:TOP_CATEGORY_COUNT],
        }

    def check_integrity(self) -> dict:
        """
        Verify the ledger as a whole.

        Reports grand totals, transactions whose entries do not balance,
        and orphaned headers with no entries at all. The last can only
        appear after a sequential posting whose cleanup failed.
        """
        total_debits, total_credits = self.db.execute(
            select(func.sum(Entry.debit), func.sum(Entry.credit))
        ).one()
        total_debits = _to_amount(total_debits)
        total_credits = _to_amount(total_credits)

        # Compared in Python: some databases sum NUMERIC as float
        per_transaction = self.db.execute(
            select(
                Entry.transaction_id,
                func.sum(Entry.debit),
                func.sum(Entry.credit),
            )
            .group_by(Entry.transaction_id)
            .order_by(Entry.transaction_id)
        ).all()
        unbalanced = [
            transaction_id
            for transaction_id, debits, credits in per_transaction
            if _to_amount(debits) != _to_amount(credits)
        ]

        orphaned = self.db.execute(
            select(Transaction.id)
            .outerjoin(Entry, Entry.transaction_id == Transaction.id)
            .where(Entry.id.is_(None))
            .order_by(Transaction.id)
        ).scalars().all()

        difference = total_debits - total_credits
        return {
            "total_debits": total_debits,
            "total_credits": total_credits,
            "difference": difference,
            "is_balanced": difference == 0 and not unbalanced,
            "unbalanced_transaction_ids": unbalanced,
            "orphaned_transaction_ids": list(orphaned),
        }
