"""
Transaction posting strategies.

A poster writes one validated transaction: the header row in
accounting_transactions and its rows in accounting_entries.

AtomicPoster writes both in a single database transaction. It is
the default and the only strategy that is safe under concurrent
postings.

SequentialPoster commits the header, then the entries. It exists
for databases reached through connections that cannot hold a
multi-statement transaction. If the entries fail it deletes the
header again; if that also fails the header is orphaned and the
failure is logged as a data-integrity problem.

The strategy is chosen once, at startup, by select_poster().
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date

from sqlalchemy import Engine, delete, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hr_ledger.config import Settings
from hr_ledger.exceptions import PersistenceFailed, PartialWriteFailed
from hr_ledger.models.entry import Entry
from hr_ledger.models.enums import TransactionStatus
from hr_ledger.models.transaction import Transaction
from hr_ledger.services.numbering import TransactionNumberGenerator
from hr_ledger.services.validation import ValidatedTransaction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransactionHeader:
    """Header fields of a transaction about to be posted."""
    date: date
    description: str | None = None
    reference: str | None = None
    status: TransactionStatus = TransactionStatus.DRAFT
    created_by: int | None = None


class TransactionPoster(ABC):

    mode: str = "base"

    def __init__(self, numbers: TransactionNumberGenerator):
        self.numbers = numbers

    @abstractmethod
    def post(
        self,
        db: Session,
        header: TransactionHeader,
        validated: ValidatedTransaction,
    ) -> Transaction:
        """
        Persist the transaction and its entries, committing the session.

        Raises PersistenceFailed (or PartialWriteFailed) on store errors.
        """

    def _build_header(
        self,
        db: Session,
        header: TransactionHeader,
        validated: ValidatedTransaction,
    ) -> Transaction:
        return Transaction(
            transaction_number=self.numbers.next_number(db),
            date=header.date,
            description=header.description,
            reference=header.reference,
            status=header.status,
            total_amount=validated.total_amount,
            created_by=header.created_by,
        )

    def _build_entries(self, validated: ValidatedTransaction) -> list[Entry]:
        return [
            Entry(
                account_id=e.account_id,
                category_id=e.category_id,
                vendor_id=e.vendor_id,
                description=e.description,
                debit=e.debit,
                credit=e.credit,
            )
            for e in validated.entries
        ]


class AtomicPoster(TransactionPoster):

    mode = "atomic"

    def post(self, db, header, validated):
        try:
            txn = self._build_header(db, header, validated)
            txn.entries = self._build_entries(validated)
            db.add(txn)
            db.flush()
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to create transaction: %s", e)
            raise PersistenceFailed(
                f"Failed to create transaction: {e}"
            ) from e

        return txn


class SequentialPoster(TransactionPoster):

    mode = "sequential"

    def post(self, db, header, validated):
        try:
            txn = self._build_header(db, header, validated)
            db.add(txn)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to create transaction header: %s", e)
            raise PersistenceFailed(
                f"Failed to create transaction: {e}"
            ) from e

        transaction_id = txn.id
        try:
            self._write_entries(
                db, transaction_id, self._build_entries(validated)
            )
        except SQLAlchemyError as e:
            db.rollback()
            self._remove_header(db, transaction_id, e)

        # Both writes are committed; only the reload can fail here
        try:
            db.refresh(txn)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(
                "Transaction %s was saved but could not be reloaded: %s",
                transaction_id, e,
            )
            raise PersistenceFailed(
                f"Transaction {transaction_id} was saved but could not "
                f"be reloaded: {e}"
            ) from e
        return txn

    def _write_entries(
        self, db: Session, transaction_id: int, entries: list[Entry]
    ) -> None:
        for entry in entries:
            entry.transaction_id = transaction_id
        db.add_all(entries)
        db.commit()

    def _delete_header(self, db: Session, transaction_id: int) -> None:
        db.execute(
            delete(Transaction).where(Transaction.id == transaction_id)
        )
        db.commit()

    def _remove_header(
        self, db: Session, transaction_id: int, cause: SQLAlchemyError
    ) -> None:
        """Compensate for failed entries. Always raises PartialWriteFailed."""
        try:
            self._delete_header(db, transaction_id)
        except SQLAlchemyError as cleanup_error:
            db.rollback()
            logger.critical(
                "DATA INTEGRITY: transaction %s was written without its "
                "entries and could not be removed: %s (entries failed with: %s)",
                transaction_id, cleanup_error, cause,
            )
            raise PartialWriteFailed(
                f"Transaction {transaction_id} was saved without entries "
                f"and could not be rolled back: {cleanup_error}",
                transaction_id=transaction_id,
                header_removed=False,
            ) from cleanup_error

        logger.error(
            "Entries for transaction %s failed, header removed: %s",
            transaction_id, cause,
        )
        raise PartialWriteFailed(
            f"Failed to create transaction entries: {cause}",
            transaction_id=transaction_id,
            header_removed=True,
        ) from cause


def _supports_transactions(engine: Engine) -> bool:
    """Probe whether the database accepts an explicit transaction."""
    if engine.get_execution_options().get("isolation_level") == "AUTOCOMMIT":
        return False
    try:
        with engine.connect() as conn:
            trans = conn.begin()
            conn.execute(text("SELECT 1"))
            trans.rollback()
    except SQLAlchemyError as e:
        logger.warning("Transaction probe failed: %s", e)
        return False
    return True


def select_poster(
    engine: Engine,
    settings: Settings,
    numbers: TransactionNumberGenerator,
) -> TransactionPoster:
    """Pick the posting strategy from POSTER_MODE and the database."""
    mode = settings.POSTER_MODE
    if mode == "auto":
        mode = "atomic" if _supports_transactions(engine) else "sequential"

    if mode == "atomic":
        logger.info("Posting mode: atomic")
        return AtomicPoster(numbers)

    logger.warning(
        "Posting mode: sequential. Header and entries are committed "
        "separately; concurrent postings are not isolated"
    )
    return SequentialPoster(numbers)
