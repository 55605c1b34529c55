"""
Transaction model.

The header of a double-entry transaction. A transaction owns
its entries and is the unit of atomicity: either the header
and all of its entries exist, or none of them do.

transaction_number is unique. It is either taken from the
counter table or, when that is unavailable, generated from
the clock (see services/numbering.py).
"""

from datetime import date as calendar_date, datetime
from decimal import Decimal

from sqlalchemy import (
    String, Date, DateTime, Numeric, Integer,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hr_ledger.models.base import Base
from hr_ledger.models.enums import TransactionStatus


class Transaction(Base):
    __tablename__ = "accounting_transactions"

    id: Mapped[int] = mapped_column(primary_key=True)
    transaction_number: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False, index=True
    )
    date: Mapped[calendar_date] = mapped_column(Date, nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(
        String(500), nullable=True
    )
    reference: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )
    status: Mapped[TransactionStatus] = mapped_column(
        SAEnum(
            TransactionStatus,
            name="transaction_status_enum",
            create_constraint=True,
            values_callable=lambda enum: [e.value for e in enum],
        ),
        nullable=False,
        default=TransactionStatus.DRAFT,
        index=True,
    )
    total_amount: Mapped[Decimal] = mapped_column(
        Numeric(15, 2), nullable=False
    )
    # Actor id supplied by the caller, kept for audit
    created_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    entries: Mapped[list["Entry"]] = relationship(
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="Entry.id",
    )

    def __repr__(self) -> str:
        return (
            f"<Transaction {self.transaction_number} "
            f"{self.total_amount} ({self.status.value})>"
        )
