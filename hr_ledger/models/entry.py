"""
Entry model.

Each entry is one line of a double-entry transaction. Exactly
one of debit and credit is positive, the other is zero. That
rule, and the rule that a transaction's debits equal its
credits, is enforced by services/validation.py before anything
is written; the CHECK constraints are a last line at the
database.
"""

from decimal import Decimal

from sqlalchemy import String, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hr_ledger.models.base import Base


class Entry(Base):
    __tablename__ = "accounting_entries"
    __table_args__ = (
        CheckConstraint("debit >= 0", name="ck_entry_debit_non_negative"),
        CheckConstraint("credit >= 0", name="ck_entry_credit_non_negative"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    transaction_id: Mapped[int] = mapped_column(
        ForeignKey("accounting_transactions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounting_accounts.id"), nullable=False, index=True
    )
    category_id: Mapped[int | None] = mapped_column(
        ForeignKey("accounting_categories.id"), nullable=True, index=True
    )
    vendor_id: Mapped[int | None] = mapped_column(
        ForeignKey("accounting_vendors.id"), nullable=True
    )
    description: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    debit: Mapped[Decimal] = mapped_column(
        Numeric(15, 2), nullable=False, default=Decimal("0")
    )
    credit: Mapped[Decimal] = mapped_column(
        Numeric(15, 2), nullable=False, default=Decimal("0")
    )

    transaction: Mapped["Transaction"] = relationship(
        back_populates="entries"
    )

    @property
    def amount(self) -> Decimal:
        """The nonzero side of the entry."""
        return self.debit if self.debit > 0 else self.credit

    def __repr__(self) -> str:
        side = "DR" if self.debit > 0 else "CR"
        return f"<Entry {side} {self.amount} account={self.account_id}>"
