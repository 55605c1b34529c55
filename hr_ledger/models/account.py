"""
Account model (chart of accounts).

Every account the business posts against, cash, salary
expense, revenue and so on, is a row here. Accounts form a
tree through parent_id.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String, Boolean, DateTime, Numeric, ForeignKey,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hr_ledger.models.base import Base
from hr_ledger.models.enums import AccountType


class Account(Base):
    """
    A single account in the chart of accounts.

    balance is informational: it is set by an administrator
    and is not updated when transactions are posted. Once an
    account has entries it is never deleted, only deactivated
    via is_active=False.
    """

    __tablename__ = "accounting_accounts"

    id: Mapped[int] = mapped_column(primary_key=True)
    code: Mapped[str] = mapped_column(
        String(20), unique=True, nullable=False
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    account_type: Mapped[AccountType] = mapped_column(
        SAEnum(
            AccountType,
            name="account_type_enum",
            values_callable=lambda enum: [e.value for e in enum],
        ),
        nullable=False,
    )
    parent_id: Mapped[int | None] = mapped_column(
        ForeignKey("accounting_accounts.id"), nullable=True, index=True
    )
    balance: Mapped[Decimal] = mapped_column(
        Numeric(15, 2), nullable=False, default=Decimal("0")
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    parent: Mapped["Account | None"] = relationship(
        remote_side=[id], back_populates="children"
    )
    children: Mapped[list["Account"]] = relationship(
        back_populates="parent"
    )

    def __repr__(self) -> str:
        return f"<Account {self.code} ({self.account_type.value})>"
