"""
Named counters kept in the database.

Used as the server-side sequence for transaction numbers.
The row is incremented with a single UPDATE inside the
posting transaction, which takes a row lock, so two
concurrent postings can never read the same value.
"""

from sqlalchemy import String, BigInteger
from sqlalchemy.orm import Mapped, mapped_column

from hr_ledger.models.base import Base


class Counter(Base):
    __tablename__ = "accounting_counters"

    name: Mapped[str] = mapped_column(String(50), primary_key=True)
    value: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<Counter {self.name}={self.value}>"
