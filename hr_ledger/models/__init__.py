"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from hr_ledger.models.base import Base
from hr_ledger.models.enums import AccountType, TransactionStatus
from hr_ledger.models.account import Account
from hr_ledger.models.category import Category
from hr_ledger.models.vendor import Vendor
from hr_ledger.models.transaction import Transaction
from hr_ledger.models.entry import Entry
from hr_ledger.models.counter import Counter

__all__ = [
    "Base",
    "AccountType",
    "TransactionStatus",
    "Account",
    "Category",
    "Vendor",
    "Transaction",
    "Entry",
    "Counter",
]
