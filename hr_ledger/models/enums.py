"""
Shared enumerations for database models.

Using Python enums mapped to database enums ensures that
only valid values can be stored. Values are lowercase to
match what API clients send.
"""

import enum


class AccountType(str, enum.Enum):
    """The five fundamental accounting categories."""
    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"


class TransactionStatus(str, enum.Enum):
    """Only POSTED transactions count toward summaries."""
    DRAFT = "draft"
    POSTED = "posted"
