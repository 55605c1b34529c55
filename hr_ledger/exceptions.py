"""
Ledger error taxonomy.

Validation errors subclass ValueError so callers that only care
about "bad input" can keep catching ValueError. Persistence errors
do not: they mean the input was fine but the store failed.
"""


class LedgerError(Exception):
    """Base class for all ledger errors."""


class ConfigurationError(LedgerError):
    """Raised at startup when settings are missing or invalid."""


class ValidationFailed(LedgerError, ValueError):
    """A proposed transaction was rejected before any write."""


class InvalidEntry(ValidationFailed):
    """A single entry breaks a per-entry rule."""

    def __init__(self, message: str, index: int | None = None):
        super().__init__(message)
        self.index = index


class UnbalancedTransaction(ValidationFailed):
    """Total debits do not equal total credits."""

    def __init__(self, total_debit, total_credit):
        super().__init__(
            f"Transaction unbalanced: total debit ({total_debit}) "
            f"does not equal total credit ({total_credit})"
        )
        self.total_debit = total_debit
        self.total_credit = total_credit


class PersistenceFailed(LedgerError):
    """The store rejected the write or could not be reached."""


class PartialWriteFailed(PersistenceFailed):
    """
    The transaction header was written but its entries were not.

    header_removed tells whether the compensating delete succeeded.
    When it is False the header is orphaned in the store.
    """

    def __init__(self, message: str, transaction_id: int, header_removed: bool):
        super().__init__(message)
        self.transaction_id = transaction_id
        self.header_removed = header_removed
