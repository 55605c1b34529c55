"""Business logic services."""

from hr_ledger.services.ledger_service import LedgerService
from hr_ledger.services.reference_service import ReferenceService
from hr_ledger.services.posting import (
    AtomicPoster,
    SequentialPoster,
    select_poster,
)
from hr_ledger.services.numbering import select_number_generator
from hr_ledger.services.validation import validate_entries

__all__ = [
    "LedgerService",
    "ReferenceService",
    "AtomicPoster",
    "SequentialPoster",
    "select_poster",
    "select_number_generator",
    "validate_entries",
]
