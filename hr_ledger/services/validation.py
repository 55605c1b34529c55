"""
Transaction validation: the double-entry rules.

validate_entries() is pure. It decides whether a list of entries
forms a legal transaction before anything is written:

1. Every amount is finite, non-negative and has at most two
   decimal places
2. An entry is never both a debit and a credit
3. An entry is never neither
4. Total debits equal total credits

Rules 1-3 are checked for every entry first, so an invalid entry
is reported even when the totals happen to agree.

Totals are compared in integer minor units (cents). Binary floats
would make 0.10 + 0.20 differ from 0.30.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Sequence

from hr_ledger.exceptions import InvalidEntry, UnbalancedTransaction
from hr_ledger.schemas.ledger import EntryInput


MINOR_UNIT_EXPONENT = 2
CENT = Decimal(1).scaleb(-MINOR_UNIT_EXPONENT)


@dataclass(frozen=True)
class ValidatedTransaction:
    """Entries that passed validation and the agreed total."""
    entries: tuple[EntryInput, ...]
    total_amount: Decimal


def to_minor_units(amount, index: int | None = None) -> int:
    """
    Convert an amount to an integer number of cents.

    Accepts Decimal, int or str. Floats are converted through
    their shortest repr so 0.1 becomes exactly 10 cents.
    """
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except InvalidOperation as e:
        raise InvalidEntry(f"Amount '{amount}' is not a number", index) from e

    if not value.is_finite():
        raise InvalidEntry(f"Amount '{amount}' is not a finite number", index)

    scaled = value.scaleb(MINOR_UNIT_EXPONENT)
    if scaled != scaled.to_integral_value():
        raise InvalidEntry(
            f"Amount {amount} has more than "
            f"{MINOR_UNIT_EXPONENT} decimal places",
            index,
        )
    return int(scaled)


def from_minor_units(cents: int) -> Decimal:
    return Decimal(cents).scaleb(-MINOR_UNIT_EXPONENT).quantize(CENT)


def _check_entry(entry: EntryInput, index: int) -> tuple[int, int]:
    """Apply the per-entry rules and return (debit, credit) in cents."""
    debit = to_minor_units(entry.debit, index)
    credit = to_minor_units(entry.credit, index)
    position = f"Entry {index + 1}"

    if debit < 0 or credit < 0:
        raise InvalidEntry(
            f"{position}: debit and credit amounts must be non-negative",
            index,
        )
    if debit > 0 and credit > 0:
        raise InvalidEntry(
            f"{position}: entry cannot have both debit and credit", index
        )
    if debit == 0 and credit == 0:
        raise InvalidEntry(
            f"{position}: entry must have either debit or credit", index
        )
    return debit, credit


def validate_entries(entries: Sequence[EntryInput]) -> ValidatedTransaction:
    """
    Validate a proposed transaction.

    Raises InvalidEntry or UnbalancedTransaction. On success returns
    the entries with total_amount == total debit == total credit.
    """
    if not entries:
        raise InvalidEntry("Transaction must have at least one entry")

    total_debit = 0
    total_credit = 0
    for index, entry in enumerate(entries):
        debit, credit = _check_entry(entry, index)
        total_debit += debit
        total_credit += credit

    if total_debit != total_credit:
        raise UnbalancedTransaction(
            from_minor_units(total_debit), from_minor_units(total_credit)
        )

    return ValidatedTransaction(
        entries=tuple(entries),
        total_amount=from_minor_units(total_debit),
    )
