"""
Transaction number generation.

Two generators, picked once at startup by select_number_generator():

- CounterNumberGenerator: a row in accounting_counters, incremented
  inside the posting transaction. Strictly sequential and unique.
- EpochNumberGenerator: "TXN-<epoch millis>-<random hex>". Used only
  when the counter table is missing. Not monotonic, and uniqueness
  is probabilistic: the unique constraint on transaction_number
  turns a collision into a failed write, never a duplicate.
"""

import logging
import secrets
import time
from abc import ABC, abstractmethod

from sqlalchemy import Engine, inspect, select, update
from sqlalchemy.orm import Session

from hr_ledger.models.counter import Counter

logger = logging.getLogger(__name__)

TRANSACTION_COUNTER = "transaction_number"
NUMBER_PREFIX = "TXN-"


class TransactionNumberGenerator(ABC):
    """Produces a unique transaction number for a new header."""

    name: str = "base"

    @abstractmethod
    def next_number(self, db: Session) -> str:
        """Return the next number. Runs inside the caller's transaction."""


class CounterNumberGenerator(TransactionNumberGenerator):

    name = "counter"

    def __init__(self, counter_name: str = TRANSACTION_COUNTER, width: int = 6):
        self.counter_name = counter_name
        self.width = width

    def next_number(self, db: Session) -> str:
        # The UPDATE row-locks the counter until the caller commits
        result = db.execute(
            update(Counter)
            .where(Counter.name == self.counter_name)
            .values(value=Counter.value + 1)
        )
        if result.rowcount == 0:
            db.add(Counter(name=self.counter_name, value=1))
            db.flush()

        value = db.execute(
            select(Counter.value).where(Counter.name == self.counter_name)
        ).scalar_one()
        return f"{NUMBER_PREFIX}{value:0{self.width}d}"


class EpochNumberGenerator(TransactionNumberGenerator):

    name = "epoch"

    def __init__(self, clock=time.time):
        self.clock = clock

    def next_number(self, db: Session) -> str:
        millis = int(self.clock() * 1000)
        return f"{NUMBER_PREFIX}{millis}-{secrets.token_hex(2)}"


def select_number_generator(engine: Engine) -> TransactionNumberGenerator:
    """Use the counter table when the database has it."""
    if inspect(engine).has_table(Counter.__tablename__):
        logger.info("Transaction numbers: database counter")
        return CounterNumberGenerator()

    logger.warning(
        "Table %s not found; transaction numbers fall back to "
        "epoch-millisecond numbers (unique with high probability, "
        "not sequential)",
        Counter.__tablename__,
    )
    return EpochNumberGenerator()
