"""
Comprehensive tests for the LedgerService.

Tests cover:
- Creating transactions (balanced, unbalanced, invalid entries)
- Reference checks on accounts, categories and vendors
- Listing transactions with filters and paging
- Monthly summaries, including month-end boundaries
- Ledger integrity check
"""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from hr_ledger.exceptions import (
    InvalidEntry,
    PersistenceFailed,
    UnbalancedTransaction,
)
from hr_ledger.models.account import Account
from hr_ledger.models.enums import TransactionStatus
from hr_ledger.models.transaction import Transaction
from hr_ledger.schemas.ledger import TransactionCreate
from hr_ledger.schemas.reference import CategoryCreate, VendorCreate
from hr_ledger.services.ledger_service import LedgerService, month_bounds
from hr_ledger.services.posting import TransactionPoster
from hr_ledger.services.reference_service import ReferenceService

from factories import make_entry, make_request


class RecordingPoster(TransactionPoster):
    """Poster that only records calls. Used to prove nothing is written."""

    mode = "recording"

    def __init__(self):
        super().__init__(numbers=None)
        self.calls = []

    def post(self, db, header, validated):
        self.calls.append((header, validated))
        raise AssertionError("post() should not have been called")


def post(service, chart, amount, txn_date, status=TransactionStatus.POSTED,
         category="payroll"):
    """Post a salary payment of `amount` on `txn_date`."""
    return service.create_transaction(make_request(
        [
            make_entry(
                chart["salary"], debit=amount,
                category_id=chart[category] if category else None,
            ),
            make_entry(chart["cash"], credit=amount),
        ],
        txn_date=txn_date,
        status=status,
    ))


def transaction_count(db_session):
    return db_session.execute(
        select(func.count()).select_from(Transaction)
    ).scalar()


# --- Create Transaction Tests ---

class TestCreateTransaction:

    def test_balanced_transaction_succeeds(
        self, db_session, chart, atomic_poster
    ):
        service = LedgerService(db_session, atomic_poster)
        txn = service.create_transaction(
            make_request(
                [
                    make_entry(chart["cash"], debit=1000),
                    make_entry(chart["revenue"], credit=1000),
                ],
                description="Consulting fee",
            ),
            created_by=3,
        )

        assert txn.id is not None
        assert txn.transaction_number.startswith("TXN-")
        assert txn.total_amount == Decimal("1000.00")
        assert txn.created_by == 3
        assert txn.description == "Consulting fee"
        assert len(txn.entries) == 2

    def test_three_way_split(self, db_session, chart, atomic_poster):
        service = LedgerService(db_session, atomic_poster)
        txn = service.create_transaction(make_request([
            make_entry(chart["salary"], debit=5000),
            make_entry(chart["cash"], credit=2000),
            make_entry(chart["payable"], credit=3000),
        ]))
        assert txn.total_amount == Decimal("5000.00")

    def test_defaults_to_draft(self, db_session, chart, atomic_poster):
        service = LedgerService(db_session, atomic_poster)
        txn = service.create_transaction(TransactionCreate(
            date=date(2024, 3, 1),
            entries=[
                make_entry(chart["cash"], debit=10),
                make_entry(chart["revenue"], credit=10),
            ],
        ))
        assert txn.status == TransactionStatus.DRAFT

    def test_numbers_are_unique(self, db_session, chart, atomic_poster):
        service = LedgerService(db_session, atomic_poster)
        first = post(service, chart, 100, date(2024, 3, 1))
        second = post(service, chart, 100, date(2024, 3, 2))
        assert first.transaction_number != second.transaction_number

    def test_unbalanced_rejected_before_posting(self, db_session, chart):
        poster = RecordingPoster()
        service = LedgerService(db_session, poster)

        with pytest.raises(UnbalancedTransaction):
            service.create_transaction(make_request([
                make_entry(chart["salary"], debit=1000),
                make_entry(chart["cash"], credit=500),
            ]))

        assert poster.calls == []
        assert transaction_count(db_session) == 0

    def test_both_sides_rejected_before_posting(self, db_session, chart):
        poster = RecordingPoster()
        service = LedgerService(db_session, poster)

        with pytest.raises(InvalidEntry):
            service.create_transaction(make_request([
                make_entry(chart["cash"], debit=100, credit=100),
            ]))

        assert poster.calls == []

    def test_nonexistent_account_rejected(self, db_session, atomic_poster):
        service = LedgerService(db_session, atomic_poster)

        with pytest.raises(InvalidEntry, match="Accounts not found"):
            service.create_transaction(make_request([
                make_entry(998, debit=100),
                make_entry(999, credit=100),
            ]))

        assert transaction_count(db_session) == 0

    def test_inactive_account_rejected(self, db_session, chart, atomic_poster):
        db_session.get(Account, chart["cash"]).is_active = False
        db_session.commit()

        service = LedgerService(db_session, atomic_poster)
        with pytest.raises(InvalidEntry, match="not active"):
            post(service, chart, 100, date(2024, 3, 1))

    def test_unknown_category_rejected(self, db_session, chart, atomic_poster):
        service = LedgerService(db_session, atomic_poster)

        with pytest.raises(InvalidEntry, match="Categories not found"):
            service.create_transaction(make_request([
                make_entry(chart["salary"], debit=100, category_id=404),
                make_entry(chart["cash"], credit=100),
            ]))

    def test_unknown_vendor_rejected(self, db_session, chart, atomic_poster):
        service = LedgerService(db_session, atomic_poster)

        with pytest.raises(InvalidEntry, match="Vendors not found"):
            service.create_transaction(make_request([
                make_entry(chart["payable"], debit=100, vendor_id=404),
                make_entry(chart["cash"], credit=100),
            ]))

    def test_known_vendor_accepted(self, db_session, chart, atomic_poster):
        vendor = ReferenceService(db_session).create_vendor(
            VendorCreate(name="Office Supplies Ltd")
        )
        db_session.commit()

        service = LedgerService(db_session, atomic_poster)
        txn = service.create_transaction(make_request([
            make_entry(chart["payable"], debit=80, vendor_id=vendor.id),
            make_entry(chart["cash"], credit=80),
        ]))
        assert txn.entries[0].vendor_id == vendor.id

    def test_sequential_poster_gives_same_result(
        self, db_session, chart, sequential_poster
    ):
        service = LedgerService(db_session, sequential_poster)
        txn = post(service, chart, 750, date(2024, 3, 10))

        assert txn.total_amount == Decimal("750.00")
        assert len(txn.entries) == 2
        assert service.get_summary(3, 2024)["total_transactions"] == 1

    def test_service_without_poster_cannot_write(self, db_session, chart):
        with pytest.raises(RuntimeError):
            post(LedgerService(db_session), chart, 1, date(2024, 3, 1))

    def test_unreachable_database_is_persistence_failed(
        self, db_session, chart, monkeypatch
    ):
        def unreachable(*args, **kwargs):
            raise OperationalError(
                "SELECT", {}, Exception("unable to open database file")
            )

        poster = RecordingPoster()
        service = LedgerService(db_session, poster)
        monkeypatch.setattr(db_session, "execute", unreachable)

        with pytest.raises(PersistenceFailed, match="unable to open database file"):
            post(service, chart, 100, date(2024, 3, 1))

        assert poster.calls == []


# --- Listing Tests ---

class TestGetTransactions:

    def _seed(self, db_session, chart, poster):
        service = LedgerService(db_session, poster)
        post(service, chart, 100, date(2024, 1, 10))
        post(service, chart, 200, date(2024, 2, 10))
        post(service, chart, 300, date(2024, 3, 10), TransactionStatus.DRAFT)
        return service

    def test_newest_first_with_entries(self, db_session, chart, atomic_poster):
        service = self._seed(db_session, chart, atomic_poster)
        txns = service.get_transactions()

        assert [t.date for t in txns] == [
            date(2024, 3, 10), date(2024, 2, 10), date(2024, 1, 10),
        ]
        assert all(len(t.entries) == 2 for t in txns)

    def test_date_range_is_inclusive(self, db_session, chart, atomic_poster):
        service = self._seed(db_session, chart, atomic_poster)
        txns = service.get_transactions(
            start_date=date(2024, 1, 10), end_date=date(2024, 2, 10)
        )
        assert {t.total_amount for t in txns} == {
            Decimal("100.00"), Decimal("200.00"),
        }

    def test_status_filter(self, db_session, chart, atomic_poster):
        service = self._seed(db_session, chart, atomic_poster)
        drafts = service.get_transactions(status=TransactionStatus.DRAFT)
        assert len(drafts) == 1
        assert drafts[0].total_amount == Decimal("300.00")

    def test_limit_and_offset(self, db_session, chart, atomic_poster):
        service = self._seed(db_session, chart, atomic_poster)
        page = service.get_transactions(limit=1, offset=1)
        assert len(page) == 1
        assert page[0].date == date(2024, 2, 10)

    def test_bad_paging_rejected(self, db_session):
        service = LedgerService(db_session)
        with pytest.raises(ValueError):
            service.get_transactions(limit=0)
        with pytest.raises(ValueError):
            service.get_transactions(offset=-1)

    def test_get_single_transaction(self, db_session, chart, atomic_poster):
        service = LedgerService(db_session, atomic_poster)
        created = post(service, chart, 42, date(2024, 3, 1))

        txn = service.get_transaction(created.id)
        assert txn.transaction_number == created.transaction_number
        assert len(txn.entries) == 2

    def test_missing_transaction(self, db_session):
        with pytest.raises(ValueError, match="not found"):
            LedgerService(db_session).get_transaction(999)


# --- Summary Tests ---

class TestMonthBounds:

    @pytest.mark.parametrize("month, year, last_day", [
        (1, 2024, 31),
        (2, 2023, 28),
        (2, 2024, 29),
        (4, 2024, 30),
        (12, 2024, 31),
    ])
    def test_last_day_of_month(self, month, year, last_day):
        first, last = month_bounds(month, year)
        assert first == date(year, month, 1)
        assert last == date(year, month, last_day)

    def test_invalid_month(self):
        with pytest.raises(ValueError):
            month_bounds(13, 2024)


class TestGetSummary:

    def test_empty_month_is_zero(self, db_session):
        summary = LedgerService(db_session).get_summary(3, 2024)
        assert summary == {
            "total_transactions": 0,
            "total_amount": Decimal("0.00"),
            "categories": [],
            "top_categories": [],
        }

    def test_counts_posted_transactions(self, db_session, chart, atomic_poster):
        service = LedgerService(db_session, atomic_poster)
        post(service, chart, 1000, date(2024, 3, 5))

        summary = service.get_summary(3, 2024)
        assert summary["total_transactions"] == 1
        assert summary["total_amount"] == Decimal("1000.00")

    def test_drafts_are_excluded(self, db_session, chart, atomic_poster):
        service = LedgerService(db_session, atomic_poster)
        post(service, chart, 1000, date(2024, 3, 5))
        post(service, chart, 400, date(2024, 3, 6), TransactionStatus.DRAFT)

        summary = service.get_summary(3, 2024)
        assert summary["total_transactions"] == 1
        assert summary["total_amount"] == Decimal("1000.00")
        assert summary["categories"][0]["total"] == Decimal("1000.00")

    @pytest.mark.parametrize("month, year, last_day", [
        (1, 2024, 31),
        (2, 2023, 28),
        (2, 2024, 29),
        (4, 2024, 30),
        (12, 2023, 31),
    ])
    def test_last_day_belongs_to_its_month(
        self, db_session, chart, atomic_poster, month, year, last_day
    ):
        service = LedgerService(db_session, atomic_poster)
        post(service, chart, 100, date(year, month, last_day))

        next_month, next_year = (1, year + 1) if month == 12 else (month + 1, year)
        assert service.get_summary(month, year)["total_transactions"] == 1
        assert service.get_summary(next_month, next_year)["total_transactions"] == 0

    def test_first_day_belongs_to_its_month(
        self, db_session, chart, atomic_poster
    ):
        service = LedgerService(db_session, atomic_poster)
        post(service, chart, 100, date(2024, 5, 1))

        assert service.get_summary(5, 2024)["total_transactions"] == 1
        assert service.get_summary(4, 2024)["total_transactions"] == 0

    def test_category_totals_use_nonzero_side(
        self, db_session, chart, atomic_poster
    ):
        service = LedgerService(db_session, atomic_poster)
        post(service, chart, 500, date(2024, 3, 1))
        post(service, chart, 200, date(2024, 3, 2))
        post(service, chart, 300, date(2024, 3, 3), category="rent")
        # Revenue is a credit; its credit side counts for the category
        service.create_transaction(make_request([
            make_entry(chart["cash"], debit=900),
            make_entry(chart["revenue"], credit=900, category_id=chart["rent"]),
        ], txn_date=date(2024, 3, 4)))

        summary = service.get_summary(3, 2024)
        assert summary["total_transactions"] == 4
        assert summary["total_amount"] == Decimal("1900.00")
        assert summary["categories"] == [
            {"id": chart["rent"], "name": "Rent", "total": Decimal("1200.00")},
            {"id": chart["payroll"], "name": "Payroll", "total": Decimal("700.00")},
        ]
        assert summary["top_categories"] == summary["categories"]

    def test_uncategorized_entries_ignored(
        self, db_session, chart, atomic_poster
    ):
        service = LedgerService(db_session, atomic_poster)
        post(service, chart, 500, date(2024, 3, 1), category=None)

        summary = service.get_summary(3, 2024)
        assert summary["total_transactions"] == 1
        assert summary["categories"] == []

    def test_top_categories_keeps_ten(self, db_session, chart, atomic_poster):
        reference = ReferenceService(db_session)
        category_ids = [
            reference.create_category(CategoryCreate(name=f"Cost {i:02d}")).id
            for i in range(12)
        ]
        db_session.commit()

        service = LedgerService(db_session, atomic_poster)
        for i, category_id in enumerate(category_ids):
            service.create_transaction(make_request([
                make_entry(chart["salary"], debit=10 * (i + 1),
                           category_id=category_id),
                make_entry(chart["cash"], credit=10 * (i + 1)),
            ]))

        summary = service.get_summary(3, 2024)
        assert len(summary["categories"]) == 12
        assert len(summary["top_categories"]) == 10
        totals = [c["total"] for c in summary["top_categories"]]
        assert totals == sorted(totals, reverse=True)
        assert totals[0] == Decimal("120.00")
        assert summary["top_categories"][-1]["total"] == Decimal("30.00")

    def test_summary_is_repeatable(self, db_session, chart, atomic_poster):
        service = LedgerService(db_session, atomic_poster)
        post(service, chart, 123.45, date(2024, 3, 9))

        assert service.get_summary(3, 2024) == service.get_summary(3, 2024)

    def test_fractional_amounts_sum_exactly(
        self, db_session, chart, atomic_poster
    ):
        service = LedgerService(db_session, atomic_poster)
        post(service, chart, "0.10", date(2024, 3, 1))
        post(service, chart, "0.20", date(2024, 3, 2))

        summary = service.get_summary(3, 2024)
        assert summary["total_amount"] == Decimal("0.30")
        assert summary["categories"][0]["total"] == Decimal("0.30")


# --- Scenarios ---

class TestScenarios:

    def test_posted_transaction_shows_in_summary(
        self, db_session, chart, atomic_poster
    ):
        service = LedgerService(db_session, atomic_poster)
        service.create_transaction(make_request([
            make_entry(chart["cash"], debit=1000),
            make_entry(chart["revenue"], credit=1000),
        ], txn_date=date(2024, 3, 20)))

        summary = service.get_summary(3, 2024)
        assert summary["total_transactions"] == 1
        assert summary["total_amount"] == Decimal("1000")

    def test_draft_does_not_show_in_summary(
        self, db_session, chart, atomic_poster
    ):
        service = LedgerService(db_session, atomic_poster)
        service.create_transaction(make_request([
            make_entry(chart["cash"], debit=1000),
            make_entry(chart["revenue"], credit=1000),
        ], txn_date=date(2024, 3, 20), status=TransactionStatus.DRAFT))

        assert service.get_summary(3, 2024)["total_transactions"] == 0


# --- Integrity Check Tests ---

class TestIntegrityCheck:

    def test_empty_ledger_is_balanced(self, db_session):
        result = LedgerService(db_session).check_integrity()
        assert result["is_balanced"] is True
        assert result["difference"] == Decimal("0")
        assert result["orphaned_transaction_ids"] == []

    def test_ledger_with_entries_is_balanced(
        self, db_session, chart, atomic_poster
    ):
        service = LedgerService(db_session, atomic_poster)
        for amount in ["1000.00", "500.00", "250.00"]:
            post(service, chart, amount, date(2024, 3, 1))

        result = service.check_integrity()
        assert result["is_balanced"] is True
        assert result["total_debits"] == Decimal("1750.00")
        assert result["total_credits"] == Decimal("1750.00")
        assert result["unbalanced_transaction_ids"] == []

    def test_detects_unbalanced_transaction(
        self, db_session, chart, atomic_poster
    ):
        service = LedgerService(db_session, atomic_poster)
        txn = post(service, chart, 100, date(2024, 3, 1))

        # Tamper with the stored data behind the service's back
        txn.entries[0].debit = Decimal("150.00")
        db_session.commit()

        result = service.check_integrity()
        assert result["is_balanced"] is False
        assert result["unbalanced_transaction_ids"] == [txn.id]
        assert result["difference"] == Decimal("50.00")
