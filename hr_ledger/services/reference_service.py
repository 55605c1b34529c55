"""
Reference data service: chart of accounts, categories, vendors.

Reference data is long-lived and created by an administrator.
Transactions refer to it by id. Listings return active rows only.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from hr_ledger.models.account import Account
from hr_ledger.models.category import Category
from hr_ledger.models.vendor import Vendor
from hr_ledger.schemas.reference import (
    AccountCreate,
    CategoryCreate,
    VendorCreate,
)


class ReferenceService:

    def __init__(self, db: Session):
        self.db = db

    def create_account(self, request: AccountCreate) -> Account:
        """
        Create a new account.

        Raises ValueError if the code already exists or the parent
        account does not.
        """
        existing = self.db.execute(
            select(Account).where(Account.code == request.code)
        ).scalar_one_or_none()

        if existing:
            raise ValueError(f"Account with code '{request.code}' already exists")

        if request.parent_id is not None:
            if not self.db.get(Account, request.parent_id):
                raise ValueError(
                    f"Parent account {request.parent_id} not found"
                )

        account = Account(
            code=request.code,
            name=request.name,
            account_type=request.account_type,
            parent_id=request.parent_id,
            balance=request.balance,
        )
        self.db.add(account)
        self.db.flush()
        return account

    def create_category(self, request: CategoryCreate) -> Category:
        existing = self.db.execute(
            select(Category).where(Category.name == request.name)
        ).scalar_one_or_none()

        if existing:
            raise ValueError(f"Category '{request.name}' already exists")

        category = Category(
            name=request.name,
            description=request.description,
        )
        self.db.add(category)
        self.db.flush()
        return category

    def create_vendor(self, request: VendorCreate) -> Vendor:
        existing = self.db.execute(
            select(Vendor).where(Vendor.name == request.name)
        ).scalar_one_or_none()

        if existing:
            raise ValueError(f"Vendor '{request.name}' already exists")

        vendor = Vendor(
            name=request.name,
            contact_email=request.contact_email,
            phone=request.phone,
        )
        self.db.add(vendor)
        self.db.flush()
        return vendor

    def get_accounts(self) -> list[Account]:
        """Active accounts ordered by code."""
        return list(self.db.execute(
            select(Account)
            .where(Account.is_active.is_(True))
            .order_by(Account.code)
        ).scalars().all())

    def get_categories(self) -> list[Category]:
        """Active categories ordered by name."""
        return list(self.db.execute(
            select(Category)
            .where(Category.is_active.is_(True))
            .order_by(Category.name)
        ).scalars().all())

    def get_vendors(self) -> list[Vendor]:
        """Active vendors ordered by name."""
        return list(self.db.execute(
            select(Vendor)
            .where(Vendor.is_active.is_(True))
            .order_by(Vendor.name)
        ).scalars().all())
