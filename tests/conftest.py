"""
Shared test fixtures.

Sets up an isolated test database so tests never touch
the real database. Tables are created before each test
and dropped after it, so no test data persists.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from hr_ledger.config import Settings
from hr_ledger.main import create_app
from hr_ledger.models import Base, AccountType
from hr_ledger.models.base import get_db
from hr_ledger.schemas.reference import AccountCreate, CategoryCreate
from hr_ledger.services.numbering import CounterNumberGenerator
from hr_ledger.services.posting import AtomicPoster, SequentialPoster
from hr_ledger.services.reference_service import ReferenceService


# SQLite for tests: no external database needed.
TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


@pytest.fixture(autouse=True)
def setup_database():
    """
    Create all tables before each test, drop them after.

    autouse=True means every test gets this automatically.
    """
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def test_settings():
    settings = Settings()
    settings.DATABASE_URL = TEST_DATABASE_URL
    settings.POSTER_MODE = "auto"
    settings.LOG_LEVEL = "INFO"
    return settings


@pytest.fixture
def app(test_settings):
    return create_app(test_settings, engine=engine)


@pytest.fixture
def client(app, db_session):
    """
    Provide a test client with the test database.

    We override the get_db dependency so the FastAPI app
    uses our test session instead of opening its own.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def atomic_poster():
    return AtomicPoster(CounterNumberGenerator())


@pytest.fixture
def sequential_poster():
    return SequentialPoster(CounterNumberGenerator())


@pytest.fixture
def chart(db_session):
    """
    A small chart of accounts plus two categories.

    Returns a dict of ids keyed by short names.
    """
    service = ReferenceService(db_session)
    cash = service.create_account(AccountCreate(
        code="1000", name="Cash", type=AccountType.ASSET,
    ))
    payable = service.create_account(AccountCreate(
        code="2000", name="Accounts Payable", type=AccountType.LIABILITY,
    ))
    revenue = service.create_account(AccountCreate(
        code="4000", name="Service Revenue", type=AccountType.REVENUE,
    ))
    salary = service.create_account(AccountCreate(
        code="5000", name="Salary Expense", type=AccountType.EXPENSE,
    ))
    payroll = service.create_category(CategoryCreate(name="Payroll"))
    rent = service.create_category(CategoryCreate(name="Rent"))
    db_session.commit()

    return {
        "cash": cash.id,
        "payable": payable.id,
        "revenue": revenue.id,
        "salary": salary.id,
        "payroll": payroll.id,
        "rent": rent.id,
    }
