"""Shared test fixtures for all test modules."""

import contextlib
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import billrun.models  # noqa: F401
from billrun.core import database as db_module
from billrun.core.database import Base, get_db
from billrun.models.plan import Plan, PlanFrequency, PlanInterval
from billrun.models.subscription import Subscription, SubscriptionStatus
from billrun.models.tax import Tax

# Create an in-memory SQLite engine with StaticPool so all connections
# share the same database state and there are no file-locking issues.
_test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_test_engine)


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and truncate all data after.

    Patches the module-level engine and SessionLocal so all application code
    uses the in-memory test database. Clears data after each test.
    """
    # Patch module-level engine and session factory
    original_engine = db_module.engine
    original_session = db_module.SessionLocal
    db_module.engine = _test_engine
    db_module.SessionLocal = _TestSessionLocal

    Base.metadata.create_all(bind=_test_engine)

    yield
    with _test_engine.connect() as conn:
        conn.execute(text("PRAGMA foreign_keys = OFF"))
        for table in reversed(Base.metadata.sorted_tables):
            with contextlib.suppress(OperationalError):
                conn.execute(table.delete())
        conn.execute(text("PRAGMA foreign_keys = ON"))
        conn.commit()

    # Restore originals
    db_module.engine = original_engine
    db_module.SessionLocal = original_session


@pytest.fixture
def db_session():
    """Create a database session for direct repository testing."""
    gen = get_db()
    db = next(gen)
    try:
        yield db
    finally:
        for _ in gen:
            pass


@pytest.fixture
def make_plan(db_session):
    """Factory for persisted plans."""

    def _make(
        code: str = "plan_monthly",
        interval: str = PlanInterval.MONTHLY.value,
        frequency: str = PlanFrequency.BEGINNING_OF_PERIOD.value,
        pay_in_advance: bool = False,
        amount_cents: int = 1000,
        currency: str = "EUR",
    ) -> Plan:
        plan = Plan(
            code=code,
            name=f"Plan {code}",
            interval=interval,
            frequency=frequency,
            pay_in_advance=pay_in_advance,
            amount_cents=amount_cents,
            currency=currency,
        )
        db_session.add(plan)
        db_session.commit()
        db_session.refresh(plan)
        return plan

    return _make


@pytest.fixture
def make_subscription(db_session):
    """Factory for persisted subscriptions."""

    def _make(
        plan: Plan,
        external_id: str = "sub_1",
        anniversary_date: date | None = date(2024, 1, 1),
        status: str = SubscriptionStatus.ACTIVE.value,
        previous_subscription_id=None,
    ) -> Subscription:
        sub = Subscription(
            external_id=external_id,
            plan_id=plan.id,
            status=status,
            anniversary_date=anniversary_date,
            previous_subscription_id=previous_subscription_id,
        )
        db_session.add(sub)
        db_session.commit()
        db_session.refresh(sub)
        return sub

    return _make


@pytest.fixture
def make_tax(db_session):
    """Factory for persisted taxes."""

    def _make(
        code: str,
        rate: str,
        applied_by_default: bool = False,
        description: str | None = None,
    ) -> Tax:
        tax = Tax(
            code=code,
            name=f"Tax {code}",
            rate=Decimal(rate),
            description=description or f"{code} description",
            applied_by_default=applied_by_default,
        )
        db_session.add(tax)
        db_session.commit()
        db_session.refresh(tax)
        return tax

    return _make
