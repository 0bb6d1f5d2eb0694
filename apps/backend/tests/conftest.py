import os
import sys
import pathlib

import pytest

# Make "apps/backend" importable as root so "finpal.*" and "tests.helpers" work
_BACKEND_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

# Must be set before finpal.db builds its engine
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["APP_ENV"] = "test"
os.environ["LLM_PROVIDER"] = "none"
os.environ.setdefault("TZ", "UTC")

from finpal.agent.context import (  # noqa: E402
    BudgetRecord,
    ChatContext,
    GoalRecord,
    UserProfile,
)
import finpal.db as app_db  # noqa: E402
import finpal.orm_models  # noqa: E402,F401
from tests.helpers.records import credit, debit  # noqa: E402


@pytest.fixture(scope="session")
def anyio_backend():
    """Ensure pytest-anyio uses asyncio loop for async tests."""
    return "asyncio"


@pytest.fixture
def db_session():
    """
    SQLAlchemy session on the shared in-memory engine, with a clean schema per test.
    """
    app_db.Base.metadata.drop_all(bind=app_db.engine)
    app_db.Base.metadata.create_all(bind=app_db.engine)
    db = app_db.SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def sample_context():
    """A month of salaried spending, loosely based on the demo seed data."""
    return ChatContext(
        user=UserProfile(
            name="Asha", monthly_income=75000, income_type="salaried", risk_tolerance="medium"
        ),
        transactions=[
            credit(75000),
            debit(649, "Subscriptions", "2025-09-12"),
            debit(856, "Food & Dining", "2025-09-11"),
            debit(15999, "Shopping", "2025-09-10"),
            debit(3450, "Groceries", "2025-09-09"),
            debit(1250, "Transportation", "2025-09-08"),
            debit(520, "Food & Dining", "2025-09-07"),
            debit(2340, "Bills & Utilities", "2025-08-28"),
        ],
        goals=[
            GoalRecord(
                name="Emergency Fund",
                target_amount=100000,
                current_amount=25000,
                target_date="2025-12-31",
                status="active",
                monthly_saving_needed=20000,
            )
        ],
        budgets=[
            BudgetRecord(category="Shopping", monthly_limit=10000),
            BudgetRecord(category="Food & Dining", monthly_limit=5000),
        ],
    )
