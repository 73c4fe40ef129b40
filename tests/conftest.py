"""Shared pytest fixtures for duetrack tests."""

import os
import tempfile
from datetime import date
from decimal import Decimal

import pytest

from duetrack.database.factories import create_sqlite_database
from duetrack.domain.category import CategoryService
from duetrack.domain.credit_card import CreditCardService
from duetrack.domain.debt import DebtService
from duetrack.domain.expense import ExpenseService
from duetrack.domain.income import IncomeService
from duetrack.domain.payment_plan import PaymentPlanService
from duetrack.domain.savings import SavingsService
from duetrack.domain.user import UserService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def second_db(temp_db):
    """A second connection to the same database file, as another process would open."""
    db = create_sqlite_database(database_path=temp_db.database_path)
    db.connect()
    yield db
    db.disconnect()


@pytest.fixture
def user_service(temp_db):
    """Create a UserService with a temporary database."""
    return UserService(temp_db)


@pytest.fixture
def sample_user(user_service):
    """Create the user most tests act as."""
    user_service.create_user("alice")
    return user_service.resolve_user("alice")


@pytest.fixture
def other_user(user_service):
    """Create a second user for ownership tests."""
    user_service.create_user("bob")
    return user_service.resolve_user("bob")


@pytest.fixture
def category_service(temp_db, sample_user):
    """Create a CategoryService bound to the sample user."""
    return CategoryService(temp_db, sample_user.id)


@pytest.fixture
def debt_service(temp_db, sample_user):
    """Create a DebtService bound to the sample user."""
    return DebtService(temp_db, sample_user.id)


@pytest.fixture
def card_service(temp_db, sample_user):
    """Create a CreditCardService bound to the sample user."""
    return CreditCardService(temp_db, sample_user.id)


@pytest.fixture
def expense_service(temp_db, sample_user):
    """Create an ExpenseService bound to the sample user."""
    return ExpenseService(temp_db, sample_user.id)


@pytest.fixture
def income_service(temp_db, sample_user):
    """Create an IncomeService bound to the sample user."""
    return IncomeService(temp_db, sample_user.id)


@pytest.fixture
def savings_service(temp_db, sample_user):
    """Create a SavingsService bound to the sample user."""
    return SavingsService(temp_db, sample_user.id)


@pytest.fixture
def plan_service(temp_db, sample_user):
    """Create a PaymentPlanService bound to the sample user."""
    return PaymentPlanService(temp_db, sample_user.id)


@pytest.fixture
def sample_debt(debt_service):
    """A 1200 loan at 12% paid 105/month from 2024-01-01 on the 15th."""
    debt_id = debt_service.create_debt(
        name="Car loan",
        total_amount=Decimal("1200.00"),
        interest_rate=Decimal("12"),
        monthly_payment=Decimal("105.00"),
        start_date=date(2024, 1, 1),
        total_installments=12,
        payment_day_of_month=15,
        creditor="Acme Credit",
    )
    return debt_service.get_debt(debt_id)


@pytest.fixture
def sample_card(card_service):
    """A card closing on the 20th and due on the 5th."""
    card_id = card_service.create_card(
        name="Gold",
        bank="Acme Bank",
        credit_limit=Decimal("5000.00"),
        billing_day=20,
        payment_day=5,
        last_digits="4242",
        interest_rate=Decimal("28"),
    )
    return card_service.get_card(card_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
