"""Tests for summary service."""

import pytest
from datetime import date
from decimal import Decimal

from duetrack.domain.entities import PaymentMethod
from duetrack.domain.errors import ValidationError
from duetrack.domain.summary import SummaryService

TODAY = date(2024, 3, 25)


@pytest.fixture
def summary_service(temp_db, sample_user):
    """Create a SummaryService bound to the sample user."""
    return SummaryService(temp_db, sample_user.id)


@pytest.fixture
def march_records(income_service, expense_service, card_service, sample_card):
    """Income and spending in February and March 2024."""
    income_service.add_income(amount=Decimal("3000"), description="Salary", income_date=date(2024, 3, 1))
    income_service.add_income(amount=Decimal("450"), description="Freelance", income_date=date(2024, 3, 12))
    income_service.add_income(amount=Decimal("3000"), description="Salary", income_date=date(2024, 2, 1))

    expense_service.add_expense(amount=Decimal("54.20"), description="Groceries", expense_date=date(2024, 3, 2))
    expense_service.add_expense(
        amount=Decimal("80"),
        description="Electricity",
        expense_date=date(2024, 3, 10),
        payment_method=PaymentMethod.DEBIT,
    )
    expense_service.add_expense(
        amount=Decimal("120"),
        description="Headphones",
        expense_date=date(2024, 3, 5),
        payment_method=PaymentMethod.CREDIT,
        credit_card_id=sample_card.id,
    )
    expense_service.add_expense(amount=Decimal("15"), description="Lunch", expense_date=date(2024, 2, 20))
    # Debit payment of the card's closed cycle
    card_service.pay_statement(sample_card.id, TODAY)


def test_month_summary_defaults_to_current_month(summary_service, march_records):
    """Test totals and the split by payment method for this month."""
    result = summary_service.build_summary(TODAY)

    assert (result.start_date, result.end_date) == (date(2024, 3, 1), date(2024, 3, 31))
    assert result.total_income == Decimal("3450")
    assert result.income_count == 2
    assert result.expense_count == 4
    assert result.cash_expenses == Decimal("54.20")
    assert result.debit_expenses == Decimal("200.00")
    assert result.credit_expenses == Decimal("120.00")
    assert result.total_expenses == Decimal("374.20")
    assert result.net == Decimal("3075.80")


def test_summary_custom_range(summary_service, march_records):
    """Test an explicit period only counts records inside it."""
    result = summary_service.build_summary(TODAY, start_date=date(2024, 2, 1), end_date=date(2024, 2, 29))

    assert result.total_income == Decimal("3000")
    assert result.total_expenses == Decimal("15")
    assert result.cash_expenses == Decimal("15")


def test_summary_counts_open_savings_goals(summary_service, savings_service):
    """Test only goals not yet completed count towards saved money."""
    trip = savings_service.create_goal("Trip", Decimal("500"))
    savings_service.contribute(trip, Decimal("200"), date(2024, 3, 1))
    laptop = savings_service.create_goal("Laptop", Decimal("100"))
    savings_service.contribute(laptop, Decimal("100"), date(2024, 3, 2))

    result = summary_service.build_summary(TODAY)

    assert result.active_goals == 1
    assert result.total_saved == Decimal("200")


def test_summary_empty_month(summary_service):
    """Test a user without records gets zero totals."""
    result = summary_service.build_summary(TODAY)

    assert result.total_income == Decimal("0")
    assert result.total_expenses == Decimal("0")
    assert result.income_count == 0
    assert result.active_goals == 0


def test_summary_inverted_range_rejected(summary_service):
    """Test a start date after the end date is rejected."""
    with pytest.raises(ValidationError):
        summary_service.build_summary(TODAY, start_date=date(2024, 3, 31), end_date=date(2024, 3, 1))
