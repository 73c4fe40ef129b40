"""Tests for income service."""

import pytest
from dataclasses import replace
from datetime import date
from decimal import Decimal

from duetrack.domain.entities import Frequency
from duetrack.domain.errors import NotFoundError, ValidationError
from duetrack.domain.income import receipt_date


@pytest.fixture
def salary(income_service):
    """A monthly salary template paid on the 25th."""
    income_service.add_income(
        amount=Decimal("3000"),
        description="Salary",
        income_date=date(2024, 2, 25),
        is_recurring=True,
    )
    return income_service.list_incomes(recurring=True)[0]


def test_recurring_income_defaults_to_monthly(salary):
    """Test a recurring income without frequency is monthly."""
    assert salary.frequency == Frequency.MONTHLY
    assert salary.source_income_id is None


def test_frequency_requires_recurring(income_service):
    """Test a frequency on a one-off income is rejected."""
    with pytest.raises(ValidationError):
        income_service.add_income(
            amount=Decimal("10"),
            description="Gift",
            income_date=date(2024, 3, 1),
            frequency=Frequency.MONTHLY,
        )


def test_month_position_counts_pending_template(income_service, salary):
    """Test a template not yet received this month is pending."""
    income_service.add_income(amount=Decimal("500"), description="Freelance", income_date=date(2024, 3, 5))

    received, pending = income_service.month_position(date(2024, 3, 10))

    assert received == Decimal("500")
    assert pending == Decimal("3000")


def test_month_position_ignores_future_dated_income(income_service):
    """Test income dated after today is not yet received."""
    income_service.add_income(amount=Decimal("500"), description="Bonus", income_date=date(2024, 3, 20))

    received, pending = income_service.month_position(date(2024, 3, 10))

    assert received == Decimal("0")
    assert pending == Decimal("0")


def test_template_dated_this_month_is_received(income_service):
    """Test a template created this month already counts as received."""
    income_service.add_income(
        amount=Decimal("3000"), description="Salary", income_date=date(2024, 3, 1), is_recurring=True
    )

    received, pending = income_service.month_position(date(2024, 3, 10))

    assert received == Decimal("3000")
    assert pending == Decimal("0")


def test_template_dated_later_this_month_is_pending(income_service):
    """Test a template dated after today this month is pending, not dropped."""
    income_service.add_income(
        amount=Decimal("3000"), description="Salary", income_date=date(2024, 3, 20), is_recurring=True
    )

    received, pending = income_service.month_position(date(2024, 3, 10))

    assert received == Decimal("0")
    assert pending == Decimal("3000")
    assert income_service.month_position(date(2024, 3, 20)) == (Decimal("3000"), Decimal("0"))


def test_generate_recurring_before_receipt_day(income_service, salary):
    """Test nothing is generated before the template's day."""
    result = income_service.generate_recurring(date(2024, 3, 10))

    assert result == {"generated": 0, "skipped": 1}


def test_generate_recurring_once_per_month(income_service, salary):
    """Test one instance is generated and a second run skips it."""
    result = income_service.generate_recurring(date(2024, 3, 26))
    assert result == {"generated": 1, "skipped": 0}

    instances = [inc for inc in income_service.list_incomes() if inc.source_income_id == salary.id]
    assert len(instances) == 1
    assert instances[0].date == date(2024, 3, 25)
    assert instances[0].description == "Salary (auto-generated)"
    assert not instances[0].is_recurring

    assert income_service.generate_recurring(date(2024, 3, 27)) == {"generated": 0, "skipped": 1}
    assert income_service.month_position(date(2024, 3, 27)) == (Decimal("3000"), Decimal("0"))


def test_receipt_date_rules(salary):
    """Test receipt dates for monthly and biweekly templates."""
    assert receipt_date(salary, date(2024, 4, 2)) == date(2024, 4, 25)

    biweekly = replace(salary, frequency=Frequency.BIWEEKLY)
    assert receipt_date(biweekly, date(2024, 2, 10)) == date(2024, 2, 15)
    assert receipt_date(biweekly, date(2024, 2, 16)) == date(2024, 2, 29)


def test_monthly_day_clamped(income_service):
    """Test a template on the 31st pays on the last day of shorter months."""
    income_service.add_income(
        amount=Decimal("100"), description="Rent in", income_date=date(2024, 1, 31), is_recurring=True
    )

    assert income_service.generate_recurring(date(2024, 2, 29)) == {"generated": 1, "skipped": 0}
    generated = [inc for inc in income_service.list_incomes() if inc.source_income_id is not None]
    assert generated[0].date == date(2024, 2, 29)


def test_update_income_partial_fields(income_service, salary):
    """Test only the given fields change."""
    updated = income_service.update_income(salary.id, amount=Decimal("3200"), frequency=Frequency.BIWEEKLY)

    assert updated.amount == Decimal("3200")
    assert updated.frequency == Frequency.BIWEEKLY
    assert updated.description == "Salary"
    assert updated.date == date(2024, 2, 25)

    one_off = income_service.update_income(salary.id, is_recurring=False)
    assert not one_off.is_recurring
    assert one_off.frequency is None


def test_generated_income_cannot_become_recurring(income_service, salary):
    """Test an auto-generated instance cannot turn into a template."""
    income_service.generate_recurring(date(2024, 3, 26))
    instance = next(inc for inc in income_service.list_incomes() if inc.source_income_id == salary.id)

    with pytest.raises(ValidationError):
        income_service.update_income(instance.id, is_recurring=True)
    with pytest.raises(ValidationError):
        income_service.update_income(instance.id, frequency=Frequency.MONTHLY)


def test_delete_template_keeps_generated_instances(income_service, salary):
    """Test deleting a template leaves its instances as one-off incomes."""
    income_service.generate_recurring(date(2024, 3, 26))

    income_service.delete_income(salary.id)

    with pytest.raises(NotFoundError):
        income_service.get_income(salary.id)
    remaining = income_service.list_incomes()
    assert len(remaining) == 1
    assert remaining[0].source_income_id is None
    assert income_service.month_position(date(2024, 3, 27)) == (Decimal("3000"), Decimal("0"))
    assert income_service.generate_recurring(date(2024, 4, 26)) == {"generated": 0, "skipped": 0}
