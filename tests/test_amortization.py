"""Tests for amortization schedule generation."""

import pytest
from datetime import date
from decimal import Decimal

from duetrack.domain.amortization import LoanTerms, generate_schedule, schedule_totals, to_cents
from duetrack.domain.entities import DebtPayment, InstallmentStatus
from duetrack.domain.errors import ValidationError


def _terms(**overrides) -> LoanTerms:
    values = dict(
        principal=Decimal("1200.00"),
        annual_rate=Decimal("12"),
        monthly_payment=Decimal("105.00"),
        total_installments=12,
        start_date=date(2024, 1, 1),
        payment_day_of_month=15,
    )
    values.update(overrides)
    return LoanTerms(**values)


def _payment(payment_id: int, paid_on: date) -> DebtPayment:
    return DebtPayment(
        id=payment_id,
        debt_id=1,
        amount=Decimal("105.00"),
        principal=Decimal("93.00"),
        interest=Decimal("12.00"),
        insurance=Decimal("0"),
        date=paid_on,
        payment_number=payment_id,
        notes=None,
    )


def test_first_installment_splits_interest_and_principal():
    """Test the first row of a 1200 loan at 12% paid 105 a month."""
    schedule = generate_schedule(_terms())

    first = schedule[0]
    assert first.installment_number == 1
    assert first.due_date == date(2024, 2, 15)
    assert first.interest == Decimal("12.00")
    assert first.principal == Decimal("93.00")
    assert first.amount == Decimal("105.00")
    assert first.status == InstallmentStatus.PENDING


def test_second_installment_charges_interest_on_remaining():
    """Test interest is charged on the principal left after the first row."""
    schedule = generate_schedule(_terms())

    assert schedule[1].interest == Decimal("11.07")
    assert schedule[1].principal == Decimal("93.93")


def test_principal_sums_to_loan_amount():
    """Test the final installment absorbs the remaining principal."""
    schedule = generate_schedule(_terms())

    totals = schedule_totals(schedule)
    assert len(schedule) == 12
    assert totals["principal"] == Decimal("1200.00")
    assert schedule[-1].amount > Decimal("105.00")


def test_amount_equals_principal_plus_interest():
    """Test every row's amount is its principal plus interest."""
    schedule = generate_schedule(_terms())

    for row in schedule:
        assert row.amount == row.principal + row.interest
    totals = schedule_totals(schedule)
    assert totals["amount"] == totals["principal"] + totals["interest"]


def test_due_dates_strictly_increase():
    """Test due dates advance one month at a time."""
    schedule = generate_schedule(_terms())

    dates = [row.due_date for row in schedule]
    assert dates == sorted(set(dates))
    assert dates[-1] == date(2025, 1, 15)


def test_zero_interest_loan():
    """Test a zero-rate loan charges no interest."""
    schedule = generate_schedule(
        _terms(annual_rate=Decimal("0"), monthly_payment=Decimal("100.00"))
    )

    assert all(row.interest == Decimal("0") for row in schedule)
    assert schedule[-1].principal == Decimal("100.00")


def test_payment_day_clamped_to_month_end():
    """Test day 31 falls on the last day of shorter months."""
    schedule = generate_schedule(_terms(start_date=date(2024, 1, 31), payment_day_of_month=31))

    assert schedule[0].due_date == date(2024, 2, 29)
    assert schedule[1].due_date == date(2024, 3, 31)
    assert schedule[2].due_date == date(2024, 4, 30)


def test_existing_payments_settle_in_chronological_order():
    """Test back-filled rows take the k-th payment by date."""
    late = _payment(7, date(2024, 3, 20))
    early = _payment(9, date(2024, 2, 10))

    schedule = generate_schedule(_terms(), existing_payments=[late, early])

    assert schedule[0].status == InstallmentStatus.ADVANCED
    assert schedule[0].debt_payment_id == 9
    assert schedule[1].status == InstallmentStatus.PAID
    assert schedule[1].debt_payment_id == 7
    assert schedule[2].status == InstallmentStatus.PENDING
    assert schedule[2].debt_payment_id is None


def test_payment_on_due_date_is_paid_not_advanced():
    """Test a payment made exactly on the due date counts as paid."""
    schedule = generate_schedule(_terms(), existing_payments=[_payment(1, date(2024, 2, 15))])

    assert schedule[0].status == InstallmentStatus.PAID


@pytest.mark.parametrize(
    "overrides",
    [
        {"total_installments": 0},
        {"principal": Decimal("0")},
        {"monthly_payment": Decimal("0")},
        {"annual_rate": Decimal("-1")},
        {"payment_day_of_month": 32},
    ],
)
def test_invalid_terms_rejected(overrides):
    """Test malformed loan terms raise ValidationError."""
    with pytest.raises(ValidationError):
        generate_schedule(_terms(**overrides))


def test_to_cents_rounds_half_up():
    """Test monetary rounding."""
    assert to_cents(Decimal("1.005")) == Decimal("1.01")
    assert to_cents(Decimal("1.004")) == Decimal("1.00")


def test_payment_repaying_early_rejected():
    """Test terms that would repay the loan before the last row are rejected."""
    terms = _terms(
        principal=Decimal("1000"),
        monthly_payment=Decimal("300"),
        total_installments=6,
    )

    with pytest.raises(ValidationError, match="repays the debt in 4 installments"):
        generate_schedule(terms)


def test_payment_covering_loan_exactly_on_last_row():
    """Test a schedule whose last row is the first to reach zero is kept."""
    schedule = generate_schedule(
        _terms(
            principal=Decimal("1000"),
            annual_rate=Decimal("0"),
            monthly_payment=Decimal("250"),
            total_installments=4,
        )
    )

    assert [row.amount for row in schedule] == [Decimal("250")] * 4
    assert all(row.amount > 0 for row in schedule)
