"""Amortization schedule generation for fixed-payment loans."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Sequence

from duetrack.domain.entities import (
    DebtPayment,
    InstallmentStatus,
    ScheduledInstallment,
)
from duetrack.domain.errors import ValidationError
from duetrack.utils.calendar_math import shift_to_day

CENT = Decimal("0.01")
MONTHS_PER_YEAR = 12


def to_cents(value: Decimal) -> Decimal:
    """Round a monetary value to cents."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class LoanTerms:
    """Inputs of the amortization generator."""

    principal: Decimal
    annual_rate: Decimal
    monthly_payment: Decimal
    total_installments: int
    start_date: date
    payment_day_of_month: int

    def validate(self) -> None:
        """Raise ValidationError if the terms cannot produce a schedule."""
        if self.total_installments is None or self.total_installments < 1:
            raise ValidationError("Total installments must be at least 1")
        if self.principal is None or self.principal <= 0:
            raise ValidationError("Total amount must be positive")
        if self.monthly_payment is None or self.monthly_payment <= 0:
            raise ValidationError("Monthly payment must be positive")
        if self.annual_rate is None or self.annual_rate < 0:
            raise ValidationError("Interest rate cannot be negative")
        if self.start_date is None:
            raise ValidationError("Start date is required")
        if not 1 <= self.payment_day_of_month <= 31:
            raise ValidationError("Payment day of month must be between 1 and 31")

    @property
    def monthly_rate(self) -> Decimal:
        return self.annual_rate / Decimal(100) / Decimal(MONTHS_PER_YEAR)


def installment_due_date(start_date: date, installment_number: int, payment_day: int) -> date:
    """Due date of installment ``k``: ``k`` months after start on the payment day."""
    return shift_to_day(start_date, installment_number, payment_day)


def initial_status(due_date: date, payment: Optional[DebtPayment]) -> InstallmentStatus:
    """Status of a freshly generated installment backed by an existing payment."""
    if payment is None:
        return InstallmentStatus.PENDING
    if payment.date < due_date:
        return InstallmentStatus.ADVANCED
    return InstallmentStatus.PAID


def generate_schedule(
    terms: LoanTerms,
    existing_payments: Sequence[DebtPayment] = (),
) -> list[ScheduledInstallment]:
    """Generate the full installment schedule for a loan.

    Interest is charged on the remaining principal at the monthly rate and
    rounded to cents. Every installment but the last pays the fixed monthly
    payment; the last one retires whatever principal remains so the principal
    column always sums to the loan amount.

    Args:
        terms: Loan terms
        existing_payments: Payments already recorded for the debt, used when
            back-filling a schedule. The k-th payment in chronological order
            settles installment k.

    Returns:
        Installments ordered by installment number

    Raises:
        ValidationError: If the terms are invalid, or the monthly payment
            repays the principal before the last installment
    """
    terms.validate()

    payments = sorted(existing_payments, key=lambda p: (p.date, p.id))
    rate = terms.monthly_rate
    remaining = terms.principal
    count = terms.total_installments

    schedule = []
    for number in range(1, count + 1):
        due_date = installment_due_date(terms.start_date, number, terms.payment_day_of_month)
        interest = to_cents(remaining * rate)
        principal = terms.monthly_payment - interest

        if number == count:
            row_principal = remaining
            amount = remaining + interest
        else:
            row_principal = principal
            amount = terms.monthly_payment

        payment = payments[number - 1] if number <= len(payments) else None
        schedule.append(
            ScheduledInstallment(
                installment_number=number,
                due_date=due_date,
                amount=amount,
                principal=row_principal,
                interest=interest,
                status=initial_status(due_date, payment),
                debt_payment_id=payment.id if payment is not None else None,
            )
        )
        remaining -= principal
        if number < count and remaining <= 0:
            raise ValidationError(
                f"Monthly payment {terms.monthly_payment} repays the debt in {number} installments, "
                f"fewer than the {count} requested"
            )

    return schedule


def schedule_totals(schedule: Sequence[ScheduledInstallment]) -> dict[str, Decimal]:
    """Sum the amount, principal and interest columns of a schedule."""
    return {
        "amount": sum((row.amount for row in schedule), Decimal("0")),
        "principal": sum((row.principal for row in schedule), Decimal("0")),
        "interest": sum((row.interest for row in schedule), Decimal("0")),
    }
