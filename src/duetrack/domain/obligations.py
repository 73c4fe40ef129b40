"""Obligation aggregation and priority classification.

Three kinds of obligations feed a payment plan: debt installments, card
statements and recurring fixed expenses. Each is a small frozen variant that
knows how to derive its ``PaymentSuggestion``; everything downstream only
sees suggestions.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Mapping, Optional, Sequence, Union

from duetrack.domain.entities import (
    CardStatement,
    CreditCard,
    Debt,
    DebtInstallment,
    Expense,
    InstallmentStatus,
    ObligationType,
    PaymentSuggestion,
    Priority,
)
from duetrack.domain.installment_status import open_installments
from duetrack.utils.calendar_math import days_between, next_occurrence

URGENT_WITHIN_DAYS = 3
HIGH_WITHIN_DAYS = 7
CARD_LOW_AFTER_DAYS = 14
HIGH_INTEREST_RATE = Decimal(15)

DEBT_BUFFER_DAYS = 2
CARD_BUFFER_DAYS = 2
EXPENSE_BUFFER_DAYS = 1

ESSENTIAL_CATEGORY_KEYWORDS = ("utilities", "services", "servicios")


def classify_priority(
    days_until_due: int,
    escalate: bool = False,
    low_after_days: Optional[int] = None,
) -> Priority:
    """Classify an obligation by how soon it is due.

    Both day boundaries are inclusive: due in exactly 3 days is urgent, in
    exactly 7 days is high.

    Args:
        days_until_due: Whole days until the due date
        escalate: Raise to high when not otherwise urgent/high (high-interest
            debt, essential service)
        low_after_days: When set, obligations due later than this are low
    """
    if days_until_due <= URGENT_WITHIN_DAYS:
        return Priority.URGENT
    if days_until_due <= HIGH_WITHIN_DAYS:
        return Priority.HIGH
    if escalate:
        return Priority.HIGH
    if low_after_days is not None and days_until_due > low_after_days:
        return Priority.LOW
    return Priority.MEDIUM


def suggested_payment_date(due_date: date, buffer_days: int, today: date) -> date:
    """Pay ``buffer_days`` ahead of the due date, but never before today."""
    return max(due_date - timedelta(days=buffer_days), today)


def is_essential_category(category_name: Optional[str]) -> bool:
    """True for categories of essential services (utilities and the like)."""
    if not category_name:
        return False
    lowered = category_name.lower()
    return any(keyword in lowered for keyword in ESSENTIAL_CATEGORY_KEYWORDS)


@dataclass(frozen=True)
class DebtObligation:
    """Installments of a debt due in the current cycle (arrears included)."""

    debt: Debt
    installments: tuple[DebtInstallment, ...]
    due_date: date

    @property
    def amount(self) -> Decimal:
        return sum((inst.amount for inst in self.installments), Decimal("0"))

    def to_suggestion(self, today: date) -> PaymentSuggestion:
        days = days_between(today, self.due_date)
        high_interest = self.debt.interest_rate > HIGH_INTEREST_RATE
        priority = classify_priority(days, escalate=high_interest)
        overdue = sum(1 for inst in self.installments if inst.status == InstallmentStatus.OVERDUE)

        if priority == Priority.URGENT:
            reason = "Due in 3 days or less"
        elif priority == Priority.HIGH and high_interest and days > HIGH_WITHIN_DAYS:
            reason = f"High interest rate ({self.debt.interest_rate}%)"
        elif priority == Priority.HIGH:
            reason = "Due within a week"
        else:
            reason = "Regular monthly payment"
        if overdue:
            reason = f"{reason}; includes {overdue} overdue installment{'s' if overdue != 1 else ''}"

        return PaymentSuggestion(
            id=f"debt-{self.debt.id}",
            type=ObligationType.DEBT,
            name=self.debt.name,
            amount=self.amount,
            due_date=self.due_date,
            priority=priority,
            reason=reason,
            suggested_payment_date=suggested_payment_date(self.due_date, DEBT_BUFFER_DAYS, today),
            interest_rate=self.debt.interest_rate,
            remaining_balance=self.debt.remaining_amount,
        )


@dataclass(frozen=True)
class CardObligation:
    """Outstanding statement of a credit card."""

    card: CreditCard
    amount: Decimal
    due_date: date

    def to_suggestion(self, today: date) -> PaymentSuggestion:
        days = days_between(today, self.due_date)
        priority = classify_priority(days, low_after_days=CARD_LOW_AFTER_DAYS)

        if priority == Priority.URGENT:
            reason = "Due in 3 days or less - avoid interest charges"
        elif priority == Priority.HIGH:
            reason = "Due soon - pay early to avoid interest"
        else:
            reason = "Credit card payment"

        return PaymentSuggestion(
            id=f"card-{self.card.id}",
            type=ObligationType.CREDIT_CARD,
            name=f"{self.card.name} - {self.card.bank}",
            amount=self.amount,
            due_date=self.due_date,
            priority=priority,
            reason=reason,
            suggested_payment_date=suggested_payment_date(self.due_date, CARD_BUFFER_DAYS, today),
            interest_rate=self.card.interest_rate,
        )


@dataclass(frozen=True)
class ExpenseObligation:
    """Next occurrence of a recurring fixed expense."""

    expense: Expense
    due_date: date

    @property
    def amount(self) -> Decimal:
        return self.expense.amount

    def to_suggestion(self, today: date) -> PaymentSuggestion:
        days = days_between(today, self.due_date)
        essential = is_essential_category(self.expense.category_name)
        priority = classify_priority(days, escalate=essential)

        if priority == Priority.URGENT:
            reason = "Due in 3 days or less - do not delay"
        elif essential:
            reason = "Essential service - pay first to avoid cut-offs"
        else:
            reason = "Fixed monthly expense"

        return PaymentSuggestion(
            id=f"expense-{self.expense.id}",
            type=ObligationType.EXPENSE,
            name=self.expense.description,
            amount=self.amount,
            due_date=self.due_date,
            priority=priority,
            reason=reason,
            suggested_payment_date=suggested_payment_date(self.due_date, EXPENSE_BUFFER_DAYS, today),
        )


Obligation = Union[DebtObligation, CardObligation, ExpenseObligation]


def debt_obligation(
    debt: Debt, installments: Sequence[DebtInstallment], today: date
) -> Optional[DebtObligation]:
    """Obligation for a debt, or None when nothing is due this cycle."""
    if debt.is_paid:
        return None
    due_date = next_occurrence(debt.payment_day_of_month, today)
    due = tuple(inst for inst in open_installments(installments) if inst.due_date <= due_date)
    if not due:
        return None
    return DebtObligation(debt=debt, installments=due, due_date=due_date)


def card_obligation(statement: CardStatement, today: date) -> Optional[CardObligation]:
    """Obligation for a card statement, or None when nothing is owed."""
    card = statement.card
    total = statement.statement.total_amount
    if not card.is_active or total == 0:
        return None
    return CardObligation(card=card, amount=total, due_date=next_occurrence(card.payment_day, today))


def expense_obligation(expense: Expense, today: date) -> Optional[ExpenseObligation]:
    """Obligation for a recurring cash expense.

    Recurring charges on a credit card are billed through the card statement
    and do not produce an obligation of their own.
    """
    if not expense.is_recurring or expense.credit_card_id is not None:
        return None
    return ExpenseObligation(expense=expense, due_date=next_occurrence(expense.date.day, today))


def aggregate_obligations(
    debts: Iterable[Debt],
    installments_by_debt: Mapping[int, Sequence[DebtInstallment]],
    statements: Iterable[CardStatement],
    recurring_expenses: Iterable[Expense],
    today: date,
) -> list[Obligation]:
    """Collect every obligation due in the near future."""
    obligations: list[Obligation] = []
    for debt in debts:
        found = debt_obligation(debt, installments_by_debt.get(debt.id, ()), today)
        if found is not None:
            obligations.append(found)
    for statement in statements:
        found = card_obligation(statement, today)
        if found is not None:
            obligations.append(found)
    for expense in recurring_expenses:
        found = expense_obligation(expense, today)
        if found is not None:
            obligations.append(found)
    return obligations


def prioritize(obligations: Iterable[Obligation], today: date) -> tuple[PaymentSuggestion, ...]:
    """Derive suggestions and order them by priority, then due date.

    The sort is stable, so ties keep aggregation order.
    """
    suggestions = [obligation.to_suggestion(today) for obligation in obligations]
    return tuple(sorted(suggestions, key=lambda s: (s.priority.rank, s.due_date)))
