"""Card statement aggregation."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from duetrack.domain.entities import (
    BillingPeriod,
    CardStatement,
    CreditCard,
    Expense,
    StatementTotals,
)

HUNDRED = Decimal(100)


def unsettled_charges(card_id: int, period: BillingPeriod, expenses: Iterable[Expense]) -> list[Expense]:
    """Charges of ``card_id`` inside ``period`` that are not yet settled."""
    return sorted(
        (
            exp
            for exp in expenses
            if exp.credit_card_id == card_id and not exp.is_paid_off and period.contains(exp.date)
        ),
        key=lambda exp: (exp.date, exp.id),
    )


def credit_usage_percent(total: Decimal, credit_limit: Decimal) -> Decimal:
    """Share of the credit limit used, as a percentage rounded to 2 decimals."""
    if credit_limit <= 0:
        return Decimal("0.00")
    return (total / credit_limit * HUNDRED).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def build_statement(
    card: CreditCard,
    period: BillingPeriod,
    expenses: Iterable[Expense],
    is_closed_period: bool = False,
) -> CardStatement:
    """Build the statement of ``card`` for ``period``.

    Only unsettled charges dated inside the period count towards the total.
    """
    charges = unsettled_charges(card.id, period, expenses)
    total = sum((exp.amount for exp in charges), Decimal("0"))
    return CardStatement(
        card=card,
        billing_period=period,
        statement=StatementTotals(
            total_amount=total,
            transaction_count=len(charges),
            credit_usage_percent=credit_usage_percent(total, card.credit_limit),
            available_credit=card.credit_limit - total,
        ),
        expenses=tuple(charges),
        is_closed_period=is_closed_period,
    )
