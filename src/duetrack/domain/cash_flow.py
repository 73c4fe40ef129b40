"""Cash-flow projection and payment plan summary."""

from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from duetrack.domain.amortization import to_cents
from duetrack.domain.entities import (
    CashFlowDay,
    CashFlowStatus,
    Debt,
    PaymentPlanSummary,
    PaymentSuggestion,
    Priority,
)

DEFAULT_HORIZON_DAYS = 30
INCOME_RECEIPT_DAY = 25
SAFETY_BUFFER_RATIO = Decimal("0.10")
MAX_URGENT_OBLIGATIONS = 3
HIGH_INTEREST_WARNING_RATE = Decimal(20)

ZERO = Decimal("0")


def estimated_income_date(today: date, pending_income: Decimal) -> Optional[date]:
    """Date on which pending recurring income is expected, if still ahead."""
    if pending_income <= 0:
        return None
    receipt = today.replace(day=INCOME_RECEIPT_DAY)
    if receipt <= today:
        return None
    return receipt


def project_cash_flow(
    current_balance: Decimal,
    pending_income: Decimal,
    suggestions: Sequence[PaymentSuggestion],
    today: date,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
) -> tuple[CashFlowDay, ...]:
    """Forecast the running balance over ``horizon_days`` days from ``today``.

    Suggestions are paid on their suggested payment date. Pending recurring
    income arrives as a single inflow on the estimated receipt date. Only
    days with an inflow or at least one payment produce a row, and each
    row's balance already reflects every earlier row.
    """
    income_date = estimated_income_date(today, pending_income)
    running = current_balance
    rows = []

    for offset in range(horizon_days + 1):
        day = today + timedelta(days=offset)
        payments = tuple(s for s in suggestions if s.suggested_payment_date == day)
        income = pending_income if day == income_date else ZERO
        if not payments and income == ZERO:
            continue

        outflow = sum((p.amount for p in payments), ZERO)
        running = running + income - outflow
        rows.append(
            CashFlowDay(
                date=day,
                income=income,
                expenses=outflow,
                balance=running,
                payments=payments,
            )
        )

    return tuple(sorted(rows, key=lambda row: row.date))


def cash_flow_status(projected_available: Decimal, safety_buffer: Decimal) -> CashFlowStatus:
    """Verdict: healthy above the buffer, tight while non-negative, else deficit."""
    if projected_available > safety_buffer:
        return CashFlowStatus.HEALTHY
    if projected_available >= 0:
        return CashFlowStatus.TIGHT
    return CashFlowStatus.DEFICIT


def plan_warnings(
    status: CashFlowStatus,
    projected_available: Decimal,
    current_balance: Decimal,
    safety_buffer: Decimal,
    pending_income: Decimal,
    suggestions: Sequence[PaymentSuggestion],
    debts: Iterable[Debt],
) -> tuple[str, ...]:
    """Human-readable warnings; each condition is checked independently."""
    warnings = []

    if status == CashFlowStatus.DEFICIT:
        warnings.append(
            f"Obligations exceed your available funds by {to_cents(-projected_available)}. "
            "Consider postponing non-essential spending."
        )
    if pending_income > 0:
        warnings.append(
            f"Projection counts {to_cents(pending_income)} of recurring income not yet received this month."
        )
    if status == CashFlowStatus.TIGHT:
        warnings.append("Your budget is tight: obligations leave little room for unexpected costs.")
    if status != CashFlowStatus.DEFICIT and current_balance < safety_buffer:
        warnings.append("Your balance is below the recommended safety buffer.")

    urgent = sum(1 for s in suggestions if s.priority == Priority.URGENT)
    if urgent > MAX_URGENT_OBLIGATIONS:
        warnings.append(
            f"You have {urgent} urgent payments. Pay the highest interest rates first."
        )

    high_interest = sorted(
        debt.name for debt in debts if not debt.is_paid and debt.interest_rate > HIGH_INTEREST_WARNING_RATE
    )
    if high_interest:
        warnings.append(
            f"High-interest debt ({', '.join(high_interest)}): consider paying it down early."
        )

    return tuple(warnings)


def summarize_plan(
    received_income: Decimal,
    pending_income: Decimal,
    current_balance: Decimal,
    suggestions: Sequence[PaymentSuggestion],
    debts: Iterable[Debt] = (),
) -> PaymentPlanSummary:
    """Aggregate totals, safety buffer and verdict of a plan."""
    total_income = received_income + pending_income
    total_obligations = sum((s.amount for s in suggestions), ZERO)
    safety_buffer = total_income * SAFETY_BUFFER_RATIO
    projected_available = current_balance + pending_income - total_obligations
    status = cash_flow_status(projected_available, safety_buffer)

    return PaymentPlanSummary(
        total_income=total_income,
        received_income=received_income,
        pending_recurring_income=pending_income,
        total_obligations=total_obligations,
        current_balance=current_balance,
        safety_buffer=safety_buffer,
        projected_available=projected_available,
        cash_flow_status=status,
        warnings=plan_warnings(
            status,
            projected_available,
            current_balance,
            safety_buffer,
            pending_income,
            suggestions,
            debts,
        ),
    )
