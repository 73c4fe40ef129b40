"""Billing cycle resolution for credit cards.

A cycle closes on the card's cut-off (billing) day and starts the day after
the previous cut-off. Its payment is due on the card's payment day, in the
same month as the cut-off when the payment day comes after the billing day,
otherwise in the following month.
"""

from datetime import date, datetime, time, timedelta

from duetrack.domain.entities import BillingCycles, BillingPeriod
from duetrack.domain.errors import ValidationError
from duetrack.utils.calendar_math import shift_to_day

END_OF_DAY = time(23, 59, 59)


def _validate_day(value: int, label: str) -> None:
    if value is None or not 1 <= value <= 31:
        raise ValidationError(f"{label} must be between 1 and 31")


def cutoff_date(reference: date, months: int, billing_day: int) -> date:
    """Cut-off date ``months`` away from the month of ``reference``."""
    return shift_to_day(reference, months, billing_day)


def payment_due_date(cycle_end: date, billing_day: int, payment_day: int) -> datetime:
    """Payment due date for a cycle ending on ``cycle_end``."""
    months = 0 if payment_day > billing_day else 1
    return datetime.combine(shift_to_day(cycle_end, months, payment_day), END_OF_DAY)


def cycle_ending(cycle_end: date, billing_day: int, payment_day: int) -> BillingPeriod:
    """Billing period that closes on ``cycle_end``."""
    previous_end = shift_to_day(cycle_end, -1, billing_day)
    return BillingPeriod(
        start=datetime.combine(previous_end + timedelta(days=1), time.min),
        end=datetime.combine(cycle_end, END_OF_DAY),
        payment_due_date=payment_due_date(cycle_end, billing_day, payment_day),
    )


def resolve_cycles(billing_day: int, payment_day: int, today: date) -> BillingCycles:
    """Resolve the last closed and the currently open cycle for ``today``.

    Args:
        billing_day: Cut-off day of month (1-31)
        payment_day: Payment due day of month (1-31)
        today: Reference date

    Returns:
        BillingCycles with both periods

    Raises:
        ValidationError: If either day is out of range
    """
    _validate_day(billing_day, "Billing day")
    _validate_day(payment_day, "Payment day")

    this_cutoff = cutoff_date(today, 0, billing_day)
    past_cutoff = today > this_cutoff

    if past_cutoff:
        closed_end = this_cutoff
        open_end = cutoff_date(today, 1, billing_day)
    else:
        closed_end = cutoff_date(today, -1, billing_day)
        open_end = this_cutoff

    return BillingCycles(
        last_closed=cycle_ending(closed_end, billing_day, payment_day),
        current=cycle_ending(open_end, billing_day, payment_day),
        past_cutoff=past_cutoff,
    )


def select_period(cycles: BillingCycles, closed_has_unsettled: bool) -> tuple[BillingPeriod, bool]:
    """Choose the period a statement should show.

    The closed cycle is surfaced while it still has unsettled charges and
    today is past this month's cut-off; otherwise the open cycle is shown.

    Returns:
        Tuple of (period, is_closed_period)
    """
    if closed_has_unsettled and cycles.past_cutoff:
        return cycles.last_closed, True
    return cycles.current, False
