"""Period summary domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

from duetrack.database.base import Database
from duetrack.domain.entities import MonthlySummary, PaymentMethod
from duetrack.domain.errors import ValidationError
from duetrack.utils.calendar_math import month_bounds


class SummaryService:
    """Service for income, spending and savings totals over a period."""

    def __init__(self, db: Database, user_id: int):
        """Initialize summary service.

        Args:
            db: Database instance
            user_id: Owning user
        """
        self.db = db
        self.user_id = user_id

    def build_summary(
        self,
        today: date,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> MonthlySummary:
        """Totals for a period, defaulting to the month containing ``today``.

        Expenses are split by payment method; card statement payments are
        debit expenses. Savings figures cover every goal not yet completed,
        whatever the period.

        Args:
            today: Reference date for the default period
            start_date: Optional start date (inclusive)
            end_date: Optional end date (inclusive)

        Returns:
            MonthlySummary for the period

        Raises:
            ValidationError: If start_date is after end_date
        """
        month_start, month_end = month_bounds(today)
        start_date = start_date or month_start
        end_date = end_date or month_end
        if start_date > end_date:
            raise ValidationError("Start date cannot be after end date")

        incomes = self.db.list_incomes(self.user_id, start_date=start_date, end_date=end_date)
        expenses = self.db.list_expenses(self.user_id, start_date=start_date, end_date=end_date)
        by_method = {method: Decimal("0") for method in PaymentMethod}
        for expense in expenses:
            by_method[expense.payment_method] += expense.amount

        active_goals = [goal for goal in self.db.list_savings_goals(self.user_id) if not goal.is_completed]

        return MonthlySummary(
            start_date=start_date,
            end_date=end_date,
            total_income=sum((inc.amount for inc in incomes), Decimal("0")),
            income_count=len(incomes),
            total_expenses=sum(by_method.values(), Decimal("0")),
            expense_count=len(expenses),
            cash_expenses=by_method[PaymentMethod.CASH],
            debit_expenses=by_method[PaymentMethod.DEBIT],
            credit_expenses=by_method[PaymentMethod.CREDIT],
            active_goals=len(active_goals),
            total_saved=sum((goal.current_amount for goal in active_goals), Decimal("0")),
        )
