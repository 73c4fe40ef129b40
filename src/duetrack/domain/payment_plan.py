"""Payment plan service.

Reads the user's records once and runs them through the engine: obligation
aggregation, priority classification, cash-flow projection and the plan
summary. Nothing here is persisted except the overdue promotion performed
when installments are read.
"""

import logging
from datetime import date

from duetrack.database.base import Database
from duetrack.domain.cash_flow import DEFAULT_HORIZON_DAYS, project_cash_flow, summarize_plan
from duetrack.domain.credit_card import CreditCardService
from duetrack.domain.debt import DebtService
from duetrack.domain.entities import PaymentPlan
from duetrack.domain.expense import ExpenseService
from duetrack.domain.income import IncomeService
from duetrack.domain.obligations import aggregate_obligations, prioritize
from duetrack.utils.calendar_math import month_bounds

logger = logging.getLogger(__name__)


class PaymentPlanService:
    """Service that builds a user's payment plan."""

    def __init__(self, db: Database, user_id: int):
        """Initialize payment plan service.

        Args:
            db: Database instance
            user_id: Owning user
        """
        self.db = db
        self.user_id = user_id
        self.debts = DebtService(db, user_id)
        self.cards = CreditCardService(db, user_id)
        self.expenses = ExpenseService(db, user_id)
        self.incomes = IncomeService(db, user_id)

    def build_plan(self, today: date, horizon_days: int = DEFAULT_HORIZON_DAYS) -> PaymentPlan:
        """Build the payment plan for ``today``.

        The current balance is this month's income received so far minus
        what already left the bank account this month (card charges are not
        counted until their statement is paid).

        Args:
            today: Reference date
            horizon_days: Days covered by the cash-flow projection

        Returns:
            PaymentPlan with summary, suggestions and projection
        """
        month_start, _ = month_bounds(today)
        received, pending = self.incomes.month_position(today)
        current_balance = received - self.expenses.cash_spending(month_start, today)

        debts = self.debts.list_debts(include_paid=False)
        installments = {debt.id: self.debts.list_installments(debt.id, today) for debt in debts}
        statements = self.cards.statements_for_active_cards(today)
        recurring = self.expenses.list_expenses(recurring_only=True)

        obligations = aggregate_obligations(debts, installments, statements, recurring, today)
        suggestions = prioritize(obligations, today)
        projection = project_cash_flow(current_balance, pending, suggestions, today, horizon_days)
        summary = summarize_plan(received, pending, current_balance, suggestions, debts)

        logger.debug(
            "Built plan for user %s: %d suggestions, status %s",
            self.user_id,
            len(suggestions),
            summary.cash_flow_status.value,
        )
        return PaymentPlan(summary=summary, suggestions=suggestions, cash_flow_projection=projection)
