"""Abstract database interface.

Every read and write takes the owning ``user_id`` and must filter by it: a
record that exists but belongs to another user is reported exactly like a
missing one.
"""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

# Import entities directly to avoid circular import through domain/__init__.py
from duetrack.domain.entities import (
    User,
    Category,
    Debt,
    DebtInstallment,
    DebtPayment,
    CreditCard,
    Expense,
    Income,
    SavingsGoal,
    SavingsContribution,
    ScheduledInstallment,
)


class Database(ABC):
    """Abstract database interface for duetrack."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # User operations
    @abstractmethod
    def create_user(self, username: str) -> int:
        """Create a user. Returns user ID."""
        pass

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        pass

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]:
        """Get user by username."""
        pass

    # Category operations
    @abstractmethod
    def create_category(self, user_id: int, name: str) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, user_id: int, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def get_category_by_name(self, user_id: int, name: str) -> Optional[Category]:
        """Get category by name."""
        pass

    @abstractmethod
    def list_categories(self, user_id: int) -> list[Category]:
        """List categories of a user."""
        pass

    # Debt operations
    @abstractmethod
    def create_debt(
        self,
        user_id: int,
        name: str,
        creditor: Optional[str],
        total_amount: Decimal,
        remaining_amount: Decimal,
        interest_rate: Decimal,
        monthly_payment: Decimal,
        total_installments: int,
        payment_day_of_month: int,
        start_date: date,
        end_date: Optional[date],
        schedule: Sequence[ScheduledInstallment],
    ) -> int:
        """Create a debt together with its installment schedule.

        Both are written in one transaction. Returns debt ID.
        """
        pass

    @abstractmethod
    def get_debt(self, user_id: int, debt_id: int) -> Optional[Debt]:
        """Get debt by ID."""
        pass

    @abstractmethod
    def list_debts(self, user_id: int, include_paid: bool = True) -> list[Debt]:
        """List debts, unpaid first then newest start date first."""
        pass

    @abstractmethod
    def delete_debt(self, user_id: int, debt_id: int) -> None:
        """Delete a debt with its installments and payments."""
        pass

    @abstractmethod
    def update_debt(
        self,
        user_id: int,
        debt_id: int,
        changes: Mapping[str, Any],
        schedule: Optional[Sequence[ScheduledInstallment]] = None,
    ) -> None:
        """Update debt fields, optionally replacing its schedule in the same transaction."""
        pass

    # Installment operations
    @abstractmethod
    def list_installments(self, user_id: int, debt_id: int) -> list[DebtInstallment]:
        """List installments of a debt ordered by installment number."""
        pass

    @abstractmethod
    def mark_installments_overdue(self, user_id: int, debt_id: int, installment_ids: Sequence[int]) -> int:
        """Move the given still-pending installments to overdue. Returns rows changed."""
        pass

    @abstractmethod
    def replace_installments(
        self, user_id: int, debt_id: int, schedule: Sequence[ScheduledInstallment]
    ) -> None:
        """Atomically replace the whole installment schedule of a debt."""
        pass

    # Debt payment operations
    @abstractmethod
    def record_debt_payment(
        self,
        user_id: int,
        debt_id: int,
        amount: Decimal,
        principal: Decimal,
        interest: Decimal,
        insurance: Decimal,
        payment_date: date,
        payment_number: Optional[int],
        notes: Optional[str],
        settlements: Sequence[DebtInstallment],
        expected_remaining: Decimal,
        new_remaining: Decimal,
    ) -> int:
        """Record a payment, settle installments and update the debt balance.

        All writes happen in one transaction. ``settlements`` carry the new
        status of each settled installment; they are linked to the new
        payment. The debt balance must still equal ``expected_remaining``.
        Returns payment ID.
        """
        pass

    @abstractmethod
    def list_debt_payments(self, user_id: int, debt_id: int) -> list[DebtPayment]:
        """List payments of a debt by payment number, then date."""
        pass

    # Credit card operations
    @abstractmethod
    def create_credit_card(
        self,
        user_id: int,
        name: str,
        bank: str,
        last_digits: Optional[str],
        credit_limit: Decimal,
        billing_day: int,
        payment_day: int,
        interest_rate: Optional[Decimal],
    ) -> int:
        """Create a credit card. Returns card ID."""
        pass

    @abstractmethod
    def get_credit_card(self, user_id: int, card_id: int) -> Optional[CreditCard]:
        """Get credit card by ID."""
        pass

    @abstractmethod
    def list_credit_cards(self, user_id: int, active_only: bool = False) -> list[CreditCard]:
        """List credit cards."""
        pass

    @abstractmethod
    def set_credit_card_active(self, user_id: int, card_id: int, is_active: bool) -> None:
        """Activate or deactivate a card."""
        pass

    @abstractmethod
    def update_credit_card(self, user_id: int, card_id: int, changes: Mapping[str, Any]) -> None:
        """Update credit card fields."""
        pass

    @abstractmethod
    def delete_credit_card(self, user_id: int, card_id: int) -> None:
        """Delete a credit card."""
        pass

    @abstractmethod
    def settle_card_period(
        self,
        user_id: int,
        card_id: int,
        start_date: date,
        end_date: date,
        payment_amount: Decimal,
        payment_date: date,
        description: str,
        category_id: Optional[int],
    ) -> tuple[int, int]:
        """Settle a card's charges in ``[start_date, end_date]``.

        Marks every unsettled charge of the card in the range as paid off
        and records one debit expense for the outgoing payment, in one
        transaction. Returns (settled charge count, payment expense ID).
        """
        pass

    # Expense operations
    @abstractmethod
    def create_expense(
        self,
        user_id: int,
        amount: Decimal,
        description: str,
        expense_date: date,
        payment_method: str,
        category_id: Optional[int] = None,
        is_recurring: bool = False,
        frequency: Optional[str] = None,
        credit_card_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Create an expense. Returns expense ID."""
        pass

    @abstractmethod
    def list_expenses(
        self,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        credit_card_id: Optional[int] = None,
        recurring_only: bool = False,
        settles_card_id: Optional[int] = None,
    ) -> list[Expense]:
        """List expenses with optional filters, newest first."""
        pass

    @abstractmethod
    def get_expense(self, user_id: int, expense_id: int) -> Optional[Expense]:
        """Get expense by ID."""
        pass

    @abstractmethod
    def update_expense(self, user_id: int, expense_id: int, changes: Mapping[str, Any]) -> None:
        """Update expense fields."""
        pass

    @abstractmethod
    def delete_expense(self, user_id: int, expense_id: int) -> None:
        """Delete an expense."""
        pass

    # Income operations
    @abstractmethod
    def create_income(
        self,
        user_id: int,
        amount: Decimal,
        description: str,
        income_date: date,
        category_id: Optional[int] = None,
        is_recurring: bool = False,
        frequency: Optional[str] = None,
        source_income_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Create an income. Returns income ID."""
        pass

    @abstractmethod
    def list_incomes(
        self,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        recurring: Optional[bool] = None,
    ) -> list[Income]:
        """List incomes with optional filters, newest first."""
        pass

    @abstractmethod
    def get_income(self, user_id: int, income_id: int) -> Optional[Income]:
        """Get income by ID."""
        pass

    @abstractmethod
    def update_income(self, user_id: int, income_id: int, changes: Mapping[str, Any]) -> None:
        """Update income fields."""
        pass

    @abstractmethod
    def delete_income(self, user_id: int, income_id: int) -> None:
        """Delete an income. Instances generated from it keep their rows but lose the link."""
        pass

    # Savings operations
    @abstractmethod
    def create_savings_goal(
        self, user_id: int, name: str, target_amount: Decimal, deadline: Optional[date]
    ) -> int:
        """Create a savings goal. Returns goal ID."""
        pass

    @abstractmethod
    def get_savings_goal(self, user_id: int, goal_id: int) -> Optional[SavingsGoal]:
        """Get savings goal by ID."""
        pass

    @abstractmethod
    def list_savings_goals(self, user_id: int) -> list[SavingsGoal]:
        """List savings goals."""
        pass

    @abstractmethod
    def update_savings_goal(self, user_id: int, goal_id: int, changes: Mapping[str, Any]) -> None:
        """Update savings goal fields."""
        pass

    @abstractmethod
    def delete_savings_goal(self, user_id: int, goal_id: int) -> None:
        """Delete a savings goal with its contributions."""
        pass

    @abstractmethod
    def add_savings_contribution(
        self,
        user_id: int,
        goal_id: int,
        amount: Decimal,
        contribution_date: date,
        notes: Optional[str],
        new_current_amount: Decimal,
        is_completed: bool,
    ) -> int:
        """Record a contribution and update the goal in one transaction. Returns contribution ID."""
        pass

    @abstractmethod
    def list_savings_contributions(self, user_id: int, goal_id: int) -> list[SavingsContribution]:
        """List contributions of a goal, oldest first."""
        pass
