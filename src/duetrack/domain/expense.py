"""Expense domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from duetrack.database.base import Database
from duetrack.domain.entities import (
    Expense as ExpenseEntity,
    Frequency,
    PaymentMethod,
)
from duetrack.domain.errors import (
    InconsistentError,
    NotFoundError,
    ValidationError,
    card_not_found,
    category_not_found,
    expense_not_found,
)

logger = logging.getLogger(__name__)


class ExpenseService:
    """Service for recording and listing expenses."""

    def __init__(self, db: Database, user_id: int):
        """Initialize expense service.

        Args:
            db: Database instance
            user_id: Owning user
        """
        self.db = db
        self.user_id = user_id

    def add_expense(
        self,
        amount: Decimal,
        description: str,
        expense_date: date,
        payment_method: PaymentMethod = PaymentMethod.CASH,
        category_id: Optional[int] = None,
        is_recurring: bool = False,
        frequency: Optional[Frequency] = None,
        credit_card_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Record an expense.

        A credit payment must name an active card of the user, and a card may
        only be named for credit payments. Recurring expenses default to a
        monthly frequency.

        Returns:
            Expense ID

        Raises:
            ValidationError: If the expense is malformed
            NotFoundError: If the card or category is not found
        """
        payment_method, frequency = self._check_fields(
            amount, description, expense_date, payment_method, credit_card_id, category_id, is_recurring, frequency
        )

        expense_id = self.db.create_expense(
            user_id=self.user_id,
            amount=amount,
            description=description.strip(),
            expense_date=expense_date,
            payment_method=payment_method.value,
            category_id=category_id,
            is_recurring=is_recurring,
            frequency=frequency.value if frequency is not None else None,
            credit_card_id=credit_card_id,
            notes=notes,
        )
        logger.debug("Created expense %s", expense_id)
        return expense_id

    def _check_fields(
        self,
        amount: Decimal,
        description: str,
        expense_date: date,
        payment_method: PaymentMethod,
        credit_card_id: Optional[int],
        category_id: Optional[int],
        is_recurring: bool,
        frequency: Optional[Frequency],
        kept_card_id: Optional[int] = None,
    ) -> tuple[PaymentMethod, Optional[Frequency]]:
        if amount is None or amount <= 0:
            raise ValidationError("Expense amount must be positive")
        if not description or not description.strip():
            raise ValidationError("Description cannot be empty")
        if expense_date is None:
            raise ValidationError("Expense date is required")

        payment_method = PaymentMethod(payment_method)
        if payment_method == PaymentMethod.CREDIT:
            if credit_card_id is None:
                raise ValidationError("Credit expenses must name a credit card")
            card = self.db.get_credit_card(self.user_id, credit_card_id)
            if card is None:
                raise NotFoundError(card_not_found(credit_card_id))
            if not card.is_active and credit_card_id != kept_card_id:
                raise ValidationError(f"Credit card {credit_card_id} is not active")
        elif credit_card_id is not None:
            raise ValidationError("Only credit expenses can be charged to a credit card")

        if frequency is not None and not is_recurring:
            raise ValidationError("Frequency is only valid for recurring expenses")
        if is_recurring and frequency is None:
            frequency = Frequency.MONTHLY

        if category_id is not None and self.db.get_category(self.user_id, category_id) is None:
            raise NotFoundError(category_not_found(category_id))
        return payment_method, Frequency(frequency) if frequency is not None else None

    def get_expense(self, expense_id: int) -> ExpenseEntity:
        """Get an expense or raise NotFoundError."""
        expense = self.db.get_expense(self.user_id, expense_id)
        if expense is None:
            raise NotFoundError(expense_not_found(expense_id))
        return expense

    def _editable(self, expense_id: int) -> ExpenseEntity:
        expense = self.get_expense(expense_id)
        if expense.settles_card_id is not None:
            raise InconsistentError(
                f"Expense {expense_id} is a card statement payment; its charges stay settled"
            )
        if expense.credit_card_id is not None and expense.is_paid_off:
            raise InconsistentError(
                f"Expense {expense_id} was settled by a card payment and can no longer change"
            )
        return expense

    def update_expense(
        self,
        expense_id: int,
        amount: Optional[Decimal] = None,
        description: Optional[str] = None,
        expense_date: Optional[date] = None,
        payment_method: Optional[PaymentMethod] = None,
        credit_card_id: Optional[int] = None,
        category_id: Optional[int] = None,
        clear_category: bool = False,
        is_recurring: Optional[bool] = None,
        frequency: Optional[Frequency] = None,
        notes: Optional[str] = None,
    ) -> ExpenseEntity:
        """Update an expense. Arguments left as None keep their current value.

        Switching away from credit drops the card, and turning recurrence off
        drops the frequency. The result is checked with the same rules as
        ``add_expense``.

        Args:
            expense_id: Expense ID
            clear_category: Remove the category (ignores category_id)

        Returns:
            The updated expense

        Raises:
            NotFoundError: If the expense, card or category is not found
            ValidationError: If the updated expense is malformed
            InconsistentError: If the expense is a card payment or a settled charge
        """
        current = self._editable(expense_id)

        new_method = PaymentMethod(payment_method) if payment_method is not None else current.payment_method
        if credit_card_id is not None:
            new_card = credit_card_id
        elif new_method == PaymentMethod.CREDIT:
            new_card = current.credit_card_id
        else:
            new_card = None

        new_recurring = current.is_recurring if is_recurring is None else is_recurring
        if frequency is not None:
            new_frequency = frequency
        elif new_recurring:
            new_frequency = current.frequency
        else:
            new_frequency = None

        if clear_category:
            new_category = None
        elif category_id is not None:
            new_category = category_id
        else:
            new_category = current.category_id
        new_description = description if description is not None else current.description
        new_amount = amount if amount is not None else current.amount
        new_date = expense_date or current.date

        new_method, new_frequency = self._check_fields(
            new_amount,
            new_description,
            new_date,
            new_method,
            new_card,
            new_category,
            new_recurring,
            new_frequency,
            kept_card_id=current.credit_card_id,
        )
        changes = {
            "amount": new_amount,
            "description": new_description.strip(),
            "date": new_date,
            "payment_method": new_method.value,
            "credit_card_id": new_card,
            "category_id": new_category,
            "is_recurring": new_recurring,
            "frequency": new_frequency.value if new_frequency is not None else None,
        }
        if notes is not None:
            changes["notes"] = notes
        self.db.update_expense(self.user_id, expense_id, changes)
        logger.debug("Updated expense %s", expense_id)
        return self.get_expense(expense_id)

    def delete_expense(self, expense_id: int) -> None:
        """Delete an expense.

        Raises:
            NotFoundError: If the expense is not found
            InconsistentError: If the expense is a card payment or a settled charge
        """
        self._editable(expense_id)
        self.db.delete_expense(self.user_id, expense_id)
        logger.info("Deleted expense %s", expense_id)

    def list_expenses(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        credit_card_id: Optional[int] = None,
        recurring_only: bool = False,
    ) -> list[ExpenseEntity]:
        """List expenses, newest first."""
        return self.db.list_expenses(
            self.user_id,
            start_date=start_date,
            end_date=end_date,
            credit_card_id=credit_card_id,
            recurring_only=recurring_only,
        )

    def cash_spending(self, start_date: date, end_date: date) -> Decimal:
        """Total spent from the bank account between two dates.

        Card charges are excluded; they leave the account only when the
        statement is paid, and that payment is itself a debit expense.
        """
        expenses = self.list_expenses(start_date=start_date, end_date=end_date)
        return sum((exp.amount for exp in expenses if exp.credit_card_id is None), Decimal("0"))
