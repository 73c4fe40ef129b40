"""Credit card domain service."""

import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Optional

from duetrack.database.base import Database
from duetrack.domain.billing_cycle import resolve_cycles, select_period
from duetrack.domain.card_statement import build_statement, unsettled_charges
from duetrack.domain.entities import (
    CardStatement,
    CreditCard as CreditCardEntity,
    Expense as ExpenseEntity,
)
from duetrack.domain.errors import InconsistentError, NotFoundError, ValidationError, card_not_found

logger = logging.getLogger(__name__)


def _check_card_fields(name, bank, credit_limit, billing_day, payment_day, last_digits, interest_rate) -> None:
    if not name or not name.strip():
        raise ValidationError("Card name cannot be empty")
    if not bank or not bank.strip():
        raise ValidationError("Bank cannot be empty")
    if credit_limit is None or credit_limit < 0:
        raise ValidationError("Credit limit cannot be negative")
    for label, day in (("Billing day", billing_day), ("Payment day", payment_day)):
        if day is None or not 1 <= day <= 31:
            raise ValidationError(f"{label} must be between 1 and 31")
    if last_digits is not None and (len(last_digits) != 4 or not last_digits.isdigit()):
        raise ValidationError("Last digits must be exactly 4 digits")
    if interest_rate is not None and interest_rate < 0:
        raise ValidationError("Interest rate cannot be negative")


class CreditCardService:
    """Service for credit cards, their statements and statement payments."""

    def __init__(self, db: Database, user_id: int):
        """Initialize credit card service.

        Args:
            db: Database instance
            user_id: Owning user
        """
        self.db = db
        self.user_id = user_id

    def create_card(
        self,
        name: str,
        bank: str,
        credit_limit: Decimal,
        billing_day: int,
        payment_day: int,
        last_digits: Optional[str] = None,
        interest_rate: Optional[Decimal] = None,
    ) -> int:
        """Register a credit card.

        Args:
            name: Card name
            bank: Issuing bank
            credit_limit: Credit limit
            billing_day: Cut-off day of month (1-31)
            payment_day: Payment due day of month (1-31)
            last_digits: Last four digits of the card number
            interest_rate: Annual interest rate in percent

        Returns:
            Card ID

        Raises:
            ValidationError: If any field is invalid
        """
        _check_card_fields(name, bank, credit_limit, billing_day, payment_day, last_digits, interest_rate)

        card_id = self.db.create_credit_card(
            user_id=self.user_id,
            name=name.strip(),
            bank=bank.strip(),
            last_digits=last_digits,
            credit_limit=credit_limit,
            billing_day=billing_day,
            payment_day=payment_day,
            interest_rate=interest_rate,
        )
        logger.info("Created credit card %s", card_id)
        return card_id

    def get_card(self, card_id: int) -> CreditCardEntity:
        """Get a card owned by the user.

        Raises:
            NotFoundError: If the card does not exist or belongs to someone else
        """
        card = self.db.get_credit_card(self.user_id, card_id)
        if card is None:
            raise NotFoundError(card_not_found(card_id))
        return card

    def list_cards(self, active_only: bool = False) -> list[CreditCardEntity]:
        """List the user's cards."""
        return self.db.list_credit_cards(self.user_id, active_only=active_only)

    def deactivate_card(self, card_id: int) -> None:
        """Stop planning payments for a card."""
        self.get_card(card_id)
        self.db.set_credit_card_active(self.user_id, card_id, False)

    def update_card(
        self,
        card_id: int,
        name: Optional[str] = None,
        bank: Optional[str] = None,
        credit_limit: Optional[Decimal] = None,
        billing_day: Optional[int] = None,
        payment_day: Optional[int] = None,
        last_digits: Optional[str] = None,
        interest_rate: Optional[Decimal] = None,
        is_active: Optional[bool] = None,
    ) -> CreditCardEntity:
        """Edit a card. Arguments left as None keep their current value.

        Returns:
            The updated card

        Raises:
            NotFoundError: If the card is not found
            ValidationError: If an edited field is invalid
            ConflictError: If the card was modified concurrently
        """
        card = self.get_card(card_id)
        requested = {
            "name": name.strip() if name is not None else None,
            "bank": bank.strip() if bank is not None else None,
            "credit_limit": credit_limit,
            "billing_day": billing_day,
            "payment_day": payment_day,
            "last_digits": last_digits,
            "interest_rate": interest_rate,
            "is_active": is_active,
        }
        changes = {field: value for field, value in requested.items() if value is not None}
        edited = replace(card, **changes)
        _check_card_fields(
            edited.name,
            edited.bank,
            edited.credit_limit,
            edited.billing_day,
            edited.payment_day,
            edited.last_digits,
            edited.interest_rate,
        )
        if changes:
            self.db.update_credit_card(self.user_id, card_id, changes)
            logger.info("Updated credit card %s (%s)", card_id, ", ".join(sorted(changes)))
        return self.get_card(card_id)

    def delete_card(self, card_id: int) -> None:
        """Delete a card that was never used.

        Raises:
            NotFoundError: If the card is not found
            InconsistentError: If charges or statement payments reference the card
        """
        self.get_card(card_id)
        used = self.db.list_expenses(self.user_id, credit_card_id=card_id) or self.db.list_expenses(
            self.user_id, settles_card_id=card_id
        )
        if used:
            raise InconsistentError(
                f"Credit card {card_id} has charges or payments; deactivate it instead"
            )
        self.db.delete_credit_card(self.user_id, card_id)
        logger.info("Deleted credit card %s", card_id)

    def _statement_for(self, card: CreditCardEntity, today: date) -> CardStatement:
        cycles = resolve_cycles(card.billing_day, card.payment_day, today)
        charges = self.db.list_expenses(
            self.user_id,
            start_date=cycles.last_closed.start.date(),
            end_date=cycles.current.end.date(),
            credit_card_id=card.id,
        )
        closed_has_unsettled = bool(unsettled_charges(card.id, cycles.last_closed, charges))
        period, is_closed = select_period(cycles, closed_has_unsettled)
        return build_statement(card, period, charges, is_closed_period=is_closed)

    def get_statement(self, card_id: int, today: date) -> CardStatement:
        """Statement of the period a card's holder should look at today.

        The closed cycle is shown while it has unsettled charges and this
        month's cut-off has passed; otherwise the open cycle is shown.
        """
        return self._statement_for(self.get_card(card_id), today)

    def statements_for_active_cards(self, today: date) -> list[CardStatement]:
        """Current statement of every active card."""
        return [self._statement_for(card, today) for card in self.list_cards(active_only=True)]

    def pay_statement(
        self,
        card_id: int,
        today: date,
        amount: Optional[Decimal] = None,
        payment_date: Optional[date] = None,
        category_id: Optional[int] = None,
    ) -> tuple[int, int]:
        """Pay the statement currently shown for a card.

        Every unsettled charge of the shown period is marked paid off and the
        outgoing payment is recorded as a debit expense. The payment is not a
        charge on the card and never appears in its statements.

        Args:
            card_id: Card ID
            today: Reference date used to resolve the period
            amount: Amount paid (defaults to the statement total)
            payment_date: Date of the payment (defaults to today)
            category_id: Optional category for the payment expense

        Returns:
            Tuple of (settled charge count, payment expense ID)

        Raises:
            NotFoundError: If the card is not found
            ValidationError: If the amount is not positive
        """
        statement = self.get_statement(card_id, today)
        card = statement.card
        if amount is None:
            amount = statement.statement.total_amount
        if amount <= 0:
            raise ValidationError("Payment amount must be positive")

        period = statement.billing_period
        settled, expense_id = self.db.settle_card_period(
            user_id=self.user_id,
            card_id=card.id,
            start_date=period.start.date(),
            end_date=period.end.date(),
            payment_amount=amount,
            payment_date=payment_date or today,
            description=f"Card payment {card.name} - {card.bank}",
            category_id=category_id,
        )
        logger.info(
            "Paid %s on card %s settling %d charges from %s to %s",
            amount,
            card.id,
            settled,
            period.start.date(),
            period.end.date(),
        )
        return settled, expense_id

    def payment_history(self, card_id: int) -> list[ExpenseEntity]:
        """Payments made towards a card, newest first."""
        self.get_card(card_id)
        return self.db.list_expenses(self.user_id, settles_card_id=card_id)
