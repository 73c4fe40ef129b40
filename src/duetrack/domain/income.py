"""Income domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from duetrack.database.base import Database
from duetrack.domain.entities import Frequency, Income as IncomeEntity
from duetrack.domain.errors import NotFoundError, ValidationError, category_not_found, income_not_found
from duetrack.utils.calendar_math import day_in_month, month_bounds

logger = logging.getLogger(__name__)

MID_MONTH_DAY = 15
GENERATED_SUFFIX = " (auto-generated)"


def receipt_date(template: IncomeEntity, today: date) -> date:
    """Date this month on which a recurring template pays out.

    Monthly income arrives on the template's own day of month. Biweekly
    income arrives on the 15th until then and on the last day of the month
    afterwards.
    """
    if template.frequency == Frequency.MONTHLY:
        return day_in_month(today.year, today.month, template.date.day)
    if template.frequency == Frequency.BIWEEKLY:
        if today.day <= MID_MONTH_DAY:
            return today.replace(day=MID_MONTH_DAY)
        return month_bounds(today)[1]
    return today


class IncomeService:
    """Service for incomes and recurring income generation."""

    def __init__(self, db: Database, user_id: int):
        """Initialize income service.

        Args:
            db: Database instance
            user_id: Owning user
        """
        self.db = db
        self.user_id = user_id

    def add_income(
        self,
        amount: Decimal,
        description: str,
        income_date: date,
        category_id: Optional[int] = None,
        is_recurring: bool = False,
        frequency: Optional[Frequency] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Record an income. A recurring income doubles as its own template.

        Returns:
            Income ID

        Raises:
            ValidationError: If the income is malformed
            NotFoundError: If the category is not found
        """
        if amount is None or amount <= 0:
            raise ValidationError("Income amount must be positive")
        if not description or not description.strip():
            raise ValidationError("Description cannot be empty")
        if income_date is None:
            raise ValidationError("Income date is required")
        if frequency is not None and not is_recurring:
            raise ValidationError("Frequency is only valid for recurring incomes")
        if is_recurring and frequency is None:
            frequency = Frequency.MONTHLY
        if category_id is not None and self.db.get_category(self.user_id, category_id) is None:
            raise NotFoundError(category_not_found(category_id))

        income_id = self.db.create_income(
            user_id=self.user_id,
            amount=amount,
            description=description.strip(),
            income_date=income_date,
            category_id=category_id,
            is_recurring=is_recurring,
            frequency=Frequency(frequency).value if frequency is not None else None,
            notes=notes,
        )
        logger.debug("Created income %s", income_id)
        return income_id

    def list_incomes(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        recurring: Optional[bool] = None,
    ) -> list[IncomeEntity]:
        """List incomes, newest first."""
        return self.db.list_incomes(
            self.user_id, start_date=start_date, end_date=end_date, recurring=recurring
        )

    def get_income(self, income_id: int) -> IncomeEntity:
        """Get an income or raise NotFoundError."""
        income = self.db.get_income(self.user_id, income_id)
        if income is None:
            raise NotFoundError(income_not_found(income_id))
        return income

    def update_income(
        self,
        income_id: int,
        amount: Optional[Decimal] = None,
        description: Optional[str] = None,
        income_date: Optional[date] = None,
        category_id: Optional[int] = None,
        clear_category: bool = False,
        is_recurring: Optional[bool] = None,
        frequency: Optional[Frequency] = None,
        notes: Optional[str] = None,
    ) -> IncomeEntity:
        """Update an income. Arguments left as None keep their current value.

        Turning recurrence off drops the frequency; a generated instance can
        never become a recurring template itself.

        Returns:
            The updated income

        Raises:
            NotFoundError: If the income or category is not found
            ValidationError: If the updated income is malformed
        """
        current = self.get_income(income_id)

        new_amount = amount if amount is not None else current.amount
        if new_amount <= 0:
            raise ValidationError("Income amount must be positive")
        new_description = description if description is not None else current.description
        if not new_description.strip():
            raise ValidationError("Description cannot be empty")

        new_recurring = current.is_recurring if is_recurring is None else is_recurring
        if new_recurring and current.source_income_id is not None:
            raise ValidationError(
                f"Income {income_id} was generated from income {current.source_income_id} "
                "and cannot be recurring"
            )
        if frequency is not None and not new_recurring:
            raise ValidationError("Frequency is only valid for recurring incomes")
        if frequency is not None:
            new_frequency = frequency
        elif new_recurring:
            new_frequency = current.frequency or Frequency.MONTHLY
        else:
            new_frequency = None

        if clear_category:
            new_category = None
        elif category_id is not None:
            if self.db.get_category(self.user_id, category_id) is None:
                raise NotFoundError(category_not_found(category_id))
            new_category = category_id
        else:
            new_category = current.category_id

        changes = {
            "amount": new_amount,
            "description": new_description.strip(),
            "date": income_date or current.date,
            "category_id": new_category,
            "is_recurring": new_recurring,
            "frequency": Frequency(new_frequency).value if new_frequency is not None else None,
        }
        if notes is not None:
            changes["notes"] = notes
        self.db.update_income(self.user_id, income_id, changes)
        logger.debug("Updated income %s", income_id)
        return self.get_income(income_id)

    def delete_income(self, income_id: int) -> None:
        """Delete an income.

        Deleting a recurring template stops future generation; instances
        already generated from it are kept as one-off incomes.
        """
        self.get_income(income_id)
        self.db.delete_income(self.user_id, income_id)
        logger.info("Deleted income %s", income_id)

    def _received_this_month(
        self, template: IncomeEntity, incomes: list[IncomeEntity], today: date
    ) -> bool:
        return any(
            inc.date <= today and (inc.id == template.id or inc.source_income_id == template.id)
            for inc in incomes
        )

    def month_position(self, today: date) -> tuple[Decimal, Decimal]:
        """Income received so far this month and recurring income still to come.

        A recurring template counts as received when the template itself or
        an instance generated from it is dated this month on or before
        ``today``. Otherwise its amount is pending.

        Returns:
            Tuple of (received income, pending recurring income)
        """
        month_start, month_end = month_bounds(today)
        this_month = self.list_incomes(start_date=month_start, end_date=month_end)
        received = sum(
            (inc.amount for inc in this_month if inc.date <= today), Decimal("0")
        )

        pending = Decimal("0")
        for template in self.list_incomes(end_date=month_end, recurring=True):
            if template.source_income_id is not None:
                continue
            if not self._received_this_month(template, this_month, today):
                pending += template.amount
        return received, pending

    def generate_recurring(self, today: date) -> dict[str, int]:
        """Create this month's instances of recurring incomes that are due.

        Templates whose receipt date has not been reached yet, and templates
        that already have an instance this month, are skipped.

        Returns:
            Dict with ``generated`` and ``skipped`` counts
        """
        month_start, month_end = month_bounds(today)
        this_month = self.list_incomes(start_date=month_start, end_date=month_end)
        generated = 0
        skipped = 0

        for template in self.list_incomes(end_date=month_end, recurring=True):
            if template.source_income_id is not None:
                continue
            received_on = receipt_date(template, today)
            if received_on > today or self._received_this_month(template, this_month, today):
                skipped += 1
                continue

            self.db.create_income(
                user_id=self.user_id,
                amount=template.amount,
                description=f"{template.description}{GENERATED_SUFFIX}",
                income_date=received_on,
                category_id=template.category_id,
                is_recurring=False,
                source_income_id=template.id,
                notes=template.notes,
            )
            generated += 1

        if generated:
            logger.info("Generated %d recurring incomes for %s", generated, today.strftime("%Y-%m"))
        return {"generated": generated, "skipped": skipped}
