"""Debt domain service."""

import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from duetrack.database.base import Database
from duetrack.domain.amortization import LoanTerms, generate_schedule
from duetrack.domain.entities import (
    Debt as DebtEntity,
    DebtInstallment as DebtInstallmentEntity,
    DebtPayment as DebtPaymentEntity,
)
from duetrack.domain.errors import (
    ConflictError,
    InconsistentError,
    NotFoundError,
    ValidationError,
    debt_not_found,
    installment_not_found,
    principal_exceeds_remaining,
)
from duetrack.domain.installment_status import (
    is_overdue,
    open_installments,
    resolve_overdue,
    settle,
)

logger = logging.getLogger(__name__)

DEFAULT_TOTAL_INSTALLMENTS = 12
DEFAULT_PAYMENT_DAY = 15
SCHEDULE_FIELDS = frozenset({
    "total_amount",
    "interest_rate",
    "monthly_payment",
    "total_installments",
    "payment_day_of_month",
    "start_date",
})


class DebtService:
    """Service for loans, their installment schedules and payments."""

    def __init__(self, db: Database, user_id: int):
        """Initialize debt service.

        Args:
            db: Database instance
            user_id: Owning user
        """
        self.db = db
        self.user_id = user_id

    def create_debt(
        self,
        name: str,
        total_amount: Decimal,
        interest_rate: Decimal,
        monthly_payment: Decimal,
        start_date: date,
        total_installments: int = DEFAULT_TOTAL_INSTALLMENTS,
        payment_day_of_month: int = DEFAULT_PAYMENT_DAY,
        creditor: Optional[str] = None,
        remaining_amount: Optional[Decimal] = None,
        end_date: Optional[date] = None,
    ) -> int:
        """Register a loan and generate its installment schedule.

        The debt and all of its installments are written in one transaction.

        Args:
            name: Debt name
            total_amount: Principal borrowed
            interest_rate: Annual interest rate in percent
            monthly_payment: Fixed monthly payment
            start_date: Loan start date; installment k is due k months later
            total_installments: Number of installments
            payment_day_of_month: Day of month installments are due
            creditor: Optional lender name
            remaining_amount: Outstanding principal (defaults to total_amount)
            end_date: Optional contractual end date

        Returns:
            Debt ID

        Raises:
            ValidationError: If the name or loan terms are invalid
        """
        if not name or not name.strip():
            raise ValidationError("Debt name cannot be empty")
        if remaining_amount is None:
            remaining_amount = total_amount
        if remaining_amount < 0:
            raise ValidationError("Remaining amount cannot be negative")
        if end_date is not None and start_date is not None and end_date < start_date:
            raise ValidationError("End date cannot be before start date")

        terms = LoanTerms(
            principal=total_amount,
            annual_rate=interest_rate,
            monthly_payment=monthly_payment,
            total_installments=total_installments,
            start_date=start_date,
            payment_day_of_month=payment_day_of_month,
        )
        schedule = generate_schedule(terms)

        debt_id = self.db.create_debt(
            user_id=self.user_id,
            name=name.strip(),
            creditor=creditor,
            total_amount=total_amount,
            remaining_amount=remaining_amount,
            interest_rate=interest_rate,
            monthly_payment=monthly_payment,
            total_installments=total_installments,
            payment_day_of_month=payment_day_of_month,
            start_date=start_date,
            end_date=end_date,
            schedule=schedule,
        )
        logger.info("Created debt %s with %d installments", debt_id, len(schedule))
        return debt_id

    def get_debt(self, debt_id: int) -> DebtEntity:
        """Get a debt owned by the user.

        Raises:
            NotFoundError: If the debt does not exist or belongs to someone else
        """
        debt = self.db.get_debt(self.user_id, debt_id)
        if debt is None:
            raise NotFoundError(debt_not_found(debt_id))
        return debt

    def list_debts(self, include_paid: bool = True) -> list[DebtEntity]:
        """List the user's debts, unpaid first."""
        return self.db.list_debts(self.user_id, include_paid=include_paid)

    def update_debt(
        self,
        debt_id: int,
        today: date,
        name: Optional[str] = None,
        creditor: Optional[str] = None,
        total_amount: Optional[Decimal] = None,
        interest_rate: Optional[Decimal] = None,
        monthly_payment: Optional[Decimal] = None,
        total_installments: Optional[int] = None,
        payment_day_of_month: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> DebtEntity:
        """Edit a debt. Arguments left as None keep their current value.

        The remaining amount only moves with payments: changing the total
        shifts it by the same difference. When any loan term changes the
        schedule is regenerated, settled by the existing payments and
        written together with the debt.

        Returns:
            The updated debt

        Raises:
            NotFoundError: If the debt is not found
            ValidationError: If the edited terms are invalid or the new total is
                below the principal already repaid
            ConflictError: If the debt was modified concurrently
        """
        debt = self.get_debt(debt_id)
        requested = {
            "name": name.strip() if name is not None else None,
            "creditor": creditor,
            "total_amount": total_amount,
            "interest_rate": interest_rate,
            "monthly_payment": monthly_payment,
            "total_installments": total_installments,
            "payment_day_of_month": payment_day_of_month,
            "start_date": start_date,
            "end_date": end_date,
        }
        changes = {
            field: value
            for field, value in requested.items()
            if value is not None and value != getattr(debt, field)
        }
        if not changes:
            return debt
        if "name" in changes and not changes["name"]:
            raise ValidationError("Debt name cannot be empty")

        edited = replace(debt, **changes)
        if edited.end_date is not None and edited.end_date < edited.start_date:
            raise ValidationError("End date cannot be before start date")
        if "total_amount" in changes:
            repaid = debt.total_amount - debt.remaining_amount
            if edited.total_amount < repaid:
                raise ValidationError(
                    f"Total amount {edited.total_amount} is below the {repaid} already repaid"
                )
            changes["remaining_amount"] = edited.total_amount - repaid
            changes["is_paid"] = changes["remaining_amount"] <= 0

        schedule = None
        if SCHEDULE_FIELDS.intersection(changes):
            terms = LoanTerms(
                principal=edited.total_amount,
                annual_rate=edited.interest_rate,
                monthly_payment=edited.monthly_payment,
                total_installments=edited.total_installments,
                start_date=edited.start_date,
                payment_day_of_month=edited.payment_day_of_month,
            )
            payments = self.db.list_debt_payments(self.user_id, debt_id)
            schedule = resolve_overdue(generate_schedule(terms, payments), today)

        self.db.update_debt(self.user_id, debt_id, changes, schedule)
        logger.info(
            "Updated debt %s (%s)%s",
            debt_id,
            ", ".join(sorted(changes)),
            " and regenerated its schedule" if schedule is not None else "",
        )
        return self.get_debt(debt_id)

    def list_installments(self, debt_id: int, today: date) -> list[DebtInstallmentEntity]:
        """List a debt's installments with overdue status brought up to date.

        Pending installments whose due date has passed are stored as overdue
        before the list is returned.
        """
        self.get_debt(debt_id)
        installments = self.db.list_installments(self.user_id, debt_id)
        overdue_ids = [inst.id for inst in installments if is_overdue(inst, today)]
        if overdue_ids:
            self.db.mark_installments_overdue(self.user_id, debt_id, overdue_ids)
            logger.debug("Marked %d installments of debt %s overdue", len(overdue_ids), debt_id)
        return resolve_overdue(installments, today)

    def next_installment(self, debt_id: int, today: date) -> Optional[DebtInstallmentEntity]:
        """Earliest installment still awaiting payment, if any."""
        pending = open_installments(self.list_installments(debt_id, today))
        return pending[0] if pending else None

    def record_payment(
        self,
        debt_id: int,
        today: date,
        amount: Decimal,
        principal: Decimal,
        interest: Decimal = Decimal("0"),
        insurance: Decimal = Decimal("0"),
        payment_date: Optional[date] = None,
        payment_number: Optional[int] = None,
        notes: Optional[str] = None,
        installment_ids: Optional[Sequence[int]] = None,
    ) -> int:
        """Record a payment and settle installments with it.

        Without ``installment_ids`` the next open installment is settled. Each
        settled installment becomes advanced when paid before its due date,
        paid otherwise.

        Returns:
            Payment ID

        Raises:
            ValidationError: If amounts are missing or not positive
            NotFoundError: If the debt or an installment is not found
            ConflictError: If an installment is already settled
            InconsistentError: If principal exceeds the remaining amount
        """
        if amount is None or amount <= 0:
            raise ValidationError("Payment amount must be positive")
        if principal is None or principal < 0:
            raise ValidationError("Payment principal is required and cannot be negative")
        if interest < 0 or insurance < 0:
            raise ValidationError("Interest and insurance cannot be negative")

        debt = self.get_debt(debt_id)
        if principal > debt.remaining_amount:
            raise InconsistentError(principal_exceeds_remaining(principal, debt.remaining_amount))

        settled_on = payment_date or today
        installments = self.list_installments(debt_id, today)

        if installment_ids:
            by_id = {inst.id: inst for inst in installments}
            targets = []
            for installment_id in installment_ids:
                if installment_id not in by_id:
                    raise NotFoundError(installment_not_found(installment_id, debt_id))
                targets.append(by_id[installment_id])
        else:
            targets = open_installments(installments)[:1]

        settlements = [settle(inst, settled_on) for inst in targets]

        if payment_number is None:
            payment_number = len(self.db.list_debt_payments(self.user_id, debt_id)) + 1

        new_remaining = debt.remaining_amount - principal
        payment_id = self.db.record_debt_payment(
            user_id=self.user_id,
            debt_id=debt_id,
            amount=amount,
            principal=principal,
            interest=interest,
            insurance=insurance,
            payment_date=settled_on,
            payment_number=payment_number,
            notes=notes,
            settlements=settlements,
            expected_remaining=debt.remaining_amount,
            new_remaining=new_remaining,
        )
        logger.info(
            "Recorded payment %s on debt %s settling installments %s",
            payment_id,
            debt_id,
            [inst.installment_number for inst in settlements],
        )
        return payment_id

    def list_payments(self, debt_id: int) -> list[DebtPaymentEntity]:
        """List a debt's payments by payment number, then date."""
        self.get_debt(debt_id)
        return self.db.list_debt_payments(self.user_id, debt_id)

    def backfill_schedule(self, debt_id: int, today: date, replace: bool = False) -> int:
        """Generate the schedule of a debt registered without one.

        Existing payments settle installments in chronological order and
        installments already past due start out overdue.

        Args:
            debt_id: Debt ID
            today: Reference date for overdue status
            replace: Regenerate even if the debt already has installments

        Returns:
            Number of installments written

        Raises:
            ConflictError: If the debt already has a schedule and replace is False
        """
        debt = self.get_debt(debt_id)
        if not replace and self.db.list_installments(self.user_id, debt_id):
            raise ConflictError(f"Debt {debt_id} already has an installment schedule")

        terms = LoanTerms(
            principal=debt.total_amount,
            annual_rate=debt.interest_rate,
            monthly_payment=debt.monthly_payment,
            total_installments=debt.total_installments or DEFAULT_TOTAL_INSTALLMENTS,
            start_date=debt.start_date,
            payment_day_of_month=debt.payment_day_of_month,
        )
        payments = self.db.list_debt_payments(self.user_id, debt_id)
        schedule = resolve_overdue(generate_schedule(terms, payments), today)
        self.db.replace_installments(self.user_id, debt_id, schedule)
        logger.info("Back-filled %d installments for debt %s", len(schedule), debt_id)
        return len(schedule)

    def backfill_missing_schedules(self, today: date) -> dict[int, int]:
        """Back-fill every debt of the user that has no installments.

        Returns:
            Mapping of debt ID to installments written
        """
        written = {}
        for debt in self.list_debts():
            if not self.db.list_installments(self.user_id, debt.id):
                written[debt.id] = self.backfill_schedule(debt.id, today)
        return written

    def delete_debt(self, debt_id: int) -> None:
        """Delete a debt together with its installments and payments."""
        self.get_debt(debt_id)
        self.db.delete_debt(self.user_id, debt_id)
        logger.info("Deleted debt %s", debt_id)
