"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the engine never sees ORM
objects and the schema can change without touching business rules.
"""

from decimal import Decimal
from typing import Optional

from duetrack.domain import entities as domain
from duetrack.database.models import (
    User as ORMUser,
    Category as ORMCategory,
    Debt as ORMDebt,
    DebtInstallment as ORMDebtInstallment,
    DebtPayment as ORMDebtPayment,
    CreditCard as ORMCreditCard,
    Expense as ORMExpense,
    Income as ORMIncome,
    SavingsGoal as ORMSavingsGoal,
    SavingsContribution as ORMSavingsContribution,
)


def _decimal(value) -> Optional[Decimal]:
    if value is None:
        return None
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _frequency(value: Optional[str]) -> Optional[domain.Frequency]:
    return domain.Frequency(value) if value else None


def user_to_domain(orm_user: ORMUser) -> domain.User:
    """Convert SQLAlchemy User model to domain User entity."""
    return domain.User(
        id=orm_user.id,
        username=orm_user.username,
        created_at=orm_user.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        user_id=orm_category.user_id,
        name=orm_category.name,
        created_at=orm_category.created_at,
    )


def debt_to_domain(orm_debt: ORMDebt) -> domain.Debt:
    """Convert SQLAlchemy Debt model to domain Debt entity."""
    return domain.Debt(
        id=orm_debt.id,
        user_id=orm_debt.user_id,
        name=orm_debt.name,
        creditor=orm_debt.creditor,
        total_amount=_decimal(orm_debt.total_amount),
        remaining_amount=_decimal(orm_debt.remaining_amount),
        interest_rate=_decimal(orm_debt.interest_rate),
        monthly_payment=_decimal(orm_debt.monthly_payment),
        total_installments=orm_debt.total_installments,
        payment_day_of_month=orm_debt.payment_day_of_month,
        start_date=orm_debt.start_date,
        end_date=orm_debt.end_date,
        is_paid=orm_debt.is_paid,
        created_at=orm_debt.created_at,
    )


def installment_to_domain(orm_installment: ORMDebtInstallment) -> domain.DebtInstallment:
    """Convert SQLAlchemy DebtInstallment model to domain DebtInstallment entity."""
    return domain.DebtInstallment(
        id=orm_installment.id,
        debt_id=orm_installment.debt_id,
        installment_number=orm_installment.installment_number,
        due_date=orm_installment.due_date,
        amount=_decimal(orm_installment.amount),
        principal=_decimal(orm_installment.principal),
        interest=_decimal(orm_installment.interest),
        insurance=_decimal(orm_installment.insurance),
        status=domain.InstallmentStatus(orm_installment.status),
        debt_payment_id=orm_installment.debt_payment_id,
    )


def payment_to_domain(orm_payment: ORMDebtPayment) -> domain.DebtPayment:
    """Convert SQLAlchemy DebtPayment model to domain DebtPayment entity."""
    return domain.DebtPayment(
        id=orm_payment.id,
        debt_id=orm_payment.debt_id,
        amount=_decimal(orm_payment.amount),
        principal=_decimal(orm_payment.principal),
        interest=_decimal(orm_payment.interest),
        insurance=_decimal(orm_payment.insurance),
        date=orm_payment.date,
        payment_number=orm_payment.payment_number,
        notes=orm_payment.notes,
    )


def credit_card_to_domain(orm_card: ORMCreditCard) -> domain.CreditCard:
    """Convert SQLAlchemy CreditCard model to domain CreditCard entity."""
    return domain.CreditCard(
        id=orm_card.id,
        user_id=orm_card.user_id,
        name=orm_card.name,
        bank=orm_card.bank,
        last_digits=orm_card.last_digits,
        credit_limit=_decimal(orm_card.credit_limit),
        billing_day=orm_card.billing_day,
        payment_day=orm_card.payment_day,
        interest_rate=_decimal(orm_card.interest_rate),
        is_active=orm_card.is_active,
        created_at=orm_card.created_at,
    )


def expense_to_domain(orm_expense: ORMExpense) -> domain.Expense:
    """Convert SQLAlchemy Expense model to domain Expense entity."""
    return domain.Expense(
        id=orm_expense.id,
        user_id=orm_expense.user_id,
        amount=_decimal(orm_expense.amount),
        description=orm_expense.description,
        date=orm_expense.date,
        is_recurring=orm_expense.is_recurring,
        frequency=_frequency(orm_expense.frequency),
        category_id=orm_expense.category_id,
        payment_method=domain.PaymentMethod(orm_expense.payment_method),
        credit_card_id=orm_expense.credit_card_id,
        is_paid_off=orm_expense.is_paid_off,
        settles_card_id=orm_expense.settles_card_id,
        notes=orm_expense.notes,
        category_name=orm_expense.category.name if orm_expense.category is not None else None,
    )


def income_to_domain(orm_income: ORMIncome) -> domain.Income:
    """Convert SQLAlchemy Income model to domain Income entity."""
    return domain.Income(
        id=orm_income.id,
        user_id=orm_income.user_id,
        amount=_decimal(orm_income.amount),
        description=orm_income.description,
        date=orm_income.date,
        is_recurring=orm_income.is_recurring,
        frequency=_frequency(orm_income.frequency),
        category_id=orm_income.category_id,
        source_income_id=orm_income.source_income_id,
        notes=orm_income.notes,
    )


def savings_goal_to_domain(orm_goal: ORMSavingsGoal) -> domain.SavingsGoal:
    """Convert SQLAlchemy SavingsGoal model to domain SavingsGoal entity."""
    return domain.SavingsGoal(
        id=orm_goal.id,
        user_id=orm_goal.user_id,
        name=orm_goal.name,
        target_amount=_decimal(orm_goal.target_amount),
        current_amount=_decimal(orm_goal.current_amount),
        deadline=orm_goal.deadline,
        is_completed=orm_goal.is_completed,
        created_at=orm_goal.created_at,
    )


def savings_contribution_to_domain(orm_contribution: ORMSavingsContribution) -> domain.SavingsContribution:
    """Convert SQLAlchemy SavingsContribution model to domain entity."""
    return domain.SavingsContribution(
        id=orm_contribution.id,
        savings_goal_id=orm_contribution.savings_goal_id,
        amount=_decimal(orm_contribution.amount),
        date=orm_contribution.date,
        notes=orm_contribution.notes,
    )
