"""Domain model entities for duetrack.

These are pure data classes representing business concepts, independent of
database schema. Stored records (debts, cards, expenses, ...) are mapped into
them by the database layer; derived values (statements, suggestions, the
payment plan) are produced by the engine modules and never persisted.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class InstallmentStatus(str, Enum):
    """Lifecycle status of a scheduled installment."""

    PENDING = "pending"
    OVERDUE = "overdue"
    PAID = "paid"
    ADVANCED = "advanced"

    @property
    def is_settled(self) -> bool:
        return self in (InstallmentStatus.PAID, InstallmentStatus.ADVANCED)


class Frequency(str, Enum):
    """Recurrence frequency for expenses and incomes."""

    MONTHLY = "MONTHLY"
    BIWEEKLY = "BIWEEKLY"


class PaymentMethod(str, Enum):
    """How an expense was paid."""

    CASH = "cash"
    DEBIT = "debit"
    CREDIT = "credit"


class ObligationType(str, Enum):
    """Kind of obligation a payment suggestion was derived from."""

    DEBT = "debt"
    CREDIT_CARD = "creditCard"
    EXPENSE = "expense"


class Priority(str, Enum):
    """Payment priority, ordered from most to least pressing."""

    URGENT = "urgent"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    Priority.URGENT: 0,
    Priority.HIGH: 1,
    Priority.MEDIUM: 2,
    Priority.LOW: 3,
}


class CashFlowStatus(str, Enum):
    """Health verdict of a payment plan."""

    HEALTHY = "healthy"
    TIGHT = "tight"
    DEFICIT = "deficit"


@dataclass(frozen=True)
class User:
    """User as resolved by the identity layer."""

    id: int
    username: str
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Expense/income category owned by a user."""

    id: int
    user_id: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class Debt:
    """Loan domain entity."""

    id: int
    user_id: int
    name: str
    creditor: Optional[str]
    total_amount: Decimal
    remaining_amount: Decimal
    interest_rate: Decimal
    monthly_payment: Decimal
    total_installments: int
    payment_day_of_month: int
    start_date: date
    end_date: Optional[date]
    is_paid: bool
    created_at: datetime


@dataclass(frozen=True)
class DebtInstallment:
    """One scheduled repayment unit of a debt."""

    id: int
    debt_id: int
    installment_number: int
    due_date: date
    amount: Decimal
    principal: Decimal
    interest: Decimal
    insurance: Decimal
    status: InstallmentStatus
    debt_payment_id: Optional[int] = None


@dataclass(frozen=True)
class DebtPayment:
    """Recorded payment against a debt (append-only)."""

    id: int
    debt_id: int
    amount: Decimal
    principal: Decimal
    interest: Decimal
    insurance: Decimal
    date: date
    payment_number: Optional[int]
    notes: Optional[str]


@dataclass(frozen=True)
class CreditCard:
    """Revolving credit line."""

    id: int
    user_id: int
    name: str
    bank: str
    last_digits: Optional[str]
    credit_limit: Decimal
    billing_day: int
    payment_day: int
    interest_rate: Optional[Decimal]
    is_active: bool
    created_at: datetime


@dataclass(frozen=True)
class Expense:
    """Expense entity. Card charges carry ``credit_card_id``."""

    id: int
    user_id: int
    amount: Decimal
    description: str
    date: date
    is_recurring: bool
    frequency: Optional[Frequency]
    category_id: Optional[int]
    payment_method: PaymentMethod
    credit_card_id: Optional[int] = None
    is_paid_off: bool = False
    settles_card_id: Optional[int] = None
    notes: Optional[str] = None
    category_name: Optional[str] = None


@dataclass(frozen=True)
class Income:
    """Income entity. Generated instances point at their recurring template."""

    id: int
    user_id: int
    amount: Decimal
    description: str
    date: date
    is_recurring: bool
    frequency: Optional[Frequency]
    category_id: Optional[int]
    source_income_id: Optional[int] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class SavingsGoal:
    """Savings goal entity."""

    id: int
    user_id: int
    name: str
    target_amount: Decimal
    current_amount: Decimal
    deadline: Optional[date]
    is_completed: bool
    created_at: datetime


@dataclass(frozen=True)
class SavingsContribution:
    """Contribution towards a savings goal."""

    id: int
    savings_goal_id: int
    amount: Decimal
    date: date
    notes: Optional[str]


@dataclass(frozen=True)
class ScheduledInstallment:
    """Installment row produced by the amortization generator, before persistence."""

    installment_number: int
    due_date: date
    amount: Decimal
    principal: Decimal
    interest: Decimal
    insurance: Decimal = Decimal("0")
    status: InstallmentStatus = InstallmentStatus.PENDING
    debt_payment_id: Optional[int] = None


@dataclass(frozen=True)
class BillingPeriod:
    """Statement period of a credit card with its payment due date."""

    start: datetime
    end: datetime
    payment_due_date: datetime

    def contains(self, day: date) -> bool:
        return self.start.date() <= day <= self.end.date()


@dataclass(frozen=True)
class BillingCycles:
    """Most recently closed and currently open billing periods."""

    last_closed: BillingPeriod
    current: BillingPeriod
    past_cutoff: bool


@dataclass(frozen=True)
class StatementTotals:
    """Aggregated figures of a card statement."""

    total_amount: Decimal
    transaction_count: int
    credit_usage_percent: Decimal
    available_credit: Decimal


@dataclass(frozen=True)
class CardStatement:
    """Statement of a card for one resolved billing period."""

    card: CreditCard
    billing_period: BillingPeriod
    statement: StatementTotals
    expenses: tuple[Expense, ...]
    is_closed_period: bool = False


@dataclass(frozen=True)
class PaymentSuggestion:
    """Prioritized obligation in a payment plan."""

    id: str
    type: ObligationType
    name: str
    amount: Decimal
    due_date: date
    priority: Priority
    reason: str
    suggested_payment_date: date
    interest_rate: Optional[Decimal] = None
    remaining_balance: Optional[Decimal] = None


@dataclass(frozen=True)
class CashFlowDay:
    """One row of the cash-flow projection."""

    date: date
    income: Decimal
    expenses: Decimal
    balance: Decimal
    payments: tuple[PaymentSuggestion, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class PaymentPlanSummary:
    """Aggregate figures and verdict of a payment plan."""

    total_income: Decimal
    received_income: Decimal
    pending_recurring_income: Decimal
    total_obligations: Decimal
    current_balance: Decimal
    safety_buffer: Decimal
    projected_available: Decimal
    cash_flow_status: CashFlowStatus
    warnings: tuple[str, ...]


@dataclass(frozen=True)
class PaymentPlan:
    """Payment plan: summary, prioritized suggestions and cash-flow projection."""

    summary: PaymentPlanSummary
    suggestions: tuple[PaymentSuggestion, ...]
    cash_flow_projection: tuple[CashFlowDay, ...]


@dataclass(frozen=True)
class MonthlySummary:
    """Income, spending and savings totals for a date range."""

    start_date: date
    end_date: date
    total_income: Decimal
    income_count: int
    total_expenses: Decimal
    expense_count: int
    cash_expenses: Decimal
    debit_expenses: Decimal
    credit_expenses: Decimal
    active_goals: int
    total_saved: Decimal

    @property
    def net(self) -> Decimal:
        return self.total_income - self.total_expenses
