"""SQLAlchemy models for duetrack database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _now() -> datetime:
    return datetime.now(UTC)


class User(Base):
    """User model. Credentials live with the identity provider, not here."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    username = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)


class Category(Base):
    """Expense/income category model."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_category_user_name"),)


class Debt(Base):
    """Loan model. ``version`` guards concurrent read-then-write updates."""

    __tablename__ = "debts"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    name = Column(String, nullable=False)
    creditor = Column(String, nullable=True)
    total_amount = Column(Numeric(12, 2), nullable=False)
    remaining_amount = Column(Numeric(12, 2), nullable=False)
    interest_rate = Column(Numeric(7, 4), nullable=False)
    monthly_payment = Column(Numeric(12, 2), nullable=False)
    total_installments = Column(Integer, nullable=False)
    payment_day_of_month = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    is_paid = Column(Boolean, default=False, nullable=False)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    # Relationships
    installments = relationship(
        "DebtInstallment",
        back_populates="debt",
        cascade="all, delete-orphan",
        order_by="DebtInstallment.installment_number",
    )
    payments = relationship("DebtPayment", back_populates="debt", cascade="all, delete-orphan")


class DebtPayment(Base):
    """Recorded payment against a debt."""

    __tablename__ = "debt_payments"

    id = Column(Integer, primary_key=True)
    debt_id = Column(Integer, ForeignKey("debts.id"), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    principal = Column(Numeric(12, 2), nullable=False)
    interest = Column(Numeric(12, 2), nullable=False)
    insurance = Column(Numeric(12, 2), default=0, nullable=False)
    date = Column(Date, nullable=False)
    payment_number = Column(Integer, nullable=True)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)

    # Relationships
    debt = relationship("Debt", back_populates="payments")
    installments = relationship("DebtInstallment", back_populates="debt_payment")


class DebtInstallment(Base):
    """Scheduled installment of a debt."""

    __tablename__ = "debt_installments"

    id = Column(Integer, primary_key=True)
    debt_id = Column(Integer, ForeignKey("debts.id"), nullable=False)
    installment_number = Column(Integer, nullable=False)
    due_date = Column(Date, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    principal = Column(Numeric(12, 2), nullable=False)
    interest = Column(Numeric(12, 2), nullable=False)
    insurance = Column(Numeric(12, 2), default=0, nullable=False)
    status = Column(String, default="pending", nullable=False)
    debt_payment_id = Column(Integer, ForeignKey("debt_payments.id"), nullable=True)

    __table_args__ = (
        UniqueConstraint("debt_id", "installment_number", name="uq_debt_installment_number"),
    )

    # Relationships
    debt = relationship("Debt", back_populates="installments")
    debt_payment = relationship("DebtPayment", back_populates="installments")


class CreditCard(Base):
    """Credit card model. ``version`` guards concurrent settlements."""

    __tablename__ = "credit_cards"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    name = Column(String, nullable=False)
    bank = Column(String, nullable=False)
    last_digits = Column(String, nullable=True)
    credit_limit = Column(Numeric(12, 2), nullable=False)
    billing_day = Column(Integer, nullable=False)
    payment_day = Column(Integer, nullable=False)
    interest_rate = Column(Numeric(7, 4), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    last_payment_date = Column(Date, nullable=True)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)

    __mapper_args__ = {"version_id_col": version}


class Expense(Base):
    """Expense model.

    ``credit_card_id`` marks a charge on a card; ``settles_card_id`` marks the
    cash payment of a card statement and is never set together with it.
    """

    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    is_recurring = Column(Boolean, default=False, nullable=False)
    frequency = Column(String, nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    payment_method = Column(String, default="cash", nullable=False)
    credit_card_id = Column(Integer, ForeignKey("credit_cards.id"), nullable=True)
    is_paid_off = Column(Boolean, default=False, nullable=False)
    settles_card_id = Column(Integer, ForeignKey("credit_cards.id"), nullable=True)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)

    # Relationships
    category = relationship("Category")


class Income(Base):
    """Income model."""

    __tablename__ = "incomes"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    is_recurring = Column(Boolean, default=False, nullable=False)
    frequency = Column(String, nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    source_income_id = Column(Integer, ForeignKey("incomes.id"), nullable=True)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)


class SavingsGoal(Base):
    """Savings goal model."""

    __tablename__ = "savings_goals"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    name = Column(String, nullable=False)
    target_amount = Column(Numeric(12, 2), nullable=False)
    current_amount = Column(Numeric(12, 2), default=0, nullable=False)
    deadline = Column(Date, nullable=True)
    is_completed = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)

    # Relationships
    contributions = relationship(
        "SavingsContribution", back_populates="goal", cascade="all, delete-orphan"
    )


class SavingsContribution(Base):
    """Contribution towards a savings goal."""

    __tablename__ = "savings_contributions"

    id = Column(Integer, primary_key=True)
    savings_goal_id = Column(Integer, ForeignKey("savings_goals.id"), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    date = Column(Date, nullable=False)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)

    # Relationships
    goal = relationship("SavingsGoal", back_populates="contributions")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
