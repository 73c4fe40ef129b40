"""Tests for credit card service."""

import pytest
from datetime import date
from decimal import Decimal

from duetrack.database.models import CreditCard as CreditCardModel
from duetrack.domain.credit_card import CreditCardService
from duetrack.domain.entities import PaymentMethod
from duetrack.domain.errors import ConflictError, InconsistentError, NotFoundError, ValidationError

TODAY = date(2024, 3, 25)


def _charge(expense_service, card, amount, on):
    return expense_service.add_expense(
        amount=Decimal(amount),
        description=f"Charge {on}",
        expense_date=on,
        payment_method=PaymentMethod.CREDIT,
        credit_card_id=card.id,
    )


class TestCreateCard:
    """Tests for card registration."""

    def test_create_card(self, card_service, sample_card):
        """Test a card is stored with its cycle days."""
        assert sample_card.name == "Gold"
        assert sample_card.billing_day == 20
        assert sample_card.payment_day == 5
        assert sample_card.is_active
        assert card_service.list_cards() == [sample_card]

    @pytest.mark.parametrize(
        "overrides",
        [
            {"billing_day": 0},
            {"payment_day": 32},
            {"credit_limit": Decimal("-1")},
            {"last_digits": "12a4"},
            {"last_digits": "123"},
            {"name": ""},
        ],
    )
    def test_invalid_card_rejected(self, card_service, overrides):
        """Test malformed cards raise ValidationError."""
        values = dict(
            name="Gold",
            bank="Acme Bank",
            credit_limit=Decimal("5000"),
            billing_day=20,
            payment_day=5,
        )
        values.update(overrides)
        with pytest.raises(ValidationError):
            card_service.create_card(**values)


class TestStatement:
    """Tests for statements and statement payments."""

    def test_closed_cycle_shown_while_owed(self, card_service, expense_service, sample_card):
        """Test the closed cycle is surfaced after the cut-off while it has charges."""
        _charge(expense_service, sample_card, "100.00", date(2024, 3, 10))
        _charge(expense_service, sample_card, "40.00", date(2024, 3, 22))

        result = card_service.get_statement(sample_card.id, TODAY)

        assert result.is_closed_period
        assert result.billing_period.start.date() == date(2024, 2, 21)
        assert result.billing_period.end.date() == date(2024, 3, 20)
        assert result.billing_period.payment_due_date.date() == date(2024, 4, 5)
        assert result.statement.total_amount == Decimal("100.00")
        assert result.statement.transaction_count == 1

    def test_open_cycle_when_closed_is_clear(self, card_service, expense_service, sample_card):
        """Test the open cycle is shown when the closed one has nothing owed."""
        _charge(expense_service, sample_card, "40.00", date(2024, 3, 22))

        result = card_service.get_statement(sample_card.id, TODAY)

        assert not result.is_closed_period
        assert result.billing_period.start.date() == date(2024, 3, 21)
        assert result.statement.total_amount == Decimal("40.00")

    def test_pay_statement_settles_resolved_period(self, card_service, expense_service, sample_card):
        """Test paying settles the shown cycle and records a debit payment."""
        _charge(expense_service, sample_card, "100.00", date(2024, 3, 10))
        _charge(expense_service, sample_card, "25.00", date(2024, 3, 15))
        _charge(expense_service, sample_card, "40.00", date(2024, 3, 22))

        settled, payment_id = card_service.pay_statement(sample_card.id, TODAY)

        assert settled == 2
        history = card_service.payment_history(sample_card.id)
        assert [p.id for p in history] == [payment_id]
        payment = history[0]
        assert payment.amount == Decimal("125.00")
        assert payment.payment_method == PaymentMethod.DEBIT
        assert payment.credit_card_id is None
        assert payment.settles_card_id == sample_card.id
        assert payment.description == "Card payment Gold - Acme Bank"

        # The payment is never a charge on the card it pays
        charges = expense_service.list_expenses(credit_card_id=sample_card.id)
        assert payment_id not in [exp.id for exp in charges]

        after = card_service.get_statement(sample_card.id, TODAY)
        assert not after.is_closed_period
        assert after.statement.total_amount == Decimal("40.00")

    def test_pay_statement_custom_amount_and_date(self, card_service, expense_service, sample_card):
        """Test a partial amount and explicit date are recorded as given."""
        _charge(expense_service, sample_card, "100.00", date(2024, 3, 10))

        card_service.pay_statement(
            sample_card.id, TODAY, amount=Decimal("60.00"), payment_date=date(2024, 3, 26)
        )

        payment = card_service.payment_history(sample_card.id)[0]
        assert payment.amount == Decimal("60.00")
        assert payment.date == date(2024, 3, 26)

    def test_pay_empty_statement_rejected(self, card_service, sample_card):
        """Test paying nothing is rejected."""
        with pytest.raises(ValidationError):
            card_service.pay_statement(sample_card.id, TODAY)
        assert card_service.payment_history(sample_card.id) == []

    def test_other_user_cannot_see_card(self, temp_db, other_user, sample_card):
        """Test a card owned by someone else is reported as not found."""
        other = CreditCardService(temp_db, other_user.id)

        with pytest.raises(NotFoundError) as excinfo:
            other.get_statement(sample_card.id, TODAY)
        assert str(excinfo.value) == f"Credit card {sample_card.id} not found"
        with pytest.raises(NotFoundError):
            other.pay_statement(sample_card.id, TODAY, amount=Decimal("10"))

    def test_deactivated_card_has_no_active_statement(self, card_service, expense_service, sample_card):
        """Test inactive cards are left out of active statements."""
        _charge(expense_service, sample_card, "100.00", date(2024, 3, 10))

        card_service.deactivate_card(sample_card.id)

        assert card_service.statements_for_active_cards(TODAY) == []
        assert not card_service.get_card(sample_card.id).is_active


class TestEditCard:
    """Tests for editing and deleting cards."""

    def test_update_card_fields(self, card_service, sample_card):
        """Test only the given fields change."""
        updated = card_service.update_card(sample_card.id, credit_limit=Decimal("7500"), billing_day=25)

        assert updated.credit_limit == Decimal("7500")
        assert updated.billing_day == 25
        assert updated.payment_day == 5
        assert updated.name == "Gold"

    def test_reactivate_card(self, card_service, sample_card):
        """Test a deactivated card can be switched back on."""
        card_service.deactivate_card(sample_card.id)

        assert card_service.update_card(sample_card.id, is_active=True).is_active

    @pytest.mark.parametrize(
        "overrides",
        [
            {"name": " "},
            {"billing_day": 32},
            {"payment_day": 0},
            {"last_digits": "42"},
            {"credit_limit": Decimal("-1")},
        ],
    )
    def test_invalid_edit_rejected(self, card_service, sample_card, overrides):
        """Test edits are checked like new cards."""
        with pytest.raises(ValidationError):
            card_service.update_card(sample_card.id, **overrides)
        assert card_service.get_card(sample_card.id) == sample_card

    def test_delete_unused_card(self, card_service, sample_card):
        """Test a card without charges can be deleted."""
        card_service.delete_card(sample_card.id)

        with pytest.raises(NotFoundError):
            card_service.get_card(sample_card.id)

    def test_delete_used_card_rejected(self, card_service, expense_service, sample_card):
        """Test a card with charges must be deactivated instead."""
        _charge(expense_service, sample_card, "100.00", date(2024, 3, 10))

        with pytest.raises(InconsistentError, match="deactivate it instead"):
            card_service.delete_card(sample_card.id)
        assert card_service.get_card(sample_card.id).is_active


def test_concurrent_card_update_is_conflict(temp_db, second_db, sample_user, card_service, sample_card):
    """Test a write based on a card version another connection replaced is rejected."""
    with pytest.raises(ConflictError):
        with temp_db._transaction("Credit card", sample_card.id) as session:
            card = session.get(CreditCardModel, sample_card.id)
            CreditCardService(second_db, sample_user.id).deactivate_card(sample_card.id)
            card.credit_limit = Decimal("9000")

    stored = card_service.get_card(sample_card.id)
    assert not stored.is_active
    assert stored.credit_limit == Decimal("5000")
