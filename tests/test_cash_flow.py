"""Tests for cash-flow projection and plan summary."""

import pytest
from datetime import date, datetime, UTC
from decimal import Decimal

from duetrack.domain.cash_flow import (
    cash_flow_status,
    estimated_income_date,
    project_cash_flow,
    summarize_plan,
)
from duetrack.domain.entities import (
    CashFlowStatus,
    Debt,
    ObligationType,
    PaymentSuggestion,
    Priority,
)

TODAY = date(2024, 3, 10)


def _suggestion(sid, amount, pay_on, priority=Priority.MEDIUM) -> PaymentSuggestion:
    return PaymentSuggestion(
        id=sid,
        type=ObligationType.EXPENSE,
        name=sid,
        amount=Decimal(amount),
        due_date=pay_on,
        priority=priority,
        reason="test",
        suggested_payment_date=pay_on,
    )


def _debt(rate) -> Debt:
    return Debt(
        id=1,
        user_id=1,
        name="Payday loan",
        creditor=None,
        total_amount=Decimal("500"),
        remaining_amount=Decimal("500"),
        interest_rate=Decimal(rate),
        monthly_payment=Decimal("100"),
        total_installments=5,
        payment_day_of_month=1,
        start_date=date(2024, 1, 1),
        end_date=None,
        is_paid=False,
        created_at=datetime.now(UTC),
    )


class TestEstimatedIncomeDate:
    """Tests for the pending income receipt date."""

    def test_before_the_25th(self):
        """Test pending income is expected on the 25th."""
        assert estimated_income_date(TODAY, Decimal("100")) == date(2024, 3, 25)

    @pytest.mark.parametrize("today", [date(2024, 3, 25), date(2024, 3, 28)])
    def test_on_or_after_the_25th(self, today):
        """Test no receipt date once the 25th is not ahead."""
        assert estimated_income_date(today, Decimal("100")) is None

    def test_nothing_pending(self):
        """Test no receipt date without pending income."""
        assert estimated_income_date(TODAY, Decimal("0")) is None


class TestProjectCashFlow:
    """Tests for the cash-flow projection."""

    def test_running_balance_reflects_every_earlier_row(self):
        """Test each balance equals the start plus inflows minus outflows so far."""
        suggestions = [
            _suggestion("a", "80.00", date(2024, 3, 11)),
            _suggestion("b", "210.00", date(2024, 3, 13)),
            _suggestion("c", "40.00", date(2024, 3, 13)),
            _suggestion("d", "300.00", date(2024, 4, 3)),
        ]
        start = Decimal("800.00")

        rows = project_cash_flow(start, Decimal("3000.00"), suggestions, TODAY)

        assert [row.date for row in rows] == [
            date(2024, 3, 11),
            date(2024, 3, 13),
            date(2024, 3, 25),
            date(2024, 4, 3),
        ]
        running = start
        for row in rows:
            running = running + row.income - row.expenses
            assert row.balance == running
        assert rows[1].expenses == Decimal("250.00")
        assert [p.id for p in rows[1].payments] == ["b", "c"]
        assert rows[2].income == Decimal("3000.00")
        assert rows[-1].balance == Decimal("3170.00")

    def test_only_days_with_movement(self):
        """Test quiet days produce no rows."""
        rows = project_cash_flow(Decimal("100"), Decimal("0"), [], TODAY)

        assert rows == ()

    def test_horizon_limits_rows(self):
        """Test payments and income beyond the horizon are left out."""
        suggestions = [_suggestion("a", "10", date(2024, 3, 15)), _suggestion("b", "10", date(2024, 3, 16))]

        rows = project_cash_flow(Decimal("100"), Decimal("500"), suggestions, TODAY, horizon_days=5)

        assert [row.date for row in rows] == [date(2024, 3, 15)]

    def test_payment_due_today_included(self):
        """Test day zero is part of the projection."""
        rows = project_cash_flow(Decimal("100"), Decimal("0"), [_suggestion("a", "10", TODAY)], TODAY)

        assert rows[0].date == TODAY
        assert rows[0].balance == Decimal("90")


class TestCashFlowStatus:
    """Tests for the plan verdict."""

    def test_above_buffer_is_healthy(self):
        """Test healthy strictly above the buffer."""
        assert cash_flow_status(Decimal("400.01"), Decimal("400")) == CashFlowStatus.HEALTHY

    def test_equal_to_buffer_is_tight(self):
        """Test exactly the buffer is tight."""
        assert cash_flow_status(Decimal("400"), Decimal("400")) == CashFlowStatus.TIGHT

    def test_zero_is_tight(self):
        """Test zero left over is tight, not deficit."""
        assert cash_flow_status(Decimal("0"), Decimal("400")) == CashFlowStatus.TIGHT

    def test_negative_is_deficit(self):
        """Test anything below zero is a deficit."""
        assert cash_flow_status(Decimal("-0.01"), Decimal("400")) == CashFlowStatus.DEFICIT


class TestSummarizePlan:
    """Tests for the plan summary and warnings."""

    def test_totals(self):
        """Test the summary arithmetic."""
        suggestions = [_suggestion("a", "80", TODAY), _suggestion("b", "510", TODAY)]

        summary = summarize_plan(Decimal("1000"), Decimal("3000"), Decimal("800"), suggestions)

        assert summary.total_income == Decimal("4000")
        assert summary.total_obligations == Decimal("590")
        assert summary.safety_buffer == Decimal("400")
        assert summary.projected_available == Decimal("3210")
        assert summary.cash_flow_status == CashFlowStatus.HEALTHY
        assert len(summary.warnings) == 1
        assert "3000.00" in summary.warnings[0]

    def test_deficit_warning_suppresses_buffer_warning(self):
        """Test a deficit reports the shortfall but not the buffer warning."""
        summary = summarize_plan(
            Decimal("1000"), Decimal("0"), Decimal("100"), [_suggestion("a", "250", TODAY)]
        )

        assert summary.cash_flow_status == CashFlowStatus.DEFICIT
        assert any("150.00" in w for w in summary.warnings)
        assert not any("safety buffer" in w for w in summary.warnings)

    def test_tight_plan_warns_about_buffer(self):
        """Test a tight plan below the buffer carries both warnings."""
        summary = summarize_plan(
            Decimal("1000"), Decimal("0"), Decimal("50"), [_suggestion("a", "20", TODAY)]
        )

        assert summary.cash_flow_status == CashFlowStatus.TIGHT
        assert any("tight" in w for w in summary.warnings)
        assert any("safety buffer" in w for w in summary.warnings)

    def test_many_urgent_payments_warning(self):
        """Test more than three urgent payments are flagged."""
        urgent = [_suggestion(str(i), "1", TODAY, Priority.URGENT) for i in range(4)]

        summary = summarize_plan(Decimal("1000"), Decimal("0"), Decimal("1000"), urgent)

        assert any("4 urgent payments" in w for w in summary.warnings)

    def test_three_urgent_payments_not_flagged(self):
        """Test exactly three urgent payments are not flagged."""
        urgent = [_suggestion(str(i), "1", TODAY, Priority.URGENT) for i in range(3)]

        summary = summarize_plan(Decimal("1000"), Decimal("0"), Decimal("1000"), urgent)

        assert not any("urgent" in w for w in summary.warnings)

    def test_high_interest_debt_warning(self):
        """Test debts above 20% are named in a warning."""
        summary = summarize_plan(Decimal("1000"), Decimal("0"), Decimal("1000"), [], debts=[_debt("35")])
        assert any("Payday loan" in w for w in summary.warnings)

        summary = summarize_plan(Decimal("1000"), Decimal("0"), Decimal("1000"), [], debts=[_debt("20")])
        assert not any("Payday loan" in w for w in summary.warnings)
