"""Tests for installment status transitions."""

import pytest
from datetime import date
from decimal import Decimal

from duetrack.domain.entities import DebtInstallment, InstallmentStatus
from duetrack.domain.errors import ConflictError
from duetrack.domain.installment_status import (
    is_overdue,
    open_installments,
    resolve_overdue,
    settle,
    settlement_status,
)


def _installment(number: int, due: date, status=InstallmentStatus.PENDING) -> DebtInstallment:
    return DebtInstallment(
        id=number,
        debt_id=1,
        installment_number=number,
        due_date=due,
        amount=Decimal("105.00"),
        principal=Decimal("93.00"),
        interest=Decimal("12.00"),
        insurance=Decimal("0"),
        status=status,
    )


def test_pending_past_due_becomes_overdue():
    """Test a pending installment whose due date passed is overdue."""
    inst = _installment(1, date(2024, 2, 15))

    assert is_overdue(inst, date(2024, 2, 16))
    assert not is_overdue(inst, date(2024, 2, 15))


def test_resolve_overdue_leaves_other_statuses():
    """Test only pending rows are promoted."""
    rows = [
        _installment(1, date(2024, 2, 15), InstallmentStatus.PAID),
        _installment(2, date(2024, 3, 15), InstallmentStatus.ADVANCED),
        _installment(3, date(2024, 4, 15)),
        _installment(4, date(2024, 5, 15)),
    ]

    resolved = resolve_overdue(rows, date(2024, 5, 1))

    assert [r.status for r in resolved] == [
        InstallmentStatus.PAID,
        InstallmentStatus.ADVANCED,
        InstallmentStatus.OVERDUE,
        InstallmentStatus.PENDING,
    ]


def test_resolve_overdue_is_idempotent():
    """Test resolving twice gives the same result."""
    rows = [_installment(1, date(2024, 2, 15)), _installment(2, date(2024, 3, 15))]
    today = date(2024, 3, 1)

    once = resolve_overdue(rows, today)
    assert resolve_overdue(once, today) == once


def test_overdue_never_reverts():
    """Test an overdue row stays overdue when resolved with an earlier date."""
    rows = resolve_overdue([_installment(1, date(2024, 2, 15))], date(2024, 3, 1))

    assert resolve_overdue(rows, date(2024, 1, 1))[0].status == InstallmentStatus.OVERDUE


def test_settlement_status_before_and_on_due_date():
    """Test early settlement is advanced and on-time or late is paid."""
    due = date(2024, 2, 15)
    assert settlement_status(date(2024, 2, 14), due) == InstallmentStatus.ADVANCED
    assert settlement_status(due, due) == InstallmentStatus.PAID
    assert settlement_status(date(2024, 3, 1), due) == InstallmentStatus.PAID


def test_settle_overdue_installment():
    """Test an overdue installment can still be settled."""
    inst = _installment(1, date(2024, 2, 15), InstallmentStatus.OVERDUE)

    settled = settle(inst, date(2024, 3, 1), payment_id=5)

    assert settled.status == InstallmentStatus.PAID
    assert settled.debt_payment_id == 5


@pytest.mark.parametrize("status", [InstallmentStatus.PAID, InstallmentStatus.ADVANCED])
def test_settle_terminal_installment_conflicts(status):
    """Test paid and advanced installments cannot be settled again."""
    inst = _installment(1, date(2024, 2, 15), status)

    with pytest.raises(ConflictError) as excinfo:
        settle(inst, date(2024, 2, 1))
    assert "already" in str(excinfo.value)


def test_open_installments_sorted_by_number():
    """Test only unsettled installments are returned, in order."""
    rows = [
        _installment(3, date(2024, 4, 15)),
        _installment(1, date(2024, 2, 15), InstallmentStatus.PAID),
        _installment(2, date(2024, 3, 15), InstallmentStatus.OVERDUE),
    ]

    assert [r.installment_number for r in open_installments(rows)] == [2, 3]
