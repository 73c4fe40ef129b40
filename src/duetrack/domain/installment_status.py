"""Installment status transitions.

pending -> overdue happens purely with the passage of time and is applied
lazily whenever an installment list is read. pending|overdue -> paid|advanced
happens when a payment settles the installment. paid and advanced are
terminal.
"""

from dataclasses import replace
from datetime import date
from typing import Optional, Sequence, TypeVar, Union

from duetrack.domain.entities import (
    DebtInstallment,
    InstallmentStatus,
    ScheduledInstallment,
)
from duetrack.domain.errors import ConflictError, installment_already_settled

InstallmentT = TypeVar("InstallmentT", DebtInstallment, ScheduledInstallment)


def is_overdue(installment: Union[DebtInstallment, ScheduledInstallment], today: date) -> bool:
    """True when a pending installment's due date has passed."""
    return installment.status == InstallmentStatus.PENDING and installment.due_date < today


def resolve_overdue(installments: Sequence[InstallmentT], today: date) -> list[InstallmentT]:
    """Promote every pending installment whose due date has passed to overdue.

    Installments in any other status are returned untouched, so running this
    on an already resolved list changes nothing.
    """
    return [
        replace(inst, status=InstallmentStatus.OVERDUE) if is_overdue(inst, today) else inst
        for inst in installments
    ]


def settlement_status(settled_on: date, due_date: date) -> InstallmentStatus:
    """Status an installment takes when settled on ``settled_on``."""
    if settled_on < due_date:
        return InstallmentStatus.ADVANCED
    return InstallmentStatus.PAID


def settle(installment: InstallmentT, settled_on: date, payment_id: Optional[int] = None) -> InstallmentT:
    """Settle an open installment with a payment.

    ``payment_id`` may be left out when the payment is not stored yet; the
    database links it when the payment is written.

    Raises:
        ConflictError: If the installment is already paid or advanced
    """
    if installment.status.is_settled:
        raise ConflictError(
            installment_already_settled(installment.installment_number, installment.status.value)
        )
    return replace(
        installment,
        status=settlement_status(settled_on, installment.due_date),
        debt_payment_id=payment_id,
    )


def open_installments(installments: Sequence[InstallmentT]) -> list[InstallmentT]:
    """Installments still awaiting payment, ordered by installment number."""
    return sorted(
        (inst for inst in installments if not inst.status.is_settled),
        key=lambda inst: inst.installment_number,
    )
