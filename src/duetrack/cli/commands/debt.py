"""Debt management commands."""

import click

from duetrack.cli.context import amount_or_exit, current_user_id, date_or_exit, today
from duetrack.cli.error_handling import handle_domain_error
from duetrack.domain.debt import DEFAULT_PAYMENT_DAY, DEFAULT_TOTAL_INSTALLMENTS, DebtService
from duetrack.domain.errors import DomainError


@click.group()
def debt_group():
    """Manage loans and their installments."""
    pass


@debt_group.command("create")
@click.argument("name")
@click.option("--amount", required=True, help="Amount borrowed (e.g., 1200.00)")
@click.option("--rate", required=True, help="Annual interest rate in percent (e.g., 12)")
@click.option("--payment", required=True, help="Fixed monthly payment (e.g., 105.00)")
@click.option("--start-date", required=True, help="Loan start date (YYYY-MM-DD or relative like 'today')")
@click.option(
    "--installments",
    type=int,
    default=DEFAULT_TOTAL_INSTALLMENTS,
    show_default=True,
    help="Number of monthly installments",
)
@click.option(
    "--payment-day",
    type=click.IntRange(1, 31),
    default=DEFAULT_PAYMENT_DAY,
    show_default=True,
    help="Day of month installments are due",
)
@click.option("--creditor", help="Lender name")
@click.option("--remaining", help="Outstanding principal (defaults to --amount)")
@click.pass_context
def create_debt(
    ctx,
    name: str,
    amount: str,
    rate: str,
    payment: str,
    start_date: str,
    installments: int,
    payment_day: int,
    creditor: str | None,
    remaining: str | None,
) -> None:
    """Register a loan and generate its installment schedule.

    Examples:
        duetrack debt create "Car loan" --amount 1200 --rate 12 --payment 105 --start-date 2024-01-01
        duetrack debt create "Laptop" --amount 900 --rate 0 --payment 75 --start-date today --payment-day 5
    """
    service = DebtService(ctx.obj["db"], current_user_id(ctx))
    remaining_amount = amount_or_exit(ctx, remaining, "remaining amount") if remaining else None

    try:
        debt_id = service.create_debt(
            name=name,
            total_amount=amount_or_exit(ctx, amount),
            interest_rate=amount_or_exit(ctx, rate, "interest rate"),
            monthly_payment=amount_or_exit(ctx, payment, "monthly payment"),
            start_date=date_or_exit(ctx, start_date, "start date"),
            total_installments=installments,
            payment_day_of_month=payment_day,
            creditor=creditor,
            remaining_amount=remaining_amount,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created debt '{name}' (ID: {debt_id}) with {installments} installments")


@debt_group.command("list")
@click.option("--unpaid", is_flag=True, help="Only show debts that are not paid off")
@click.pass_context
def list_debts(ctx, unpaid: bool):
    """List debts with their next open installment."""
    service = DebtService(ctx.obj["db"], current_user_id(ctx))
    debts = service.list_debts(include_paid=not unpaid)
    if not debts:
        click.echo("No debts found.")
        return

    click.echo("\nDebts:")
    click.echo("-" * 100)
    for debt in debts:
        status = "paid" if debt.is_paid else f"{debt.remaining_amount:>10.2f} left"
        line = f"ID: {debt.id:3d} | {debt.name:20s} | {debt.interest_rate:>6.2f}% | {status}"
        upcoming = service.next_installment(debt.id, today(ctx))
        if upcoming is not None:
            line += (
                f" | next #{upcoming.installment_number} {upcoming.amount:.2f}"
                f" on {upcoming.due_date} ({upcoming.status.value})"
            )
        click.echo(line)


@debt_group.command("installments")
@click.argument("debt_id", type=int)
@click.pass_context
def list_installments(ctx, debt_id: int):
    """Show the installment schedule of a debt.

    Pending installments that are past due are marked overdue.
    """
    service = DebtService(ctx.obj["db"], current_user_id(ctx))
    try:
        installments = service.list_installments(debt_id, today(ctx))
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not installments:
        click.echo("No installments found. Use 'debt backfill' to generate them.")
        return

    click.echo(f"\n{'ID':>4} | {'#':>3} | {'Due':10} | {'Amount':>10} | {'Principal':>10} | {'Interest':>9} | Status")
    click.echo("-" * 77)
    for inst in installments:
        click.echo(
            f"{inst.id:4d} | {inst.installment_number:3d} | {inst.due_date} | {inst.amount:10.2f} | "
            f"{inst.principal:10.2f} | {inst.interest:9.2f} | {inst.status.value}"
        )


@debt_group.command("pay")
@click.argument("debt_id", type=int)
@click.option("--amount", required=True, help="Amount paid")
@click.option("--principal", required=True, help="Part of the payment that reduces principal")
@click.option("--interest", default="0", show_default=True, help="Part of the payment that is interest")
@click.option("--insurance", default="0", show_default=True, help="Part of the payment that is insurance")
@click.option("--date", "payment_date", help="Payment date (defaults to today)")
@click.option(
    "--installment",
    "installment_ids",
    type=int,
    multiple=True,
    help="Installment ID to settle (repeatable; defaults to the next open one)",
)
@click.option("--notes", help="Notes")
@click.pass_context
def pay_debt(
    ctx,
    debt_id: int,
    amount: str,
    principal: str,
    interest: str,
    insurance: str,
    payment_date: str | None,
    installment_ids: tuple[int, ...],
    notes: str | None,
) -> None:
    """Record a payment on a debt.

    Examples:
        duetrack debt pay 1 --amount 105 --principal 93 --interest 12
        duetrack debt pay 1 --amount 210 --principal 187 --interest 23 --installment 4 --installment 5
    """
    service = DebtService(ctx.obj["db"], current_user_id(ctx))
    try:
        payment_id = service.record_payment(
            debt_id,
            today(ctx),
            amount=amount_or_exit(ctx, amount),
            principal=amount_or_exit(ctx, principal, "principal"),
            interest=amount_or_exit(ctx, interest, "interest"),
            insurance=amount_or_exit(ctx, insurance, "insurance"),
            payment_date=date_or_exit(ctx, payment_date, "payment date"),
            notes=notes,
            installment_ids=list(installment_ids) or None,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    debt = service.get_debt(debt_id)
    click.echo(f"Recorded payment {payment_id} on '{debt.name}'. Remaining: {debt.remaining_amount:.2f}")
    if debt.is_paid:
        click.echo("Debt is fully paid.")


@debt_group.command("payments")
@click.argument("debt_id", type=int)
@click.pass_context
def list_payments(ctx, debt_id: int):
    """List payments recorded on a debt."""
    service = DebtService(ctx.obj["db"], current_user_id(ctx))
    try:
        payments = service.list_payments(debt_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not payments:
        click.echo("No payments found.")
        return

    for p in payments:
        number = f"#{p.payment_number}" if p.payment_number is not None else "#-"
        click.echo(
            f"{number:>4} | {p.date} | {p.amount:10.2f} | principal {p.principal:.2f} | interest {p.interest:.2f}"
        )


@debt_group.command("backfill")
@click.argument("debt_id", type=int, required=False)
@click.option("--replace", is_flag=True, help="Regenerate even if the debt already has a schedule")
@click.pass_context
def backfill(ctx, debt_id: int | None, replace: bool):
    """Generate missing installment schedules.

    With DEBT_ID only that debt is processed; otherwise every debt without
    installments is. Existing payments settle installments in order.
    """
    service = DebtService(ctx.obj["db"], current_user_id(ctx))
    try:
        if debt_id is not None:
            written = {debt_id: service.backfill_schedule(debt_id, today(ctx), replace=replace)}
        else:
            written = service.backfill_missing_schedules(today(ctx))
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not written:
        click.echo("Every debt already has an installment schedule.")
        return
    for backfilled_id, count in written.items():
        click.echo(f"Debt {backfilled_id}: generated {count} installments")


@debt_group.command("edit")
@click.argument("debt_id", type=int)
@click.option("--name", help="Debt name")
@click.option("--creditor", help="Lender name")
@click.option("--amount", help="Amount borrowed")
@click.option("--rate", help="Annual interest rate in percent")
@click.option("--payment", help="Fixed monthly payment")
@click.option("--installments", type=int, help="Number of monthly installments")
@click.option("--payment-day", type=click.IntRange(1, 31), help="Day of month installments are due")
@click.option("--start-date", help="Loan start date")
@click.option("--end-date", help="Contractual end date")
@click.pass_context
def edit_debt(
    ctx,
    debt_id: int,
    name: str | None,
    creditor: str | None,
    amount: str | None,
    rate: str | None,
    payment: str | None,
    installments: int | None,
    payment_day: int | None,
    start_date: str | None,
    end_date: str | None,
) -> None:
    """Edit a debt.

    Updates only the fields that are provided. Changing a loan term
    regenerates the installment schedule; existing payments stay applied.

    Examples:
        duetrack debt edit 1 --creditor "Acme Bank"
        duetrack debt edit 1 --payment 110 --installments 11
    """
    service = DebtService(ctx.obj["db"], current_user_id(ctx))
    try:
        debt = service.update_debt(
            debt_id,
            today(ctx),
            name=name,
            creditor=creditor,
            total_amount=amount_or_exit(ctx, amount) if amount else None,
            interest_rate=amount_or_exit(ctx, rate, "interest rate") if rate else None,
            monthly_payment=amount_or_exit(ctx, payment, "monthly payment") if payment else None,
            total_installments=installments,
            payment_day_of_month=payment_day,
            start_date=date_or_exit(ctx, start_date, "start date"),
            end_date=date_or_exit(ctx, end_date, "end date"),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated debt '{debt.name}' (ID: {debt.id}). Remaining: {debt.remaining_amount:.2f}")


@debt_group.command("delete")
@click.argument("debt_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_debt(ctx, debt_id: int, yes: bool):
    """Delete a debt with its installments and payments."""
    service = DebtService(ctx.obj["db"], current_user_id(ctx))
    try:
        debt = service.get_debt(debt_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(f"Are you sure you want to delete debt '{debt.name}' (ID: {debt_id})?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_debt(debt_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted debt '{debt.name}'")


def register_commands(cli):
    """Register debt commands with main CLI."""
    cli.add_command(debt_group, name="debt")
