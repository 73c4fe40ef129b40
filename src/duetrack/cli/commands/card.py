"""Credit card commands."""

import click

from duetrack.cli.context import (
    amount_or_exit,
    category_or_exit,
    current_user_id,
    date_or_exit,
    today,
)
from duetrack.cli.error_handling import handle_domain_error
from duetrack.domain.credit_card import CreditCardService
from duetrack.domain.errors import DomainError


@click.group()
def card_group():
    """Manage credit cards and statements."""
    pass


@card_group.command("create")
@click.argument("name")
@click.option("--bank", required=True, help="Issuing bank")
@click.option("--limit", "credit_limit", required=True, help="Credit limit")
@click.option("--billing-day", type=int, required=True, help="Cut-off day of month (1-31)")
@click.option("--payment-day", type=int, required=True, help="Payment due day of month (1-31)")
@click.option("--last-digits", help="Last four digits of the card number")
@click.option("--rate", help="Annual interest rate in percent")
@click.pass_context
def create_card(
    ctx,
    name: str,
    bank: str,
    credit_limit: str,
    billing_day: int,
    payment_day: int,
    last_digits: str | None,
    rate: str | None,
) -> None:
    """Register a credit card.

    Examples:
        duetrack card create "Gold" --bank "Acme Bank" --limit 5000 --billing-day 20 --payment-day 5
    """
    service = CreditCardService(ctx.obj["db"], current_user_id(ctx))
    try:
        card_id = service.create_card(
            name=name,
            bank=bank,
            credit_limit=amount_or_exit(ctx, credit_limit, "credit limit"),
            billing_day=billing_day,
            payment_day=payment_day,
            last_digits=last_digits,
            interest_rate=amount_or_exit(ctx, rate, "interest rate") if rate else None,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created card '{name}' (ID: {card_id})")


@card_group.command("list")
@click.option("--active", is_flag=True, help="Only show active cards")
@click.pass_context
def list_cards(ctx, active: bool):
    """List credit cards."""
    service = CreditCardService(ctx.obj["db"], current_user_id(ctx))
    cards = service.list_cards(active_only=active)
    if not cards:
        click.echo("No credit cards found.")
        return

    click.echo("\nCredit cards:")
    click.echo("-" * 80)
    for card in cards:
        digits = f"*{card.last_digits}" if card.last_digits else ""
        state = "" if card.is_active else " (inactive)"
        click.echo(
            f"ID: {card.id:3d} | {card.name:15s} {digits:5s} | {card.bank:15s} | "
            f"limit {card.credit_limit:.2f} | cut-off {card.billing_day}, due {card.payment_day}{state}"
        )


@card_group.command("statement")
@click.argument("card_id", type=int)
@click.pass_context
def show_statement(ctx, card_id: int):
    """Show the current statement of a card.

    While the last closed cycle still has unpaid charges after this month's
    cut-off, that cycle is shown; otherwise the open cycle is.
    """
    service = CreditCardService(ctx.obj["db"], current_user_id(ctx))
    try:
        result = service.get_statement(card_id, today(ctx))
    except DomainError as e:
        handle_domain_error(ctx, e)

    period = result.billing_period
    totals = result.statement
    label = "closed" if result.is_closed_period else "open"
    click.echo(f"\n{result.card.name} - {result.card.bank} ({label} cycle)")
    click.echo(f"Period: {period.start.date()} to {period.end.date()}, due {period.payment_due_date.date()}")
    click.echo("-" * 60)
    for exp in result.expenses:
        click.echo(f"{exp.date} | {exp.amount:10.2f} | {exp.description}")
    click.echo("-" * 60)
    click.echo(f"Total:            {totals.total_amount:10.2f} ({totals.transaction_count} charges)")
    click.echo(f"Credit used:      {totals.credit_usage_percent:9.2f}%")
    click.echo(f"Available credit: {totals.available_credit:10.2f}")


@card_group.command("pay")
@click.argument("card_id", type=int)
@click.option("--amount", help="Amount paid (defaults to the statement total)")
@click.option("--date", "payment_date", help="Payment date (defaults to today)")
@click.option("--category", help="Category name or ID for the payment")
@click.pass_context
def pay_card(ctx, card_id: int, amount: str | None, payment_date: str | None, category: str | None):
    """Pay the current statement of a card.

    Every unpaid charge of the shown cycle is settled and the payment is
    recorded as a debit expense.
    """
    user_id = current_user_id(ctx)
    service = CreditCardService(ctx.obj["db"], user_id)
    try:
        settled, expense_id = service.pay_statement(
            card_id,
            today(ctx),
            amount=amount_or_exit(ctx, amount) if amount else None,
            payment_date=date_or_exit(ctx, payment_date, "payment date"),
            category_id=category_or_exit(ctx, user_id, category),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Settled {settled} charge{'s' if settled != 1 else ''}; payment recorded as expense {expense_id}")


@card_group.command("history")
@click.argument("card_id", type=int)
@click.pass_context
def payment_history(ctx, card_id: int):
    """List payments made towards a card."""
    service = CreditCardService(ctx.obj["db"], current_user_id(ctx))
    try:
        payments = service.payment_history(card_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not payments:
        click.echo("No payments found.")
        return
    for p in payments:
        click.echo(f"{p.date} | {p.amount:10.2f} | {p.description}")


@card_group.command("deactivate")
@click.argument("card_id", type=int)
@click.pass_context
def deactivate_card(ctx, card_id: int):
    """Stop planning payments for a card."""
    service = CreditCardService(ctx.obj["db"], current_user_id(ctx))
    try:
        service.deactivate_card(card_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deactivated card {card_id}")


@card_group.command("edit")
@click.argument("card_id", type=int)
@click.option("--name", help="Card name")
@click.option("--bank", help="Issuing bank")
@click.option("--limit", "credit_limit", help="Credit limit")
@click.option("--billing-day", type=int, help="Cut-off day of month (1-31)")
@click.option("--payment-day", type=int, help="Payment due day of month (1-31)")
@click.option("--last-digits", help="Last four digits of the card number")
@click.option("--rate", help="Annual interest rate in percent")
@click.option("--active/--inactive", default=None, help="Include the card in payment plans")
@click.pass_context
def edit_card(
    ctx,
    card_id: int,
    name: str | None,
    bank: str | None,
    credit_limit: str | None,
    billing_day: int | None,
    payment_day: int | None,
    last_digits: str | None,
    rate: str | None,
    active: bool | None,
) -> None:
    """Edit a credit card.

    Updates only the fields that are provided.

    Examples:
        duetrack card edit 1 --limit 7500
        duetrack card edit 1 --billing-day 25 --payment-day 10
    """
    service = CreditCardService(ctx.obj["db"], current_user_id(ctx))
    try:
        card = service.update_card(
            card_id,
            name=name,
            bank=bank,
            credit_limit=amount_or_exit(ctx, credit_limit, "credit limit") if credit_limit else None,
            billing_day=billing_day,
            payment_day=payment_day,
            last_digits=last_digits,
            interest_rate=amount_or_exit(ctx, rate, "interest rate") if rate else None,
            is_active=active,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    state = "active" if card.is_active else "inactive"
    click.echo(f"Updated card '{card.name}' (ID: {card.id}, {state})")


@card_group.command("delete")
@click.argument("card_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_card(ctx, card_id: int, yes: bool):
    """Delete a card that has no charges or payments."""
    service = CreditCardService(ctx.obj["db"], current_user_id(ctx))
    try:
        card = service.get_card(card_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(f"Are you sure you want to delete card '{card.name}' (ID: {card_id})?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_card(card_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted card '{card.name}'")


def register_commands(cli):
    """Register credit card commands with main CLI."""
    cli.add_command(card_group, name="card")
