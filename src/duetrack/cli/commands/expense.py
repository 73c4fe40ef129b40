"""Expense commands."""

import click

from duetrack.cli.context import (
    amount_or_exit,
    category_or_exit,
    current_user_id,
    date_or_exit,
    today,
)
from duetrack.cli.error_handling import fail, handle_domain_error
from duetrack.domain.entities import Frequency, PaymentMethod
from duetrack.domain.errors import DomainError
from duetrack.domain.expense import ExpenseService
from duetrack.utils.date_parser import get_date_range


@click.group()
def expense_group():
    """Record and list expenses."""
    pass


@expense_group.command("add")
@click.argument("description")
@click.option("--amount", required=True, help="Expense amount")
@click.option("--date", "expense_date", default="today", help="Expense date (defaults to today)")
@click.option(
    "--method",
    type=click.Choice([m.value for m in PaymentMethod]),
    default=PaymentMethod.CASH.value,
    show_default=True,
    help="How the expense was paid",
)
@click.option("--card", "card_id", type=int, help="Credit card ID (required with --method credit)")
@click.option("--category", help="Category name or ID")
@click.option("--recurring", is_flag=True, help="Expense repeats every month on the same day")
@click.option(
    "--frequency",
    type=click.Choice([f.value for f in Frequency], case_sensitive=False),
    help="Recurrence frequency (defaults to MONTHLY for recurring expenses)",
)
@click.option("--notes", help="Notes")
@click.pass_context
def add_expense(
    ctx,
    description: str,
    amount: str,
    expense_date: str,
    method: str,
    card_id: int | None,
    category: str | None,
    recurring: bool,
    frequency: str | None,
    notes: str | None,
) -> None:
    """Record an expense.

    Examples:
        duetrack expense add "Groceries" --amount 54.20
        duetrack expense add "Electricity" --amount 80 --date 2024-03-10 --recurring --category Utilities
        duetrack expense add "Headphones" --amount 120 --method credit --card 1
    """
    user_id = current_user_id(ctx)
    service = ExpenseService(ctx.obj["db"], user_id)
    try:
        expense_id = service.add_expense(
            amount=amount_or_exit(ctx, amount),
            description=description,
            expense_date=date_or_exit(ctx, expense_date),
            payment_method=PaymentMethod(method),
            category_id=category_or_exit(ctx, user_id, category),
            is_recurring=recurring,
            frequency=Frequency(frequency.upper()) if frequency else None,
            credit_card_id=card_id,
            notes=notes,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recorded expense {expense_id}")


@expense_group.command("list")
@click.option("--this-month", is_flag=True, help="Only expenses of the current month")
@click.option("--last-month", is_flag=True, help="Only expenses of the previous month")
@click.option("--card", "card_id", type=int, help="Only charges on this credit card")
@click.option("--recurring", is_flag=True, help="Only recurring expenses")
@click.pass_context
def list_expenses(ctx, this_month: bool, last_month: bool, card_id: int | None, recurring: bool):
    """List expenses, newest first."""
    if this_month and last_month:
        fail(ctx, "Only one of --this-month and --last-month can be specified.")

    start = end = None
    if this_month:
        start, end = get_date_range("this-month", today(ctx))
    elif last_month:
        start, end = get_date_range("last-month", today(ctx))

    service = ExpenseService(ctx.obj["db"], current_user_id(ctx))
    expenses = service.list_expenses(
        start_date=start, end_date=end, credit_card_id=card_id, recurring_only=recurring
    )
    if not expenses:
        click.echo("No expenses found.")
        return

    for exp in expenses:
        flags = []
        if exp.credit_card_id is not None:
            flags.append(f"card {exp.credit_card_id}" + (", paid" if exp.is_paid_off else ""))
        if exp.is_recurring:
            flags.append(exp.frequency.value.lower() if exp.frequency else "recurring")
        suffix = f" [{'; '.join(flags)}]" if flags else ""
        category = f" ({exp.category_name})" if exp.category_name else ""
        click.echo(f"{exp.id:4d} | {exp.date} | {exp.amount:10.2f} | {exp.description}{category}{suffix}")


@expense_group.command("edit")
@click.argument("expense_id", type=int)
@click.option("--amount", help="Expense amount")
@click.option("--description", help="Expense description")
@click.option("--date", "expense_date", help="Expense date")
@click.option("--method", type=click.Choice([m.value for m in PaymentMethod]), help="How the expense was paid")
@click.option("--card", "card_id", type=int, help="Credit card ID")
@click.option("--category", help="Category name or ID, or empty string to clear")
@click.option("--recurring/--one-off", default=None, help="Whether the expense repeats")
@click.option(
    "--frequency",
    type=click.Choice([f.value for f in Frequency], case_sensitive=False),
    help="Recurrence frequency",
)
@click.option("--notes", help="Notes")
@click.pass_context
def edit_expense(
    ctx,
    expense_id: int,
    amount: str | None,
    description: str | None,
    expense_date: str | None,
    method: str | None,
    card_id: int | None,
    category: str | None,
    recurring: bool | None,
    frequency: str | None,
    notes: str | None,
) -> None:
    """Edit an expense.

    Updates only the fields that are provided. Use --category "" to clear the category.

    Examples:
        duetrack expense edit 3 --amount 60
        duetrack expense edit 3 --method cash
        duetrack expense edit 3 --one-off --category ""
    """
    user_id = current_user_id(ctx)
    service = ExpenseService(ctx.obj["db"], user_id)
    clear_category = category == ""
    try:
        expense = service.update_expense(
            expense_id,
            amount=amount_or_exit(ctx, amount) if amount is not None else None,
            description=description,
            expense_date=date_or_exit(ctx, expense_date),
            payment_method=PaymentMethod(method) if method else None,
            credit_card_id=card_id,
            category_id=None if clear_category else category_or_exit(ctx, user_id, category),
            clear_category=clear_category,
            is_recurring=recurring,
            frequency=Frequency(frequency.upper()) if frequency else None,
            notes=notes,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated expense {expense.id}: {expense.date} | {expense.amount:.2f} | {expense.description}")


@expense_group.command("delete")
@click.argument("expense_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_expense(ctx, expense_id: int, yes: bool):
    """Delete an expense."""
    service = ExpenseService(ctx.obj["db"], current_user_id(ctx))
    try:
        expense = service.get_expense(expense_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(
        f"Are you sure you want to delete expense '{expense.description}' (ID: {expense_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_expense(expense_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted expense '{expense.description}'")


def register_commands(cli):
    """Register expense commands with main CLI."""
    cli.add_command(expense_group, name="expense")
