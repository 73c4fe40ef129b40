"""Income commands."""

import click

from duetrack.cli.context import (
    amount_or_exit,
    category_or_exit,
    current_user_id,
    date_or_exit,
    today,
)
from duetrack.cli.error_handling import handle_domain_error
from duetrack.domain.entities import Frequency
from duetrack.domain.errors import DomainError
from duetrack.domain.income import IncomeService
from duetrack.utils.date_parser import get_date_range


@click.group()
def income_group():
    """Record and list incomes."""
    pass


@income_group.command("add")
@click.argument("description")
@click.option("--amount", required=True, help="Income amount")
@click.option("--date", "income_date", default="today", help="Income date (defaults to today)")
@click.option("--category", help="Category name or ID")
@click.option("--recurring", is_flag=True, help="Income repeats (e.g., salary)")
@click.option(
    "--frequency",
    type=click.Choice([f.value for f in Frequency], case_sensitive=False),
    help="Recurrence frequency (defaults to MONTHLY for recurring incomes)",
)
@click.option("--notes", help="Notes")
@click.pass_context
def add_income(
    ctx,
    description: str,
    amount: str,
    income_date: str,
    category: str | None,
    recurring: bool,
    frequency: str | None,
    notes: str | None,
) -> None:
    """Record an income.

    Examples:
        duetrack income add "Salary" --amount 3000 --date 2024-03-25 --recurring
        duetrack income add "Freelance" --amount 450
    """
    user_id = current_user_id(ctx)
    service = IncomeService(ctx.obj["db"], user_id)
    try:
        income_id = service.add_income(
            amount=amount_or_exit(ctx, amount),
            description=description,
            income_date=date_or_exit(ctx, income_date),
            category_id=category_or_exit(ctx, user_id, category),
            is_recurring=recurring,
            frequency=Frequency(frequency.upper()) if frequency else None,
            notes=notes,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recorded income {income_id}")


@income_group.command("list")
@click.option("--this-month", is_flag=True, help="Only incomes of the current month")
@click.option("--recurring", is_flag=True, help="Only recurring templates")
@click.pass_context
def list_incomes(ctx, this_month: bool, recurring: bool):
    """List incomes, newest first."""
    start = end = None
    if this_month:
        start, end = get_date_range("this-month", today(ctx))

    service = IncomeService(ctx.obj["db"], current_user_id(ctx))
    incomes = service.list_incomes(start_date=start, end_date=end, recurring=True if recurring else None)
    if not incomes:
        click.echo("No incomes found.")
        return

    for inc in incomes:
        suffix = f" [{inc.frequency.value.lower()}]" if inc.is_recurring and inc.frequency else ""
        click.echo(f"{inc.id:4d} | {inc.date} | {inc.amount:10.2f} | {inc.description}{suffix}")


@income_group.command("generate-recurring")
@click.pass_context
def generate_recurring(ctx):
    """Create this month's instances of recurring incomes that are due."""
    service = IncomeService(ctx.obj["db"], current_user_id(ctx))
    result = service.generate_recurring(today(ctx))
    click.echo(f"Generated {result['generated']} income(s), skipped {result['skipped']}")


@income_group.command("edit")
@click.argument("income_id", type=int)
@click.option("--amount", help="Income amount")
@click.option("--description", help="Income description")
@click.option("--date", "income_date", help="Income date")
@click.option("--category", help="Category name or ID, or empty string to clear")
@click.option("--recurring/--one-off", default=None, help="Whether the income repeats")
@click.option(
    "--frequency",
    type=click.Choice([f.value for f in Frequency], case_sensitive=False),
    help="Recurrence frequency",
)
@click.option("--notes", help="Notes")
@click.pass_context
def edit_income(
    ctx,
    income_id: int,
    amount: str | None,
    description: str | None,
    income_date: str | None,
    category: str | None,
    recurring: bool | None,
    frequency: str | None,
    notes: str | None,
) -> None:
    """Edit an income.

    Updates only the fields that are provided. Use --category "" to clear the category.

    Examples:
        duetrack income edit 1 --amount 3200
        duetrack income edit 1 --frequency BIWEEKLY
    """
    user_id = current_user_id(ctx)
    service = IncomeService(ctx.obj["db"], user_id)
    clear_category = category == ""
    try:
        income = service.update_income(
            income_id,
            amount=amount_or_exit(ctx, amount) if amount is not None else None,
            description=description,
            income_date=date_or_exit(ctx, income_date),
            category_id=None if clear_category else category_or_exit(ctx, user_id, category),
            clear_category=clear_category,
            is_recurring=recurring,
            frequency=Frequency(frequency.upper()) if frequency else None,
            notes=notes,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated income {income.id}: {income.date} | {income.amount:.2f} | {income.description}")


@income_group.command("delete")
@click.argument("income_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_income(ctx, income_id: int, yes: bool):
    """Delete an income. Incomes generated from a recurring one are kept."""
    service = IncomeService(ctx.obj["db"], current_user_id(ctx))
    try:
        income = service.get_income(income_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(
        f"Are you sure you want to delete income '{income.description}' (ID: {income_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_income(income_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted income '{income.description}'")


def register_commands(cli):
    """Register income commands with main CLI."""
    cli.add_command(income_group, name="income")
