"""Period summary command."""

import click

from duetrack.cli.context import current_user_id, date_or_exit, today
from duetrack.cli.error_handling import fail, handle_domain_error
from duetrack.domain.errors import DomainError
from duetrack.domain.summary import SummaryService
from duetrack.utils.date_parser import get_date_range


@click.command("summary")
@click.option("--last-month", is_flag=True, help="Summarize the previous month")
@click.option("--this-year", is_flag=True, help="Summarize the current year")
@click.option("--start-date", help="Start date (defaults to the first day of this month)")
@click.option("--end-date", help="End date (defaults to the last day of this month)")
@click.pass_context
def summary(ctx, last_month: bool, this_year: bool, start_date: str | None, end_date: str | None):
    """Show income, spending and savings totals for a period.

    Without options the current month is summarized.

    Examples:
        duetrack summary
        duetrack summary --last-month
        duetrack summary --start-date 2024-01-01 --end-date 2024-03-31
    """
    periods = [flag for flag in (last_month, this_year) if flag]
    if len(periods) > 1 or (periods and (start_date or end_date)):
        fail(ctx, "Use only one of --last-month, --this-year or --start-date/--end-date.")

    start = date_or_exit(ctx, start_date, "start date")
    end = date_or_exit(ctx, end_date, "end date")
    if last_month:
        start, end = get_date_range("last-month", today(ctx))
    elif this_year:
        start, end = get_date_range("this-year", today(ctx))

    service = SummaryService(ctx.obj["db"], current_user_id(ctx))
    try:
        result = service.build_summary(today(ctx), start_date=start, end_date=end)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nSummary {result.start_date} to {result.end_date}:")
    click.echo("-" * 60)
    click.echo(f"Income:               {result.total_income:12.2f}  ({result.income_count} records)")
    click.echo(f"Expenses:             {result.total_expenses:12.2f}  ({result.expense_count} records)")
    click.echo(f"  cash:               {result.cash_expenses:12.2f}")
    click.echo(f"  debit:              {result.debit_expenses:12.2f}")
    click.echo(f"  credit:             {result.credit_expenses:12.2f}")
    click.echo(f"Net:                  {result.net:12.2f}")
    click.echo(f"Saved in {result.active_goals} open goal(s): {result.total_saved:10.2f}")


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
