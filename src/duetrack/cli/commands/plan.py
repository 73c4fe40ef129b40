"""Payment plan command."""

import click

from duetrack.cli.context import current_user_id, today
from duetrack.cli.error_handling import handle_domain_error
from duetrack.domain.cash_flow import DEFAULT_HORIZON_DAYS
from duetrack.domain.errors import DomainError
from duetrack.domain.payment_plan import PaymentPlanService


@click.command("plan")
@click.option(
    "--days",
    type=click.IntRange(min=0),
    default=DEFAULT_HORIZON_DAYS,
    show_default=True,
    help="Days covered by the cash-flow projection",
)
@click.pass_context
def plan(ctx, days: int):
    """Show what to pay next and how your balance will evolve.

    Obligations from debts, credit cards and recurring expenses are ranked
    by urgency. The projection only lists days on which money moves.
    """
    service = PaymentPlanService(ctx.obj["db"], current_user_id(ctx))
    try:
        result = service.build_plan(today(ctx), horizon_days=days)
    except DomainError as e:
        handle_domain_error(ctx, e)

    summary = result.summary
    click.echo("\nSummary:")
    click.echo("-" * 60)
    click.echo(f"Income received:      {summary.received_income:12.2f}")
    click.echo(f"Recurring pending:    {summary.pending_recurring_income:12.2f}")
    click.echo(f"Current balance:      {summary.current_balance:12.2f}")
    click.echo(f"Total obligations:    {summary.total_obligations:12.2f}")
    click.echo(f"Safety buffer:        {summary.safety_buffer:12.2f}")
    click.echo(f"Projected available:  {summary.projected_available:12.2f}")
    click.echo(f"Status: {summary.cash_flow_status.value.upper()}")

    if result.suggestions:
        click.echo("\nSuggested payments:")
        click.echo("-" * 60)
        for s in result.suggestions:
            click.echo(
                f"[{s.priority.value:6s}] {s.name:25s} {s.amount:10.2f} due {s.due_date}, "
                f"pay by {s.suggested_payment_date}"
            )
            click.echo(f"         {s.reason}")
    else:
        click.echo("\nNothing to pay in the coming days.")

    if result.cash_flow_projection:
        click.echo("\nCash flow:")
        click.echo("-" * 60)
        for row in result.cash_flow_projection:
            click.echo(f"{row.date} | +{row.income:10.2f} | -{row.expenses:10.2f} | {row.balance:12.2f}")

    if summary.warnings:
        click.echo("\nWarnings:")
        for warning in summary.warnings:
            click.echo(f"  ! {warning}")


def register_commands(cli):
    """Register plan command with main CLI."""
    cli.add_command(plan, name="plan")
