"""Savings goal commands."""

import click

from duetrack.cli.context import amount_or_exit, current_user_id, date_or_exit
from duetrack.cli.error_handling import handle_domain_error
from duetrack.domain.errors import DomainError
from duetrack.domain.savings import SavingsService


@click.group()
def savings_group():
    """Manage savings goals."""
    pass


@savings_group.command("create")
@click.argument("name")
@click.option("--target", required=True, help="Target amount")
@click.option("--deadline", help="Deadline date")
@click.pass_context
def create_goal(ctx, name: str, target: str, deadline: str | None):
    """Create a savings goal."""
    service = SavingsService(ctx.obj["db"], current_user_id(ctx))
    try:
        goal_id = service.create_goal(
            name,
            amount_or_exit(ctx, target, "target"),
            deadline=date_or_exit(ctx, deadline, "deadline"),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created savings goal '{name}' (ID: {goal_id})")


@savings_group.command("contribute")
@click.argument("goal_id", type=int)
@click.option("--amount", required=True, help="Amount contributed")
@click.option("--date", "contribution_date", default="today", help="Contribution date")
@click.option("--notes", help="Notes")
@click.pass_context
def contribute(ctx, goal_id: int, amount: str, contribution_date: str, notes: str | None):
    """Add money to a savings goal."""
    service = SavingsService(ctx.obj["db"], current_user_id(ctx))
    try:
        goal = service.contribute(
            goal_id,
            amount_or_exit(ctx, amount),
            date_or_exit(ctx, contribution_date),
            notes=notes,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"'{goal.name}': {goal.current_amount:.2f} of {goal.target_amount:.2f}")
    if goal.is_completed:
        click.echo("Goal reached!")


@savings_group.command("list")
@click.pass_context
def list_goals(ctx):
    """List savings goals."""
    service = SavingsService(ctx.obj["db"], current_user_id(ctx))
    goals = service.list_goals()
    if not goals:
        click.echo("No savings goals found.")
        return

    for goal in goals:
        deadline = f" by {goal.deadline}" if goal.deadline else ""
        done = " (completed)" if goal.is_completed else ""
        click.echo(
            f"ID: {goal.id:3d} | {goal.name:20s} | {goal.current_amount:10.2f} / {goal.target_amount:.2f}{deadline}{done}"
        )


@savings_group.command("edit")
@click.argument("goal_id", type=int)
@click.option("--name", help="Goal name")
@click.option("--target", help="Target amount")
@click.option("--deadline", help="Deadline date, or empty string to clear")
@click.pass_context
def edit_goal(ctx, goal_id: int, name: str | None, target: str | None, deadline: str | None):
    """Edit a savings goal. Updates only the fields that are provided."""
    service = SavingsService(ctx.obj["db"], current_user_id(ctx))
    clear_deadline = deadline == ""
    try:
        goal = service.update_goal(
            goal_id,
            name=name,
            target_amount=amount_or_exit(ctx, target, "target") if target else None,
            deadline=None if clear_deadline else date_or_exit(ctx, deadline, "deadline"),
            clear_deadline=clear_deadline,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"'{goal.name}': {goal.current_amount:.2f} of {goal.target_amount:.2f}")
    if goal.is_completed:
        click.echo("Goal reached!")


@savings_group.command("delete")
@click.argument("goal_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_goal(ctx, goal_id: int, yes: bool):
    """Delete a savings goal with its contributions."""
    service = SavingsService(ctx.obj["db"], current_user_id(ctx))
    try:
        goal = service.get_goal(goal_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(f"Are you sure you want to delete goal '{goal.name}' (ID: {goal_id})?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_goal(goal_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted savings goal '{goal.name}'")


def register_commands(cli):
    """Register savings commands with main CLI."""
    cli.add_command(savings_group, name="savings")
