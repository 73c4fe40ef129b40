"""User management commands."""

import click

from duetrack.cli.error_handling import handle_domain_error
from duetrack.domain.errors import DomainError
from duetrack.domain.user import UserService


@click.group()
def user_group():
    """Manage users."""
    pass


@user_group.command("create")
@click.argument("username")
@click.pass_context
def create_user(ctx, username: str):
    """Create a user to act as with --user.

    Examples:
        duetrack user create alice
    """
    service = UserService(ctx.obj["db"])
    try:
        user_id = service.create_user(username)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created user '{username.strip()}' (ID: {user_id})")


def register_commands(cli):
    """Register user commands with main CLI."""
    cli.add_command(user_group, name="user")
