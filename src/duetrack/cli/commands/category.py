"""Category management commands."""

import click

from duetrack.cli.context import current_user_id
from duetrack.cli.error_handling import handle_domain_error
from duetrack.domain.category import CategoryService
from duetrack.domain.errors import DomainError


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("add")
@click.argument("name")
@click.pass_context
def add_category(ctx, name: str):
    """Add a category.

    Categories whose name mentions utilities or services are treated as
    essential when prioritizing recurring expenses.

    Examples:
        duetrack category add "Utilities"
    """
    service = CategoryService(ctx.obj["db"], current_user_id(ctx))
    try:
        category_id = service.create_category(name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created category '{name.strip()}' (ID: {category_id})")


@category_group.command("list")
@click.pass_context
def list_categories(ctx):
    """List categories."""
    service = CategoryService(ctx.obj["db"], current_user_id(ctx))
    categories = service.list_categories()
    if not categories:
        click.echo("No categories found.")
        return

    click.echo("\nCategories:")
    click.echo("-" * 40)
    for cat in categories:
        click.echo(f"ID: {cat.id:3d} | {cat.name}")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
