"""Rendering of domain errors on the command line."""

import logging

import click

from duetrack.domain.errors import ConflictError, DomainError, InconsistentError, UnauthenticatedError

logger = logging.getLogger(__name__)

HINTS = {
    ConflictError: "Run the command again to use the latest data.",
    InconsistentError: "Check the amounts against 'debt installments' and 'debt payments'.",
    UnauthenticatedError: "Create a user with 'duetrack user create NAME'.",
}


def fail(ctx: click.Context, message: str, hint: str | None = None) -> None:
    """Print an error line (and optional hint) to stderr and exit with status 1."""
    click.echo(f"Error: {message}", err=True)
    if hint:
        click.echo(f"Hint: {hint}", err=True)
    ctx.exit(1)


def handle_domain_error(ctx: click.Context, error: DomainError) -> None:
    """Render a domain error with a hint for its kind, then exit."""
    logger.debug("%s in '%s': %s", type(error).__name__, ctx.command_path, error)
    hint = next((text for kind, text in HINTS.items() if isinstance(error, kind)), None)
    fail(ctx, str(error), hint)
