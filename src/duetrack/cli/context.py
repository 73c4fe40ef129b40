"""CLI helpers for resolving the caller and parsing option values."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import click

from duetrack.cli.error_handling import fail, handle_domain_error
from duetrack.domain.category import CategoryService
from duetrack.domain.errors import DomainError
from duetrack.domain.user import UserService
from duetrack.utils.amount_parser import parse_amount
from duetrack.utils.date_parser import parse_date


def current_user_id(ctx: click.Context) -> int:
    """Resolve the acting user, or exit with a CLI error."""
    try:
        return UserService(ctx.obj["db"]).resolve_user(ctx.obj.get("username")).id
    except DomainError as exc:
        handle_domain_error(ctx, exc)


def today(ctx: click.Context) -> date:
    """Reference date of this invocation."""
    return ctx.obj["today"]


def amount_or_exit(ctx: click.Context, value: str, label: str = "amount") -> Decimal:
    """Parse a money option, or exit with a CLI error."""
    try:
        return parse_amount(value)
    except ValueError as e:
        fail(ctx, f"Invalid {label}: {e}")


def date_or_exit(ctx: click.Context, value: str | None, label: str = "date") -> date | None:
    """Parse a date option relative to the invocation's date, or exit."""
    if value is None:
        return None
    try:
        return parse_date(value, today=today(ctx))
    except ValueError as e:
        fail(ctx, f"Invalid {label}: {e}")


def category_or_exit(ctx: click.Context, user_id: int, category: str | None) -> int | None:
    """Resolve a category name or ID, or exit with a CLI error."""
    try:
        return CategoryService(ctx.obj["db"], user_id).resolve_category_id(category)
    except DomainError as exc:
        handle_domain_error(ctx, exc)
