"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested entity does not exist or is not owned by the current user."""


class UnauthenticatedError(DomainError):
    """No user could be resolved for the current caller."""


class InconsistentError(DomainError):
    """Operation would leave records in an inconsistent state."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations or a lost concurrent update."""


def debt_not_found(debt_id: int) -> str:
    """Return message for missing debt."""
    return f"Debt {debt_id} not found"


def card_not_found(card_id: int) -> str:
    """Return message for missing credit card."""
    return f"Credit card {card_id} not found"


def savings_goal_not_found(goal_id: int) -> str:
    """Return message for missing savings goal."""
    return f"Savings goal {goal_id} not found"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def installment_not_found(installment_id: int, debt_id: int) -> str:
    """Return message for an installment that is not part of the debt."""
    return f"Installment {installment_id} not found for debt {debt_id}"


def installment_already_settled(installment_number: int, status: str) -> str:
    """Return message when settling an installment that is already terminal."""
    return f"Installment {installment_number} is already {status}"


def principal_exceeds_remaining(principal, remaining) -> str:
    """Return message when a payment would retire more principal than remains."""
    return f"Payment principal {principal} exceeds remaining amount {remaining}"


def concurrent_update(entity: str, entity_id: int) -> str:
    """Return message for a lost optimistic-lock race."""
    return f"{entity} {entity_id} was modified concurrently; please retry"


def not_authenticated() -> str:
    """Return message when no user can be resolved."""
    return "Not authenticated: set --user or DUETRACK_USER to an existing user"


def expense_not_found(expense_id: int) -> str:
    """Return message for missing expense."""
    return f"Expense {expense_id} not found"


def income_not_found(income_id: int) -> str:
    """Return message for missing income."""
    return f"Income {income_id} not found"
