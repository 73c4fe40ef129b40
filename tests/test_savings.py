"""Tests for savings service."""

import pytest
from datetime import date
from decimal import Decimal

from duetrack.domain.errors import NotFoundError, ValidationError
from duetrack.domain.savings import SavingsService


def test_contributions_complete_goal(savings_service):
    """Test a goal is completed once contributions reach its target."""
    goal_id = savings_service.create_goal("Emergency fund", Decimal("1000"), deadline=date(2024, 12, 31))

    goal = savings_service.contribute(goal_id, Decimal("400"), date(2024, 3, 1))
    assert goal.current_amount == Decimal("400")
    assert not goal.is_completed

    goal = savings_service.contribute(goal_id, Decimal("600"), date(2024, 4, 1), notes="bonus")
    assert goal.current_amount == Decimal("1000")
    assert goal.is_completed

    contributions = savings_service.list_contributions(goal_id)
    assert [c.amount for c in contributions] == [Decimal("400"), Decimal("600")]


def test_invalid_goal_rejected(savings_service):
    """Test goals need a name and a positive target."""
    with pytest.raises(ValidationError):
        savings_service.create_goal("", Decimal("100"))
    with pytest.raises(ValidationError):
        savings_service.create_goal("Trip", Decimal("0"))


def test_non_positive_contribution_rejected(savings_service):
    """Test contributions must be positive."""
    goal_id = savings_service.create_goal("Trip", Decimal("500"))

    with pytest.raises(ValidationError):
        savings_service.contribute(goal_id, Decimal("0"), date(2024, 3, 1))


def test_other_user_cannot_contribute(temp_db, other_user, savings_service):
    """Test goals are scoped to their owner."""
    goal_id = savings_service.create_goal("Trip", Decimal("500"))
    other = SavingsService(temp_db, other_user.id)

    with pytest.raises(NotFoundError):
        other.contribute(goal_id, Decimal("10"), date(2024, 3, 1))
    assert other.list_goals() == []


def test_update_goal_recomputes_completion(savings_service):
    """Test lowering or raising the target moves the goal in and out of completed."""
    goal_id = savings_service.create_goal("Trip", Decimal("500"), deadline=date(2024, 8, 1))
    savings_service.contribute(goal_id, Decimal("300"), date(2024, 3, 1))

    goal = savings_service.update_goal(goal_id, target_amount=Decimal("300"))
    assert goal.is_completed
    assert goal.current_amount == Decimal("300")

    goal = savings_service.update_goal(
        goal_id, name="Summer trip", target_amount=Decimal("900"), clear_deadline=True
    )
    assert not goal.is_completed
    assert goal.name == "Summer trip"
    assert goal.deadline is None


def test_update_goal_invalid_rejected(savings_service):
    """Test edits need a name and a positive target."""
    goal_id = savings_service.create_goal("Trip", Decimal("500"))

    with pytest.raises(ValidationError):
        savings_service.update_goal(goal_id, target_amount=Decimal("0"))
    with pytest.raises(ValidationError):
        savings_service.update_goal(goal_id, name="")
    assert savings_service.get_goal(goal_id).target_amount == Decimal("500")


def test_delete_goal_with_contributions(temp_db, other_user, savings_service):
    """Test deleting a goal removes it and its contributions."""
    goal_id = savings_service.create_goal("Trip", Decimal("500"))
    savings_service.contribute(goal_id, Decimal("100"), date(2024, 3, 1))

    with pytest.raises(NotFoundError):
        SavingsService(temp_db, other_user.id).delete_goal(goal_id)

    savings_service.delete_goal(goal_id)
    assert savings_service.list_goals() == []
    with pytest.raises(NotFoundError):
        savings_service.list_contributions(goal_id)
