"""Savings goal domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from duetrack.database.base import Database
from duetrack.domain.entities import (
    SavingsContribution as SavingsContributionEntity,
    SavingsGoal as SavingsGoalEntity,
)
from duetrack.domain.errors import NotFoundError, ValidationError, savings_goal_not_found

logger = logging.getLogger(__name__)


class SavingsService:
    """Service for savings goals and contributions."""

    def __init__(self, db: Database, user_id: int):
        """Initialize savings service.

        Args:
            db: Database instance
            user_id: Owning user
        """
        self.db = db
        self.user_id = user_id

    def create_goal(self, name: str, target_amount: Decimal, deadline: Optional[date] = None) -> int:
        """Create a savings goal.

        Raises:
            ValidationError: If the name is empty or the target is not positive
        """
        if not name or not name.strip():
            raise ValidationError("Goal name cannot be empty")
        if target_amount is None or target_amount <= 0:
            raise ValidationError("Target amount must be positive")
        return self.db.create_savings_goal(self.user_id, name.strip(), target_amount, deadline)

    def get_goal(self, goal_id: int) -> SavingsGoalEntity:
        """Get a goal or raise NotFoundError."""
        goal = self.db.get_savings_goal(self.user_id, goal_id)
        if goal is None:
            raise NotFoundError(savings_goal_not_found(goal_id))
        return goal

    def contribute(
        self,
        goal_id: int,
        amount: Decimal,
        contribution_date: date,
        notes: Optional[str] = None,
    ) -> SavingsGoalEntity:
        """Add a contribution to a goal.

        The goal is marked completed once its current amount reaches the
        target.

        Returns:
            The updated goal

        Raises:
            ValidationError: If the amount is not positive
            NotFoundError: If the goal is not found
        """
        if amount is None or amount <= 0:
            raise ValidationError("Contribution amount must be positive")
        goal = self.get_goal(goal_id)
        new_amount = goal.current_amount + amount
        completed = new_amount >= goal.target_amount

        self.db.add_savings_contribution(
            user_id=self.user_id,
            goal_id=goal_id,
            amount=amount,
            contribution_date=contribution_date,
            notes=notes,
            new_current_amount=new_amount,
            is_completed=completed,
        )
        if completed and not goal.is_completed:
            logger.info("Savings goal %s reached its target", goal_id)
        return self.get_goal(goal_id)

    def list_goals(self) -> list[SavingsGoalEntity]:
        """List goals, open ones first."""
        return self.db.list_savings_goals(self.user_id)

    def update_goal(
        self,
        goal_id: int,
        name: Optional[str] = None,
        target_amount: Optional[Decimal] = None,
        deadline: Optional[date] = None,
        clear_deadline: bool = False,
    ) -> SavingsGoalEntity:
        """Edit a goal. Arguments left as None keep their current value.

        The saved amount only moves with contributions. Completion is
        recomputed against the new target.

        Raises:
            ValidationError: If the name is empty or the target is not positive
            NotFoundError: If the goal is not found
        """
        goal = self.get_goal(goal_id)
        changes = {}
        if name is not None:
            if not name.strip():
                raise ValidationError("Goal name cannot be empty")
            changes["name"] = name.strip()
        if target_amount is not None:
            if target_amount <= 0:
                raise ValidationError("Target amount must be positive")
            changes["target_amount"] = target_amount
            changes["is_completed"] = goal.current_amount >= target_amount
        if clear_deadline:
            changes["deadline"] = None
        elif deadline is not None:
            changes["deadline"] = deadline

        if changes:
            self.db.update_savings_goal(self.user_id, goal_id, changes)
        return self.get_goal(goal_id)

    def delete_goal(self, goal_id: int) -> None:
        """Delete a goal together with its contributions."""
        self.get_goal(goal_id)
        self.db.delete_savings_goal(self.user_id, goal_id)
        logger.info("Deleted savings goal %s", goal_id)

    def list_contributions(self, goal_id: int) -> list[SavingsContributionEntity]:
        """List a goal's contributions, oldest first."""
        self.get_goal(goal_id)
        return self.db.list_savings_contributions(self.user_id, goal_id)
