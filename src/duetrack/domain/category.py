"""Category domain service."""

from typing import Optional

from duetrack.database.base import Database
from duetrack.domain.entities import Category as CategoryEntity
from duetrack.domain.errors import ConflictError, NotFoundError, ValidationError, category_not_found


class CategoryService:
    """Service for managing a user's categories."""

    def __init__(self, db: Database, user_id: int):
        """Initialize category service.

        Args:
            db: Database instance
            user_id: Owning user
        """
        self.db = db
        self.user_id = user_id

    def create_category(self, name: str) -> int:
        """Create a category.

        Raises:
            ValidationError: If the name is empty
            ConflictError: If the user already has a category with that name
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name cannot be empty")
        if self.db.get_category_by_name(self.user_id, name) is not None:
            raise ConflictError(f"Category '{name}' already exists")
        return self.db.create_category(self.user_id, name)

    def get_or_create(self, name: str) -> int:
        """Return the ID of the named category, creating it if needed."""
        existing = self.db.get_category_by_name(self.user_id, name.strip())
        if existing is not None:
            return existing.id
        return self.create_category(name)

    def require_category(self, category_id: int) -> CategoryEntity:
        """Get a category or raise NotFoundError."""
        category = self.db.get_category(self.user_id, category_id)
        if category is None:
            raise NotFoundError(category_not_found(category_id))
        return category

    def resolve_category_id(self, category: Optional[str | int]) -> Optional[int]:
        """Resolve a category name or ID to an ID (None passes through)."""
        if category is None or category == "":
            return None
        if isinstance(category, int) or str(category).isdigit():
            return self.require_category(int(category)).id
        found = self.db.get_category_by_name(self.user_id, str(category).strip())
        if found is None:
            raise NotFoundError(f"Category '{category}' not found")
        return found.id

    def list_categories(self) -> list[CategoryEntity]:
        """List categories."""
        return self.db.list_categories(self.user_id)
