"""Category service: lookups, validation and display metadata."""

from typing import List, Optional
from uuid import uuid4

from errors import CategoryInUse, DuplicateCategory, NotFoundError, ValidationError
from logger import get_logger
from models.category import (
    Category,
    DEFAULT_COLOR,
    DEFAULT_ICON,
    UNCATEGORIZED,
    categories_from_document,
    normalize_color,
)
from models.money import TRANSACTION_TYPES

logger = get_logger()


class CategoryService:
    """Service for managing a user's categories."""

    def __init__(self, store):
        """Initialize the category service.

        Args:
            store: LedgerStore holding the per-user collections.
        """
        self.store = store

    def find_all(self, user_id: str, type: Optional[str] = None) -> List[Category]:
        """Get all categories of a user.

        Args:
            user_id: Owner of the categories.
            type: Optional "income" or "expense" filter.

        Returns:
            List of Category objects ordered by type, then name.
        """
        categories = self._load(user_id)
        if type is not None:
            categories = [c for c in categories if c.type == type]
        return sorted(categories, key=lambda c: (c.type, c.name.lower()))

    def find(self, user_id: str, category_id: str) -> Optional[Category]:
        """Get a single category by ID, or None."""
        for category in self._load(user_id):
            if category.id == category_id:
                return category
        return None

    def resolve(
        self, user_id: str, category_id: str, type: str
    ) -> Optional[Category]:
        """Return the category if it exists and has the given type, else None."""
        category = self.find(user_id, category_id)
        if category is None or category.type != type:
            return None
        return category

    def create(
        self,
        user_id: str,
        type: str,
        name: str,
        color: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> Category:
        """Create a new category.

        Args:
            user_id: Owner of the category.
            type: "income" or "expense".
            name: Category name, unique per type (case-insensitive).
            color: Optional colour; normalized to a colour class.
            icon: Optional icon name.

        Returns:
            The created Category.

        Raises:
            ValidationError: If type or name is invalid.
            DuplicateCategory: If the name is taken for this type.
        """
        _check_type(type)
        name = _clean_name(name)

        with self.store.lock(user_id):
            categories = self._load(user_id)
            if _name_taken(categories, type, name):
                raise DuplicateCategory(f"Category '{name}' already exists for {type}")

            category = Category(
                id=f"cat_{type[:3]}_{uuid4().hex[:8]}",
                name=name,
                type=type,
                color=normalize_color(color),
                icon=icon or DEFAULT_ICON,
            )
            categories.append(category)
            self._save(user_id, categories)

        logger.info(f"Created {type} category '{name}' ({category.id}) for {user_id}")
        return category

    def quick_create(self, user_id: str, type: str, name: str) -> Category:
        """Create a category inline during transaction entry, with default display data."""
        return self.create(user_id, type, name, color=DEFAULT_COLOR, icon=DEFAULT_ICON)

    def update(
        self,
        user_id: str,
        category_id: str,
        name: Optional[str] = None,
        color: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> Category:
        """Update name and display data of a category. The type never changes.

        Raises:
            NotFoundError: If the category does not exist.
            DuplicateCategory: If another category of the same type has the name.
        """
        with self.store.lock(user_id):
            categories = self._load(user_id)
            category = next((c for c in categories if c.id == category_id), None)
            if category is None:
                raise NotFoundError(f"Category with ID {category_id} not found")

            if name is not None:
                name = _clean_name(name)
                if _name_taken(categories, category.type, name, exclude_id=category_id):
                    raise DuplicateCategory(
                        f"Another category with name '{name}' already exists for {category.type}"
                    )
                category.name = name
            if color is not None:
                category.color = normalize_color(color)
            if icon:
                category.icon = icon

            self._save(user_id, categories)

        return category

    def delete(self, user_id: str, category_id: str) -> None:
        """Delete a category that no transaction references.

        Raises:
            NotFoundError: If the category does not exist.
            CategoryInUse: If any transaction references it.
        """
        with self.store.lock(user_id):
            categories = self._load(user_id)
            remaining = [c for c in categories if c.id != category_id]
            if len(remaining) == len(categories):
                raise NotFoundError(f"Category with ID {category_id} not found")

            in_use = sum(
                1
                for t in self.store.load_all(user_id, "transactions")
                if t.get("categoryId") == category_id
            )
            if in_use:
                raise CategoryInUse(
                    f"Category {category_id} is used by {in_use} transaction(s)"
                )

            self._save(user_id, remaining)

        logger.info(f"Deleted category {category_id} for {user_id}")

    def describe(self, categories: List[Category], category_id: str) -> tuple:
        """Return (name, color, icon) for display.

        A missing category degrades to "Uncategorized" instead of failing.
        """
        for category in categories:
            if category.id == category_id:
                return category.name, category.color, category.icon
        return UNCATEGORIZED, DEFAULT_COLOR, DEFAULT_ICON

    def _load(self, user_id: str) -> List[Category]:
        return categories_from_document(self.store.load_all(user_id, "categories"))

    def _save(self, user_id: str, categories: List[Category]) -> None:
        self.store.save_all(user_id, "categories", [c.to_dict() for c in categories])


def _check_type(type: str) -> None:
    if type not in TRANSACTION_TYPES:
        raise ValidationError(f"Invalid category type: {type!r}")


def _clean_name(name) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Category name cannot be empty")
    return name.strip()


def _name_taken(categories, type, name, exclude_id=None) -> bool:
    return any(
        c.type == type and c.name.lower() == name.lower() and c.id != exclude_id
        for c in categories
    )
