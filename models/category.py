"""Category model for transaction classification."""

from dataclasses import dataclass
from typing import List

from models.money import TRANSACTION_TYPES

DEFAULT_COLOR = "bg-slate-500"
DEFAULT_ICON = "QuestionMarkCircleIcon"
UNCATEGORIZED = "Uncategorized"

# Hex colours found in older category documents, mapped to the colour classes
# used everywhere else.
HEX_TO_COLOR_CLASS = {
    "#22c55e": "bg-green-500",
    "#3b82f6": "bg-blue-500",
    "#eab308": "bg-yellow-500",
    "#f97316": "bg-orange-500",
    "#0ea5e9": "bg-sky-500",
    "#a855f7": "bg-purple-500",
    "#ef4444": "bg-red-500",
}


@dataclass
class Category:
    """Represents a user-defined income or expense category.

    Attributes:
        id: Unique identifier (e.g. "cat_exp_1a2b3c4d").
        name: Category name (unique per user within its type, case-insensitive).
        type: "income" or "expense".
        color: Colour class used for display.
        icon: Icon name used for display.
    """

    id: str
    name: str
    type: str
    color: str = DEFAULT_COLOR
    icon: str = DEFAULT_ICON

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "color": self.color,
            "icon": self.icon,
        }

    @classmethod
    def from_dict(cls, data: dict, type: str = None) -> "Category":
        """Build a category from a stored record, normalizing display metadata.

        Args:
            data: Stored record.
            type: Type to use when the record predates the ``type`` field.
        """
        return cls(
            id=data["id"],
            name=data["name"],
            type=data.get("type") or type,
            color=normalize_color(data.get("color")),
            icon=data.get("icon") or DEFAULT_ICON,
        )


def normalize_color(color) -> str:
    """Collapse the colour formats seen in stored data into a colour class."""
    if not color or not isinstance(color, str):
        return DEFAULT_COLOR
    if color.startswith("#"):
        return HEX_TO_COLOR_CLASS.get(color.lower(), DEFAULT_COLOR)
    if not color.startswith("bg-"):
        return DEFAULT_COLOR
    return color


def categories_from_document(document) -> List[Category]:
    """Read a stored categories document.

    Accepts the current flat list and the legacy ``{"income": [...],
    "expense": [...]}`` layout.
    """
    if not document:
        return []
    if isinstance(document, dict):
        categories = []
        for category_type in TRANSACTION_TYPES:
            for item in document.get(category_type) or []:
                categories.append(Category.from_dict(item, type=category_type))
        return categories
    return [Category.from_dict(item) for item in document]
