from dataclasses import dataclass, field
from typing import Dict, Any, Optional, Tuple

from models.technology import is_category_id


@dataclass(frozen=True)
class Category:
    """A classification bucket from categories.json."""
    id: int
    name: Optional[str] = None
    groups: Tuple[int, ...] = field(default_factory=tuple) # parent group IDs
    priority: Optional[int] = None


def unknown_category(cat_id: Any) -> str:
    return f"Unknown({cat_id})"


def index_categories(raw: Dict[str, Any]) -> Dict[int, Category]:
    """Index raw categories (keyed by ID string) by integer ID.

    Entries whose key is not an integer or whose value is not an object
    are left out; they can only ever resolve to ``Unknown(<id>)``.
    """
    index: Dict[int, Category] = {}
    for key, value in raw.items():
        try:
            cat_id = int(key)
        except (TypeError, ValueError):
            continue
        if not isinstance(value, dict):
            continue
        groups = value.get("groups")
        name = value.get("name")
        index[cat_id] = Category(
            id=cat_id,
            name=str(name) if name else None,
            groups=tuple(g for g in groups if is_category_id(g)) if isinstance(groups, list) else (),
            priority=value.get("priority") if is_category_id(value.get("priority")) else None,
        )
    return index


def category_name(index: Dict[int, Category], cat_id: Any) -> str:
    """Resolve a category ID to its display name, or the Unknown placeholder."""
    if not is_category_id(cat_id):
        return unknown_category(cat_id)
    category = index.get(cat_id)
    if category is None or not category.name:
        return unknown_category(cat_id)
    return category.name
