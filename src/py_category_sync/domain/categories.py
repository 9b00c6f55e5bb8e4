"""Category value objects shared by the catalog, the repository and the use cases.

Public API:
- CategoryKind: income/expense with the remote store's wire vocabulary.
- SubcategoryDefinition / CanonicalCategoryDefinition: immutable catalog rows.
- UserSubcategory / UsageStats / UserCategory: rows owned by the remote store.
- category_key / same_key: the ``(kind, lowercased name)`` reconciliation key.
- validate_definition: format checks applied before a definition is sent.

No infrastructure dependencies.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum

from .errors import ValidationError

__all__ = [
    "CategoryKind",
    "SubcategoryDefinition",
    "CanonicalCategoryDefinition",
    "UserSubcategory",
    "UsageStats",
    "UserCategory",
    "CategoryKey",
    "category_key",
    "same_key",
    "definition_errors",
    "validate_definition",
]

MAX_NAME_LENGTH = 50
MAX_SUBCATEGORY_NAME_LENGTH = 30
_HEX_COLOR_RE = re.compile(r"#[0-9A-F]{6}", re.IGNORECASE)


class CategoryKind(str, Enum):
    """Kind of a category: money coming in or going out."""

    INCOME = "income"
    EXPENSE = "expense"

    @property
    def wire(self) -> str:
        """Value used by the remote category store (``tipo`` field / query)."""
        return _WIRE_BY_KIND[self]

    @classmethod
    def parse(cls, value: CategoryKind | str) -> CategoryKind:
        """Parse a kind from either vocabulary (``income``/``receita``...).

        Raises:
            ValidationError: unknown kind.
        """
        if isinstance(value, CategoryKind):
            return value
        norm = (value or "").strip().lower()
        kind = _KIND_BY_ALIAS.get(norm)
        if kind is None:
            raise ValidationError(f"Unknown category kind: {value!r}")
        return kind


_WIRE_BY_KIND = {CategoryKind.INCOME: "receita", CategoryKind.EXPENSE: "despesa"}
_KIND_BY_ALIAS = {
    "income": CategoryKind.INCOME,
    "receita": CategoryKind.INCOME,
    "expense": CategoryKind.EXPENSE,
    "despesa": CategoryKind.EXPENSE,
}


@dataclass(slots=True, frozen=True)
class SubcategoryDefinition:
    """Catalog subcategory: display name, icon and color."""

    name: str
    icon: str
    color: str


@dataclass(slots=True, frozen=True)
class CanonicalCategoryDefinition:
    """Immutable default category baked into the client.

    Attributes:
        name: Display name (unique per kind, case-insensitively).
        kind: Income or expense.
        icon: Icon identifier understood by the UI.
        color: Hex color ``#RRGGBB``.
        order: Position within its kind (1-based).
        subcategories: Optional nested entries.
    """

    name: str
    kind: CategoryKind
    icon: str
    color: str
    order: int
    subcategories: tuple[SubcategoryDefinition, ...] = ()


@dataclass(slots=True)
class UserSubcategory:
    name: str
    icon: str
    color: str
    active: bool = True


@dataclass(slots=True)
class UsageStats:
    transaction_count: int = 0
    total_amount: Decimal = Decimal("0")
    last_used_at: datetime | None = None


@dataclass(slots=True)
class UserCategory:
    """Category row owned by the remote store.

    ``is_default`` marks rows that originated from the canonical catalog; such
    rows are never deleted by this package.
    """

    id: str
    name: str
    kind: CategoryKind
    icon: str
    color: str
    order: int = 0
    active: bool = True
    is_default: bool = False
    subcategories: list[UserSubcategory] = field(default_factory=list)
    usage_stats: UsageStats | None = None


CategoryKey = tuple[CategoryKind, str]


def category_key(item: CanonicalCategoryDefinition | UserCategory) -> CategoryKey:
    """Return the reconciliation key ``(kind, lowercased name)``.

    No whitespace or accent normalization is applied.
    """
    return item.kind, item.name.lower()


def same_key(
    a: CanonicalCategoryDefinition | UserCategory,
    b: CanonicalCategoryDefinition | UserCategory,
) -> bool:
    """True when both items share the same ``(kind, name)`` key."""
    return category_key(a) == category_key(b)


def definition_errors(definition: CanonicalCategoryDefinition) -> list[str]:
    """Collect human-readable validation errors for a definition (empty if valid)."""
    errors: list[str] = []
    name = definition.name or ""
    if not name.strip():
        errors.append("name is required")
    elif len(name) > MAX_NAME_LENGTH:
        errors.append(f"name must be at most {MAX_NAME_LENGTH} characters")
    if not isinstance(definition.kind, CategoryKind):
        errors.append("kind must be income or expense")
    if not (definition.icon or "").strip():
        errors.append("icon is required")
    if not _HEX_COLOR_RE.fullmatch(definition.color or ""):
        errors.append("color must be a hex value (#RRGGBB)")
    for index, sub in enumerate(definition.subcategories, start=1):
        sub_name = sub.name or ""
        if not sub_name.strip():
            errors.append(f"subcategory {index}: name is required")
        elif len(sub_name) > MAX_SUBCATEGORY_NAME_LENGTH:
            errors.append(
                f"subcategory {index}: name must be at most {MAX_SUBCATEGORY_NAME_LENGTH} characters"
            )
    return errors


def validate_definition(definition: CanonicalCategoryDefinition) -> CanonicalCategoryDefinition:
    """Return the definition unchanged or raise ValidationError listing all problems."""
    errors = definition_errors(definition)
    if errors:
        raise ValidationError(f"Invalid category {definition.name!r}: " + "; ".join(errors))
    return definition
