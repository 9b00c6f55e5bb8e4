from .catalog import (
    all_definitions,
    definitions_by_kind,
    find_by_name,
    find_subcategory,
)
from .categories import (
    CanonicalCategoryDefinition,
    CategoryKind,
    SubcategoryDefinition,
    UsageStats,
    UserCategory,
    UserSubcategory,
    category_key,
    same_key,
    validate_definition,
)
from .errors import DomainError, ValidationError
from .reconciliation import DEFAULT_SYNC_TTL, ReconciliationService

__all__ = [
    "DomainError",
    "ValidationError",
    "CategoryKind",
    "SubcategoryDefinition",
    "CanonicalCategoryDefinition",
    "UserSubcategory",
    "UsageStats",
    "UserCategory",
    "category_key",
    "same_key",
    "validate_definition",
    "all_definitions",
    "definitions_by_kind",
    "find_by_name",
    "find_subcategory",
    "DEFAULT_SYNC_TTL",
    "ReconciliationService",
]
