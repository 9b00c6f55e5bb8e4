"""Wire models for the remote category store.

The store speaks Portuguese field names (``nome``, ``tipo``, ``icone``...);
these models map them onto the domain vocabulary and back.
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from py_category_sync.domain.categories import (
    CanonicalCategoryDefinition,
    CategoryKind,
    UsageStats,
    UserCategory,
    UserSubcategory,
)
from py_category_sync.domain.errors import ValidationError

__all__ = [
    "SubcategoryWire",
    "UsageStatsWire",
    "CategoryWire",
    "EnvelopeWire",
    "definition_payload",
    "UPDATE_FIELD_ALIASES",
]

# Domain attribute -> wire field accepted by PUT /categories/{id}
UPDATE_FIELD_ALIASES: dict[str, str] = {
    "name": "nome",
    "icon": "icone",
    "color": "cor",
    "order": "ordem",
    "active": "ativa",
}


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SubcategoryWire(_WireModel):
    name: str = Field(alias="nome")
    icon: str = Field(alias="icone", default="")
    color: str = Field(alias="cor", default="")
    active: bool = Field(alias="ativa", default=True)

    def to_domain(self, parent_color: str) -> UserSubcategory:
        return UserSubcategory(
            name=self.name,
            icon=self.icon,
            color=self.color or parent_color,
            active=self.active,
        )


class UsageStatsWire(_WireModel):
    transaction_count: int = Field(alias="totalTransacoes", default=0)
    total_amount: Decimal = Field(alias="totalValor", default=Decimal("0"))
    last_used_at: datetime | None = Field(alias="ultimaTransacao", default=None)

    def to_domain(self) -> UsageStats:
        return UsageStats(
            transaction_count=self.transaction_count,
            total_amount=self.total_amount,
            last_used_at=self.last_used_at,
        )


class CategoryWire(_WireModel):
    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    name: str = Field(alias="nome")
    kind: CategoryKind = Field(alias="tipo")
    icon: str = Field(alias="icone", default="")
    color: str = Field(alias="cor", default="")
    order: int = Field(alias="ordem", default=0)
    active: bool = Field(alias="ativa", default=True)
    is_default: bool = Field(alias="padrao", default=False)
    subcategories: list[SubcategoryWire] = Field(alias="subcategorias", default_factory=list)
    usage_stats: UsageStatsWire | None = Field(alias="estatisticas", default=None)

    @field_validator("kind", mode="before")
    @classmethod
    def parse_kind(cls, v: Any) -> CategoryKind:
        try:
            return CategoryKind.parse(v)
        except ValidationError as exc:
            raise ValueError(str(exc)) from exc

    def to_domain(self) -> UserCategory:
        return UserCategory(
            id=self.id,
            name=self.name,
            kind=self.kind,
            icon=self.icon,
            color=self.color,
            order=self.order,
            active=self.active,
            is_default=self.is_default,
            subcategories=[s.to_domain(self.color) for s in self.subcategories],
            usage_stats=self.usage_stats.to_domain() if self.usage_stats else None,
        )


class EnvelopeWire(_WireModel):
    """``{success, data, message}`` envelope wrapping most store responses."""

    success: bool = True
    data: Any = None
    message: str | None = None
    error: str | None = None

    @property
    def reason(self) -> str | None:
        return self.message or self.error


def definition_payload(definition: CanonicalCategoryDefinition) -> dict[str, Any]:
    """Body for ``POST /categories`` built from a catalog definition."""
    return {
        "nome": definition.name,
        "tipo": definition.kind.wire,
        "icone": definition.icon,
        "cor": definition.color,
        "ordem": definition.order,
        "padrao": True,
        "subcategorias": [
            {"nome": s.name, "icone": s.icon, "cor": s.color} for s in definition.subcategories
        ],
    }
