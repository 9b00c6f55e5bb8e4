"""Canonical category catalog shipped with the client.

The catalog is a fixed, versionless table: 7 income and 16 expense categories,
each with its subcategories. Accessors are pure and total; lookups by name are
case-insensitive. Names stay in the product language because they are matched
against rows already stored remotely.
"""
from __future__ import annotations

from .categories import (
    CanonicalCategoryDefinition,
    CategoryKind,
    SubcategoryDefinition,
)

__all__ = [
    "INCOME_DEFINITIONS",
    "EXPENSE_DEFINITIONS",
    "all_definitions",
    "definitions_by_kind",
    "find_by_name",
    "find_subcategory",
]


def _category(
    kind: CategoryKind,
    order: int,
    name: str,
    icon: str,
    color: str,
    subs: list[tuple[str, str]],
) -> CanonicalCategoryDefinition:
    # Subcategories inherit the parent's color
    return CanonicalCategoryDefinition(
        name=name,
        kind=kind,
        icon=icon,
        color=color,
        order=order,
        subcategories=tuple(SubcategoryDefinition(name=n, icon=i, color=color) for n, i in subs),
    )


_IN = CategoryKind.INCOME
_EX = CategoryKind.EXPENSE

INCOME_DEFINITIONS: tuple[CanonicalCategoryDefinition, ...] = (
    _category(_IN, 1, "Salário", "briefcase", "#4CAF50", [
        ("Salário Principal", "briefcase"),
        ("Salário Secundário", "briefcase-outline"),
        ("Hora Extra", "time"),
        ("Comissão", "trending-up"),
        ("13º Salário", "gift"),
        ("Férias", "beach"),
    ]),
    _category(_IN, 2, "Freelance", "laptop", "#2196F3", [
        ("Desenvolvimento", "code"),
        ("Design", "color-palette"),
        ("Consultoria", "people"),
        ("Redação", "create"),
        ("Marketing", "megaphone"),
    ]),
    _category(_IN, 3, "Investimentos", "trending-up", "#9C27B0", [
        ("Dividendos", "cash"),
        ("Juros", "calculator"),
        ("Renda Fixa", "bar-chart"),
        ("Renda Variável", "stats-chart"),
        ("Criptomoedas", "logo-bitcoin"),
        ("Fundos", "wallet"),
    ]),
    _category(_IN, 4, "Vendas", "storefront", "#FF9800", [
        ("Produtos", "cube"),
        ("Serviços", "construct"),
        ("Comissões", "trending-up"),
        ("Revendas", "repeat"),
    ]),
    _category(_IN, 5, "Renda Passiva", "home", "#00BCD4", [
        ("Aluguel", "home"),
        ("Royalties", "musical-notes"),
        ("Direitos Autorais", "document-text"),
        ("Licenças", "key"),
    ]),
    _category(_IN, 6, "Bonificações", "gift", "#E91E63", [
        ("Bônus", "star"),
        ("Prêmios", "trophy"),
        ("Gratificações", "heart"),
        ("PLR", "people"),
    ]),
    _category(_IN, 7, "Outros", "ellipsis-horizontal", "#607D8B", [
        ("Reembolsos", "refresh"),
        ("Empréstimos Recebidos", "hand-right"),
        ("Vendas Eventuais", "pricetag"),
        ("Doações Recebidas", "heart"),
    ]),
)

EXPENSE_DEFINITIONS: tuple[CanonicalCategoryDefinition, ...] = (
    _category(_EX, 1, "Alimentação", "restaurant", "#FF5722", [
        ("Supermercado", "storefront"),
        ("Restaurantes", "restaurant"),
        ("Lanchonetes", "fast-food"),
        ("Delivery", "bicycle"),
        ("Padaria", "cafe"),
        ("Bebidas", "wine"),
    ]),
    _category(_EX, 2, "Transporte", "car", "#607D8B", [
        ("Combustível", "car"),
        ("Transporte Público", "bus"),
        ("Uber/Taxi", "car-sport"),
        ("Estacionamento", "car"),
        ("Manutenção", "construct"),
        ("Seguro Veículo", "shield"),
        ("IPVA", "document-text"),
    ]),
    _category(_EX, 3, "Moradia", "home", "#795548", [
        ("Aluguel", "home"),
        ("Financiamento", "card"),
        ("Condomínio", "business"),
        ("Luz", "flash"),
        ("Água", "water"),
        ("Gás", "flame"),
        ("Internet", "wifi"),
        ("Telefone", "call"),
        ("IPTU", "document-text"),
        ("Reparos", "hammer"),
    ]),
    _category(_EX, 4, "Saúde", "medical", "#F44336", [
        ("Plano de Saúde", "medical"),
        ("Médico", "person"),
        ("Dentista", "happy"),
        ("Farmácia", "medical"),
        ("Exames", "analytics"),
        ("Psicólogo", "brain"),
        ("Academia", "fitness"),
    ]),
    _category(_EX, 5, "Educação", "school", "#3F51B5", [
        ("Mensalidade", "school"),
        ("Livros", "book"),
        ("Material Escolar", "pencil"),
        ("Cursos", "library"),
        ("Idiomas", "language"),
        ("Transporte Escolar", "bus"),
    ]),
    _category(_EX, 6, "Lazer", "game-controller", "#9C27B0", [
        ("Cinema", "film"),
        ("Teatro", "musical-notes"),
        ("Shows", "musical-note"),
        ("Jogos", "game-controller"),
        ("Streaming", "tv"),
        ("Viagens", "airplane"),
        ("Hobbies", "color-palette"),
        ("Esportes", "football"),
    ]),
    _category(_EX, 7, "Vestuário", "shirt", "#E91E63", [
        ("Roupas", "shirt"),
        ("Sapatos", "footsteps"),
        ("Acessórios", "watch"),
        ("Roupas Íntimas", "shirt"),
        ("Uniformes", "business"),
    ]),
    _category(_EX, 8, "Beleza", "cut", "#E91E63", [
        ("Cabelo", "cut"),
        ("Estética", "flower"),
        ("Cosméticos", "color-palette"),
        ("Perfumes", "sparkles"),
        ("Manicure", "hand-left"),
    ]),
    _category(_EX, 9, "Tecnologia", "phone-portrait", "#2196F3", [
        ("Celular", "phone-portrait"),
        ("Computador", "laptop"),
        ("Software", "code"),
        ("Acessórios", "headset"),
        ("Conserto", "construct"),
        ("Upgrade", "trending-up"),
    ]),
    _category(_EX, 10, "Serviços", "build", "#009688", [
        ("Bancários", "card"),
        ("Contabilidade", "calculator"),
        ("Advocacia", "library"),
        ("Limpeza", "build"),
        ("Delivery", "bicycle"),
        ("Segurança", "shield"),
    ]),
    _category(_EX, 11, "Impostos", "document-text", "#FF9800", [
        ("Imposto de Renda", "document-text"),
        ("IPVA", "car"),
        ("IPTU", "home"),
        ("Taxas", "receipt"),
        ("Multas", "warning"),
    ]),
    _category(_EX, 12, "Investimentos", "trending-up", "#4CAF50", [
        ("Poupança", "wallet"),
        ("Renda Fixa", "bar-chart"),
        ("Renda Variável", "stats-chart"),
        ("Previdência", "shield"),
        ("Criptomoedas", "logo-bitcoin"),
    ]),
    _category(_EX, 13, "Pets", "paw", "#795548", [
        ("Ração", "nutrition"),
        ("Veterinário", "medical"),
        ("Medicamentos", "medical"),
        ("Higiene", "water"),
        ("Brinquedos", "football"),
        ("Hotel Pet", "home"),
    ]),
    _category(_EX, 14, "Doações", "heart", "#E91E63", [
        ("Caridade", "heart"),
        ("Igreja", "business"),
        ("ONG", "people"),
        ("Causas Sociais", "globe"),
    ]),
    _category(_EX, 15, "Empréstimos", "card", "#FF5722", [
        ("Empréstimo Pessoal", "person"),
        ("Cartão de Crédito", "card"),
        ("Financiamento", "home"),
        ("Cheque Especial", "checkbook"),
    ]),
    _category(_EX, 16, "Outros", "ellipsis-horizontal", "#9E9E9E", [
        ("Diversos", "apps"),
        ("Emergências", "alert-circle"),
        ("Presentes", "gift"),
        ("Festas", "balloon"),
    ]),
)

_ALL: tuple[CanonicalCategoryDefinition, ...] = INCOME_DEFINITIONS + EXPENSE_DEFINITIONS


def all_definitions() -> tuple[CanonicalCategoryDefinition, ...]:
    """Return the full catalog, income first then expense, each in catalog order."""
    return _ALL


def definitions_by_kind(kind: CategoryKind | str) -> tuple[CanonicalCategoryDefinition, ...]:
    """Return the catalog entries of one kind (accepts either kind vocabulary)."""
    if CategoryKind.parse(kind) is CategoryKind.INCOME:
        return INCOME_DEFINITIONS
    return EXPENSE_DEFINITIONS


def find_by_name(name: str, kind: CategoryKind | str | None = None) -> CanonicalCategoryDefinition | None:
    """Case-insensitive lookup by name.

    Names such as ``Outros`` exist once per kind; without ``kind`` the first
    match in catalog order (income first) is returned.
    """
    wanted = (name or "").lower()
    pool = _ALL if kind is None else definitions_by_kind(kind)
    for definition in pool:
        if definition.name.lower() == wanted:
            return definition
    return None


def find_subcategory(
    category_name: str,
    sub_name: str,
    kind: CategoryKind | str | None = None,
) -> SubcategoryDefinition | None:
    """Case-insensitive nested lookup; None when either level is missing."""
    category = find_by_name(category_name, kind)
    if category is None:
        return None
    wanted = (sub_name or "").lower()
    for sub in category.subcategories:
        if sub.name.lower() == wanted:
            return sub
    return None
