"""
Entity model for catalog records.

A YarpUnit is either a custom entity (unit, building, shop or builder) defined
by the map author, or a stock passthrough record for an existing engine entity.
Custom entities know how to project themselves into the template context.
"""
# [CTX:PBI-1:1-2:UNITS]

from dataclasses import dataclass, field
from typing import Any

from .identifiers import UnitIdentifier

# Separator between list elements in generated code
CODE_LIST_SEPARATOR = ' + "," + '


def raw_code_expression(unit_id: UnitIdentifier) -> str:
    """Code expression evaluating to the raw code of a custom entity."""
    return f"{unit_id.constant()}.toRawCode()"


def built_expression(built_ids: list[UnitIdentifier]) -> str:
    """
    Code expression listing the units a builder can build.

    Every built id is rendered through its constant, stock or not.
    """
    return CODE_LIST_SEPARATOR.join(raw_code_expression(unit_id) for unit_id in built_ids)


def sold_expression(sold_ids: list[UnitIdentifier]) -> str:
    """
    Code expression listing the units a shop sells.

    Stock ids are rendered as quoted raw codes, custom ids through their constant.
    """
    parts = []
    for unit_id in sold_ids:
        if unit_id.is_rawid():
            parts.append(f'"{unit_id.rawid()}"')
        else:
            parts.append(raw_code_expression(unit_id))
    return CODE_LIST_SEPARATOR.join(parts)


# [CTX:PBI-1:1-2:UNITS] Variants of custom entities
@dataclass
class YarpUnitVariant:
    """Base class for the kind of a custom entity."""

    kind = ""
    context_key = ""

    def liquid_fields(self) -> dict[str, str]:
        """Variant-specific projection fields."""
        return {}


@dataclass
class UnitVariant(YarpUnitVariant):
    """A plain unit."""

    kind = "unit"
    context_key = "units"


@dataclass
class BuildingVariant(YarpUnitVariant):
    """A building."""

    kind = "building"
    context_key = "buildings"


@dataclass
class UnitShopVariant(YarpUnitVariant):
    """
    A shop selling other entities.

    Attributes:
        sold_ids: Identifiers of sold entities, in source order
        scale: Model scale factor of the shop
    """
    sold_ids: list[UnitIdentifier] = field(default_factory=list)
    scale: float = 1.0

    kind = "shop"
    context_key = "shops"

    def liquid_fields(self) -> dict[str, str]:
        return {"sold": sold_expression(self.sold_ids)}


@dataclass
class BuilderVariant(YarpUnitVariant):
    """
    A unit able to construct other entities.

    Attributes:
        built_ids: Identifiers of built entities, in source order
    """
    built_ids: list[UnitIdentifier] = field(default_factory=list)

    kind = "builder"
    context_key = "builders"

    def liquid_fields(self) -> dict[str, str]:
        return {"built": built_expression(self.built_ids)}


# [CTX:PBI-1:1-2:UNITS] Catalog records
@dataclass
class YarpUnit:
    """
    Base catalog record.

    Attributes:
        id: Identifier of the entity, unique within a UnitRegistry
        model: Asset model path, trimmed of surrounding whitespace
    """
    id: UnitIdentifier
    model: str

    def __post_init__(self):
        self.model = self.model.strip()

    @property
    def kind(self) -> str:
        """Short name of the entity kind, used in logs."""
        return ""

    def liquid_value(self) -> dict[str, Any] | None:
        """Projection of this entity for the template context."""
        return None

    def liquid_insert_into_context(self, context: dict[str, list]) -> None:
        """Append this entity's projection to the matching context list."""
        pass

    @staticmethod
    def new_unit(id: UnitIdentifier, name: str, model: str, icon: str) -> "CustomUnit":
        return CustomUnit(id=id, model=model, name=name, icon=icon, variant=UnitVariant())

    @staticmethod
    def new_building(id: UnitIdentifier, name: str, model: str, icon: str) -> "CustomUnit":
        return CustomUnit(id=id, model=model, name=name, icon=icon, variant=BuildingVariant())

    @staticmethod
    def new_shop(
        id: UnitIdentifier,
        name: str,
        model: str,
        sold_ids: list[UnitIdentifier],
        scale: float,
    ) -> "CustomUnit":
        """Shops carry no icon."""
        return CustomUnit(
            id=id,
            model=model,
            name=name,
            icon="",
            variant=UnitShopVariant(sold_ids=list(sold_ids), scale=scale),
        )

    @staticmethod
    def new_builder(
        id: UnitIdentifier,
        name: str,
        model: str,
        icon: str,
        built_ids: list[UnitIdentifier],
    ) -> "CustomUnit":
        return CustomUnit(
            id=id,
            model=model,
            name=name,
            icon=icon,
            variant=BuilderVariant(built_ids=list(built_ids)),
        )

    @staticmethod
    def new_with_variant(
        id: UnitIdentifier,
        name: str,
        model: str,
        icon: str,
        variant: YarpUnitVariant,
    ) -> "CustomUnit":
        return CustomUnit(id=id, model=model, name=name, icon=icon, variant=variant)

    @staticmethod
    def new_stock(id: UnitIdentifier, model: str) -> "StockUnit":
        return StockUnit(id=id, model=model)


@dataclass
class CustomUnit(YarpUnit):
    """
    An entity defined by the map author.

    Attributes:
        name: Display name
        icon: Icon path (empty for shops)
        variant: Kind of entity and its kind-specific data
    """
    name: str = ""
    icon: str = ""
    variant: YarpUnitVariant = field(default_factory=UnitVariant)

    @property
    def kind(self) -> str:
        return self.variant.kind

    def liquid_value(self) -> dict[str, Any]:
        value = {
            "constant": self.id.constant(),
            "model": self.model,
            "name": self.name,
            "icon": self.icon,
        }
        value.update(self.variant.liquid_fields())
        return value

    def liquid_insert_into_context(self, context: dict[str, list]) -> None:
        context[self.variant.context_key].append(self.liquid_value())


@dataclass
class StockUnit(YarpUnit):
    """
    Passthrough record for an existing engine entity.

    Stock units contribute nothing to the entity lists of the context.
    """

    @property
    def kind(self) -> str:
        return "stock"
