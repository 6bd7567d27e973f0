"""Core identifier model, registries, transformation and context projection."""

from yarp_meta.core.config import (
    ConfigValidationError,
    MetaConfig,
    TelemetryConfig,
    get_default_config,
    load_config,
    validate_config,
)
from yarp_meta.core.context import CONTEXT_KEYS, empty_context, liquid_context
from yarp_meta.core.identifiers import (
    IdentifierKind,
    UnitIdentifier,
    WrongVariantError,
    to_shouty_snake_case,
)
from yarp_meta.core.registries import IdRegistry, ModelRegistry, Registries, UnitRegistry
from yarp_meta.core.source import (
    CustomDataUnit,
    DataUnitKind,
    SourceFormatError,
    StockDataUnit,
    YarpData,
    YarpDataShop,
    YarpDataUnit,
    load_source,
)
from yarp_meta.core.transform import (
    SourceDepthError,
    transform_yarp_data,
    transform_yarp_data_unit,
)
from yarp_meta.core.units import (
    BuilderVariant,
    BuildingVariant,
    CustomUnit,
    StockUnit,
    UnitShopVariant,
    UnitVariant,
    YarpUnit,
    YarpUnitVariant,
)

__all__ = [
    # config
    "ConfigValidationError",
    "MetaConfig",
    "TelemetryConfig",
    "get_default_config",
    "load_config",
    "validate_config",
    # context
    "CONTEXT_KEYS",
    "empty_context",
    "liquid_context",
    # identifiers
    "IdentifierKind",
    "UnitIdentifier",
    "WrongVariantError",
    "to_shouty_snake_case",
    # registries
    "IdRegistry",
    "ModelRegistry",
    "Registries",
    "UnitRegistry",
    # source
    "CustomDataUnit",
    "DataUnitKind",
    "SourceFormatError",
    "StockDataUnit",
    "YarpData",
    "YarpDataShop",
    "YarpDataUnit",
    "load_source",
    # transform
    "SourceDepthError",
    "transform_yarp_data",
    "transform_yarp_data_unit",
    # units
    "BuilderVariant",
    "BuildingVariant",
    "CustomUnit",
    "StockUnit",
    "UnitShopVariant",
    "UnitVariant",
    "YarpUnit",
    "YarpUnitVariant",
]
