"""
In-memory source tree consumed by the transformation engine.

The tree is normally produced by an upstream parser. This module provides the
typed node classes, dictionary constructors for them, and a YAML reader. Only
the shape of the data is checked here; the tree is assumed acyclic and
semantically valid.
"""
# [CTX:PBI-1:1-4:SRC]

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


class SourceFormatError(ValueError):
    """Raised when a source node has an unrecognized shape."""


class DataUnitKind(Enum):
    """Declared kind of a custom source node."""
    UNIT = "unit"
    BUILDING = "building"
    BUILDER = "builder"


def _optional_text(data: dict[str, Any], key: str) -> str:
    """
    Read an optional string field.

    Keys that are missing or present with an empty YAML value read as "".

    Raises:
        SourceFormatError: If the value is not a string
    """
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise SourceFormatError(
            f"Field {key!r} must be a string, got {type(value).__name__} {value!r}; "
            f"quote it in the source file"
        )
    return value


def _code(value: Any, field_name: str) -> str:
    """
    Check that a uid or raw code was read as a string.

    YAML types unquoted scalars such as 0123 or 1e3 as numbers, which would
    change the code when converted back to text.

    Raises:
        SourceFormatError: If the value is not a string
    """
    if not isinstance(value, str):
        raise SourceFormatError(
            f"{field_name} {value!r} was read as {type(value).__name__}, not text; "
            f"quote it in the source file"
        )
    return value


@dataclass
class YarpDataUnit:
    """Base class for entity nodes in the source tree."""

    model: str

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "YarpDataUnit":
        """
        Create a stock or custom node from a dictionary.

        Nodes carrying a ``rawid`` key are stock references; all others are
        custom definitions.
        """
        if "rawid" in data:
            return StockDataUnit.from_dict(data)
        return CustomDataUnit.from_dict(data)


@dataclass
class StockDataUnit(YarpDataUnit):
    """Reference to an existing engine entity."""

    rawid: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StockDataUnit":
        return cls(
            rawid=_code(data["rawid"], "rawid"),
            model=_optional_text(data, "model"),
        )


@dataclass
class CustomDataUnit(YarpDataUnit):
    """
    Entity defined by the map author.

    Attributes:
        uid: User-chosen identifier
        name: Display name
        icon: Icon path
        kind: Declared kind of the entity
        built: Nested nodes built by this entity (builders only)
    """
    uid: str = ""
    name: str = ""
    icon: str = ""
    kind: DataUnitKind = DataUnitKind.UNIT
    built: list[YarpDataUnit] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CustomDataUnit":
        kind_name = data.get("kind", DataUnitKind.UNIT.value)
        try:
            kind = DataUnitKind(kind_name)
        except ValueError:
            raise SourceFormatError(
                f"Unit {data.get('uid')!r} has unknown kind {kind_name!r}"
            )

        built_data = data.get("built") or []
        if built_data and kind is not DataUnitKind.BUILDER:
            raise SourceFormatError(
                f"Unit {data.get('uid')!r} lists built units but is not a builder"
            )

        return cls(
            uid=_code(data["uid"], "uid"),
            name=_optional_text(data, "name"),
            model=_optional_text(data, "model"),
            icon=_optional_text(data, "icon"),
            kind=kind,
            built=[YarpDataUnit.from_dict(node) for node in built_data],
        )


@dataclass
class YarpDataShop:
    """A shop definition and the nodes it sells."""

    uid: str
    name: str = ""
    model: str = ""
    scale: float = 1.0
    sold: list[YarpDataUnit] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "YarpDataShop":
        return cls(
            uid=_code(data["uid"], "uid"),
            name=_optional_text(data, "name"),
            model=_optional_text(data, "model"),
            scale=float(data.get("scale", 1.0)),
            sold=[YarpDataUnit.from_dict(node) for node in data.get("sold") or []],
        )


@dataclass
class YarpData:
    """
    Root of the source tree.

    Attributes:
        shops: Shop groupings, each an ordered list of shops
        stock_model_registry: Raw code to model path table
    """
    shops: dict[str, list[YarpDataShop]] = field(default_factory=dict)
    stock_model_registry: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "YarpData":
        shops_data = data.get("shops") or {}
        shops = {
            group: [YarpDataShop.from_dict(shop) for shop in group_shops or []]
            for group, group_shops in shops_data.items()
        }

        models_data = data.get("stock_model_registry") or {}
        stock_model_registry = {
            _code(rawid, "rawid"): _optional_text(models_data, rawid)
            for rawid in models_data
        }

        return cls(shops=shops, stock_model_registry=stock_model_registry)


def load_source(source_path: str | Path) -> YarpData:
    """
    Load a source tree from a YAML file.

    Args:
        source_path: Path to the YAML source description

    Returns:
        YarpData tree (empty if the document is empty)

    Raises:
        FileNotFoundError: If the file doesn't exist
        yaml.YAMLError: If the file is invalid YAML
        KeyError: If a node is missing a required key
        SourceFormatError: If a node has an unrecognized shape
    """
    source_path = Path(source_path)

    with open(source_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not data:
        logger.info(f"Source {source_path} is empty")
        return YarpData()

    source = YarpData.from_dict(data)
    logger.debug(
        f"Loaded {sum(len(shops) for shops in source.shops.values())} shops "
        f"and {len(source.stock_model_registry)} stock models from {source_path}"
    )
    return source
