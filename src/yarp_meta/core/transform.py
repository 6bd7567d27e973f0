"""
Transformation engine.

Walks a source tree depth-first and populates a fresh Registries value.
Children are always registered before the parent that references them, so a
shop or builder only ever stores identifiers that are already in the entity
registry.

The source tree must be acyclic along built/sold edges. Nesting deeper than
the configured max_depth raises SourceDepthError instead of exhausting the
interpreter stack.
"""
# [CTX:PBI-1:1-7:XFORM]

import logging
from typing import Optional

from .config import MetaConfig, get_default_config, validate_config
from .identifiers import UnitIdentifier
from .registries import Registries
from .source import CustomDataUnit, DataUnitKind, StockDataUnit, YarpData, YarpDataUnit
from .telemetry import TelemetryAction, TelemetryRecorder, create_event, get_recorder
from .units import BuilderVariant, BuildingVariant, UnitVariant, YarpUnit, YarpUnitVariant

logger = logging.getLogger(__name__)


class SourceDepthError(ValueError):
    """Raised when source nodes are nested deeper than the configured limit."""

    def __init__(self, node_name: str, depth: int, max_depth: int):
        self.node_name = node_name
        self.depth = depth
        self.max_depth = max_depth
        super().__init__(
            f"Source node {node_name!r} is nested {depth} levels deep "
            f"(max_depth={max_depth}); the source tree is probably cyclic"
        )


def _node_name(unit: YarpDataUnit) -> str:
    if isinstance(unit, StockDataUnit):
        return unit.rawid
    if isinstance(unit, CustomDataUnit):
        return unit.uid
    return type(unit).__name__


def _register_id(
    registries: Registries,
    id: UnitIdentifier,
    depth: int,
    recorder: TelemetryRecorder,
) -> UnitIdentifier:
    """Append an identifier to the id arena and report it."""
    id = registries.id.insert(id)
    recorder.record(create_event(
        action=TelemetryAction.REGISTER_ID,
        identifier=id.constant(),
        depth=depth,
    ))
    return id


def _insert_unit(
    registries: Registries,
    unit: YarpUnit,
    depth: int,
    recorder: TelemetryRecorder,
) -> None:
    """Insert an entity record and report it, flagging replaced records."""
    replaced = registries.unit.insert(unit)
    action = TelemetryAction.OVERWRITE_UNIT if replaced else TelemetryAction.INSERT_UNIT
    recorder.record(create_event(
        action=action,
        identifier=unit.id.constant(),
        variant=unit.kind,
        depth=depth,
    ))


def _variant_for(
    unit: CustomDataUnit,
    registries: Registries,
    depth: int,
    max_depth: int,
    recorder: TelemetryRecorder,
) -> YarpUnitVariant:
    if unit.kind is DataUnitKind.BUILDER:
        built_ids = [
            transform_yarp_data_unit(child, registries, depth + 1, max_depth, recorder)
            for child in unit.built
        ]
        return BuilderVariant(built_ids=built_ids)
    if unit.kind is DataUnitKind.BUILDING:
        return BuildingVariant()
    return UnitVariant()


def transform_yarp_data_unit(
    unit: YarpDataUnit,
    registries: Registries,
    depth: int = 0,
    max_depth: Optional[int] = None,
    recorder: Optional[TelemetryRecorder] = None,
) -> UnitIdentifier:
    """
    Register one source node and everything nested below it.

    Args:
        unit: Custom or stock source node
        registries: Registries to populate
        depth: Nesting depth of the node
        max_depth: Nesting limit (defaults to the default config)
        recorder: Telemetry recorder (defaults to the global recorder)

    Returns:
        Identifier of the registered node

    Raises:
        SourceDepthError: If depth exceeds max_depth
        TypeError: If the node is neither custom nor stock
    """
    if max_depth is None:
        max_depth = get_default_config().max_depth
    recorder = recorder or get_recorder()

    if depth > max_depth:
        raise SourceDepthError(_node_name(unit), depth, max_depth)

    if isinstance(unit, CustomDataUnit):
        variant = _variant_for(unit, registries, depth, max_depth, recorder)

        id = _register_id(registries, UnitIdentifier.new_custom(unit.uid), depth, recorder)
        yarp_unit = YarpUnit.new_with_variant(id, unit.name, unit.model, unit.icon, variant)
        _insert_unit(registries, yarp_unit, depth, recorder)
        return id

    if isinstance(unit, StockDataUnit):
        id = _register_id(registries, UnitIdentifier.new_stock(unit.rawid), depth, recorder)
        _insert_unit(registries, YarpUnit.new_stock(id, unit.model), depth, recorder)
        return id

    raise TypeError(f"Unsupported source node type: {type(unit).__name__}")


def transform_yarp_data(
    data: YarpData,
    config: Optional[MetaConfig] = None,
    recorder: Optional[TelemetryRecorder] = None,
) -> Registries:
    """
    Build registries from a source tree.

    Shops are registered after the units they sell. Stock model paths are
    registered afterwards, independently of unit data.

    Args:
        data: Source tree
        config: Pass configuration (defaults to the default config)
        recorder: Telemetry recorder (defaults to the global recorder)

    Returns:
        Populated Registries

    Raises:
        ConfigValidationError: If config is invalid
        SourceDepthError: If nodes are nested deeper than config.max_depth
    """
    config = config or get_default_config()
    validate_config(config)
    recorder = recorder or get_recorder()
    registries = Registries()

    for group, unit_shops in data.shops.items():
        logger.debug(f"Transforming shop group {group!r} ({len(unit_shops)} shops)")

        for unit_shop in unit_shops:
            sold_ids = [
                transform_yarp_data_unit(unit, registries, 1, config.max_depth, recorder)
                for unit in unit_shop.sold
            ]

            id = _register_id(registries, UnitIdentifier.new_custom(unit_shop.uid), 0, recorder)
            yarp_unit = YarpUnit.new_shop(
                id,
                unit_shop.name,
                unit_shop.model,
                sold_ids,
                unit_shop.scale,
            )
            _insert_unit(registries, yarp_unit, 0, recorder)

    for rawid, model in data.stock_model_registry.items():
        id = _register_id(registries, UnitIdentifier.new_stock(rawid), 0, recorder)
        registries.model.insert(id, model)
        recorder.record(create_event(
            action=TelemetryAction.INSERT_MODEL,
            identifier=id.constant(),
            details={"path": model},
        ))

    logger.info(
        f"Transformed source into {len(registries.id)} identifiers, "
        f"{len(registries.unit)} entities and {len(registries.model)} stock models"
    )
    return registries
