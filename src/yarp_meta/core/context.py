"""
Context projector.

Turns populated registries into the value handed to the Liquid templates that
generate the constant definitions. Field names and the code-literal join
syntax are shared with the template text and must not change.
"""
# [CTX:PBI-1:1-8:CTX]

import logging
from typing import Any, Optional

from .registries import Registries
from .telemetry import TelemetryAction, TelemetryRecorder, create_event, get_recorder

logger = logging.getLogger(__name__)

CONTEXT_KEYS = ("units", "buildings", "shops", "builders", "uids", "models")

LiquidContext = dict[str, list[dict[str, Any]]]


def empty_context() -> LiquidContext:
    """Return a context with every list present and empty."""
    return {key: [] for key in CONTEXT_KEYS}


def liquid_context(
    registries: Registries,
    recorder: Optional[TelemetryRecorder] = None,
) -> LiquidContext:
    """
    Project registries into the template context.

    Args:
        registries: Registries produced by a transformation pass
        recorder: Telemetry recorder (defaults to the global recorder)

    Returns:
        Dict with units, buildings, shops, builders, uids and models lists,
        each in registry iteration order
    """
    context = empty_context()

    for _, unit in registries.unit:
        unit.liquid_insert_into_context(context)

    for id in registries.id:
        if id.is_uid():
            context["uids"].append({
                "constant": id.constant(),
                "uid": id.uid(),
            })

    for id, model in registries.model:
        context["models"].append({
            "constant": id.constant(),
            "path": model,
        })

    sizes = {key: len(values) for key, values in context.items()}
    (recorder or get_recorder()).record(create_event(
        action=TelemetryAction.PROJECT,
        details=sizes,
    ))
    logger.info(
        "Projected context: " + ", ".join(f"{count} {key}" for key, count in sizes.items())
    )
    return context
