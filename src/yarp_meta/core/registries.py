"""
Registries populated by a transformation pass.

All registries preserve insertion order, which is observable in the projected
template context. Nothing is ever removed from a registry.
"""
# [CTX:PBI-1:1-3:REG]

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

from .identifiers import UnitIdentifier
from .units import YarpUnit

logger = logging.getLogger(__name__)


class IdRegistry:
    """
    Append-only arena of identifiers.

    The position of an identifier in the arena is its handle. Inserting an
    identifier equal to an existing one still allocates a new slot.
    """

    def __init__(self):
        self._slab: list[UnitIdentifier] = []

    def insert(self, id: UnitIdentifier) -> UnitIdentifier:
        """
        Store an identifier.

        Args:
            id: Identifier to store

        Returns:
            The stored identifier, value-equal to the argument
        """
        self._slab.append(id)
        return self._slab[-1]

    def get(self, handle: int) -> UnitIdentifier:
        """Return the identifier stored at handle."""
        return self._slab[handle]

    def __iter__(self) -> Iterator[UnitIdentifier]:
        return iter(self._slab)

    def __len__(self) -> int:
        return len(self._slab)


class UnitRegistry:
    """Ordered map from identifier to entity record, last write wins."""

    def __init__(self):
        self.registry: dict[UnitIdentifier, YarpUnit] = {}

    def insert(self, unit: YarpUnit) -> bool:
        """
        Insert an entity keyed by its identifier.

        An existing record under the same identifier is replaced in place.

        Returns:
            True if an existing record was replaced
        """
        replaced = unit.id in self.registry
        if replaced:
            logger.debug(f"Replacing entity record for {unit.id.constant()}")
        self.registry[unit.id] = unit
        return replaced

    def get(self, id: UnitIdentifier) -> YarpUnit:
        """
        Return the record for an identifier.

        Raises:
            KeyError: If the identifier was never inserted
        """
        return self.registry[id]

    def __contains__(self, id: UnitIdentifier) -> bool:
        return id in self.registry

    def __iter__(self) -> Iterator[tuple[UnitIdentifier, YarpUnit]]:
        return iter(self.registry.items())

    def __len__(self) -> int:
        return len(self.registry)


class ModelRegistry:
    """Ordered map from stock identifier to asset model path."""

    def __init__(self):
        self.registry: dict[UnitIdentifier, str] = {}

    def insert(self, id: UnitIdentifier, model: str) -> None:
        self.registry[id] = model

    def __iter__(self) -> Iterator[tuple[UnitIdentifier, str]]:
        return iter(self.registry.items())

    def __len__(self) -> int:
        return len(self.registry)


@dataclass
class Registries:
    """State threaded through one transformation pass."""

    id: IdRegistry = field(default_factory=IdRegistry)
    unit: UnitRegistry = field(default_factory=UnitRegistry)
    model: ModelRegistry = field(default_factory=ModelRegistry)
