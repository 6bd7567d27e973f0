"""
Structured telemetry for transformation and projection passes.
[CTX:PBI-1:1-6:TELEM]

This module provides structured logging capabilities for understanding:
- Which identifiers and entities a source tree produced
- Entity records silently replaced by a later definition
- How deep the built/sold nesting of a source tree goes
- What a projection pass emitted for the template stage
"""
import json
import logging
import threading
from collections import deque
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Deque, Dict, List, Optional

if TYPE_CHECKING:
    from .config import MetaConfig

logger = logging.getLogger(__name__)


class TelemetryLevel(Enum):
    """Telemetry verbosity levels."""
    INFO = "info"
    DEBUG = "debug"


class TelemetryAction(Enum):
    """Registry operations reported by telemetry."""
    REGISTER_ID = "register_id"        # Identifier appended to the id arena
    INSERT_UNIT = "insert_unit"        # New entity record
    OVERWRITE_UNIT = "overwrite_unit"  # Entity record replaced under the same id
    INSERT_MODEL = "insert_model"      # Stock model path recorded
    PROJECT = "project"                # Context projection completed


# [CTX:PBI-1:1-6:TELEM] Telemetry event structure
@dataclass
class TelemetryEvent:
    """
    A single telemetry event capturing registry or projection activity.

    Attributes:
        timestamp: ISO 8601 timestamp of event
        action: Registry operation (register_id, insert_unit, etc.)
        identifier: Code constant of the identifier involved
        variant: Entity kind (unit, building, shop, builder, stock)
        depth: Nesting depth of the source node (0 for shops and stock models)
        details: Extra key-value data (list sizes, paths)
    """
    timestamp: str
    action: str
    identifier: str = ""
    variant: Optional[str] = None
    depth: int = 0
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for logging."""
        return {k: v for k, v in asdict(self).items() if v is not None}

    def to_json(self) -> str:
        """Convert event to JSON string."""
        return json.dumps(self.to_dict(), default=str)

    def to_keyvalue(self) -> str:
        """Convert event to key=value format."""
        pairs = []
        for key, value in self.to_dict().items():
            if isinstance(value, dict):
                # Flatten nested dicts
                for subkey, subval in value.items():
                    pairs.append(f"{key}.{subkey}={subval}")
            else:
                pairs.append(f"{key}={value}")
        return " ".join(pairs)


# [CTX:PBI-1:1-6:TELEM] In-memory statistics tracker
@dataclass
class TelemetryStats:
    """
    Aggregated statistics for telemetry analysis.

    Useful for tests and build reports.
    """
    total_events: int = 0
    overwrites: int = 0
    max_depth: int = 0
    actions_by_type: Dict[str, int] = field(default_factory=dict)
    variants: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert stats to dictionary."""
        return {
            "total_events": self.total_events,
            "overwrites": self.overwrites,
            "max_depth": self.max_depth,
            "actions_by_type": self.actions_by_type,
            "variants": self.variants,
        }


# [CTX:PBI-1:1-6:TELEM] Main telemetry recorder
class TelemetryRecorder:
    """
    Records and emits structured telemetry for registry operations.

    Features:
    - Structured logging in JSON or key=value format
    - Configurable verbosity (info/debug)
    - Optional in-memory statistics collection
    - Bounded history of the most recent events
    - Thread-safe operation
    """

    def __init__(
        self,
        level: TelemetryLevel = TelemetryLevel.INFO,
        format_json: bool = True,
        collect_stats: bool = False,
        max_events: int = 1000,
    ):
        """
        Initialize telemetry recorder.

        Args:
            level: Logging verbosity level
            format_json: If True, log as JSON; otherwise use key=value
            collect_stats: If True, collect in-memory statistics
            max_events: Number of recent events kept in history; older
                        events are dropped (stats still count them)
        """
        self.level = level
        self.format_json = format_json
        self.collect_stats = collect_stats

        self._stats = TelemetryStats()
        self._stats_lock = threading.Lock()

        # Event history (for testing and reports), oldest dropped first
        self._events: Deque[TelemetryEvent] = deque(maxlen=max_events)
        self._events_lock = threading.Lock()

    @classmethod
    def from_config(cls, config: "MetaConfig") -> "TelemetryRecorder":
        """Create a recorder from the telemetry section of a config."""
        return cls(
            level=TelemetryLevel(config.telemetry.level),
            format_json=config.telemetry.format_json,
            collect_stats=config.telemetry.collect_stats,
        )

    def record(self, event: TelemetryEvent) -> None:
        """
        Record a telemetry event.

        Args:
            event: Event to record
        """
        if self.format_json:
            log_message = f"[CTX:PBI-1:1-6:TELEM] {event.to_json()}"
        else:
            log_message = f"[CTX:PBI-1:1-6:TELEM] {event.to_keyvalue()}"

        if self.level == TelemetryLevel.DEBUG:
            logger.debug(log_message)
        elif event.action in (
            TelemetryAction.OVERWRITE_UNIT.value,
            TelemetryAction.PROJECT.value,
        ):
            # Only replaced records and pass summaries are logged at INFO level
            logger.info(log_message)
        else:
            logger.debug(log_message)

        if self.collect_stats:
            with self._stats_lock:
                self._stats.total_events += 1
                self._stats.max_depth = max(self._stats.max_depth, event.depth)

                if event.action == TelemetryAction.OVERWRITE_UNIT.value:
                    self._stats.overwrites += 1

                self._stats.actions_by_type[event.action] = (
                    self._stats.actions_by_type.get(event.action, 0) + 1
                )

                if event.variant:
                    self._stats.variants[event.variant] = (
                        self._stats.variants.get(event.variant, 0) + 1
                    )

        with self._events_lock:
            self._events.append(event)

    def get_stats(self) -> TelemetryStats:
        """Get current statistics snapshot."""
        with self._stats_lock:
            return TelemetryStats(
                total_events=self._stats.total_events,
                overwrites=self._stats.overwrites,
                max_depth=self._stats.max_depth,
                actions_by_type=self._stats.actions_by_type.copy(),
                variants=self._stats.variants.copy(),
            )

    def reset_stats(self) -> None:
        """Reset statistics."""
        with self._stats_lock:
            self._stats = TelemetryStats()

    def get_events(self) -> List[TelemetryEvent]:
        """Get the retained events, oldest first (for testing)."""
        with self._events_lock:
            return list(self._events)

    def clear_events(self) -> None:
        """Clear event history."""
        with self._events_lock:
            self._events.clear()


# [CTX:PBI-1:1-6:TELEM] Global telemetry recorder instance
_global_recorder: Optional[TelemetryRecorder] = None
_recorder_lock = threading.Lock()


def get_recorder() -> TelemetryRecorder:
    """
    Get the global telemetry recorder instance.

    Creates a default recorder if none exists.
    """
    global _global_recorder

    if _global_recorder is None:
        with _recorder_lock:
            if _global_recorder is None:
                _global_recorder = TelemetryRecorder()

    return _global_recorder


def set_recorder(recorder: TelemetryRecorder) -> None:
    """
    Set the global telemetry recorder instance.

    Args:
        recorder: Recorder instance to use globally
    """
    global _global_recorder

    with _recorder_lock:
        _global_recorder = recorder


def create_event(
    action: TelemetryAction,
    identifier: str = "",
    variant: Optional[str] = None,
    depth: int = 0,
    details: Optional[Dict[str, Any]] = None,
) -> TelemetryEvent:
    """
    Helper to create a telemetry event with current timestamp.

    Args:
        action: Registry operation
        identifier: Code constant of the identifier involved
        variant: Entity kind
        depth: Nesting depth of the source node
        details: Extra key-value data

    Returns:
        TelemetryEvent ready for recording
    """
    from datetime import datetime, timezone

    return TelemetryEvent(
        timestamp=datetime.now(timezone.utc).isoformat(),
        action=action.value,
        identifier=identifier,
        variant=variant,
        depth=depth,
        details=details or {},
    )
