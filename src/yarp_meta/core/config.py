"""
Configuration module for transformation passes.

This module provides configuration loading and validation for the recursion
guard of the transformation engine and for telemetry output.
"""
# [CTX:PBI-1:1-5:CFG]

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

TELEMETRY_LEVELS = ("info", "debug")

# Each nesting level costs a few interpreter frames; stay well under the
# default recursion limit.
MAX_DEPTH_LIMIT = 200


class ConfigValidationError(ValueError):
    """Raised when a configuration value is invalid."""


@dataclass
class TelemetryConfig:
    """Configuration for telemetry output."""

    level: str = "info"
    format_json: bool = True
    collect_stats: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TelemetryConfig":
        """Create TelemetryConfig from dictionary."""
        return cls(
            level=data.get("level", "info"),
            format_json=data.get("format_json", True),
            collect_stats=data.get("collect_stats", False),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.level,
            "format_json": self.format_json,
            "collect_stats": self.collect_stats,
        }


@dataclass
class MetaConfig:
    """
    Configuration for a transformation pass.

    Attributes:
        max_depth: Maximum nesting of built/sold nodes before the source tree
                   is rejected as cyclic or malformed
        telemetry: Telemetry output settings
    """

    max_depth: int = 64
    telemetry: TelemetryConfig = field(default_factory=TelemetryConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MetaConfig":
        """Create MetaConfig from dictionary."""
        telemetry_data = data.get("telemetry", {})
        telemetry = TelemetryConfig.from_dict(telemetry_data) if telemetry_data else TelemetryConfig()

        return cls(
            max_depth=data.get("max_depth", 64),
            telemetry=telemetry,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert MetaConfig to dictionary."""
        return {
            "max_depth": self.max_depth,
            "telemetry": self.telemetry.to_dict(),
        }


def get_default_config() -> MetaConfig:
    """Return a fresh default configuration."""
    return MetaConfig()


def load_config(config_path: str | Path | None = None) -> MetaConfig:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        MetaConfig with validated settings

    Raises:
        yaml.YAMLError: If config file is invalid YAML
        ConfigValidationError: If config validation fails
    """
    if config_path is None:
        config_path = Path(__file__).parents[3] / "config" / "yarp_meta.yml"
    else:
        config_path = Path(config_path)

    if not config_path.exists():
        # Return default config if file doesn't exist
        return get_default_config()

    with open(config_path, "r") as f:
        data = yaml.safe_load(f)

    if not data:
        return get_default_config()

    config = MetaConfig.from_dict(data)
    validate_config(config)
    return config


def validate_config(config: MetaConfig) -> None:
    """
    Validate configuration.

    Args:
        config: Configuration to validate

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    if not isinstance(config.max_depth, int) or isinstance(config.max_depth, bool):
        raise ConfigValidationError("max_depth must be an integer")

    if config.max_depth <= 0:
        raise ConfigValidationError("max_depth must be positive")

    if config.max_depth > MAX_DEPTH_LIMIT:
        raise ConfigValidationError(f"max_depth must be at most {MAX_DEPTH_LIMIT}")

    if config.telemetry.level not in TELEMETRY_LEVELS:
        raise ConfigValidationError(
            f"telemetry level must be one of {', '.join(TELEMETRY_LEVELS)}, "
            f"got {config.telemetry.level!r}"
        )

    if not isinstance(config.telemetry.format_json, bool):
        raise ConfigValidationError("telemetry format_json must be a boolean")

    if not isinstance(config.telemetry.collect_stats, bool):
        raise ConfigValidationError("telemetry collect_stats must be a boolean")
