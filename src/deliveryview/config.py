"""
Configuration for deliveryview.

Caps the only unbounded-cost vectors of the core (walk depth, causation
chain depth, history scan length), with support for loading from
environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from deliveryview.errors import ConfigurationError

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class ViewConfig:
    """Traversal and correlation limits.

    Environment Variables:
        DELIVERYVIEW_MAX_TOPOLOGY_DEPTH: Max trigger-graph walk depth (default: 256)
        DELIVERYVIEW_MAX_CHAIN_DEPTH: Max causation links followed (default: 64)
        DELIVERYVIEW_MAX_HISTORY_WINDOW: Executions scanned per job when
            correlating (default: 200, 0 for unbounded)
        DELIVERYVIEW_REJECT_CYCLES: Raise on trigger cycles instead of
            skipping the back edge (default: true)
        DELIVERYVIEW_INSTANCE_COUNT: Instances shown by default (default: 3)

    Attributes:
        max_topology_depth: Deepest trigger path the extractor will walk
        max_chain_depth: Most upstream links the tracer will follow
        max_history_window: Executions per job the correlator scans
        reject_cycles: Whether a trigger cycle is an error
        default_instance_count: Instance count used when a caller gives none
    """

    max_topology_depth: int = 256
    max_chain_depth: int = 64
    max_history_window: int | None = 200
    reject_cycles: bool = True
    default_instance_count: int = 3

    def __post_init__(self) -> None:
        if self.max_history_window == 0:
            self.max_history_window = None

    @classmethod
    def from_env(cls) -> ViewConfig:
        """Load configuration from environment variables with defaults.

        Raises:
            ConfigurationError: If a variable is not a valid number
        """
        try:
            config = cls(
                max_topology_depth=int(os.getenv("DELIVERYVIEW_MAX_TOPOLOGY_DEPTH", "256")),
                max_chain_depth=int(os.getenv("DELIVERYVIEW_MAX_CHAIN_DEPTH", "64")),
                max_history_window=int(os.getenv("DELIVERYVIEW_MAX_HISTORY_WINDOW", "200")),
                reject_cycles=os.getenv("DELIVERYVIEW_REJECT_CYCLES", "true").strip().lower() in _TRUE_VALUES,
                default_instance_count=int(os.getenv("DELIVERYVIEW_INSTANCE_COUNT", "3")),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid deliveryview environment setting: {e}", cause=e) from e
        config.validate()
        return config

    def validate(self) -> ViewConfig:
        """Check limits are positive.

        Raises:
            ConfigurationError: On a zero or negative limit
        """
        if self.max_topology_depth < 1:
            raise ConfigurationError(f"max_topology_depth must be >= 1, got {self.max_topology_depth}")
        if self.max_chain_depth < 1:
            raise ConfigurationError(f"max_chain_depth must be >= 1, got {self.max_chain_depth}")
        if self.max_history_window is not None and self.max_history_window < 0:
            raise ConfigurationError(f"max_history_window must be >= 0, got {self.max_history_window}")
        if self.default_instance_count < 1:
            raise ConfigurationError(f"default_instance_count must be >= 1, got {self.default_instance_count}")
        return self


# Default config (loaded lazily)
_default_view_config: ViewConfig | None = None


def get_view_config() -> ViewConfig:
    """Get the default ViewConfig, loading from environment on first call."""
    global _default_view_config
    if _default_view_config is None:
        _default_view_config = ViewConfig.from_env()
    return _default_view_config


def reset_view_config() -> None:
    """Reset the default config. Useful for testing."""
    global _default_view_config
    _default_view_config = None
