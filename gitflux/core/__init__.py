"""gitflux core — shared types, enums, and configuration.

Import the most commonly used types from here for convenience:

    from gitflux.core import Compatibility, Derivation, get_config
"""

from gitflux.core.config import ConfigError, GitFluxConfig, get_config, set_config
from gitflux.core.types import (
    DERIVATION_SCHEMA,
    CompatDecision,
    Compatibility,
    Derivation,
    GitFluxError,
    NoCompat,
    RequireCompat,
    decision_from_dict,
)

__all__ = [
    "DERIVATION_SCHEMA",
    "CompatDecision",
    "Compatibility",
    "ConfigError",
    "Derivation",
    "GitFluxConfig",
    "GitFluxError",
    "NoCompat",
    "RequireCompat",
    "decision_from_dict",
    "get_config",
    "set_config",
]
