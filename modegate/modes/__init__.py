"""
Mode management module.

Provides mode definitions, the built-in mode registry, and resolution of
custom mode overrides.
"""

from .schema import (
    ModeConfig,
    ModeValidationError,
    MODE_SCHEMA,
    validate_mode_config,
)
from .registry import ModeRegistry, UnknownModeError, get_mode_registry
from .builtin import (
    CODE_MODE,
    ARCHITECT_MODE,
    ASK_MODE,
    BUILTIN_MODES,
    get_builtin_modes,
    get_builtin_mode,
)

__all__ = [
    # Schema
    "ModeConfig",
    "ModeValidationError",
    "MODE_SCHEMA",
    "validate_mode_config",
    # Registry
    "ModeRegistry",
    "UnknownModeError",
    "get_mode_registry",
    # Built-in modes
    "CODE_MODE",
    "ARCHITECT_MODE",
    "ASK_MODE",
    "BUILTIN_MODES",
    "get_builtin_modes",
    "get_builtin_mode",
]
