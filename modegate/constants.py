"""
Constants and configuration defaults for modegate.
"""
from pathlib import Path
from typing import Final

APP_NAME: Final[str] = "modegate"
APP_VERSION: Final[str] = "1.0.0"
APP_DESCRIPTION: Final[str] = "Mode-based tool authorization for agentic assistants"

CONFIG_DIR: Final[Path] = Path.home() / ".modegate"
CONFIG_FILE: Final[Path] = CONFIG_DIR / "config.json"
CUSTOM_MODES_FILE: Final[Path] = CONFIG_DIR / "custom_modes.json"

DEFAULT_MODE: Final[str] = "code"

# Environment overrides
MODE_ENV_VAR: Final[str] = "MODEGATE_MODE"
CUSTOM_MODES_ENV_VAR: Final[str] = "MODEGATE_CUSTOM_MODES"

DENIED_MESSAGE_TEMPLATE: Final[str] = 'Tool "{tool}" is not allowed in {mode} mode.'
