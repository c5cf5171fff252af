"""
Configuration management for modegate.
Handles reading policy settings and custom mode definitions from JSON files
and environment variables. Configuration is only ever read, never written.
"""
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from .constants import (
    CONFIG_FILE,
    CUSTOM_MODES_ENV_VAR,
    CUSTOM_MODES_FILE,
    DEFAULT_MODE,
    MODE_ENV_VAR,
)
from .modes.schema import ModeConfig, ModeValidationError, validate_mode_config


logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when configuration parsing or validation fails."""

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.line = line
        self.column = column

        if line is not None and column is not None:
            full_message = f"{message} (line {line}, column {column})"
        elif line is not None:
            full_message = f"{message} (line {line})"
        else:
            full_message = message

        super().__init__(full_message)


@dataclass
class PolicyConfig:
    """Policy settings.

    Attributes:
        default_mode: Mode slug used when none is given.
        custom_modes_file: Path of a JSON file with custom mode definitions.
        tool_requirements: Per-tool availability; False disables a tool.
    """
    default_mode: str = DEFAULT_MODE
    custom_modes_file: Optional[str] = None
    tool_requirements: dict[str, bool] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PolicyConfig":
        """Create a PolicyConfig from a dictionary.

        Raises:
            ConfigError: If a field has the wrong type.
        """
        default_mode = data.get("default_mode", DEFAULT_MODE)
        if not isinstance(default_mode, str) or not default_mode:
            raise ConfigError("Field 'default_mode' must be a non-empty string")

        custom_modes_file = data.get("custom_modes_file")
        if custom_modes_file is not None and not isinstance(custom_modes_file, str):
            raise ConfigError("Field 'custom_modes_file' must be a string")

        requirements = data.get("tool_requirements", {})
        if not isinstance(requirements, dict):
            raise ConfigError("Field 'tool_requirements' must be an object")
        for tool, enabled in requirements.items():
            if not isinstance(enabled, bool):
                raise ConfigError(f"Tool requirement '{tool}' must be true or false")

        return cls(
            default_mode=default_mode,
            custom_modes_file=custom_modes_file,
            tool_requirements=dict(requirements),
        )


def _parse_json(json_str: str) -> Any:
    try:
        return json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON: {e.msg}", line=e.lineno, column=e.colno) from e


def import_custom_modes(json_str: str) -> list[ModeConfig]:
    """Parse custom mode definitions from a JSON string.

    Accepts a single mode object, an array of mode objects, or an object
    with a "custom_modes" array. Entries that fail validation are skipped
    and logged.

    Args:
        json_str: JSON text to parse.

    Returns:
        The valid custom modes, in file order.

    Raises:
        ConfigError: If the JSON is malformed (with line and column).
        ModeValidationError: If the top-level structure is not a mode
            object or an array of them.
    """
    data = _parse_json(json_str)

    if isinstance(data, dict) and "custom_modes" in data:
        data = data["custom_modes"]

    if isinstance(data, dict):
        modes_data = [data]
    elif isinstance(data, list):
        modes_data = data
    else:
        raise ModeValidationError(
            f"Invalid mode file format: expected object or array, got {type(data).__name__}"
        )

    modes: list[ModeConfig] = []
    errors: list[str] = []

    for i, mode_data in enumerate(modes_data):
        is_valid, validation_errors = validate_mode_config(mode_data)
        if not is_valid:
            errors.append(f"Mode {i}: {'; '.join(validation_errors)}")
            continue
        modes.append(ModeConfig.from_dict(mode_data))

    if errors:
        logger.warning(f"Skipped invalid custom modes: {errors}")

    return modes


def load_custom_modes(path: Path) -> list[ModeConfig]:
    """Load custom modes from a JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ConfigError: If the file can't be read or contains invalid JSON.
        ModeValidationError: If the top-level structure is invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Mode file not found: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read mode file {path}: {e}") from e

    modes = import_custom_modes(content)
    logger.info(f"Loaded {len(modes)} custom modes from {path}")
    return modes


class ConfigManager:
    """
    Reads policy configuration from a JSON file and environment variables.

    Environment variables take precedence over config file values.
    """

    def __init__(
        self,
        config_file: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._config_file = Path(config_file) if config_file else CONFIG_FILE
        self._environ = os.environ if environ is None else environ
        self._config = PolicyConfig()
        self._load_config()
        self._load_env_vars()

    def _load_config(self) -> None:
        """Load configuration from the JSON file, if present."""
        if not self._config_file.exists():
            return

        try:
            data = json.loads(self._config_file.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ConfigError("Configuration must be a JSON object")
            self._config = PolicyConfig.from_dict(data)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, ConfigError) as e:
            logger.warning(f"Failed to load config file {self._config_file}: {e}")
            self._config = PolicyConfig()

    def _load_env_vars(self) -> None:
        """Apply environment variable overrides."""
        mode = self._environ.get(MODE_ENV_VAR, "").strip()
        if mode:
            self._config.default_mode = mode

        custom_modes_file = self._environ.get(CUSTOM_MODES_ENV_VAR, "").strip()
        if custom_modes_file:
            self._config.custom_modes_file = custom_modes_file

    @property
    def config(self) -> PolicyConfig:
        """Get the current configuration."""
        return self._config

    @property
    def default_mode(self) -> str:
        """Mode slug used when none is given."""
        return self._config.default_mode

    @property
    def tool_requirements(self) -> dict[str, bool]:
        """A copy of the configured tool requirements."""
        return dict(self._config.tool_requirements)

    @property
    def custom_modes_path(self) -> Optional[Path]:
        """Path of the custom modes file.

        Falls back to the default location when that file exists.
        """
        if self._config.custom_modes_file:
            return Path(self._config.custom_modes_file).expanduser()
        if CUSTOM_MODES_FILE.exists():
            return CUSTOM_MODES_FILE
        return None

    def get_custom_modes(self) -> list[ModeConfig]:
        """Load the configured custom modes.

        Returns:
            The custom modes, or an empty list when none are configured.

        Raises:
            FileNotFoundError: If a configured custom modes file is missing.
            ConfigError: If the file can't be read or contains invalid JSON.
        """
        path = self.custom_modes_path
        if path is None:
            return []
        return load_custom_modes(path)

    def reload(self) -> None:
        """Reload configuration from file and environment."""
        self._config = PolicyConfig()
        self._load_config()
        self._load_env_vars()


_config_manager: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager
