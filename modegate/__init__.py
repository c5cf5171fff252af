"""
modegate - Mode-based tool authorization for agentic assistants.
"""
from .constants import APP_NAME, APP_VERSION, APP_DESCRIPTION
from .modes import ModeConfig, ModeRegistry, ModeValidationError, UnknownModeError
from .tools import ToolGroup, ToolGroupRegistry, ToolName, UnknownGroupError
from .validator import (
    ModeValidator,
    PermissionDeniedError,
    get_all_modes,
    get_allowed_tools,
    get_mode_config,
    is_tool_allowed_for_mode,
    validate_tool_use,
)

__version__ = APP_VERSION
__all__ = [
    'APP_NAME',
    'APP_VERSION',
    'APP_DESCRIPTION',
    'ModeConfig',
    'ModeRegistry',
    'ModeValidationError',
    'UnknownModeError',
    'ToolGroup',
    'ToolGroupRegistry',
    'ToolName',
    'UnknownGroupError',
    'ModeValidator',
    'PermissionDeniedError',
    'get_all_modes',
    'get_allowed_tools',
    'get_mode_config',
    'is_tool_allowed_for_mode',
    'validate_tool_use',
]
