"""
Tool group module.

Provides the tool and tool group identifiers and the registry that maps
groups to the tools they grant.
"""

from .groups import (
    ToolName,
    ToolGroup,
    TOOL_GROUPS,
    VALID_TOOL_GROUPS,
    ToolGroupRegistry,
    UnknownGroupError,
    get_tool_group_registry,
)

__all__ = [
    "ToolName",
    "ToolGroup",
    "TOOL_GROUPS",
    "VALID_TOOL_GROUPS",
    "ToolGroupRegistry",
    "UnknownGroupError",
    "get_tool_group_registry",
]
