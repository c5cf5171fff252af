"""
Tool group registry.

Maps each tool group identifier to the ordered tools it grants. Groups are
the unit modes are configured with; a tool that appears in no group can never
be granted by any mode.
"""

import logging
from enum import Enum
from types import MappingProxyType
from typing import Final, Mapping, Optional, Sequence


logger = logging.getLogger(__name__)


class ToolName(str, Enum):
    """Identifiers of the tools an agent can request."""
    READ_FILE = "read_file"
    FETCH_INSTRUCTIONS = "fetch_instructions"
    SEARCH_FILES = "search_files"
    LIST_FILES = "list_files"
    LIST_CODE_DEFINITION_NAMES = "list_code_definition_names"
    APPLY_DIFF = "apply_diff"
    EDIT_FILE = "edit_file"
    WRITE_TO_FILE = "write_to_file"
    INSERT_CONTENT = "insert_content"
    SEARCH_AND_REPLACE = "search_and_replace"
    BROWSER_ACTION = "browser_action"
    EXECUTE_COMMAND = "execute_command"
    USE_MCP_TOOL = "use_mcp_tool"
    ACCESS_MCP_RESOURCE = "access_mcp_resource"

    def __str__(self) -> str:
        return self.value


class ToolGroup(str, Enum):
    """Identifiers of the tool groups modes can reference."""
    READ = "read"
    EDIT = "edit"
    BROWSER = "browser"
    COMMAND = "command"
    MCP = "mcp"

    def __str__(self) -> str:
        return self.value


TOOL_GROUPS: Final[Mapping[ToolGroup, tuple[ToolName, ...]]] = MappingProxyType({
    ToolGroup.READ: (
        ToolName.READ_FILE,
        ToolName.FETCH_INSTRUCTIONS,
        ToolName.SEARCH_FILES,
        ToolName.LIST_FILES,
        ToolName.LIST_CODE_DEFINITION_NAMES,
    ),
    ToolGroup.EDIT: (
        ToolName.APPLY_DIFF,
        ToolName.EDIT_FILE,
        ToolName.WRITE_TO_FILE,
        ToolName.INSERT_CONTENT,
        ToolName.SEARCH_AND_REPLACE,
    ),
    ToolGroup.BROWSER: (
        ToolName.BROWSER_ACTION,
    ),
    ToolGroup.COMMAND: (
        ToolName.EXECUTE_COMMAND,
    ),
    ToolGroup.MCP: (
        ToolName.USE_MCP_TOOL,
        ToolName.ACCESS_MCP_RESOURCE,
    ),
})

# Valid tool groups that modes can reference
VALID_TOOL_GROUPS: Final[frozenset[str]] = frozenset(group.value for group in ToolGroup)


class UnknownGroupError(KeyError):
    """Raised when a tool group identifier is not registered."""

    def __init__(self, group: str):
        super().__init__(group)
        self.group = group

    def __str__(self) -> str:
        return f"Unknown tool group: '{self.group}'"


class ToolGroupRegistry:
    """Immutable table of tool groups.

    Group and tool identifiers are stored as plain strings, so lookups accept
    either the enum members or their string values.

    Example:
        registry = ToolGroupRegistry({"read": ["read_file", "list_files"]})
        registry.get_group_tools("read")   # ("read_file", "list_files")
        registry.groups_for_tool("read_file")  # ("read",)
    """

    def __init__(self, groups: Mapping[str, Sequence[str]]) -> None:
        """Build the registry.

        Args:
            groups: Mapping of group identifier to the tools it grants.

        Raises:
            ValueError: If a group identifier or tool name is empty or
                not a string.
        """
        table: dict[str, tuple[str, ...]] = {}
        for group, tools in groups.items():
            if not isinstance(group, str) or not group:
                raise ValueError(f"Invalid tool group identifier: {group!r}")
            names = []
            for tool in tools:
                if not isinstance(tool, str) or not tool:
                    raise ValueError(f"Invalid tool name {tool!r} in group '{group}'")
                if str(tool) not in names:
                    names.append(str(tool))
            table[str(group)] = tuple(names)
            logger.debug(f"Registered tool group '{group}' with {len(names)} tools")

        self._groups: Mapping[str, tuple[str, ...]] = MappingProxyType(table)

    def get_group_tools(self, group: str) -> tuple[str, ...]:
        """Get the tools granted by a group.

        Args:
            group: The group identifier.

        Returns:
            Ordered tuple of tool names.

        Raises:
            UnknownGroupError: If the group is not registered.
        """
        try:
            return self._groups[group]
        except (KeyError, TypeError):
            raise UnknownGroupError(group) from None

    def has_group(self, group: str) -> bool:
        """Check whether a group identifier is registered."""
        try:
            return group in self._groups
        except TypeError:
            return False

    def groups(self) -> tuple[str, ...]:
        """Registered group identifiers, in registration order."""
        return tuple(self._groups)

    def all_tools(self) -> frozenset[str]:
        """Every tool granted by at least one group."""
        return frozenset(tool for tools in self._groups.values() for tool in tools)

    def groups_for_tool(self, tool: str) -> tuple[str, ...]:
        """Groups that grant the given tool, in registration order."""
        return tuple(group for group, tools in self._groups.items() if tool in tools)

    def __contains__(self, group: object) -> bool:
        return isinstance(group, str) and self.has_group(group)

    def __len__(self) -> int:
        return len(self._groups)


_default_registry: Optional[ToolGroupRegistry] = None


def get_tool_group_registry() -> ToolGroupRegistry:
    """Get the registry built from the built-in TOOL_GROUPS table."""
    global _default_registry
    if _default_registry is None:
        _default_registry = ToolGroupRegistry(TOOL_GROUPS)
    return _default_registry
