"""
Tool permission checks for modes.

ModeValidator.is_tool_allowed() answers whether a tool may be used in a
mode and never raises, so it is safe to call when building tool listings.
ModeValidator.validate_tool_use() is the gate in front of tool execution:
it raises PermissionDeniedError when the answer is no.
"""

import logging
from typing import Mapping, Optional, Sequence

from .constants import DENIED_MESSAGE_TEMPLATE
from .modes.registry import ModeRegistry, UnknownModeError, get_mode_registry
from .modes.schema import ModeConfig
from .tools.groups import UnknownGroupError


logger = logging.getLogger(__name__)


class PermissionDeniedError(Exception):
    """Raised when a tool is not allowed in the active mode."""

    def __init__(self, tool: str, mode_slug: str):
        self.tool = tool
        self.mode_slug = mode_slug
        super().__init__(DENIED_MESSAGE_TEMPLATE.format(tool=tool, mode=mode_slug))


class ModeValidator:
    """Decides which tools a mode may use.

    A tool is allowed when it is not disabled by the tool requirements and
    one of the effective mode's tool groups grants it. Requirements can only
    take permissions away: a True requirement is the same as no entry.

    Example:
        validator = ModeValidator()

        validator.is_tool_allowed("read_file", "architect")       # True
        validator.is_tool_allowed("write_to_file", "architect")   # False
        validator.is_tool_allowed("edit_file", "code", [], {"edit_file": False})  # False

        validator.validate_tool_use("write_to_file", "architect")
        # PermissionDeniedError: Tool "write_to_file" is not allowed in architect mode.
    """

    def __init__(self, modes: Optional[ModeRegistry] = None) -> None:
        """Initialize the validator.

        Args:
            modes: Registry of built-in modes. Defaults to the built-in
                code, architect, and ask modes.
        """
        self._modes = modes if modes is not None else get_mode_registry()

    @property
    def modes(self) -> ModeRegistry:
        """The mode registry used for resolution."""
        return self._modes

    def is_tool_allowed(
        self,
        tool: str,
        mode_slug: str,
        custom_modes: Optional[Sequence[ModeConfig]] = None,
        tool_requirements: Optional[Mapping[str, bool]] = None,
    ) -> bool:
        """Check whether a tool may be used in a mode.

        Args:
            tool: The tool being requested.
            mode_slug: Slug of the active mode.
            custom_modes: Caller-supplied modes that override built-in ones.
            tool_requirements: Per-tool availability. A False entry disables
                the tool in every mode.

        Returns:
            True if the tool is allowed, False otherwise, including when the
            mode cannot be resolved or the tool is unknown.
        """
        if not isinstance(tool, str):
            return False

        if tool_requirements and tool in tool_requirements and not tool_requirements[tool]:
            logger.debug(f"Tool '{tool}' disabled by tool requirements")
            return False

        try:
            mode = self._modes.resolve(mode_slug, custom_modes)
        except UnknownModeError:
            logger.debug(f"Mode '{mode_slug}' not found, denying '{tool}'")
            return False

        for group in mode.tool_groups:
            try:
                tools = self._modes.tool_groups.get_group_tools(group)
            except UnknownGroupError:
                logger.warning(
                    f"Mode '{mode.slug}' references unknown tool group '{group}'; it grants no tools"
                )
                continue
            if tool in tools:
                return True

        return False

    def validate_tool_use(
        self,
        tool: str,
        mode_slug: str,
        custom_modes: Optional[Sequence[ModeConfig]] = None,
        tool_requirements: Optional[Mapping[str, bool]] = None,
    ) -> None:
        """Raise if a tool may not be used in a mode.

        Args:
            tool: The tool being requested.
            mode_slug: Slug of the active mode.
            custom_modes: Caller-supplied modes that override built-in ones.
            tool_requirements: Per-tool availability overrides.

        Raises:
            PermissionDeniedError: If is_tool_allowed() returns False.
        """
        if not self.is_tool_allowed(tool, mode_slug, custom_modes, tool_requirements):
            raise PermissionDeniedError(str(tool), str(mode_slug))

    def get_allowed_tools(
        self,
        mode_slug: str,
        custom_modes: Optional[Sequence[ModeConfig]] = None,
        tool_requirements: Optional[Mapping[str, bool]] = None,
    ) -> list[str]:
        """List the tools allowed in a mode.

        Returns:
            Allowed tool names in group order without repeats. Empty if the
            mode cannot be resolved.
        """
        try:
            mode = self._modes.resolve(mode_slug, custom_modes)
        except UnknownModeError:
            return []

        allowed: list[str] = []
        for group in mode.tool_groups:
            if not self._modes.tool_groups.has_group(group):
                continue
            for tool in self._modes.tool_groups.get_group_tools(group):
                if tool not in allowed and self.is_tool_allowed(
                    tool, mode_slug, custom_modes, tool_requirements
                ):
                    allowed.append(tool)
        return allowed


_default_validator: Optional[ModeValidator] = None


def get_mode_validator() -> ModeValidator:
    """Get the validator backed by the built-in modes."""
    global _default_validator
    if _default_validator is None:
        _default_validator = ModeValidator(get_mode_registry())
    return _default_validator


def is_tool_allowed_for_mode(
    tool: str,
    mode_slug: str,
    custom_modes: Optional[Sequence[ModeConfig]] = None,
    tool_requirements: Optional[Mapping[str, bool]] = None,
) -> bool:
    """Check a tool against the built-in modes. See ModeValidator.is_tool_allowed()."""
    return get_mode_validator().is_tool_allowed(tool, mode_slug, custom_modes, tool_requirements)


def validate_tool_use(
    tool: str,
    mode_slug: str,
    custom_modes: Optional[Sequence[ModeConfig]] = None,
    tool_requirements: Optional[Mapping[str, bool]] = None,
) -> None:
    """Gate a tool against the built-in modes. See ModeValidator.validate_tool_use()."""
    get_mode_validator().validate_tool_use(tool, mode_slug, custom_modes, tool_requirements)


def get_allowed_tools(
    mode_slug: str,
    custom_modes: Optional[Sequence[ModeConfig]] = None,
    tool_requirements: Optional[Mapping[str, bool]] = None,
) -> list[str]:
    """List allowed tools using the built-in modes."""
    return get_mode_validator().get_allowed_tools(mode_slug, custom_modes, tool_requirements)


def get_mode_config(mode_slug: str) -> Optional[ModeConfig]:
    """Look up a built-in mode, e.g. to display its role definition."""
    return get_mode_registry().lookup(mode_slug)


def get_all_modes(custom_modes: Optional[Sequence[ModeConfig]] = None) -> list[ModeConfig]:
    """List the effective modes, custom overrides applied."""
    return get_mode_registry().list_modes(custom_modes)
