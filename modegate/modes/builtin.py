"""
Built-in mode definitions.

Provides the default operational modes: code, architect, and ask.
"""

from typing import Final

from ..tools.groups import ToolGroup
from .schema import ModeConfig


# Code Mode - Every tool group
CODE_MODE: Final[ModeConfig] = ModeConfig(
    slug="code",
    name="Code",
    role_definition=(
        "You are a highly skilled software engineer with extensive knowledge "
        "in many programming languages, frameworks, design patterns, and best practices."
    ),
    tool_groups=(
        ToolGroup.READ,
        ToolGroup.EDIT,
        ToolGroup.BROWSER,
        ToolGroup.COMMAND,
        ToolGroup.MCP,
    ),
    icon="💻",
)


# Architect Mode - Planning and design, no edits or commands
ARCHITECT_MODE: Final[ModeConfig] = ModeConfig(
    slug="architect",
    name="Architect",
    role_definition=(
        "You are an experienced technical leader who is inquisitive and an excellent "
        "planner. Your goal is to gather information and get context to create a "
        "detailed plan for accomplishing the user's task."
    ),
    tool_groups=(
        ToolGroup.READ,
        ToolGroup.BROWSER,
        ToolGroup.MCP,
    ),
    custom_instructions=(
        "Do not modify files or run commands. Produce a plan the user can review "
        "before switching to code mode."
    ),
    icon="🏗️",
)


# Ask Mode - Questions and explanations, read-only
ASK_MODE: Final[ModeConfig] = ModeConfig(
    slug="ask",
    name="Ask",
    role_definition=(
        "You are a knowledgeable technical assistant focused on answering questions "
        "and providing information about software development, technology, and related topics."
    ),
    tool_groups=(
        ToolGroup.READ,
        ToolGroup.BROWSER,
        ToolGroup.MCP,
    ),
    icon="❓",
)


# All built-in modes, in display order
BUILTIN_MODES: Final[tuple[ModeConfig, ...]] = (
    CODE_MODE,
    ARCHITECT_MODE,
    ASK_MODE,
)


def get_builtin_modes() -> list[ModeConfig]:
    """Get all built-in mode configurations.

    Returns:
        A list of all built-in ModeConfig objects.
    """
    return list(BUILTIN_MODES)


def get_builtin_mode(slug: str) -> ModeConfig | None:
    """Get a specific built-in mode by slug.

    Args:
        slug: The slug of the mode to retrieve.

    Returns:
        The ModeConfig if found, None otherwise.
    """
    for mode in BUILTIN_MODES:
        if mode.slug == slug:
            return mode
    return None
