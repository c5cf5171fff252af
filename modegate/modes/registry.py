"""
Mode registry and resolver.

Provides the ModeRegistry class that holds the built-in modes and resolves
a mode slug against a caller-supplied list of custom modes.
"""

import logging
from typing import Iterable, Optional, Sequence

from ..tools.groups import ToolGroupRegistry, UnknownGroupError, get_tool_group_registry
from .schema import ModeConfig, ModeValidationError


logger = logging.getLogger(__name__)


class UnknownModeError(KeyError):
    """Raised when a mode slug matches neither a custom nor a built-in mode."""

    def __init__(self, slug: str):
        super().__init__(slug)
        self.slug = slug

    def __str__(self) -> str:
        return f"Unknown mode: '{self.slug}'"


def _custom_entries(custom_modes: Optional[Sequence[ModeConfig]]) -> Iterable[ModeConfig]:
    """Yield the custom modes that can take part in resolution."""
    for mode in custom_modes or ():
        if isinstance(mode, ModeConfig):
            yield mode
        else:
            logger.warning(f"Ignoring custom mode entry that is not a ModeConfig: {mode!r}")


class ModeRegistry:
    """Read-only table of built-in modes.

    The registry is built once and never changes. Custom modes are not
    registered; they are passed to each lookup and take precedence over a
    built-in mode with the same slug. A custom mode replaces the built-in
    mode entirely, its tool groups are not merged with the built-in ones.

    Example:
        registry = ModeRegistry(get_builtin_modes())

        registry.resolve("architect").tool_groups  # ("read", "browser", "mcp")

        narrowed = ModeConfig(
            slug="code",
            name="Read-only Code",
            role_definition="You only read code.",
            tool_groups=["read"],
        )
        registry.resolve("code", [narrowed]).tool_groups  # ("read",)
    """

    def __init__(
        self,
        modes: Iterable[ModeConfig],
        tool_groups: Optional[ToolGroupRegistry] = None,
    ) -> None:
        """Initialize the ModeRegistry.

        Args:
            modes: The built-in modes, in display order.
            tool_groups: Registry used to check group references. Defaults
                to the built-in tool groups.

        Raises:
            ModeValidationError: If two modes share a slug.
            UnknownGroupError: If a mode references an unregistered group.
        """
        self._tool_groups = tool_groups if tool_groups is not None else get_tool_group_registry()
        self._modes: dict[str, ModeConfig] = {}

        for mode in modes:
            if mode.slug in self._modes:
                raise ModeValidationError(
                    f"Duplicate mode slug: '{mode.slug}'",
                    errors=[f"Mode '{mode.slug}' is defined more than once"],
                )
            for group in mode.tool_groups:
                if not self._tool_groups.has_group(group):
                    raise UnknownGroupError(group)
            self._modes[mode.slug] = mode
            logger.debug(f"Loaded built-in mode: {mode.slug}")

    @property
    def tool_groups(self) -> ToolGroupRegistry:
        """The tool group registry modes are checked against."""
        return self._tool_groups

    def lookup(self, slug: str) -> Optional[ModeConfig]:
        """Get a built-in mode by its slug.

        Custom modes are not consulted; use resolve() for the effective mode.

        Args:
            slug: The slug of the mode to look up.

        Returns:
            The built-in ModeConfig, or None if there is none with that slug.
        """
        if not isinstance(slug, str):
            return None
        return self._modes.get(slug)

    def resolve(
        self,
        slug: str,
        custom_modes: Optional[Sequence[ModeConfig]] = None,
    ) -> ModeConfig:
        """Get the effective mode for a slug.

        The first custom mode with a matching slug wins. Otherwise the
        built-in mode with that slug is used. No default mode is substituted.
        Custom entries that are not ModeConfig instances are skipped.

        Args:
            slug: The slug of the mode to resolve.
            custom_modes: Caller-supplied mode definitions, searched in order.

        Returns:
            The effective ModeConfig.

        Raises:
            UnknownModeError: If no custom or built-in mode has this slug.
        """
        for mode in _custom_entries(custom_modes):
            if mode.slug == slug:
                if slug in self._modes:
                    logger.debug(f"Custom mode overrides built-in mode: {slug}")
                return mode

        mode = self.lookup(slug)
        if mode is None:
            raise UnknownModeError(slug)
        return mode

    def has_mode(
        self,
        slug: str,
        custom_modes: Optional[Sequence[ModeConfig]] = None,
    ) -> bool:
        """Check if a slug resolves to a custom or built-in mode."""
        try:
            self.resolve(slug, custom_modes)
        except UnknownModeError:
            return False
        return True

    def list_modes(
        self,
        custom_modes: Optional[Sequence[ModeConfig]] = None,
    ) -> list[ModeConfig]:
        """List the effective modes.

        Built-in modes keep their order, each replaced by the first custom
        mode sharing its slug. Remaining custom modes follow in the order
        given; later duplicates of a slug are ignored.

        Args:
            custom_modes: Caller-supplied mode definitions.

        Returns:
            A list of effective ModeConfig objects.
        """
        overrides: dict[str, ModeConfig] = {}
        for mode in _custom_entries(custom_modes):
            overrides.setdefault(mode.slug, mode)

        modes = [overrides.pop(slug, mode) for slug, mode in self._modes.items()]
        modes.extend(overrides.values())
        return modes

    @property
    def slugs(self) -> tuple[str, ...]:
        """Slugs of the built-in modes, in order."""
        return tuple(self._modes)

    def __len__(self) -> int:
        return len(self._modes)


_default_registry: Optional[ModeRegistry] = None


def get_mode_registry() -> ModeRegistry:
    """Get the registry holding the built-in modes."""
    global _default_registry
    if _default_registry is None:
        from .builtin import get_builtin_modes

        _default_registry = ModeRegistry(get_builtin_modes(), get_tool_group_registry())
    return _default_registry
