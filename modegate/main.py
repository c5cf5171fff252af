"""
Main entry point for modegate.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Sequence

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .constants import APP_NAME, APP_VERSION, APP_DESCRIPTION

if TYPE_CHECKING:
    from .config import ConfigManager


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description=APP_DESCRIPTION
    )

    parser.add_argument(
        "-v", "--version",
        action="version",
        version=f"{APP_NAME} {APP_VERSION}"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show debug logging"
    )

    # Options shared by every subcommand that resolves modes
    custom_modes = argparse.ArgumentParser(add_help=False)
    custom_modes.add_argument(
        "--custom-modes",
        type=Path,
        help="JSON file with custom mode definitions"
    )

    # Options for subcommands that evaluate tool permissions
    requirements = argparse.ArgumentParser(add_help=False)
    requirements.add_argument(
        "--disable",
        action="append",
        default=[],
        metavar="TOOL",
        help="Mark a tool as unavailable (repeatable)"
    )
    requirements.add_argument(
        "--enable",
        action="append",
        default=[],
        metavar="TOOL",
        help="Mark a tool as available, overriding the config file (repeatable)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser(
        "check",
        parents=[custom_modes, requirements],
        help="Check whether a tool may be used in a mode"
    )
    check.add_argument("tool", help="Tool name, e.g. read_file")
    check.add_argument("-m", "--mode", help="Mode slug (default: configured default mode)")

    tools = subparsers.add_parser(
        "tools",
        parents=[custom_modes, requirements],
        help="List the tools allowed in a mode"
    )
    tools.add_argument("-m", "--mode", help="Mode slug (default: configured default mode)")

    subparsers.add_parser(
        "modes",
        parents=[custom_modes],
        help="List the effective modes"
    )

    show = subparsers.add_parser(
        "show",
        parents=[custom_modes],
        help="Show a mode's definition"
    )
    show.add_argument("mode", help="Mode slug")

    return parser


def configure_logging(debug: bool) -> None:
    """Route log output through Rich."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


def _load_custom_modes(args: argparse.Namespace, config: "ConfigManager") -> list:
    from .config import load_custom_modes

    if args.custom_modes is not None:
        return load_custom_modes(args.custom_modes)
    return config.get_custom_modes()


def _tool_requirements(args: argparse.Namespace, config: "ConfigManager") -> dict[str, bool]:
    requirements = config.tool_requirements
    for tool in args.enable:
        requirements[tool] = True
    for tool in args.disable:
        requirements[tool] = False
    return requirements


def run_check(args, console, config, validator) -> int:
    """Run the enforcement gate for one tool."""
    from .validator import PermissionDeniedError

    mode = args.mode or config.default_mode
    try:
        validator.validate_tool_use(
            args.tool,
            mode,
            _load_custom_modes(args, config),
            _tool_requirements(args, config),
        )
    except PermissionDeniedError as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        return 1

    console.print(f"[green]✓[/green] Tool \"{escape(args.tool)}\" is allowed in {escape(mode)} mode.")
    return 0


def run_tools(args, console, config, validator) -> int:
    """Print the tools allowed in a mode."""
    mode = args.mode or config.default_mode
    custom_modes = _load_custom_modes(args, config)

    if not validator.modes.has_mode(mode, custom_modes):
        console.print(f"[red]Unknown mode:[/red] {escape(mode)}")
        return 1

    allowed = validator.get_allowed_tools(mode, custom_modes, _tool_requirements(args, config))
    groups = validator.modes.tool_groups

    table = Table(title=f"Tools allowed in {mode} mode")
    table.add_column("Tool", style="cyan")
    table.add_column("Groups")
    for tool in allowed:
        table.add_row(tool, ", ".join(groups.groups_for_tool(tool)))

    console.print(table)
    return 0


def run_modes(args, console, config, validator) -> int:
    """Print the effective modes."""
    builtin_slugs = set(validator.modes.slugs)
    custom_modes = _load_custom_modes(args, config)
    custom_slugs = {mode.slug for mode in custom_modes}

    table = Table(title="Modes")
    table.add_column("", no_wrap=True)
    table.add_column("Slug", style="cyan")
    table.add_column("Name")
    table.add_column("Tool Groups")
    table.add_column("Source", style="dim")

    for mode in validator.modes.list_modes(custom_modes):
        if mode.slug not in custom_slugs:
            source = "built-in"
        elif mode.slug in builtin_slugs:
            source = "custom (overrides built-in)"
        else:
            source = "custom"
        table.add_row(
            mode.icon,
            mode.slug,
            mode.name,
            ", ".join(mode.tool_groups) or "none",
            source,
        )

    console.print(table)
    return 0


def run_show(args, console, config, validator) -> int:
    """Print a mode's definition."""
    from .modes import UnknownModeError

    try:
        mode = validator.modes.resolve(args.mode, _load_custom_modes(args, config))
    except UnknownModeError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        return 1

    body = [
        f"[bold]Slug:[/bold] {mode.slug}",
        f"[bold]Tool Groups:[/bold] {', '.join(mode.tool_groups) or 'none'}",
        "",
        escape(mode.role_definition),
    ]
    if mode.custom_instructions:
        body.extend(["", f"[dim]{escape(mode.custom_instructions)}[/dim]"])

    console.print(Panel("\n".join(body), title=escape(f"{mode.icon} {mode.name}"), expand=False))
    return 0


COMMANDS = {
    "check": run_check,
    "tools": run_tools,
    "modes": run_modes,
    "show": run_show,
}


def main(argv: Optional[Sequence[str]] = None, console: Optional[Console] = None) -> int:
    """Main entry point."""
    from .config import ConfigError, get_config
    from .modes import ModeValidationError
    from .validator import get_mode_validator

    args = build_parser().parse_args(argv)
    configure_logging(args.debug)
    console = console or Console()

    try:
        return COMMANDS[args.command](args, console, get_config(), get_mode_validator())
    except (FileNotFoundError, ConfigError, ModeValidationError) as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
