"""
Mode configuration schema and validation.

Provides the ModeConfig dataclass and schema validation for mode definitions.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from ..tools.groups import VALID_TOOL_GROUPS


SLUG_PATTERN = re.compile(r"^[a-z][a-z0-9-]*$")

DEFAULT_ICON = "🤖"


@dataclass(frozen=True)
class ModeConfig:
    """Configuration for an operational mode.

    A mode grants the union of the tools of its tool groups. Instances are
    immutable so they can be shared by the registries and passed around as
    custom mode overrides without being changed underneath their owners.

    Attributes:
        slug: Unique identifier for the mode (lowercase, alphanumeric with hyphens).
        name: Human-readable display name for the mode.
        role_definition: Description of the agent's role in this mode.
        tool_groups: Tool group identifiers available in this mode.
        custom_instructions: Additional instructions specific to this mode.
        icon: Emoji or short string icon for the mode.

    Example:
        review_mode = ModeConfig(
            slug="review",
            name="Review Mode",
            role_definition="You are a meticulous code reviewer.",
            tool_groups=["read"],
        )
    """
    slug: str
    name: str
    role_definition: str
    tool_groups: tuple[str, ...] = field(default_factory=tuple)
    custom_instructions: str = ""
    icon: str = DEFAULT_ICON

    def __post_init__(self) -> None:
        if isinstance(self.tool_groups, str):
            raise TypeError("tool_groups must be a sequence of group names, not a string")
        object.__setattr__(self, "tool_groups", tuple(str(g) for g in self.tool_groups))

    def to_dict(self) -> dict[str, Any]:
        """Convert the mode config to a JSON-compatible dictionary."""
        return {
            "slug": self.slug,
            "name": self.name,
            "role_definition": self.role_definition,
            "tool_groups": list(self.tool_groups),
            "custom_instructions": self.custom_instructions,
            "icon": self.icon,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ModeConfig":
        """Create a ModeConfig from a dictionary.

        Args:
            data: Dictionary containing mode configuration fields.

        Returns:
            A new ModeConfig instance.

        Raises:
            KeyError: If a required field is missing.
            TypeError: If tool_groups is a string.
        """
        return cls(
            slug=data["slug"],
            name=data["name"],
            role_definition=data["role_definition"],
            tool_groups=data.get("tool_groups", ()),
            custom_instructions=data.get("custom_instructions", ""),
            icon=data.get("icon", DEFAULT_ICON),
        )


# Schema for mode configuration validation
MODE_SCHEMA = {
    "type": "object",
    "required": ["slug", "name", "role_definition"],
    "properties": {
        "slug": {
            "type": "string",
            "pattern": SLUG_PATTERN.pattern,
            "minLength": 1,
            "maxLength": 50,
        },
        "name": {
            "type": "string",
            "minLength": 1,
            "maxLength": 100,
        },
        "role_definition": {
            "type": "string",
            "minLength": 1,
        },
        "tool_groups": {
            "type": "array",
            "uniqueItems": True,
            "items": {
                "type": "string",
                "enum": sorted(VALID_TOOL_GROUPS),
            },
        },
        "custom_instructions": {
            "type": "string",
        },
        "icon": {
            "type": "string",
            "maxLength": 4,
        },
    },
    "additionalProperties": False,
}

KNOWN_FIELDS = frozenset(MODE_SCHEMA["properties"])


class ModeValidationError(Exception):
    """Raised when mode configuration validation fails."""

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        super().__init__(message)
        self.errors = errors or []


def validate_mode_config(
    data: dict[str, Any],
    valid_groups: Optional[Iterable[str]] = None,
) -> tuple[bool, list[str]]:
    """Validate a mode configuration dictionary against the schema.

    Checks that required fields are present, that field types, string
    patterns and lengths are valid, and that tool groups reference
    registered groups without repeats.

    Args:
        data: Dictionary containing mode configuration to validate.
        valid_groups: Group identifiers to accept. Defaults to the
            built-in tool groups.

    Returns:
        A tuple of (is_valid, errors) where errors is empty if valid.

    Example:
        is_valid, errors = validate_mode_config({
            "slug": "review",
            "name": "Review Mode",
            "role_definition": "You review code.",
            "tool_groups": ["read"],
        })
    """
    if not isinstance(data, dict):
        return False, ["Configuration must be a dictionary"]

    allowed_groups = frozenset(valid_groups) if valid_groups is not None else VALID_TOOL_GROUPS
    errors: list[str] = []

    for field_name in MODE_SCHEMA["required"]:
        if field_name not in data:
            errors.append(f"Missing required field: '{field_name}'")

    if errors:
        return False, errors

    slug = data["slug"]
    if not isinstance(slug, str):
        errors.append("Field 'slug' must be a string")
    elif not slug:
        errors.append("Field 'slug' must not be empty")
    elif len(slug) > 50:
        errors.append("Field 'slug' must be at most 50 characters")
    elif not SLUG_PATTERN.match(slug):
        errors.append(
            "Field 'slug' must start with a lowercase letter and contain "
            "only lowercase letters, numbers, and hyphens"
        )

    name = data["name"]
    if not isinstance(name, str):
        errors.append("Field 'name' must be a string")
    elif not name:
        errors.append("Field 'name' must not be empty")
    elif len(name) > 100:
        errors.append("Field 'name' must be at most 100 characters")

    role_def = data["role_definition"]
    if not isinstance(role_def, str):
        errors.append("Field 'role_definition' must be a string")
    elif not role_def.strip():
        errors.append("Field 'role_definition' must not be empty")

    if "tool_groups" in data:
        tool_groups = data["tool_groups"]
        if not isinstance(tool_groups, (list, tuple)):
            errors.append("Field 'tool_groups' must be an array")
        else:
            seen: set[str] = set()
            for i, group in enumerate(tool_groups):
                if not isinstance(group, str):
                    errors.append(f"Field 'tool_groups[{i}]' must be a string")
                elif group not in allowed_groups:
                    errors.append(
                        f"Field 'tool_groups[{i}]' has invalid value '{group}'. "
                        f"Valid values are: {', '.join(sorted(allowed_groups))}"
                    )
                elif group in seen:
                    errors.append(f"Field 'tool_groups[{i}]' duplicates group '{group}'")
                else:
                    seen.add(group)

    if "custom_instructions" in data and not isinstance(data["custom_instructions"], str):
        errors.append("Field 'custom_instructions' must be a string")

    if "icon" in data:
        icon = data["icon"]
        if not isinstance(icon, str):
            errors.append("Field 'icon' must be a string")
        elif len(icon) > 4:
            errors.append("Field 'icon' must be at most 4 characters")

    unknown_fields = set(data) - KNOWN_FIELDS
    if unknown_fields:
        errors.append(f"Unknown fields: {', '.join(sorted(map(str, unknown_fields)))}")

    return len(errors) == 0, errors
