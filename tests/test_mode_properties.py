"""
Property-based tests for mode definitions and resolution.

Tests schema validation and the custom-mode precedence rules using hypothesis.
"""

import dataclasses

import allure
import pytest
from hypothesis import given, settings, strategies as st

from modegate.modes import (
    ARCHITECT_MODE,
    BUILTIN_MODES,
    CODE_MODE,
    ModeConfig,
    ModeRegistry,
    ModeValidationError,
    UnknownModeError,
    get_builtin_mode,
    get_mode_registry,
    validate_mode_config,
)
from modegate.tools import VALID_TOOL_GROUPS, ToolGroupRegistry, UnknownGroupError


BUILTIN_SLUGS = [mode.slug for mode in BUILTIN_MODES]


# Strategies for generating test data

def valid_slug_strategy():
    """Generate valid slugs: start with lowercase letter, then lowercase/digits/hyphens."""
    return st.from_regex(r"^[a-z][a-z0-9-]{0,20}$", fullmatch=True)


def invalid_slug_strategy():
    """Generate invalid slugs that should fail validation."""
    return st.one_of(
        st.from_regex(r"^[0-9][a-z0-9-]*$", fullmatch=True),
        st.from_regex(r"^-[a-z0-9-]*$", fullmatch=True),
        st.from_regex(r"^[a-z][a-zA-Z0-9-]*[A-Z][a-zA-Z0-9-]*$", fullmatch=True),
        st.just(""),
    )


def valid_tool_groups_strategy():
    return st.lists(
        st.sampled_from(sorted(VALID_TOOL_GROUPS)),
        max_size=len(VALID_TOOL_GROUPS),
        unique=True,
    )


@st.composite
def valid_mode_config_dict(draw):
    """Generate a valid mode configuration dictionary."""
    return {
        "slug": draw(valid_slug_strategy()),
        "name": draw(st.text(min_size=1, max_size=100)),
        "role_definition": draw(st.text(min_size=1, max_size=300).filter(str.strip)),
        "tool_groups": draw(valid_tool_groups_strategy()),
        "custom_instructions": draw(st.text(max_size=200)),
        "icon": draw(st.text(max_size=4)),
    }


@st.composite
def mode_config_strategy(draw, slug=None):
    data = draw(valid_mode_config_dict())
    if slug is not None:
        data["slug"] = slug
    return ModeConfig.from_dict(data)


@allure.feature("Mode Schema")
@allure.story("Valid configs accepted")
@allure.severity(allure.severity_level.CRITICAL)
@settings(max_examples=100)
@given(config=valid_mode_config_dict())
def test_valid_mode_configs_accepted(config: dict):
    """
    For any mode configuration dictionary with valid fields, validation
    SHALL accept the configuration.
    """
    is_valid, errors = validate_mode_config(config)

    assert is_valid, f"Valid config should be accepted, but got errors: {errors}"
    assert errors == []


@allure.feature("Mode Schema")
@allure.story("Missing required fields rejected")
@allure.severity(allure.severity_level.CRITICAL)
@settings(max_examples=100)
@given(
    config=valid_mode_config_dict(),
    missing=st.lists(
        st.sampled_from(["slug", "name", "role_definition"]),
        min_size=1,
        max_size=3,
        unique=True,
    ),
)
def test_missing_required_fields_rejected(config: dict, missing: list[str]):
    for field_name in missing:
        del config[field_name]

    is_valid, errors = validate_mode_config(config)

    assert not is_valid
    assert len(errors) == len(missing)
    assert all("Missing required field" in error for error in errors)


@allure.feature("Mode Schema")
@allure.story("Invalid tool groups rejected")
@allure.severity(allure.severity_level.CRITICAL)
@settings(max_examples=100)
@given(
    config=valid_mode_config_dict(),
    invalid_group=st.text(min_size=1, max_size=20).filter(lambda g: g not in VALID_TOOL_GROUPS),
)
def test_invalid_tool_groups_rejected(config: dict, invalid_group: str):
    """
    For any mode configuration referencing an unregistered group,
    validation SHALL reject it and name the offending field.
    """
    config["tool_groups"] = [invalid_group]

    is_valid, errors = validate_mode_config(config)

    assert not is_valid
    assert any("tool_groups[0]" in error for error in errors)


@allure.feature("Mode Schema")
@allure.story("Invalid slugs rejected")
@allure.severity(allure.severity_level.NORMAL)
@settings(max_examples=100)
@given(slug=invalid_slug_strategy())
def test_invalid_slug_pattern_rejected(slug: str):
    config = {
        "slug": slug,
        "name": "Test Mode",
        "role_definition": "A test mode for validation testing",
    }

    is_valid, errors = validate_mode_config(config)

    assert not is_valid, f"Config with invalid slug '{slug}' should be rejected"
    assert any("slug" in error for error in errors)


@allure.feature("Mode Schema")
@allure.story("Field checks")
@allure.severity(allure.severity_level.NORMAL)
def test_schema_field_checks():
    base = {"slug": "review", "name": "Review", "role_definition": "You review code."}

    assert validate_mode_config("not a dict") == (False, ["Configuration must be a dictionary"])
    assert not validate_mode_config({**base, "tool_groups": "read"})[0]
    assert not validate_mode_config({**base, "tool_groups": ["read", "read"]})[0]
    assert not validate_mode_config({**base, "role_definition": "   "})[0]
    assert not validate_mode_config({**base, "icon": "too long"})[0]

    is_valid, errors = validate_mode_config({**base, "groups": ["read"]})
    assert not is_valid
    assert errors == ["Unknown fields: groups"]

    assert validate_mode_config({**base, "tool_groups": ["docs"]}, valid_groups=["docs"]) == (True, [])


@allure.feature("Mode Schema")
@allure.story("Dictionary round trip")
@allure.severity(allure.severity_level.NORMAL)
@settings(max_examples=50)
@given(config=valid_mode_config_dict())
def test_mode_config_dict_round_trip(config: dict):
    mode = ModeConfig.from_dict(config)

    assert mode.to_dict() == config
    assert ModeConfig.from_dict(mode.to_dict()) == mode


def test_mode_config_is_immutable():
    mode = ModeConfig(slug="review", name="Review", role_definition="Reviews", tool_groups=["read"])

    assert mode.tool_groups == ("read",)
    with pytest.raises(dataclasses.FrozenInstanceError):
        mode.tool_groups = ("edit",)


def test_mode_config_rejects_string_tool_groups():
    with pytest.raises(TypeError):
        ModeConfig(slug="review", name="Review", role_definition="Reviews", tool_groups="read")

    with pytest.raises(TypeError):
        ModeConfig.from_dict({"slug": "review", "name": "Review", "role_definition": "Reviews", "tool_groups": "edit"})

    is_valid, errors = validate_mode_config(
        {"slug": "review", "name": "Review", "role_definition": "Reviews", "tool_groups": "read"}
    )
    assert not is_valid
    assert "Field 'tool_groups' must be an array" in errors


@allure.feature("Built-in Modes")
@allure.story("Built-in mode definitions")
@allure.severity(allure.severity_level.CRITICAL)
def test_builtin_modes():
    assert BUILTIN_SLUGS == ["code", "architect", "ask"]
    assert set(CODE_MODE.tool_groups) == VALID_TOOL_GROUPS
    assert ARCHITECT_MODE.tool_groups == ("read", "browser", "mcp")
    assert get_builtin_mode("ask").tool_groups == ("read", "browser", "mcp")
    assert get_builtin_mode("debug") is None

    for mode in BUILTIN_MODES:
        is_valid, errors = validate_mode_config(mode.to_dict())
        assert is_valid, f"Built-in mode '{mode.slug}' is invalid: {errors}"


@allure.feature("Mode Registry")
@allure.story("Registry construction checks")
@allure.severity(allure.severity_level.CRITICAL)
def test_registry_rejects_bad_definitions():
    groups = ToolGroupRegistry({"read": ["read_file"]})
    reader = ModeConfig(slug="reader", name="Reader", role_definition="Reads", tool_groups=["read"])

    with pytest.raises(ModeValidationError) as exc_info:
        ModeRegistry([reader, reader], groups)
    assert "reader" in str(exc_info.value)

    writer = ModeConfig(slug="writer", name="Writer", role_definition="Writes", tool_groups=["edit"])
    with pytest.raises(UnknownGroupError) as group_info:
        ModeRegistry([reader, writer], groups)
    assert group_info.value.group == "edit"


@allure.feature("Mode Registry")
@allure.story("Resolution order")
@allure.severity(allure.severity_level.CRITICAL)
@settings(max_examples=100)
@given(slug=st.sampled_from(BUILTIN_SLUGS), data=st.data())
def test_custom_mode_replaces_builtin(slug: str, data):
    """
    For any custom mode sharing a built-in slug, resolve SHALL return the
    custom mode itself, with its own groups only.
    """
    registry = get_mode_registry()
    override = data.draw(mode_config_strategy(slug=slug))

    resolved = registry.resolve(slug, [override])

    assert resolved is override
    assert resolved.tool_groups == override.tool_groups
    assert registry.lookup(slug) is get_builtin_mode(slug)


@allure.feature("Mode Registry")
@allure.story("Unknown modes")
@allure.severity(allure.severity_level.CRITICAL)
@settings(max_examples=100)
@given(slug=st.text(max_size=20).filter(lambda s: s not in BUILTIN_SLUGS), customs=st.lists(mode_config_strategy(), max_size=3))
def test_unknown_mode_raises(slug: str, customs: list[ModeConfig]):
    """
    For any slug matching no custom or built-in mode, resolve SHALL raise
    UnknownModeError rather than fall back to a default.
    """
    registry = get_mode_registry()
    customs = [mode for mode in customs if mode.slug != slug]

    with pytest.raises(UnknownModeError) as exc_info:
        registry.resolve(slug, customs)

    assert exc_info.value.slug == slug
    assert not registry.has_mode(slug, customs)


def test_resolve_prefers_first_custom_mode():
    registry = get_mode_registry()
    first = ModeConfig(slug="helper", name="First", role_definition="First helper", tool_groups=["read"])
    second = ModeConfig(slug="helper", name="Second", role_definition="Second helper", tool_groups=["edit"])

    assert registry.resolve("helper", [first, second]) is first
    assert registry.resolve("code", None) is CODE_MODE
    assert registry.has_mode("helper", [second])
    assert registry.lookup("helper") is None
    assert registry.lookup(None) is None


@allure.feature("Mode Registry")
@allure.story("Effective mode listing")
@allure.severity(allure.severity_level.NORMAL)
def test_list_modes_substitutes_and_appends():
    registry = get_mode_registry()
    narrowed_ask = ModeConfig(slug="ask", name="Quiet Ask", role_definition="Answers only", tool_groups=["read"])
    review = ModeConfig(slug="review", name="Review", role_definition="Reviews code", tool_groups=["read"])
    review_dup = ModeConfig(slug="review", name="Review 2", role_definition="Reviews again")

    modes = registry.list_modes([review, narrowed_ask, review_dup])

    assert [mode.slug for mode in modes] == ["code", "architect", "ask", "review"]
    assert modes[2] is narrowed_ask
    assert modes[3] is review
    assert registry.list_modes() == list(BUILTIN_MODES)
    assert registry.slugs == tuple(BUILTIN_SLUGS)


@allure.feature("Mode Registry")
@allure.story("Malformed custom entries")
@allure.severity(allure.severity_level.CRITICAL)
def test_registry_skips_entries_that_are_not_modes():
    registry = get_mode_registry()
    review = ModeConfig(slug="review", name="Review", role_definition="Reviews code", tool_groups=["read"])
    garbage = [None, 7, "code", {"slug": "code", "tool_groups": []}]

    assert registry.resolve("code", garbage) is CODE_MODE
    assert registry.resolve("review", [*garbage, review]) is review
    assert registry.has_mode("code", garbage)
    assert not registry.has_mode("review", garbage)
    assert registry.list_modes(garbage) == list(BUILTIN_MODES)

    with pytest.raises(UnknownModeError):
        registry.resolve("review", garbage)
