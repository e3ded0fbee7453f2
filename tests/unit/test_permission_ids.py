"""Tests for permission identifiers: parsing, aliases, and (action, resource) mapping."""

import pytest

from authcore.domain.exceptions import UnknownPermissionException
from authcore.domain.permissions import (
    IRREGULAR_ALIASES,
    Permission,
    action_resource,
    encode_action_resource,
    parse_permission,
    permission_for_resource_action,
    try_parse_permission,
)


def test_parse_permission_normalizes_case_and_whitespace() -> None:
    assert parse_permission("  view_companies ") is Permission.VIEW_COMPANIES
    assert parse_permission(Permission.ASSIGN_ROLES) is Permission.ASSIGN_ROLES


def test_parse_permission_rejects_unknown_identifier() -> None:
    with pytest.raises(UnknownPermissionException) as exc_info:
        parse_permission("FLY_TO_MOON")
    assert exc_info.value.error_code == "UNKNOWN_PERMISSION"
    assert exc_info.value.details == {"permission": "FLY_TO_MOON"}


def test_try_parse_permission_returns_none_for_unknown() -> None:
    assert try_parse_permission("NOPE") is None
    assert try_parse_permission("edit_users") is Permission.EDIT_USERS


@pytest.mark.parametrize(
    ("permission", "expected"),
    [
        (Permission.VIEW_COMPANIES, ("view", "companies")),
        (Permission.EXPORT_GDPR_DATA, ("export", "gdpr_data")),
        (Permission.ROLE_MANAGEMENT, ("manage", "roles")),
        (Permission.ADMIN_PANEL, ("view", "administration")),
    ],
)
def test_action_resource(permission: Permission, expected: tuple[str, str]) -> None:
    assert action_resource(permission) == expected


def test_every_alias_is_a_permission() -> None:
    """Irregular identifiers are still members of the closed set."""
    for alias in IRREGULAR_ALIASES:
        assert parse_permission(alias) in Permission


def test_encode_action_resource() -> None:
    assert encode_action_resource("view", "companies") == "VIEW_COMPANIES"


@pytest.mark.parametrize(
    ("resource", "action", "expected"),
    [
        ("companies", "read", Permission.VIEW_COMPANIES),
        ("employees", "update", Permission.EDIT_EMPLOYEES),
        ("Courses", "DELETE", Permission.DELETE_COURSES),
        ("reports", "export", Permission.EXPORT_REPORTS),
        ("roles", "manage", Permission.ROLE_MANAGEMENT),
        ("settings", "manage", Permission.SYSTEM_SETTINGS),
        ("users", "manage", Permission.MANAGE_USERS),
        ("administration", "read", Permission.VIEW_ADMINISTRATION),
    ],
)
def test_permission_for_resource_action(
    resource: str, action: str, expected: Permission
) -> None:
    assert permission_for_resource_action(resource, action) is expected


def test_permission_for_resource_action_unmappable() -> None:
    assert permission_for_resource_action("companies", "teleport") is None
    assert permission_for_resource_action("spaceships", "read") is None
