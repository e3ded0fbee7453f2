"""Tests for the built-in role -> default permission catalog."""

import pytest

from authcore.application.services.permission_catalog import (
    CATALOG_VERSION,
    PermissionCatalog,
    catalog,
)
from authcore.domain.enums import RoleType, custom_role_marker
from authcore.domain.permissions import Permission


def test_every_role_type_has_an_entry() -> None:
    assert set(catalog.table) == set(RoleType)


def test_super_admin_has_every_permission() -> None:
    assert catalog.permissions_for("SUPER_ADMIN") == frozenset(Permission)


def test_admin_lacks_tenant_provisioning() -> None:
    admin = catalog.permissions_for(RoleType.ADMIN)
    assert Permission.CREATE_TENANTS not in admin
    assert Permission.TENANT_MANAGEMENT not in admin
    assert Permission.ASSIGN_ROLES in admin


def test_trainer_defaults() -> None:
    assert catalog.permissions_for("TRAINER") == {
        Permission.VIEW_USERS,
        Permission.VIEW_COURSES,
        Permission.VIEW_EMPLOYEES,
        Permission.VIEW_SCHEDULES,
        Permission.VIEW_REPORTS,
    }


def test_roles_without_defaults_are_empty() -> None:
    assert catalog.permissions_for(RoleType.GUEST) == frozenset()
    assert catalog.permissions_for(RoleType.AUDITOR) == frozenset()


def test_custom_and_unknown_role_types_have_no_defaults() -> None:
    assert catalog.permissions_for(custom_role_marker("abc")) == frozenset()
    assert catalog.permissions_for("WIZARD") == frozenset()
    assert not catalog.grants("WIZARD", Permission.VIEW_COURSES)


def test_catalog_is_read_only_and_versioned() -> None:
    fresh = PermissionCatalog()
    assert fresh.version == CATALOG_VERSION
    with pytest.raises(TypeError):
        fresh.table[RoleType.GUEST] = frozenset({Permission.VIEW_COURSES})  # type: ignore[index]
    assert fresh.permissions_for(RoleType.GUEST) == frozenset()
