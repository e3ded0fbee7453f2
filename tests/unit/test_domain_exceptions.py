"""Tests for domain exceptions (error_code, message, details, to_dict)."""

from authcore.core.exception_handlers import status_for
from authcore.domain.exceptions import (
    AuthcoreException,
    AuthenticationException,
    AuthorizationException,
    DataLayerException,
    DuplicateAssignmentException,
    HostRequiredException,
    PersonNotInTenantException,
    ResourceNotFoundException,
    SyntheticAssignmentError,
    TenantMismatchException,
    TenantNotFoundException,
    UnknownPermissionException,
    ValidationException,
)


def test_base_exception_defaults_error_code_to_class_name() -> None:
    exc = AuthcoreException("Something failed")
    assert exc.error_code == "AuthcoreException"
    assert exc.details == {}
    assert exc.to_dict() == {"error": "AuthcoreException", "message": "Something failed"}


def test_to_dict_includes_details_when_present() -> None:
    exc = AuthcoreException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {"error": "CUSTOM", "message": "Oops", "details": {"key": "value"}}


def test_authentication_exception_body() -> None:
    assert AuthenticationException().to_dict() == {
        "error": "NOT_AUTHENTICATED",
        "message": "Authentication required",
    }


def test_authorization_exception_body() -> None:
    exc = AuthorizationException(required="VIEW_ROLES", context={"tenant_id": "t-1"})
    assert exc.to_dict() == {
        "error": "PERMISSION_DENIED",
        "message": "Insufficient permissions",
        "details": {"required": "VIEW_ROLES", "context": {"tenant_id": "t-1"}},
    }
    assert AuthorizationException().details == {}


def test_tenant_not_found_body() -> None:
    exc = TenantNotFoundException("nowhere.example.com", "/api/v1/tenants/current")
    assert exc.to_dict() == {
        "error": "NO_TENANT",
        "message": "Tenant not found or inactive",
        "details": {"host": "nowhere.example.com", "path": "/api/v1/tenants/current"},
    }


def test_duplicate_assignment_details() -> None:
    exc = DuplicateAssignmentException(
        "dup", assignment_type="person_role", details_extra={"role_type": "EMPLOYEE"}
    )
    assert exc.details == {"role_type": "EMPLOYEE", "assignment_type": "person_role"}


def test_status_codes() -> None:
    assert status_for(ValidationException("bad")) == 400
    assert status_for(HostRequiredException("/x")) == 400
    assert status_for(UnknownPermissionException("X")) == 400
    assert status_for(SyntheticAssignmentError("p-1")) == 400
    assert status_for(AuthenticationException()) == 401
    assert status_for(AuthorizationException()) == 403
    assert status_for(TenantMismatchException("p-1", "t-1")) == 403
    assert status_for(PersonNotInTenantException("p-1", "t-1")) == 403
    assert status_for(TenantNotFoundException(None, "/x")) == 404
    assert status_for(ResourceNotFoundException("person", "p-1")) == 404
    assert status_for(DuplicateAssignmentException("d", "person_role")) == 409
    assert status_for(DataLayerException()) == 500
    assert status_for(AuthcoreException("other")) == 400
