"""Domain exceptions for the authorization core.

Business rule violations, independent of infrastructure. The presentation
layer maps them to HTTP responses by error_code (see
authcore.core.exception_handlers). Expected denials in tenant resolution and
permission evaluation are return values, not exceptions; these are raised by
RoleStore mutations, request guards, and permission parsing.
"""

from typing import Any


class AuthcoreException(Exception):
    """Base exception for all authcore errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, person_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Response body: error, message, and details when present."""
        body: dict[str, Any] = {"error": self.error_code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationException(AuthcoreException):
    """Raised when input validation fails (e.g. unknown role type)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(AuthcoreException):
    """Raised when the request carries no valid principal."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, "NOT_AUTHENTICATED")


class AuthorizationException(AuthcoreException):
    """Raised when the principal lacks the permission an operation requires."""

    def __init__(
        self,
        required: str | None = None,
        context: dict[str, Any] | None = None,
        message: str = "Insufficient permissions",
    ) -> None:
        """Initialize with the required permission and the evaluated context.

        Args:
            required: Permission identifier that was checked.
            context: Context the check ran against (tenant_id, company_id, ...).
            message: Human-readable message.
        """
        details: dict[str, Any] = {}
        if required:
            details["required"] = required
            details["context"] = context or {}
        super().__init__(message, "PERMISSION_DENIED", details)


class TenantNotFoundException(AuthcoreException):
    """Raised when no active tenant matches the request."""

    def __init__(self, host: str | None, path: str) -> None:
        super().__init__(
            "Tenant not found or inactive",
            "NO_TENANT",
            {"host": host, "path": path},
        )


class HostRequiredException(AuthcoreException):
    """Raised when a tenant-scoped request arrives without a Host header."""

    def __init__(self, path: str) -> None:
        super().__init__("Host header is required", "HOST_REQUIRED", {"path": path})


class TenantMismatchException(AuthcoreException):
    """Raised when the authenticated person does not belong to the resolved tenant."""

    def __init__(self, person_id: str, tenant_id: str) -> None:
        super().__init__(
            "Access denied: user does not belong to this tenant",
            "TENANT_MISMATCH",
            {"person_id": person_id, "tenant_id": tenant_id},
        )


class PersonNotInTenantException(AuthcoreException):
    """Raised when a role is assigned to a person outside the target tenant."""

    def __init__(self, person_id: str, tenant_id: str) -> None:
        """Initialize with person and tenant.

        Args:
            person_id: Person the assignment was requested for.
            tenant_id: Tenant the person was expected to belong to.
        """
        super().__init__(
            f"Person {person_id} does not belong to tenant {tenant_id}",
            "PERSON_NOT_IN_TENANT",
            {"person_id": person_id, "tenant_id": tenant_id},
        )


class ResourceNotFoundException(AuthcoreException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'person', 'role_assignment').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class UnknownPermissionException(AuthcoreException):
    """Raised when a permission string is not in the closed permission set."""

    def __init__(self, permission: str) -> None:
        super().__init__(
            f"Unknown permission: {permission}",
            "UNKNOWN_PERMISSION",
            {"permission": permission},
        )


class DuplicateAssignmentException(AuthcoreException):
    """Raised when an active assignment collides and cannot be refreshed."""

    def __init__(
        self,
        message: str,
        assignment_type: str,
        details_extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with message and assignment context.

        Args:
            message: Human-readable description.
            assignment_type: 'person_role' or 'role_permission'.
            details_extra: Optional extra keys (e.g. person_id, role_type).
        """
        details = dict(details_extra or {})
        details["assignment_type"] = assignment_type
        super().__init__(message, "DUPLICATE_ASSIGNMENT", details)


class SyntheticAssignmentError(AuthcoreException):
    """Raised when a mutation targets the synthetic global-role assignment."""

    def __init__(self, person_id: str) -> None:
        super().__init__(
            "Global roles are not stored as role assignments and cannot be modified here",
            "SYNTHETIC_ASSIGNMENT",
            {"person_id": person_id},
        )


class DataLayerException(AuthcoreException):
    """Raised when a repository fails in a way callers should surface as 500."""

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message, "DATA_LAYER_ERROR")
