from __future__ import annotations

from starlette import status


class TenancyError(Exception):
    """Base for failures of tenant validation, provisioning and resolution.

    ``status_code`` is the HTTP status the API layer reports for the error.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class ValidationError(TenancyError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, candidate: object, reason: str, *, field: str = "schema name") -> None:
        super().__init__(f"Invalid {field} {candidate!r}: {reason}")
        self.candidate = candidate
        self.reason = reason


class DuplicateTenantError(TenancyError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, schema_name: str) -> None:
        super().__init__(f"Tenant schema {schema_name!r} already exists")
        self.schema_name = schema_name


class ProvisioningError(TenancyError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, schema_name: str, cause: BaseException) -> None:
        super().__init__(f"Failed to provision tenant schema {schema_name!r}")
        self.schema_name = schema_name
        self.cause = cause


class TenantNotFoundError(TenancyError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, identifier: str) -> None:
        super().__init__("Tenant not found")
        self.identifier = identifier


class TenantSuspendedError(TenancyError):
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, identifier: str) -> None:
        super().__init__("Tenant is suspended")
        self.identifier = identifier


class TenantContextMissingError(TenancyError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str = "Tenant context missing", *, status_code: int | None = None) -> None:
        super().__init__(detail)
        if status_code is not None:
            self.status_code = status_code
