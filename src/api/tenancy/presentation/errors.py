"""HTTP mapping of tenancy exceptions."""

from __future__ import annotations

from fastapi import HTTPException, status

from tenancy.domain.value_objects import DepartmentId, OrganizationId
from tenancy.ports.exceptions import (
    AccessDeniedError,
    CascadeIncompleteError,
    ConflictError,
    DepartmentNotFoundError,
    DepartmentSeedingError,
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
    OrganizationNotFoundError,
    PlanRestrictedError,
    QuotaExceededError,
    UnauthenticatedError,
)

# Checked in order; subclasses before their bases.
_STATUS_BY_ERROR: tuple[tuple[type[Exception], int], ...] = (
    (UnauthenticatedError, status.HTTP_401_UNAUTHORIZED),
    (AccessDeniedError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (InvalidStateError, status.HTTP_409_CONFLICT),
    (CascadeIncompleteError, status.HTTP_409_CONFLICT),
    (InvalidArgumentError, status.HTTP_400_BAD_REQUEST),
    (QuotaExceededError, status.HTTP_402_PAYMENT_REQUIRED),
    (PlanRestrictedError, status.HTTP_402_PAYMENT_REQUIRED),
    (DepartmentSeedingError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)

TENANCY_ERRORS: tuple[type[Exception], ...] = tuple(
    error for error, _ in _STATUS_BY_ERROR
)


def to_http_exception(error: Exception) -> HTTPException:
    """Translate a tenancy exception into the matching HTTPException."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            headers = (
                {"WWW-Authenticate": "Bearer"}
                if status_code == status.HTTP_401_UNAUTHORIZED
                else None
            )
            return HTTPException(
                status_code=status_code, detail=str(error), headers=headers
            )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal server error",
    )


def parse_organization_id(value: str) -> OrganizationId:
    """Parse an organization id from a path, answering 404 when malformed."""
    try:
        return OrganizationId.from_string(value)
    except ValueError as e:
        raise to_http_exception(OrganizationNotFoundError()) from e


def parse_department_id(value: str) -> DepartmentId:
    """Parse a department id from a path, answering 404 when malformed."""
    try:
        return DepartmentId.from_string(value)
    except ValueError as e:
        raise to_http_exception(DepartmentNotFoundError()) from e
