"""Domain exceptions for the tenancy bounded context.

Every failure of an authorization check or a lifecycle operation surfaces as
one of these exceptions. The presentation layer maps each family to an HTTP
status; nothing here knows about HTTP.
"""

from __future__ import annotations


class UnauthenticatedError(Exception):
    """Raised when the caller has no authenticated identity."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class AccessDeniedError(Exception):
    """Raised when the caller lacks the membership or role a scope requires."""

    pass


class NotFoundError(Exception):
    """Raised when a referenced record does not exist."""

    pass


class OrganizationNotFoundError(NotFoundError):
    """Raised when an organization id does not resolve."""

    def __init__(self, message: str = "Organization not found.") -> None:
        super().__init__(message)


class DepartmentNotFoundError(NotFoundError):
    """Raised when a department id does not resolve."""

    def __init__(self, message: str = "Department not found.") -> None:
        super().__init__(message)


class InvalidStateError(Exception):
    """Raised when a record exists but is not in a usable state."""

    pass


class DepartmentNotLinkedError(InvalidStateError):
    """Raised when an org-scoped check hits a department with no organization.

    Legacy departments predate organizations. They stay readable but cannot
    pass org-level authorization until ``link_departments_to_organization``
    repairs them.
    """

    def __init__(
        self, message: str = "Department has no organization linked."
    ) -> None:
        super().__init__(message)


class ConflictError(Exception):
    """Raised when a write collides with existing data."""

    pass


class DuplicateDepartmentSlugError(ConflictError):
    """Raised when creating a department whose slug is already taken.

    Slugs are globally unique, across organizations.
    """

    def __init__(self, slug: str) -> None:
        self.slug = slug
        super().__init__(f'Department with slug "{slug}" already exists')


class DepartmentOrganizationMismatchError(ConflictError):
    """Raised when a department is presented together with a foreign organization."""

    def __init__(
        self,
        message: str = "Department does not belong to the provided organization.",
    ) -> None:
        super().__init__(message)


class InvalidArgumentError(ValueError):
    """Raised when an input fails validation (blank names, bad limits)."""

    pass


class QuotaExceededError(Exception):
    """Raised by the quota gate when a plan limit is reached."""

    pass


class PlanRestrictedError(Exception):
    """Raised by the integration gate when the plan excludes an integration type."""

    pass


class DepartmentSeedingError(Exception):
    """Raised when a post-creation hook fails after the department committed.

    The department exists; the hook can be retried with ``seed_department``.
    """

    def __init__(self, department_id: str, hook: str, cause: Exception) -> None:
        self.department_id = department_id
        self.hook = hook
        super().__init__(
            f"Post-creation hook '{hook}' failed for department "
            f"{department_id}: {cause}"
        )


class CascadeIncompleteError(Exception):
    """Raised when department-scoped rows survive the removal cascade.

    The surrounding transaction is rolled back, so nothing is deleted.
    """

    def __init__(self, department_id: str, remaining: dict[str, int]) -> None:
        self.department_id = department_id
        self.remaining = remaining
        details = ", ".join(f"{name}={count}" for name, count in remaining.items())
        super().__init__(
            f"Cascade for department {department_id} left rows behind: {details}"
        )
