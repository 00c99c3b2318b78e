"""Application-layer value objects for the tenancy bounded context.

Read-only result objects returned by the application services.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from tenancy.domain.aggregates import Department, DeptMembership
from tenancy.domain.value_objects import IntegrationId, Role, UserId


@dataclass(frozen=True)
class AuthenticatedUser:
    """The caller of the current request, as resolved from its bearer token."""

    user_id: UserId
    username: str | None = None


@dataclass(frozen=True)
class MembershipResult:
    """Outcome of enrolling a user in a department.

    Attributes:
        membership: The stored membership (existing or newly inserted)
        already_member: True when the membership existed before the call
    """

    membership: DeptMembership
    already_member: bool


@dataclass(frozen=True)
class DepartmentWithRole:
    """A department annotated with the caller's department role."""

    department: Department
    role: Role


@dataclass(frozen=True)
class CascadeReport:
    """Rows deleted per department-scoped collection during removal."""

    department_id: str
    deleted: dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.deleted.values())


@dataclass(frozen=True)
class RepairReport:
    """Outcome of relinking every department to one organization."""

    organization_id: str
    organization_name: str
    total_departments: int
    updated: int
    already_linked: int


@dataclass(frozen=True)
class UpsertResult:
    """Outcome of writing an integration configuration."""

    integration_id: IntegrationId
    created: bool


@dataclass(frozen=True)
class DisconnectResult:
    """Outcome of dropping an integration's OAuth grant."""

    disconnected: bool
