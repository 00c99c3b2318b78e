"""Repository protocols (ports) for the tenancy bounded context.

Repositories persist and reconstitute aggregates. None of them open or commit
transactions; application services own transaction boundaries.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from tenancy.domain.aggregates import (
    Agent,
    Department,
    DeptMembership,
    Integration,
    Organization,
    OrgMembership,
)
from tenancy.domain.value_objects import (
    DepartmentId,
    IntegrationType,
    OrganizationId,
    UserId,
)


@runtime_checkable
class IOrganizationRepository(Protocol):
    """Read access to organizations (provisioned outside this service)."""

    async def get_by_id(self, organization_id: OrganizationId) -> Organization | None:
        """Retrieve an organization by its ID."""
        ...


@runtime_checkable
class IOrgMembershipRepository(Protocol):
    """Read access to organization memberships."""

    async def get(
        self, user_id: UserId, organization_id: OrganizationId
    ) -> OrgMembership | None:
        """Retrieve the membership of ``user_id`` in ``organization_id``.

        Uses the (user, organization) unique index.
        """
        ...


@runtime_checkable
class IDepartmentRepository(Protocol):
    """Repository for Department aggregate persistence."""

    async def save(self, department: Department) -> None:
        """Insert or update a department.

        Raises:
            sqlalchemy.exc.IntegrityError: If the slug collides on insert
        """
        ...

    async def get_by_id(self, department_id: DepartmentId) -> Department | None:
        """Retrieve a department by its ID."""
        ...

    async def get_by_slug(self, slug: str) -> Department | None:
        """Retrieve a department by its globally unique slug."""
        ...

    async def list_by_organization(
        self, organization_id: OrganizationId, limit: int
    ) -> list[Department]:
        """List an organization's departments, newest first, at most ``limit``."""
        ...

    async def list_all(self) -> list[Department]:
        """List every department regardless of organization."""
        ...

    async def count_by_organization(self, organization_id: OrganizationId) -> int:
        """Count the departments an organization owns."""
        ...

    async def delete(self, department: Department) -> bool:
        """Delete the department row.

        Returns:
            True if a row was deleted
        """
        ...


@runtime_checkable
class IDeptMembershipRepository(Protocol):
    """Repository for department memberships."""

    async def get(
        self, user_id: UserId, department_id: DepartmentId
    ) -> DeptMembership | None:
        """Retrieve the membership of ``user_id`` in ``department_id``."""
        ...

    async def list_by_user(self, user_id: UserId) -> list[DeptMembership]:
        """List every department membership of a user."""
        ...

    async def add(self, membership: DeptMembership) -> None:
        """Insert a membership.

        Raises:
            sqlalchemy.exc.IntegrityError: If (user, department) already exists
        """
        ...


@runtime_checkable
class IAgentRepository(Protocol):
    """Repository for department agents."""

    async def get_by_session_key(
        self, department_id: DepartmentId, session_key: str
    ) -> Agent | None:
        """Retrieve an agent by its (department, session key) pair."""
        ...

    async def add(self, agent: Agent) -> None:
        """Insert an agent.

        Raises:
            sqlalchemy.exc.IntegrityError: If the session key exists in the department
        """
        ...

    async def count_by_department(self, department_id: DepartmentId) -> int:
        """Count agents in a department (quota checks)."""
        ...


@runtime_checkable
class IIntegrationRepository(Protocol):
    """Repository for integration configuration records."""

    async def get_by_organization_and_type(
        self, organization_id: OrganizationId, type: IntegrationType
    ) -> Integration | None:
        """Retrieve the org-scoped record for ``type``."""
        ...

    async def get_by_department_and_type(
        self, department_id: DepartmentId, type: IntegrationType
    ) -> Integration | None:
        """Retrieve a legacy department-scoped record for ``type``."""
        ...

    async def list_by_organization(
        self, organization_id: OrganizationId
    ) -> list[Integration]:
        """List every record owned by an organization."""
        ...

    async def save(self, integration: Integration) -> None:
        """Insert or update an integration record.

        Raises:
            sqlalchemy.exc.IntegrityError: If (organization, type) collides on insert
        """
        ...


@runtime_checkable
class DepartmentScopedCollection(Protocol):
    """A collection of records owned by a department.

    Department removal walks a registry of these; adding a department-owned
    table means registering one more collection.
    """

    @property
    def name(self) -> str:
        """Stable collection name used in cascade reports."""
        ...

    async def delete_by_department(self, department_id: DepartmentId) -> int:
        """Delete every record of the department, returning the count removed."""
        ...

    async def count_by_department(self, department_id: DepartmentId) -> int:
        """Count the records the department still owns."""
        ...
