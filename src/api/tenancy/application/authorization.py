"""Authorization resolution across the organization and department scopes.

Every check either returns the resolved role (or record) or raises; callers
never receive a partial answer. Checks are reads only and run inside the
caller's transaction.
"""

from __future__ import annotations

from collections.abc import Iterable

from tenancy.application.observability import (
    AuthorizationProbe,
    DefaultAuthorizationProbe,
)
from tenancy.domain.aggregates import Department, DeptMembership
from tenancy.domain.value_objects import (
    DepartmentId,
    LinkedTo,
    OrganizationId,
    Role,
    Unlinked,
    UserId,
)
from tenancy.ports.exceptions import (
    AccessDeniedError,
    DepartmentNotFoundError,
    DepartmentNotLinkedError,
    UnauthenticatedError,
)
from tenancy.ports.gates import IdentityProvider
from tenancy.ports.repositories import (
    IDepartmentRepository,
    IDeptMembershipRepository,
    IOrgMembershipRepository,
)

NOT_ORG_MEMBER = "Access denied: not a member of this organization."
ADMIN_REQUIRED = "Access denied: admin or owner role required."
NOT_DEPARTMENT_MEMBER = "Access denied: not a member of this department."
OPERATOR_REQUIRED = "Access denied: system operator required."


class AuthorizationResolver:
    """Resolves a caller's permissions for organizations and departments.

    Org-scoped checks on a department first resolve the department's owning
    organization, so a department admin without an org role cannot pass an
    org-level check.
    """

    def __init__(
        self,
        identity: IdentityProvider,
        org_membership_repository: IOrgMembershipRepository,
        department_repository: IDepartmentRepository,
        dept_membership_repository: IDeptMembershipRepository,
        operator_user_ids: Iterable[str] = (),
        probe: AuthorizationProbe | None = None,
    ):
        """Initialize AuthorizationResolver with dependencies.

        Args:
            identity: Source of the current caller
            org_membership_repository: Organization membership lookups
            department_repository: Department lookups
            dept_membership_repository: Department membership lookups
            operator_user_ids: Users allowed to run maintenance operations
            probe: Optional domain probe for observability
        """
        self._identity = identity
        self._org_memberships = org_membership_repository
        self._departments = department_repository
        self._dept_memberships = dept_membership_repository
        self._operator_user_ids = frozenset(operator_user_ids)
        self._probe = probe or DefaultAuthorizationProbe()

    def require_authenticated_user(self) -> UserId:
        """Return the caller's user id.

        Raises:
            UnauthenticatedError: If the request carries no identity
        """
        user_id = self._identity.current_user_id()
        if user_id is None:
            self._probe.unauthenticated_request()
            raise UnauthenticatedError()
        return user_id

    async def require_org_membership(
        self, user_id: UserId, organization_id: OrganizationId
    ) -> Role:
        """Return the caller's stored role in the organization.

        Raises:
            AccessDeniedError: If the user is not a member
        """
        membership = await self._org_memberships.get(user_id, organization_id)
        if membership is None:
            self._deny(user_id, "organization", organization_id.value, "not_a_member")
            raise AccessDeniedError(NOT_ORG_MEMBER)

        self._probe.access_granted(
            user_id=user_id.value,
            scope="organization",
            scope_id=organization_id.value,
            role=membership.role.value,
        )
        return membership.role

    async def require_org_admin_membership(
        self, user_id: UserId, organization_id: OrganizationId
    ) -> Role:
        """Return the caller's role if it is owner or admin.

        Raises:
            AccessDeniedError: If the user is not a member, or only a member
        """
        role = await self.require_org_membership(user_id, organization_id)
        if not role.has_admin_privileges:
            self._deny(user_id, "organization", organization_id.value, "admin_required")
            raise AccessDeniedError(ADMIN_REQUIRED)
        return role

    async def require_department_with_org(
        self, department_id: DepartmentId
    ) -> Department:
        """Load a department that is linked to an organization.

        Raises:
            DepartmentNotFoundError: If the department does not exist
            DepartmentNotLinkedError: If the department has no organization
        """
        department, _ = await self._department_and_org(department_id)
        return department

    async def _department_and_org(
        self, department_id: DepartmentId
    ) -> tuple[Department, OrganizationId]:
        department = await self._departments.get_by_id(department_id)
        if department is None:
            self._probe.department_not_found(department_id=department_id.value)
            raise DepartmentNotFoundError()

        match department.org_link:
            case LinkedTo(organization_id=organization_id):
                return department, organization_id
            case Unlinked():
                self._probe.department_not_linked(department_id=department_id.value)
                raise DepartmentNotLinkedError()

    async def require_department_org_membership(
        self, user_id: UserId, department_id: DepartmentId
    ) -> tuple[Department, Role]:
        """Authorize the caller as a member of the department's organization."""
        department, organization_id = await self._department_and_org(department_id)
        role = await self.require_org_membership(user_id, organization_id)
        return department, role

    async def require_department_org_admin_membership(
        self, user_id: UserId, department_id: DepartmentId
    ) -> tuple[Department, Role]:
        """Authorize the caller as owner/admin of the department's organization."""
        department, organization_id = await self._department_and_org(department_id)
        role = await self.require_org_admin_membership(user_id, organization_id)
        return department, role

    async def require_department_membership(
        self, user_id: UserId, department_id: DepartmentId
    ) -> DeptMembership:
        """Authorize the caller as a direct member of the department.

        A department membership is only honored while the user still belongs
        to the department's organization; unlinked departments rely on the
        department membership alone.

        Raises:
            DepartmentNotFoundError: If the department does not exist
            AccessDeniedError: If either membership is missing
        """
        department = await self._departments.get_by_id(department_id)
        if department is None:
            self._probe.department_not_found(department_id=department_id.value)
            raise DepartmentNotFoundError()

        membership = await self._dept_memberships.get(user_id, department_id)
        if membership is None:
            self._deny(user_id, "department", department_id.value, "not_a_member")
            raise AccessDeniedError(NOT_DEPARTMENT_MEMBER)

        match department.org_link:
            case LinkedTo(organization_id=organization_id):
                await self.require_org_membership(user_id, organization_id)
            case Unlinked():
                pass

        self._probe.access_granted(
            user_id=user_id.value,
            scope="department",
            scope_id=department_id.value,
            role=membership.role.value,
        )
        return membership

    def require_system_operator(self, user_id: UserId) -> None:
        """Allow only configured operators (maintenance operations).

        Raises:
            AccessDeniedError: If the user is not on the operator allow-list
        """
        if user_id.value not in self._operator_user_ids:
            self._deny(user_id, "system", "maintenance", "operator_required")
            raise AccessDeniedError(OPERATOR_REQUIRED)

    def _deny(self, user_id: UserId, scope: str, scope_id: str, reason: str) -> None:
        self._probe.access_denied(
            user_id=user_id.value, scope=scope, scope_id=scope_id, reason=reason
        )
