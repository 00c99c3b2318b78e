"""Department application service for the tenancy bounded context.

Handles the department lifecycle: creation (with post-creation hooks),
lookups and listings, membership enrollment, renaming, cascading removal and
the organization relink repair.
"""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tenancy.application.authorization import AuthorizationResolver
from tenancy.application.hooks import PostCreationHook
from tenancy.application.observability import (
    DefaultDepartmentServiceProbe,
    DepartmentServiceProbe,
)
from tenancy.application.value_objects import (
    CascadeReport,
    DepartmentWithRole,
    MembershipResult,
    RepairReport,
)
from tenancy.domain.aggregates import Department, DeptMembership
from tenancy.domain.value_objects import (
    DepartmentId,
    DepartmentPlan,
    LimitedResource,
    OrganizationId,
    Role,
    UserId,
)
from tenancy.ports.exceptions import (
    CascadeIncompleteError,
    DepartmentNotFoundError,
    DepartmentSeedingError,
    DuplicateDepartmentSlugError,
    InvalidArgumentError,
    OrganizationNotFoundError,
)
from tenancy.ports.gates import QuotaGate
from tenancy.ports.repositories import (
    DepartmentScopedCollection,
    IDepartmentRepository,
    IDeptMembershipRepository,
    IOrganizationRepository,
)

DEFAULT_LIST_LIMIT = 50


class DepartmentService:
    """Application service for department lifecycle management.

    Creation is two-phase: the department row commits first, then each
    post-creation hook runs in its own transaction. Removal is a single
    transaction covering every registered department-scoped collection and
    the department row itself.
    """

    def __init__(
        self,
        session: AsyncSession,
        authorization: AuthorizationResolver,
        organization_repository: IOrganizationRepository,
        department_repository: IDepartmentRepository,
        dept_membership_repository: IDeptMembershipRepository,
        cascade: Sequence[DepartmentScopedCollection],
        quota_gate: QuotaGate,
        hooks: Sequence[PostCreationHook] = (),
        hook_attempts: int = 2,
        default_list_limit: int = DEFAULT_LIST_LIMIT,
        probe: DepartmentServiceProbe | None = None,
    ):
        """Initialize DepartmentService with dependencies.

        Args:
            session: Database session for transaction management
            authorization: Resolver bound to the same session
            organization_repository: Organization lookups
            department_repository: Department persistence
            dept_membership_repository: Department membership persistence
            cascade: Department-scoped collections, in deletion order
            quota_gate: Plan quota enforcement
            hooks: Ordered post-creation hooks
            hook_attempts: Attempts per hook when it hits a unique-constraint race
            default_list_limit: Page size when list_departments gets no limit
            probe: Optional domain probe for observability
        """
        self._session = session
        self._authz = authorization
        self._organizations = organization_repository
        self._departments = department_repository
        self._dept_memberships = dept_membership_repository
        self._cascade = tuple(cascade)
        self._quota_gate = quota_gate
        self._hooks = tuple(hooks)
        self._hook_attempts = max(1, hook_attempts)
        self._default_list_limit = default_list_limit
        self._probe = probe or DefaultDepartmentServiceProbe()

    async def create_department(
        self,
        name: str,
        slug: str,
        organization_id: OrganizationId,
        plan: DepartmentPlan | None = None,
    ) -> DepartmentId:
        """Create a department and run the post-creation hooks.

        Callers are expected to have authorized the request (the HTTP route
        requires an org admin); the quota gate always applies.

        Args:
            name: Display name
            slug: Globally unique slug
            organization_id: Owning organization
            plan: Department tier, ``free`` when omitted

        Returns:
            The new department's ID

        Raises:
            InvalidArgumentError: If the name or slug is invalid
            QuotaExceededError: If the organization is at its department limit
            DuplicateDepartmentSlugError: If the slug is taken
            DepartmentSeedingError: If a hook failed after the department committed
        """
        try:
            department = Department.create(
                name=name, slug=slug, organization_id=organization_id, plan=plan
            )
        except ValueError as e:
            raise InvalidArgumentError(str(e)) from e

        async with self._session.begin():
            await self._quota_gate.check_limit(
                organization_id, LimitedResource.DEPARTMENTS
            )

            if await self._departments.get_by_slug(department.slug) is not None:
                self._probe.duplicate_department_slug(slug=department.slug)
                raise DuplicateDepartmentSlugError(department.slug)

            try:
                await self._departments.save(department)
            except IntegrityError as e:
                # Lost a race against a concurrent create with the same slug
                self._probe.duplicate_department_slug(slug=department.slug)
                raise DuplicateDepartmentSlugError(department.slug) from e

        self._probe.department_created(
            department_id=department.id.value,
            slug=department.slug,
            organization_id=organization_id.value,
        )

        await self._run_hooks(department)
        return department.id

    async def seed_department(self, department_id: DepartmentId) -> None:
        """Re-run the post-creation hooks for an existing department.

        Raises:
            DepartmentNotFoundError: If the department does not exist
            DepartmentSeedingError: If a hook fails again
        """
        async with self._session.begin():
            department = await self._departments.get_by_id(department_id)

        if department is None:
            self._probe.department_not_found(department_id=department_id.value)
            raise DepartmentNotFoundError()

        await self._run_hooks(department)

    async def _run_hooks(self, department: Department) -> None:
        for hook in self._hooks:
            await self._run_hook(hook, department)

    async def _run_hook(self, hook: PostCreationHook, department: Department) -> None:
        last_error: Exception | None = None
        for attempt in range(1, self._hook_attempts + 1):
            try:
                async with self._session.begin():
                    changed = await hook.run(department)
            except IntegrityError as e:
                # A concurrent run inserted first; the next attempt finds it.
                last_error = e
                self._probe.post_creation_hook_failed(
                    hook=hook.name,
                    department_id=department.id.value,
                    attempt=attempt,
                    error=str(e),
                )
                continue
            except SQLAlchemyError as e:
                self._probe.post_creation_hook_failed(
                    hook=hook.name,
                    department_id=department.id.value,
                    attempt=attempt,
                    error=str(e),
                )
                raise DepartmentSeedingError(department.id.value, hook.name, e) from e

            self._probe.post_creation_hook_completed(
                hook=hook.name, department_id=department.id.value, changed=changed
            )
            return

        assert last_error is not None
        raise DepartmentSeedingError(
            department.id.value, hook.name, last_error
        ) from last_error

    async def get_department(self, department_id: DepartmentId) -> Department | None:
        """Plain lookup by ID; access is decided by the caller."""
        department = await self._departments.get_by_id(department_id)
        if department is None:
            self._probe.department_not_found(department_id=department_id.value)
        return department

    async def get_department_by_slug(self, slug: str) -> Department | None:
        """Plain lookup by slug; access is decided by the caller."""
        return await self._departments.get_by_slug(slug)

    async def list_departments(
        self,
        organization_id: OrganizationId,
        limit: int | None = None,
    ) -> list[Department]:
        """List an organization's departments, newest first.

        Raises:
            UnauthenticatedError: If there is no caller
            AccessDeniedError: If the caller is not an organization member
            InvalidArgumentError: If ``limit`` is below 1
        """
        user_id = self._authz.require_authenticated_user()
        await self._authz.require_org_membership(user_id, organization_id)

        page_size = self._default_list_limit if limit is None else limit
        if page_size < 1:
            raise InvalidArgumentError("limit must be at least 1")

        departments = await self._departments.list_by_organization(
            organization_id, page_size
        )
        self._probe.departments_listed(
            organization_id=organization_id.value, count=len(departments)
        )
        return departments

    async def add_member(
        self,
        department_id: DepartmentId,
        user_id: UserId,
        role: Role = Role.MEMBER,
    ) -> MembershipResult:
        """Enroll a user in a department; re-adding returns the existing record.

        Raises:
            DepartmentNotFoundError: If the department does not exist
        """
        try:
            async with self._session.begin():
                if await self._departments.get_by_id(department_id) is None:
                    self._probe.department_not_found(department_id=department_id.value)
                    raise DepartmentNotFoundError()

                existing = await self._dept_memberships.get(user_id, department_id)
                if existing is not None:
                    result = MembershipResult(membership=existing, already_member=True)
                else:
                    membership = DeptMembership.create(
                        user_id=user_id, department_id=department_id, role=role
                    )
                    await self._dept_memberships.add(membership)
                    result = MembershipResult(
                        membership=membership, already_member=False
                    )
        except IntegrityError:
            # A concurrent enrollment won; report the stored record.
            async with self._session.begin():
                existing = await self._dept_memberships.get(user_id, department_id)
            if existing is None:
                raise
            result = MembershipResult(membership=existing, already_member=True)

        self._probe.member_added(
            department_id=department_id.value,
            user_id=user_id.value,
            role=result.membership.role.value,
            already_member=result.already_member,
        )
        return result

    async def get_departments_for_user(
        self, user_id: UserId
    ) -> list[DepartmentWithRole]:
        """Resolve every department the user belongs to, with the user's role.

        Memberships pointing at deleted departments are skipped.
        """
        memberships = await self._dept_memberships.list_by_user(user_id)
        results: list[DepartmentWithRole] = []
        for membership in memberships:
            department = await self._departments.get_by_id(membership.department_id)
            if department is None:
                continue
            results.append(DepartmentWithRole(department=department, role=membership.role))
        return results

    async def list_all_departments(self) -> list[Department]:
        """Full scan for trusted callers (maintenance jobs)."""
        departments = await self._departments.list_all()
        self._probe.departments_listed(organization_id=None, count=len(departments))
        return departments

    async def update_department_name(
        self, department_id: DepartmentId, name: str
    ) -> None:
        """Rename a department.

        Raises:
            UnauthenticatedError: If there is no caller
            DepartmentNotFoundError: If the department does not exist
            DepartmentNotLinkedError: If the department has no organization
            AccessDeniedError: If the caller is not an org owner/admin
            InvalidArgumentError: If the trimmed name is empty
        """
        user_id = self._authz.require_authenticated_user()

        async with self._session.begin():
            department, _ = await self._authz.require_department_org_admin_membership(
                user_id, department_id
            )
            try:
                department.rename(name)
            except ValueError as e:
                raise InvalidArgumentError(str(e)) from e
            await self._departments.save(department)

        self._probe.department_renamed(
            department_id=department_id.value, name=department.name
        )

    async def remove_department(self, department_id: DepartmentId) -> CascadeReport:
        """Delete a department and every record it owns.

        Collections are emptied in registry order, then re-counted; if any
        rows survive the transaction is rolled back.

        Returns:
            Per-collection deletion counts

        Raises:
            UnauthenticatedError: If there is no caller
            DepartmentNotFoundError: If the department does not exist
            DepartmentNotLinkedError: If the department has no organization
            AccessDeniedError: If the caller is not an org owner/admin
            CascadeIncompleteError: If rows remain after the cascade
        """
        user_id = self._authz.require_authenticated_user()

        async with self._session.begin():
            department, _ = await self._authz.require_department_org_admin_membership(
                user_id, department_id
            )

            self._probe.department_cascade_deletion_started(
                department_id=department_id.value, collections=len(self._cascade)
            )

            # AsyncSession is not safe for concurrent use; delete sequentially.
            deleted: dict[str, int] = {}
            for collection in self._cascade:
                deleted[collection.name] = await collection.delete_by_department(
                    department.id
                )

            remaining: dict[str, int] = {}
            for collection in self._cascade:
                count = await collection.count_by_department(department.id)
                if count:
                    remaining[collection.name] = count

            if remaining:
                self._probe.department_cascade_incomplete(
                    department_id=department_id.value, remaining=remaining
                )
                raise CascadeIncompleteError(department_id.value, remaining)

            await self._departments.delete(department)

        self._probe.department_deleted(
            department_id=department_id.value, deleted=deleted
        )
        return CascadeReport(department_id=department_id.value, deleted=deleted)

    async def link_departments_to_organization(
        self, organization_id: OrganizationId
    ) -> RepairReport:
        """Point every department at ``organization_id`` (single-tenant repair).

        Raises:
            OrganizationNotFoundError: If the organization does not exist
        """
        async with self._session.begin():
            organization = await self._organizations.get_by_id(organization_id)
            if organization is None:
                raise OrganizationNotFoundError()

            departments = await self._departments.list_all()
            updated = 0
            for department in departments:
                if department.link_to(organization_id):
                    await self._departments.save(department)
                    updated += 1

        report = RepairReport(
            organization_id=organization_id.value,
            organization_name=organization.name,
            total_departments=len(departments),
            updated=updated,
            already_linked=len(departments) - updated,
        )
        self._probe.departments_linked(
            organization_id=organization_id.value,
            updated=report.updated,
            already_linked=report.already_linked,
        )
        return report
