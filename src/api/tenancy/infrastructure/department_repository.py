"""PostgreSQL implementations of the department and department membership repositories."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tenancy.domain.aggregates import Department, DeptMembership
from tenancy.domain.value_objects import (
    DepartmentId,
    DepartmentPlan,
    MembershipId,
    OrganizationId,
    Role,
    UserId,
    org_link_from_optional,
)
from tenancy.infrastructure.models import DepartmentModel, DeptMembershipModel
from tenancy.infrastructure.observability import (
    DefaultDepartmentRepositoryProbe,
    DepartmentRepositoryProbe,
)
from tenancy.ports.repositories import IDepartmentRepository, IDeptMembershipRepository


class DepartmentRepository(IDepartmentRepository):
    """PostgreSQL-backed repository for Department aggregates.

    Never opens transactions; the calling service owns the boundary.
    """

    def __init__(
        self, session: AsyncSession, probe: DepartmentRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultDepartmentRepositoryProbe()

    async def save(self, department: Department) -> None:
        """Insert or update a department.

        The slug is immutable and only written on insert. Flushes so that a
        slug collision surfaces as IntegrityError inside the caller's
        transaction.
        """
        model = await self._get_model(department.id)
        organization_id = department.organization_id

        if model:
            model.name = department.name
            model.organization_id = organization_id.value if organization_id else None
            model.plan = department.plan.value
            model.updated_at = department.updated_at
            created = False
        else:
            model = DepartmentModel(
                id=department.id.value,
                name=department.name,
                slug=department.slug,
                organization_id=organization_id.value if organization_id else None,
                plan=department.plan.value,
                created_at=department.created_at,
                updated_at=department.updated_at,
            )
            self._session.add(model)
            created = True

        await self._session.flush()
        self._probe.department_saved(department.id.value, created=created)

    async def get_by_id(self, department_id: DepartmentId) -> Department | None:
        model = await self._get_model(department_id)
        return self._to_domain(model) if model else None

    async def get_by_slug(self, slug: str) -> Department | None:
        stmt = select(DepartmentModel).where(DepartmentModel.slug == slug)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def list_by_organization(
        self, organization_id: OrganizationId, limit: int
    ) -> list[Department]:
        """List newest first using the (organization_id, created_at) index."""
        stmt = (
            select(DepartmentModel)
            .where(DepartmentModel.organization_id == organization_id.value)
            .order_by(DepartmentModel.created_at.desc(), DepartmentModel.id.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def list_all(self) -> list[Department]:
        stmt = select(DepartmentModel).order_by(DepartmentModel.created_at)
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def count_by_organization(self, organization_id: OrganizationId) -> int:
        stmt = (
            select(func.count())
            .select_from(DepartmentModel)
            .where(DepartmentModel.organization_id == organization_id.value)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def delete(self, department: Department) -> bool:
        """Delete the department row.

        Every department-scoped table references departments with RESTRICT,
        so this fails unless the cascade already emptied them.

        Returns:
            True if deleted, False if not found
        """
        model = await self._get_model(department.id)
        if model is None:
            return False

        await self._session.delete(model)
        await self._session.flush()

        self._probe.department_deleted(department.id.value)
        return True

    async def _get_model(self, department_id: DepartmentId) -> DepartmentModel | None:
        stmt = select(DepartmentModel).where(DepartmentModel.id == department_id.value)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _to_domain(self, model: DepartmentModel) -> Department:
        return Department(
            id=DepartmentId(value=model.id),
            name=model.name,
            slug=model.slug,
            org_link=org_link_from_optional(
                OrganizationId(value=model.organization_id)
                if model.organization_id
                else None
            ),
            plan=DepartmentPlan(model.plan),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )


class DeptMembershipRepository(IDeptMembershipRepository):
    """PostgreSQL-backed repository for department memberships."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(
        self, user_id: UserId, department_id: DepartmentId
    ) -> DeptMembership | None:
        stmt = select(DeptMembershipModel).where(
            DeptMembershipModel.user_id == user_id.value,
            DeptMembershipModel.department_id == department_id.value,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def list_by_user(self, user_id: UserId) -> list[DeptMembership]:
        stmt = (
            select(DeptMembershipModel)
            .where(DeptMembershipModel.user_id == user_id.value)
            .order_by(DeptMembershipModel.joined_at)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def add(self, membership: DeptMembership) -> None:
        self._session.add(
            DeptMembershipModel(
                id=membership.id.value,
                user_id=membership.user_id.value,
                department_id=membership.department_id.value,
                role=membership.role.value,
                joined_at=membership.joined_at,
            )
        )
        await self._session.flush()

    def _to_domain(self, model: DeptMembershipModel) -> DeptMembership:
        return DeptMembership(
            id=MembershipId(value=model.id),
            user_id=UserId(value=model.user_id),
            department_id=DepartmentId(value=model.department_id),
            role=Role(model.role),
            joined_at=model.joined_at,
        )
