"""PostgreSQL implementations of the organization read repositories."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tenancy.domain.aggregates import Organization, OrgMembership
from tenancy.domain.value_objects import (
    MembershipId,
    OrganizationId,
    OrganizationPlan,
    Role,
    UserId,
)
from tenancy.infrastructure.models import OrganizationModel, OrgMembershipModel
from tenancy.ports.repositories import IOrganizationRepository, IOrgMembershipRepository


class OrganizationRepository(IOrganizationRepository):
    """Read-only access to organizations."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, organization_id: OrganizationId) -> Organization | None:
        stmt = select(OrganizationModel).where(
            OrganizationModel.id == organization_id.value
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return None

        return Organization(
            id=OrganizationId(value=model.id),
            name=model.name,
            slug=model.slug,
            plan=OrganizationPlan.normalize(model.plan),
            created_at=model.created_at,
        )


class OrgMembershipRepository(IOrgMembershipRepository):
    """Read-only access to organization memberships."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(
        self, user_id: UserId, organization_id: OrganizationId
    ) -> OrgMembership | None:
        stmt = select(OrgMembershipModel).where(
            OrgMembershipModel.user_id == user_id.value,
            OrgMembershipModel.organization_id == organization_id.value,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return None

        return OrgMembership(
            id=MembershipId(value=model.id),
            user_id=UserId(value=model.user_id),
            organization_id=OrganizationId(value=model.organization_id),
            role=Role(model.role),
            joined_at=model.joined_at,
        )
