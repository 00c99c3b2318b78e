"""PostgreSQL implementation of IIntegrationRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tenancy.domain.aggregates import Integration
from tenancy.domain.integration_config import IntegrationConfig
from tenancy.domain.value_objects import (
    AuthType,
    DepartmentId,
    IntegrationId,
    IntegrationType,
    OAuthStatus,
    OrganizationId,
)
from tenancy.infrastructure.models import IntegrationModel
from tenancy.infrastructure.observability import (
    DefaultIntegrationRepositoryProbe,
    IntegrationRepositoryProbe,
)
from tenancy.ports.repositories import IIntegrationRepository


class IntegrationRepository(IIntegrationRepository):
    """PostgreSQL-backed repository for integration configuration.

    The configuration bag is stored as JSONB and replaced wholesale on save;
    merging happens in the domain before the write.
    """

    def __init__(
        self, session: AsyncSession, probe: IntegrationRepositoryProbe | None = None
    ) -> None:
        self._session = session
        self._probe = probe or DefaultIntegrationRepositoryProbe()

    async def get_by_organization_and_type(
        self, organization_id: OrganizationId, type: IntegrationType
    ) -> Integration | None:
        stmt = select(IntegrationModel).where(
            IntegrationModel.organization_id == organization_id.value,
            IntegrationModel.type == type.value,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def get_by_department_and_type(
        self, department_id: DepartmentId, type: IntegrationType
    ) -> Integration | None:
        stmt = (
            select(IntegrationModel)
            .where(
                IntegrationModel.department_id == department_id.value,
                IntegrationModel.type == type.value,
            )
            .order_by(IntegrationModel.created_at.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def list_by_organization(
        self, organization_id: OrganizationId
    ) -> list[Integration]:
        stmt = (
            select(IntegrationModel)
            .where(IntegrationModel.organization_id == organization_id.value)
            .order_by(IntegrationModel.type)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def save(self, integration: Integration) -> None:
        stmt = select(IntegrationModel).where(IntegrationModel.id == integration.id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        organization_id = (
            integration.organization_id.value if integration.organization_id else None
        )
        department_id = (
            integration.department_id.value if integration.department_id else None
        )

        if model:
            model.organization_id = organization_id
            model.department_id = department_id
            model.name = integration.name
            model.config = integration.config.as_dict()
            model.auth_type = integration.auth_type.value if integration.auth_type else None
            model.oauth_status = (
                integration.oauth_status.value if integration.oauth_status else None
            )
            model.last_sync_at = integration.last_sync_at
            model.last_error = integration.last_error
            created = False
        else:
            model = IntegrationModel(
                id=integration.id.value,
                organization_id=organization_id,
                department_id=department_id,
                type=integration.type.value,
                name=integration.name,
                config=integration.config.as_dict(),
                auth_type=integration.auth_type.value if integration.auth_type else None,
                oauth_status=(
                    integration.oauth_status.value if integration.oauth_status else None
                ),
                last_sync_at=integration.last_sync_at,
                last_error=integration.last_error,
                created_at=integration.created_at,
            )
            self._session.add(model)
            created = True

        await self._session.flush()
        self._probe.integration_saved(
            integration_id=integration.id.value,
            type=integration.type.value,
            created=created,
            config_keys=sorted(integration.config),
        )

    def _to_domain(self, model: IntegrationModel) -> Integration:
        return Integration(
            id=IntegrationId(value=model.id),
            organization_id=(
                OrganizationId(value=model.organization_id)
                if model.organization_id
                else None
            ),
            type=IntegrationType(model.type),
            name=model.name,
            config=IntegrationConfig(values=dict(model.config or {})),
            auth_type=AuthType(model.auth_type) if model.auth_type else None,
            oauth_status=OAuthStatus(model.oauth_status) if model.oauth_status else None,
            department_id=(
                DepartmentId(value=model.department_id) if model.department_id else None
            ),
            last_sync_at=model.last_sync_at,
            last_error=model.last_error or "",
            created_at=model.created_at,
        )
