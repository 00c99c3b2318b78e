"""Integration application service for the tenancy bounded context.

Stores org-scoped connector configuration. Gmail is configured with the
organization's own OAuth app registration; the OAuth grant itself is written
by the token-exchange flow and only removed here.
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tenancy.application.authorization import AuthorizationResolver
from tenancy.application.observability import (
    DefaultIntegrationServiceProbe,
    IntegrationServiceProbe,
)
from tenancy.application.value_objects import DisconnectResult, UpsertResult
from tenancy.domain.aggregates import Integration
from tenancy.domain.integration_config import AppRegistrationKey, ContextKey
from tenancy.domain.value_objects import (
    DepartmentId,
    IntegrationType,
    OrganizationId,
    UserId,
)
from tenancy.ports.exceptions import (
    DepartmentOrganizationMismatchError,
    InvalidArgumentError,
)
from tenancy.ports.gates import IntegrationAllowanceGate
from tenancy.ports.repositories import IIntegrationRepository

DEFAULT_GMAIL_NAME = "Gmail"
DEFAULT_APP_RETURN_URL = "http://localhost:5173/settings/integrations"

# Department-scoped connectors that never appear in the organization listing.
_DEPARTMENT_SCOPED_TYPES = frozenset({IntegrationType.TELEGRAM})


class IntegrationService:
    """Application service for integration configuration.

    Holds at most one record per (organization, type). Writes are admin-gated
    and merge into the existing configuration instead of replacing it.
    """

    def __init__(
        self,
        session: AsyncSession,
        authorization: AuthorizationResolver,
        integration_repository: IIntegrationRepository,
        allowance_gate: IntegrationAllowanceGate,
        default_app_return_url: str = DEFAULT_APP_RETURN_URL,
        probe: IntegrationServiceProbe | None = None,
    ):
        """Initialize IntegrationService with dependencies.

        Args:
            session: Database session for transaction management
            authorization: Resolver bound to the same session
            integration_repository: Integration persistence
            allowance_gate: Plan-based integration gate
            default_app_return_url: Where to send users after OAuth when the
                admin did not configure a return URL
            probe: Optional domain probe for observability
        """
        self._session = session
        self._authz = authorization
        self._integrations = integration_repository
        self._allowance_gate = allowance_gate
        self._default_app_return_url = default_app_return_url
        self._probe = probe or DefaultIntegrationServiceProbe()

    async def upsert_gmail_config(
        self,
        organization_id: OrganizationId,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        department_id: DepartmentId | None = None,
        name: str | None = None,
        app_return_url: str | None = None,
    ) -> UpsertResult:
        """Create or update the organization's Gmail app registration.

        Existing configuration keys (including an OAuth grant) are preserved;
        only the app registration and OAuth context keys are overwritten.

        Raises:
            UnauthenticatedError: If there is no caller
            AccessDeniedError: If the caller is not an org owner/admin
            DepartmentNotFoundError: If ``department_id`` does not exist
            DepartmentNotLinkedError: If ``department_id`` has no organization
            DepartmentOrganizationMismatchError: If ``department_id`` belongs
                to another organization
            PlanRestrictedError: If the plan excludes Gmail
            InvalidArgumentError: If the client id or secret is blank
        """
        user_id = self._authz.require_authenticated_user()

        client_id = (client_id or "").strip()
        client_secret = (client_secret or "").strip()
        if not client_id or not client_secret:
            raise InvalidArgumentError("Gmail client id and client secret are required.")

        updates = {
            AppRegistrationKey.CLIENT_ID: client_id,
            AppRegistrationKey.CLIENT_SECRET: client_secret,
            AppRegistrationKey.REDIRECT_URI: (redirect_uri or "").strip(),
            AppRegistrationKey.APP_RETURN_URL: (app_return_url or "").strip()
            or self._default_app_return_url,
            ContextKey.OAUTH_CONTEXT_DEPARTMENT_ID: (
                department_id.value if department_id is not None else None
            ),
        }
        display_name = (name or "").strip() or DEFAULT_GMAIL_NAME

        try:
            return await self._write_gmail(
                user_id, organization_id, department_id, display_name, updates
            )
        except IntegrityError:
            # A concurrent insert took the (organization, gmail) slot; update it.
            self._probe.integration_write_conflict(
                organization_id=organization_id.value, type=IntegrationType.GMAIL.value
            )
            return await self._write_gmail(
                user_id, organization_id, department_id, display_name, updates
            )

    async def _write_gmail(
        self,
        user_id: UserId,
        organization_id: OrganizationId,
        department_id: DepartmentId | None,
        name: str,
        updates: dict[str, str | None],
    ) -> UpsertResult:
        async with self._session.begin():
            await self._authorize_admin(user_id, organization_id, department_id)
            await self._allowance_gate.assert_integration_allowed(
                organization_id, IntegrationType.GMAIL
            )

            existing = await self._integrations.get_by_organization_and_type(
                organization_id, IntegrationType.GMAIL
            )
            if existing is not None:
                existing.reconfigure(name=name, updates=updates)
                integration, created = existing, False
            else:
                integration = Integration.create_oauth(
                    organization_id=organization_id,
                    type=IntegrationType.GMAIL,
                    name=name,
                    config=updates,
                )
                created = True
            await self._integrations.save(integration)

        self._probe.integration_configured(
            organization_id=organization_id.value,
            type=IntegrationType.GMAIL.value,
            integration_id=integration.id.value,
            created=created,
        )
        return UpsertResult(integration_id=integration.id, created=created)

    async def disconnect_gmail(
        self,
        organization_id: OrganizationId,
        department_id: DepartmentId | None = None,
    ) -> DisconnectResult:
        """Drop the Gmail OAuth grant, keeping the app registration.

        Succeeds with ``disconnected=False`` when Gmail was never configured.
        Disconnecting is allowed on any plan.
        """
        user_id = self._authz.require_authenticated_user()

        async with self._session.begin():
            await self._authorize_admin(user_id, organization_id, department_id)

            integration = await self._integrations.get_by_organization_and_type(
                organization_id, IntegrationType.GMAIL
            )
            if integration is not None:
                integration.disconnect()
                await self._integrations.save(integration)

        disconnected = integration is not None
        self._probe.integration_disconnected(
            organization_id=organization_id.value,
            type=IntegrationType.GMAIL.value,
            disconnected=disconnected,
        )
        return DisconnectResult(disconnected=disconnected)

    async def list_integrations(
        self, organization_id: OrganizationId
    ) -> list[Integration]:
        """List the organization's connectors (org members only)."""
        user_id = self._authz.require_authenticated_user()
        await self._authz.require_org_membership(user_id, organization_id)

        integrations = [
            integration
            for integration in await self._integrations.list_by_organization(
                organization_id
            )
            if integration.type not in _DEPARTMENT_SCOPED_TYPES
        ]
        self._probe.integrations_listed(
            organization_id=organization_id.value, count=len(integrations)
        )
        return integrations

    async def get_integration_for_department(
        self, department_id: DepartmentId, type: IntegrationType
    ) -> Integration | None:
        """Resolve the connector a department should use.

        The organization's record wins; departments that predate org-scoped
        integrations fall back to their own legacy record.
        """
        user_id = self._authz.require_authenticated_user()
        department, _ = await self._authz.require_department_org_membership(
            user_id, department_id
        )

        assert department.organization_id is not None
        integration = await self._integrations.get_by_organization_and_type(
            department.organization_id, type
        )
        if integration is not None:
            return integration
        return await self._integrations.get_by_department_and_type(department_id, type)

    async def _authorize_admin(
        self,
        user_id: UserId,
        organization_id: OrganizationId,
        department_id: DepartmentId | None,
    ) -> None:
        await self._authz.require_org_admin_membership(user_id, organization_id)
        if department_id is None:
            return

        department = await self._authz.require_department_with_org(department_id)
        if department.organization_id != organization_id:
            raise DepartmentOrganizationMismatchError()
