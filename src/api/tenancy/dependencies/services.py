"""FastAPI dependency injection for tenancy repositories and services.

Services run on the write session and carry their own authorization
resolver bound to it, so the checks made inside a service transaction see
the same snapshot as the writes. Route guards use a separate resolver on the
read session (see ``tenancy.presentation.guards``).
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_read_session, get_write_session
from infrastructure.settings import TenancySettings, get_tenancy_settings
from shared_kernel.observability_context import ObservationContext
from tenancy.application.authorization import AuthorizationResolver
from tenancy.application.hooks import AgentProfile, DefaultAgentSeeder
from tenancy.application.observability import (
    DefaultDepartmentServiceProbe,
    DefaultIntegrationServiceProbe,
    DepartmentServiceProbe,
    IntegrationServiceProbe,
)
from tenancy.application.services import DepartmentService, IntegrationService
from tenancy.dependencies.context import get_observation_context
from tenancy.dependencies.identity import RequestIdentity, get_request_identity
from tenancy.infrastructure import (
    AgentRepository,
    DepartmentRepository,
    DeptMembershipRepository,
    IntegrationRepository,
    OrganizationRepository,
    OrgMembershipRepository,
    PlanLimitGate,
    build_department_cascade,
)


def get_department_service_probe(
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> DepartmentServiceProbe:
    """Get DepartmentServiceProbe instance.

    Returns:
        DefaultDepartmentServiceProbe bound to the request context
    """
    return DefaultDepartmentServiceProbe().with_context(context)


def get_integration_service_probe(
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> IntegrationServiceProbe:
    """Get IntegrationServiceProbe instance bound to the request context."""
    return DefaultIntegrationServiceProbe().with_context(context)


def _build_resolver(
    session: AsyncSession, identity: RequestIdentity, settings: TenancySettings
) -> AuthorizationResolver:
    return AuthorizationResolver(
        identity=identity,
        org_membership_repository=OrgMembershipRepository(session=session),
        department_repository=DepartmentRepository(session=session),
        dept_membership_repository=DeptMembershipRepository(session=session),
        operator_user_ids=settings.operators,
    )


def get_authorization_resolver(
    session: Annotated[AsyncSession, Depends(get_read_session)],
    identity: Annotated[RequestIdentity, Depends(get_request_identity)],
    settings: Annotated[TenancySettings, Depends(get_tenancy_settings)],
) -> AuthorizationResolver:
    """Get an AuthorizationResolver bound to the read session.

    Used by route guards only.
    """
    return _build_resolver(session, identity, settings)


def get_plan_limit_gate(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> PlanLimitGate:
    """Get the plan gate, reading counts inside the service's transaction."""
    return PlanLimitGate(
        organization_repository=OrganizationRepository(session=session),
        department_repository=DepartmentRepository(session=session),
        agent_repository=AgentRepository(session=session),
    )


def get_department_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    identity: Annotated[RequestIdentity, Depends(get_request_identity)],
    settings: Annotated[TenancySettings, Depends(get_tenancy_settings)],
    plan_gate: Annotated[PlanLimitGate, Depends(get_plan_limit_gate)],
    probe: Annotated[DepartmentServiceProbe, Depends(get_department_service_probe)],
) -> DepartmentService:
    """Get DepartmentService instance.

    Args:
        session: Write session shared by every collaborator
        identity: Caller of the current request
        settings: Tenancy settings (agent profile, limits, operators)
        plan_gate: Quota gate
        probe: Domain probe for observability

    Returns:
        DepartmentService wired with the default agent seeder and the full
        department-scoped cascade
    """
    profile = AgentProfile(
        name=settings.default_agent_name,
        slug=settings.default_agent_slug,
        role=settings.default_agent_role,
        description=settings.default_agent_description,
    )
    return DepartmentService(
        session=session,
        authorization=_build_resolver(session, identity, settings),
        organization_repository=OrganizationRepository(session=session),
        department_repository=DepartmentRepository(session=session),
        dept_membership_repository=DeptMembershipRepository(session=session),
        cascade=build_department_cascade(session),
        quota_gate=plan_gate,
        hooks=[DefaultAgentSeeder(AgentRepository(session=session), profile)],
        hook_attempts=settings.hook_attempts,
        default_list_limit=settings.department_list_limit,
        probe=probe,
    )


def get_integration_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    identity: Annotated[RequestIdentity, Depends(get_request_identity)],
    settings: Annotated[TenancySettings, Depends(get_tenancy_settings)],
    plan_gate: Annotated[PlanLimitGate, Depends(get_plan_limit_gate)],
    probe: Annotated[
        IntegrationServiceProbe, Depends(get_integration_service_probe)
    ],
) -> IntegrationService:
    """Get IntegrationService instance."""
    return IntegrationService(
        session=session,
        authorization=_build_resolver(session, identity, settings),
        integration_repository=IntegrationRepository(session=session),
        allowance_gate=plan_gate,
        default_app_return_url=settings.gmail_app_return_url,
        probe=probe,
    )
