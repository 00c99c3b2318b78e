"""Plan-table implementation of the quota and integration allowance gates."""

from __future__ import annotations

from dataclasses import dataclass

from tenancy.domain.aggregates import Organization
from tenancy.domain.value_objects import (
    DepartmentId,
    IntegrationType,
    LimitedResource,
    OrganizationId,
    OrganizationPlan,
)
from tenancy.ports.exceptions import (
    InvalidArgumentError,
    OrganizationNotFoundError,
    PlanRestrictedError,
    QuotaExceededError,
)
from tenancy.ports.repositories import (
    IAgentRepository,
    IDepartmentRepository,
    IOrganizationRepository,
)


@dataclass(frozen=True)
class PlanLimits:
    """Quotas and features of a billing plan.

    ``allowed_integrations`` of None means every integration type.
    """

    max_departments: int
    max_agents_per_department: int
    allowed_integrations: frozenset[IntegrationType] | None
    allow_team_invites: bool

    def allows(self, type: IntegrationType) -> bool:
        return self.allowed_integrations is None or type in self.allowed_integrations


PLANS: dict[OrganizationPlan, PlanLimits] = {
    OrganizationPlan.STARTER: PlanLimits(
        max_departments=1,
        max_agents_per_department=3,
        allowed_integrations=frozenset(
            {
                IntegrationType.TELEGRAM,
                IntegrationType.OPENAI,
                IntegrationType.ANTHROPIC,
                IntegrationType.TAVILY,
                IntegrationType.RESEND,
                IntegrationType.GMAIL,
            }
        ),
        allow_team_invites=False,
    ),
    OrganizationPlan.PRO: PlanLimits(
        max_departments=5,
        max_agents_per_department=10,
        allowed_integrations=None,
        allow_team_invites=False,
    ),
    OrganizationPlan.BUSINESS: PlanLimits(
        max_departments=999,
        max_agents_per_department=999,
        allowed_integrations=None,
        allow_team_invites=True,
    ),
}


class PlanLimitGate:
    """Enforces plan quotas and integration availability from ``PLANS``.

    Implements both QuotaGate and IntegrationAllowanceGate. Counts are read
    inside the caller's transaction.
    """

    def __init__(
        self,
        organization_repository: IOrganizationRepository,
        department_repository: IDepartmentRepository,
        agent_repository: IAgentRepository,
        plans: dict[OrganizationPlan, PlanLimits] | None = None,
    ) -> None:
        self._organizations = organization_repository
        self._departments = department_repository
        self._agents = agent_repository
        self._plans = plans or PLANS

    async def check_limit(
        self,
        organization_id: OrganizationId,
        resource: LimitedResource,
        department_id: DepartmentId | None = None,
    ) -> None:
        limits = self._plans[(await self._organization(organization_id)).plan]

        match resource:
            case LimitedResource.DEPARTMENTS:
                count = await self._departments.count_by_organization(organization_id)
                if count >= limits.max_departments:
                    raise QuotaExceededError(
                        "Upgrade to Pro to create more departments."
                    )
            case LimitedResource.AGENTS:
                if department_id is None:
                    raise InvalidArgumentError(
                        "Department is required to enforce agent limits."
                    )
                count = await self._agents.count_by_department(department_id)
                if count >= limits.max_agents_per_department:
                    raise QuotaExceededError(
                        "Upgrade to Pro to hire more agents in this department."
                    )
            case LimitedResource.TEAM_INVITES:
                if not limits.allow_team_invites:
                    raise QuotaExceededError("Team collaboration is a Business feature.")

    async def assert_integration_allowed(
        self, organization_id: OrganizationId, type: IntegrationType
    ) -> None:
        limits = self._plans[(await self._organization(organization_id)).plan]
        if not limits.allows(type):
            raise PlanRestrictedError(f"{type.label} is a Pro feature.")

    async def _organization(self, organization_id: OrganizationId) -> Organization:
        organization = await self._organizations.get_by_id(organization_id)
        if organization is None:
            raise OrganizationNotFoundError()
        return organization
