"""Unit tests for PlanLimitGate."""

from datetime import UTC, datetime
from unittest.mock import create_autospec

import pytest

from tenancy.domain.aggregates import Organization
from tenancy.domain.value_objects import (
    DepartmentId,
    IntegrationType,
    LimitedResource,
    OrganizationId,
    OrganizationPlan,
)
from tenancy.infrastructure.plan_gate import PLANS, PlanLimitGate
from tenancy.ports.exceptions import (
    InvalidArgumentError,
    OrganizationNotFoundError,
    PlanRestrictedError,
    QuotaExceededError,
)
from tenancy.ports.gates import IntegrationAllowanceGate, QuotaGate
from tenancy.ports.repositories import (
    IAgentRepository,
    IDepartmentRepository,
    IOrganizationRepository,
)


@pytest.fixture
def organizations():
    return create_autospec(IOrganizationRepository, instance=True)


@pytest.fixture
def departments():
    return create_autospec(IDepartmentRepository, instance=True)


@pytest.fixture
def agents():
    return create_autospec(IAgentRepository, instance=True)


@pytest.fixture
def gate(organizations, departments, agents):
    return PlanLimitGate(organizations, departments, agents)


def _on_plan(organizations, plan: OrganizationPlan) -> OrganizationId:
    organization = Organization(
        id=OrganizationId.generate(),
        name="Acme",
        slug="acme",
        plan=plan,
        created_at=datetime.now(UTC),
    )
    organizations.get_by_id.return_value = organization
    return organization.id


def test_implements_both_gates(gate):
    assert isinstance(gate, QuotaGate)
    assert isinstance(gate, IntegrationAllowanceGate)


class TestDepartmentQuota:
    @pytest.mark.asyncio
    async def test_starter_allows_first_department(self, gate, organizations, departments):
        org_id = _on_plan(organizations, OrganizationPlan.STARTER)
        departments.count_by_organization.return_value = 0

        await gate.check_limit(org_id, LimitedResource.DEPARTMENTS)

    @pytest.mark.asyncio
    async def test_starter_blocks_second_department(
        self, gate, organizations, departments
    ):
        org_id = _on_plan(organizations, OrganizationPlan.STARTER)
        departments.count_by_organization.return_value = 1

        with pytest.raises(QuotaExceededError, match="Upgrade to Pro"):
            await gate.check_limit(org_id, LimitedResource.DEPARTMENTS)

    @pytest.mark.asyncio
    async def test_pro_limit(self, gate, organizations, departments):
        org_id = _on_plan(organizations, OrganizationPlan.PRO)
        departments.count_by_organization.return_value = (
            PLANS[OrganizationPlan.PRO].max_departments
        )

        with pytest.raises(QuotaExceededError):
            await gate.check_limit(org_id, LimitedResource.DEPARTMENTS)

    @pytest.mark.asyncio
    async def test_unknown_organization(self, gate, organizations):
        organizations.get_by_id.return_value = None

        with pytest.raises(OrganizationNotFoundError):
            await gate.check_limit(OrganizationId.generate(), LimitedResource.DEPARTMENTS)


class TestAgentQuota:
    @pytest.mark.asyncio
    async def test_requires_department(self, gate, organizations):
        org_id = _on_plan(organizations, OrganizationPlan.PRO)

        with pytest.raises(InvalidArgumentError):
            await gate.check_limit(org_id, LimitedResource.AGENTS)

    @pytest.mark.asyncio
    async def test_counts_agents_of_department(self, gate, organizations, agents):
        org_id = _on_plan(organizations, OrganizationPlan.STARTER)
        department_id = DepartmentId.generate()
        agents.count_by_department.return_value = 3

        with pytest.raises(QuotaExceededError, match="hire more agents"):
            await gate.check_limit(org_id, LimitedResource.AGENTS, department_id)

        agents.count_by_department.assert_awaited_once_with(department_id)


class TestTeamInvites:
    @pytest.mark.asyncio
    async def test_business_only(self, gate, organizations):
        org_id = _on_plan(organizations, OrganizationPlan.PRO)

        with pytest.raises(QuotaExceededError, match="Business feature"):
            await gate.check_limit(org_id, LimitedResource.TEAM_INVITES)

        _on_plan(organizations, OrganizationPlan.BUSINESS)
        await gate.check_limit(org_id, LimitedResource.TEAM_INVITES)


class TestIntegrationAllowance:
    @pytest.mark.asyncio
    async def test_starter_allows_gmail(self, gate, organizations):
        org_id = _on_plan(organizations, OrganizationPlan.STARTER)

        await gate.assert_integration_allowed(org_id, IntegrationType.GMAIL)

    @pytest.mark.asyncio
    async def test_starter_restricts_github(self, gate, organizations):
        org_id = _on_plan(organizations, OrganizationPlan.STARTER)

        with pytest.raises(PlanRestrictedError, match="GitHub is a Pro feature."):
            await gate.assert_integration_allowed(org_id, IntegrationType.GITHUB)

    @pytest.mark.asyncio
    async def test_pro_allows_everything(self, gate, organizations):
        org_id = _on_plan(organizations, OrganizationPlan.PRO)

        for type in IntegrationType:
            await gate.assert_integration_allowed(org_id, type)
