"""Infrastructure layer of the tenancy bounded context."""

from tenancy.infrastructure.agent_repository import AgentRepository
from tenancy.infrastructure.cascade import (
    DEPARTMENT_SCOPED_TABLES,
    SqlDepartmentScopedCollection,
    build_department_cascade,
)
from tenancy.infrastructure.department_repository import (
    DepartmentRepository,
    DeptMembershipRepository,
)
from tenancy.infrastructure.integration_repository import IntegrationRepository
from tenancy.infrastructure.organization_repository import (
    OrganizationRepository,
    OrgMembershipRepository,
)
from tenancy.infrastructure.plan_gate import PLANS, PlanLimitGate, PlanLimits

__all__ = [
    "AgentRepository",
    "DEPARTMENT_SCOPED_TABLES",
    "DepartmentRepository",
    "DeptMembershipRepository",
    "IntegrationRepository",
    "OrgMembershipRepository",
    "OrganizationRepository",
    "PLANS",
    "PlanLimitGate",
    "PlanLimits",
    "SqlDepartmentScopedCollection",
    "build_department_cascade",
]
