"""Shared fixtures for tenancy unit tests.

Provides in-memory implementations of the tenancy ports so service behavior
can be exercised end to end without a database. The fakes enforce the same
uniqueness rules as the real tables and raise IntegrityError on violation.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from tenancy.application.authorization import AuthorizationResolver
from tenancy.application.hooks import AgentProfile, DefaultAgentSeeder
from tenancy.application.services import DepartmentService, IntegrationService
from tenancy.domain.aggregates import (
    Agent,
    Department,
    DeptMembership,
    Integration,
    Organization,
    OrgMembership,
)
from tenancy.domain.value_objects import (
    DepartmentId,
    IntegrationType,
    MembershipId,
    OrganizationId,
    OrganizationPlan,
    Role,
    UserId,
)
from tenancy.infrastructure.cascade import DEPARTMENT_SCOPED_TABLES
from tenancy.infrastructure.plan_gate import PlanLimitGate


def _integrity_error(constraint: str) -> IntegrityError:
    return IntegrityError("INSERT", {}, Exception(f"duplicate key {constraint}"))


class _Transaction:
    def __init__(self, session: FakeSession) -> None:
        self._session = session

    async def __aenter__(self) -> None:
        self._session.transactions += 1

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        if exc_type is not None:
            self._session.rollbacks += 1
        return False


class FakeSession:
    """Stands in for AsyncSession; only transaction boundaries are tracked."""

    def __init__(self) -> None:
        self.transactions = 0
        self.rollbacks = 0

    def begin(self) -> _Transaction:
        return _Transaction(self)


@dataclass
class StaticIdentity:
    """IdentityProvider returning a fixed (possibly absent) caller."""

    user_id: UserId | None = None

    def current_user_id(self) -> UserId | None:
        return self.user_id


@dataclass
class TenancyStore:
    """In-memory rows shared by the fake repositories."""

    organizations: dict[str, Organization] = field(default_factory=dict)
    org_memberships: list[OrgMembership] = field(default_factory=list)
    departments: dict[str, Department] = field(default_factory=dict)
    dept_memberships: list[DeptMembership] = field(default_factory=list)
    agents: list[Agent] = field(default_factory=list)
    integrations: dict[str, Integration] = field(default_factory=dict)

    def add_organization(
        self, name: str = "Acme", plan: OrganizationPlan = OrganizationPlan.PRO
    ) -> Organization:
        organization = Organization(
            id=OrganizationId.generate(),
            name=name,
            slug=name.lower().replace(" ", "-"),
            plan=plan,
            created_at=datetime.now(UTC),
        )
        self.organizations[organization.id.value] = organization
        return organization

    def add_org_member(
        self, user_id: UserId, organization_id: OrganizationId, role: Role
    ) -> None:
        self.org_memberships.append(
            OrgMembership(
                id=MembershipId.generate(),
                user_id=user_id,
                organization_id=organization_id,
                role=role,
                joined_at=datetime.now(UTC),
            )
        )

    def add_department(self, department: Department) -> Department:
        self.departments[department.id.value] = copy.deepcopy(department)
        return department


class FakeOrganizationRepository:
    def __init__(self, store: TenancyStore) -> None:
        self._store = store

    async def get_by_id(self, organization_id: OrganizationId) -> Organization | None:
        return self._store.organizations.get(organization_id.value)


class FakeOrgMembershipRepository:
    def __init__(self, store: TenancyStore) -> None:
        self._store = store

    async def get(
        self, user_id: UserId, organization_id: OrganizationId
    ) -> OrgMembership | None:
        return next(
            (
                m
                for m in self._store.org_memberships
                if m.user_id == user_id and m.organization_id == organization_id
            ),
            None,
        )


class FakeDepartmentRepository:
    def __init__(self, store: TenancyStore) -> None:
        self._store = store

    async def save(self, department: Department) -> None:
        for other in self._store.departments.values():
            if other.slug == department.slug and other.id != department.id:
                raise _integrity_error("uq_departments_slug")
        self._store.departments[department.id.value] = copy.deepcopy(department)

    async def get_by_id(self, department_id: DepartmentId) -> Department | None:
        department = self._store.departments.get(department_id.value)
        return copy.deepcopy(department) if department else None

    async def get_by_slug(self, slug: str) -> Department | None:
        for department in self._store.departments.values():
            if department.slug == slug:
                return copy.deepcopy(department)
        return None

    async def list_by_organization(
        self, organization_id: OrganizationId, limit: int
    ) -> list[Department]:
        matching = [
            d
            for d in self._store.departments.values()
            if d.organization_id == organization_id
        ]
        matching.sort(key=lambda d: (d.created_at, d.id.value), reverse=True)
        return [copy.deepcopy(d) for d in matching[:limit]]

    async def list_all(self) -> list[Department]:
        return [copy.deepcopy(d) for d in self._store.departments.values()]

    async def count_by_organization(self, organization_id: OrganizationId) -> int:
        return sum(
            1
            for d in self._store.departments.values()
            if d.organization_id == organization_id
        )

    async def delete(self, department: Department) -> bool:
        return self._store.departments.pop(department.id.value, None) is not None


class FakeDeptMembershipRepository:
    def __init__(self, store: TenancyStore) -> None:
        self._store = store

    async def get(
        self, user_id: UserId, department_id: DepartmentId
    ) -> DeptMembership | None:
        return next(
            (
                m
                for m in self._store.dept_memberships
                if m.user_id == user_id and m.department_id == department_id
            ),
            None,
        )

    async def list_by_user(self, user_id: UserId) -> list[DeptMembership]:
        return [m for m in self._store.dept_memberships if m.user_id == user_id]

    async def add(self, membership: DeptMembership) -> None:
        if await self.get(membership.user_id, membership.department_id):
            raise _integrity_error("uq_dept_memberships_user_id_department_id")
        self._store.dept_memberships.append(membership)


class FakeAgentRepository:
    def __init__(self, store: TenancyStore) -> None:
        self._store = store

    async def get_by_session_key(
        self, department_id: DepartmentId, session_key: str
    ) -> Agent | None:
        return next(
            (
                a
                for a in self._store.agents
                if a.department_id == department_id and a.session_key == session_key
            ),
            None,
        )

    async def add(self, agent: Agent) -> None:
        if await self.get_by_session_key(agent.department_id, agent.session_key):
            raise _integrity_error("uq_agents_department_id_session_key")
        self._store.agents.append(agent)

    async def count_by_department(self, department_id: DepartmentId) -> int:
        return sum(1 for a in self._store.agents if a.department_id == department_id)


class FakeIntegrationRepository:
    def __init__(self, store: TenancyStore) -> None:
        self._store = store

    async def get_by_organization_and_type(
        self, organization_id: OrganizationId, type: IntegrationType
    ) -> Integration | None:
        for integration in self._store.integrations.values():
            if integration.organization_id == organization_id and integration.type == type:
                return copy.deepcopy(integration)
        return None

    async def get_by_department_and_type(
        self, department_id: DepartmentId, type: IntegrationType
    ) -> Integration | None:
        for integration in self._store.integrations.values():
            if integration.department_id == department_id and integration.type == type:
                return copy.deepcopy(integration)
        return None

    async def list_by_organization(
        self, organization_id: OrganizationId
    ) -> list[Integration]:
        return sorted(
            (
                copy.deepcopy(i)
                for i in self._store.integrations.values()
                if i.organization_id == organization_id
            ),
            key=lambda i: i.type.value,
        )

    async def save(self, integration: Integration) -> None:
        for other in self._store.integrations.values():
            if (
                other.id != integration.id
                and integration.organization_id is not None
                and other.organization_id == integration.organization_id
                and other.type == integration.type
            ):
                raise _integrity_error("uq_integrations_organization_id_type")
        self._store.integrations[integration.id.value] = copy.deepcopy(integration)


class FakeCollection:
    """Department-scoped collection holding anonymous rows per department."""

    def __init__(self, name: str, rows: dict[str, int] | None = None) -> None:
        self._name = name
        self.rows: dict[str, int] = dict(rows or {})

    @property
    def name(self) -> str:
        return self._name

    async def delete_by_department(self, department_id: DepartmentId) -> int:
        return self.rows.pop(department_id.value, 0)

    async def count_by_department(self, department_id: DepartmentId) -> int:
        return self.rows.get(department_id.value, 0)


class AgentCollection:
    """Exposes the store's agents as a department-scoped collection."""

    name = "agents"

    def __init__(self, store: TenancyStore) -> None:
        self._store = store

    async def delete_by_department(self, department_id: DepartmentId) -> int:
        before = len(self._store.agents)
        self._store.agents = [
            a for a in self._store.agents if a.department_id != department_id
        ]
        return before - len(self._store.agents)

    async def count_by_department(self, department_id: DepartmentId) -> int:
        return sum(1 for a in self._store.agents if a.department_id == department_id)


class DeptMembershipCollection:
    """Exposes the store's department memberships as a collection."""

    name = "dept_memberships"

    def __init__(self, store: TenancyStore) -> None:
        self._store = store

    async def delete_by_department(self, department_id: DepartmentId) -> int:
        before = len(self._store.dept_memberships)
        self._store.dept_memberships = [
            m for m in self._store.dept_memberships if m.department_id != department_id
        ]
        return before - len(self._store.dept_memberships)

    async def count_by_department(self, department_id: DepartmentId) -> int:
        return sum(
            1 for m in self._store.dept_memberships if m.department_id == department_id
        )


_REGISTRY_ORDER = {name: i for i, (name, _) in enumerate(DEPARTMENT_SCOPED_TABLES)}


AGENT_PROFILE = AgentProfile(
    name="Jarvis",
    slug="jarvis",
    role="Head of Operations",
    description="Department coordinator",
)


@dataclass
class TenancyWorld:
    """A wired set of fakes plus services acting as one caller."""

    store: TenancyStore
    session: FakeSession
    identity: StaticIdentity
    collections: list[Any]
    department_service: DepartmentService
    integration_service: IntegrationService
    resolver: AuthorizationResolver

    def act_as(self, user_id: UserId | None) -> None:
        self.identity.user_id = user_id


def build_world(
    store: TenancyStore | None = None,
    extra_collections: list[Any] | None = None,
    operator_user_ids: tuple[str, ...] = (),
) -> TenancyWorld:
    store = store or TenancyStore()
    session = FakeSession()
    identity = StaticIdentity()
    departments = FakeDepartmentRepository(store)
    dept_memberships = FakeDeptMembershipRepository(store)
    organizations = FakeOrganizationRepository(store)
    agents = FakeAgentRepository(store)
    resolver = AuthorizationResolver(
        identity=identity,
        org_membership_repository=FakeOrgMembershipRepository(store),
        department_repository=departments,
        dept_membership_repository=dept_memberships,
        operator_user_ids=operator_user_ids,
        probe=MagicMock(),
    )
    gate = PlanLimitGate(
        organization_repository=organizations,
        department_repository=departments,
        agent_repository=agents,
    )
    # Same deletion order as the production registry.
    collections: list[Any] = sorted(
        [
            AgentCollection(store),
            *(extra_collections or []),
            DeptMembershipCollection(store),
        ],
        key=lambda c: _REGISTRY_ORDER.get(c.name, len(_REGISTRY_ORDER)),
    )
    department_service = DepartmentService(
        session=session,  # type: ignore[arg-type]
        authorization=resolver,
        organization_repository=organizations,
        department_repository=departments,
        dept_membership_repository=dept_memberships,
        cascade=collections,
        quota_gate=gate,
        hooks=[DefaultAgentSeeder(agents, AGENT_PROFILE)],
        probe=MagicMock(),
    )
    integration_service = IntegrationService(
        session=session,  # type: ignore[arg-type]
        authorization=resolver,
        integration_repository=FakeIntegrationRepository(store),
        allowance_gate=gate,
        default_app_return_url="https://app.example.com/settings/integrations",
        probe=MagicMock(),
    )
    return TenancyWorld(
        store=store,
        session=session,
        identity=identity,
        collections=collections,
        department_service=department_service,
        integration_service=integration_service,
        resolver=resolver,
    )


@pytest.fixture
def world() -> TenancyWorld:
    return build_world()


@pytest.fixture
def organization(world: TenancyWorld) -> Organization:
    return world.store.add_organization()


@pytest.fixture
def owner(world: TenancyWorld, organization: Organization) -> UserId:
    user_id = UserId(value="owner-1")
    world.store.add_org_member(user_id, organization.id, Role.OWNER)
    return user_id


@pytest.fixture
def admin(world: TenancyWorld, organization: Organization) -> UserId:
    user_id = UserId(value="admin-1")
    world.store.add_org_member(user_id, organization.id, Role.ADMIN)
    return user_id


@pytest.fixture
def member(world: TenancyWorld, organization: Organization) -> UserId:
    user_id = UserId(value="member-1")
    world.store.add_org_member(user_id, organization.id, Role.MEMBER)
    return user_id


@pytest.fixture
def outsider() -> UserId:
    return UserId(value="outsider-1")


@pytest.fixture
def make_world():
    """Factory for worlds needing extra collections or operators."""
    return build_world


@pytest.fixture
def make_collection():
    """Factory for department-scoped collections seeded with row counts."""
    return FakeCollection
