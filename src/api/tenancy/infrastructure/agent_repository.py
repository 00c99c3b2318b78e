"""PostgreSQL implementation of IAgentRepository."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tenancy.domain.aggregates import Agent
from tenancy.domain.value_objects import AgentId, AgentStatus, DepartmentId
from tenancy.infrastructure.models import AgentModel
from tenancy.ports.repositories import IAgentRepository


class AgentRepository(IAgentRepository):
    """PostgreSQL-backed repository for department agents."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_session_key(
        self, department_id: DepartmentId, session_key: str
    ) -> Agent | None:
        stmt = select(AgentModel).where(
            AgentModel.department_id == department_id.value,
            AgentModel.session_key == session_key,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def add(self, agent: Agent) -> None:
        """Insert an agent, flushing so a session-key race raises here."""
        self._session.add(
            AgentModel(
                id=agent.id.value,
                department_id=agent.department_id.value,
                name=agent.name,
                slug=agent.slug,
                role=agent.role,
                description=agent.description,
                session_key=agent.session_key,
                status=agent.status.value,
                last_seen_at=agent.last_seen_at,
            )
        )
        await self._session.flush()

    async def count_by_department(self, department_id: DepartmentId) -> int:
        stmt = (
            select(func.count())
            .select_from(AgentModel)
            .where(AgentModel.department_id == department_id.value)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    def _to_domain(self, model: AgentModel) -> Agent:
        return Agent(
            id=AgentId(value=model.id),
            department_id=DepartmentId(value=model.department_id),
            name=model.name,
            slug=model.slug,
            role=model.role,
            description=model.description,
            session_key=model.session_key,
            status=AgentStatus(model.status),
            last_seen_at=model.last_seen_at,
        )
