"""Agent aggregate (department-scoped automation persona)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from tenancy.domain.value_objects import AgentId, AgentStatus, DepartmentId


def agent_session_key(agent_slug: str, department_slug: str) -> str:
    """Session key addressing ``agent_slug`` inside a department."""
    return f"agent:{agent_slug}:{department_slug}"


@dataclass
class Agent:
    """An automation agent living in a department.

    Agents are unique per (department, session key).
    """

    id: AgentId
    department_id: DepartmentId
    name: str
    slug: str
    role: str
    description: str
    session_key: str
    status: AgentStatus
    last_seen_at: datetime

    @classmethod
    def create(
        cls,
        department_id: DepartmentId,
        department_slug: str,
        name: str,
        slug: str,
        role: str,
        description: str,
    ) -> Agent:
        """Create an idle agent addressed by its department-scoped session key."""
        return cls(
            id=AgentId.generate(),
            department_id=department_id,
            name=name,
            slug=slug,
            role=role,
            description=description,
            session_key=agent_session_key(slug, department_slug),
            status=AgentStatus.IDLE,
            last_seen_at=datetime.now(UTC),
        )
