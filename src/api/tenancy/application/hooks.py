"""Post-creation hooks run after a department row commits.

Hooks must be idempotent: they are re-run by ``seed_department`` and retried
after a unique-constraint race, and each must then find its earlier work and
do nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from tenancy.domain.aggregates import Agent, Department, agent_session_key
from tenancy.ports.repositories import IAgentRepository


@runtime_checkable
class PostCreationHook(Protocol):
    """Side effect attached to department creation."""

    @property
    def name(self) -> str:
        """Stable hook name used in logs and seeding errors."""
        ...

    async def run(self, department: Department) -> bool:
        """Apply the side effect.

        Returns:
            True if anything was written, False if it was already in place
        """
        ...


@dataclass(frozen=True)
class AgentProfile:
    """Persona of the agent seeded into every new department."""

    name: str
    slug: str
    role: str
    description: str


class DefaultAgentSeeder:
    """Ensures a department has exactly one default coordinator agent."""

    name = "default_agent"

    def __init__(self, agent_repository: IAgentRepository, profile: AgentProfile):
        self._agents = agent_repository
        self._profile = profile

    async def run(self, department: Department) -> bool:
        session_key = agent_session_key(self._profile.slug, department.slug)
        existing = await self._agents.get_by_session_key(department.id, session_key)
        if existing is not None:
            return False

        await self._agents.add(
            Agent.create(
                department_id=department.id,
                department_slug=department.slug,
                name=self._profile.name,
                slug=self._profile.slug,
                role=self._profile.role,
                description=self._profile.description,
            )
        )
        return True
