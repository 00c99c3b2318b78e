"""Department-scoped collections purged when a department is removed.

``DEPARTMENT_SCOPED_TABLES`` is the registry: every table keyed by
``department_id`` must appear here, or department removal fails on the
RESTRICT foreign key.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tenancy.domain.value_objects import DepartmentId
from tenancy.infrastructure.models import (
    ActivityModel,
    AgentModel,
    AgentTemplateModel,
    DeptMembershipModel,
    DocumentModel,
    ExecutorRunModel,
    IntegrationModel,
    MessageModel,
    NotificationModel,
    TaskModel,
    ThreadReadModel,
    ThreadSubscriptionModel,
    UxEventModel,
)
from tenancy.infrastructure.observability import (
    DefaultDepartmentRepositoryProbe,
    DepartmentRepositoryProbe,
)
from tenancy.ports.repositories import DepartmentScopedCollection

# Deletion order: dependents first, memberships last.
DEPARTMENT_SCOPED_TABLES: tuple[tuple[str, Any], ...] = (
    ("agent_templates", AgentTemplateModel),
    ("agents", AgentModel),
    ("tasks", TaskModel),
    ("messages", MessageModel),
    ("thread_reads", ThreadReadModel),
    ("activities", ActivityModel),
    ("documents", DocumentModel),
    ("notifications", NotificationModel),
    ("thread_subscriptions", ThreadSubscriptionModel),
    ("executor_runs", ExecutorRunModel),
    ("ux_events", UxEventModel),
    ("integrations", IntegrationModel),
    ("dept_memberships", DeptMembershipModel),
)


class SqlDepartmentScopedCollection(DepartmentScopedCollection):
    """A table whose rows carry a ``department_id`` column."""

    def __init__(
        self,
        session: AsyncSession,
        name: str,
        model: Any,
        probe: DepartmentRepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._name = name
        self._model = model
        self._probe = probe or DefaultDepartmentRepositoryProbe()

    @property
    def name(self) -> str:
        return self._name

    async def delete_by_department(self, department_id: DepartmentId) -> int:
        stmt = delete(self._model).where(
            self._model.department_id == department_id.value
        )
        result = await self._session.execute(stmt)
        count = result.rowcount or 0
        self._probe.collection_purged(self._name, department_id.value, count)
        return count

    async def count_by_department(self, department_id: DepartmentId) -> int:
        stmt = (
            select(func.count())
            .select_from(self._model)
            .where(self._model.department_id == department_id.value)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()


def build_department_cascade(
    session: AsyncSession, probe: DepartmentRepositoryProbe | None = None
) -> list[SqlDepartmentScopedCollection]:
    """Instantiate the registry against ``session``."""
    return [
        SqlDepartmentScopedCollection(session, name, model, probe)
        for name, model in DEPARTMENT_SCOPED_TABLES
    ]
