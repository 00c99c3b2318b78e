"""ORM models for department-scoped collections owned by other modules.

The business logic of these tables lives elsewhere; this service only needs
their department key to cascade department removal. Each table references
departments with RESTRICT, so a department row cannot be deleted while any
of them still holds its rows.
"""

from typing import Any

from sqlalchemy import ForeignKey, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, CreatedAtMixin


class DepartmentScopedRecordMixin(CreatedAtMixin):
    """Columns shared by every department-scoped record table."""

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    department_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("departments.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    payload: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False, default=dict)


class AgentTemplateModel(Base, DepartmentScopedRecordMixin):
    __tablename__ = "agent_templates"


class TaskModel(Base, DepartmentScopedRecordMixin):
    __tablename__ = "tasks"


class MessageModel(Base, DepartmentScopedRecordMixin):
    __tablename__ = "messages"


class ThreadReadModel(Base, DepartmentScopedRecordMixin):
    __tablename__ = "thread_reads"


class ActivityModel(Base, DepartmentScopedRecordMixin):
    __tablename__ = "activities"


class DocumentModel(Base, DepartmentScopedRecordMixin):
    __tablename__ = "documents"


class NotificationModel(Base, DepartmentScopedRecordMixin):
    __tablename__ = "notifications"


class ThreadSubscriptionModel(Base, DepartmentScopedRecordMixin):
    __tablename__ = "thread_subscriptions"


class ExecutorRunModel(Base, DepartmentScopedRecordMixin):
    __tablename__ = "executor_runs"


class UxEventModel(Base, DepartmentScopedRecordMixin):
    __tablename__ = "ux_events"
