"""SQLAlchemy ORM model for the integrations table."""

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class IntegrationModel(Base, TimestampMixin):
    """ORM model for integrations table.

    Org-scoped rows carry organization_id; legacy rows written before
    integrations moved to organizations carry only department_id.

    Unique Constraint:
    - (organization_id, type): one configuration per connector per organization
    """

    __tablename__ = "integrations"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    organization_id: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("organizations.id", ondelete="RESTRICT"),
        nullable=True,
    )
    department_id: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("departments.id", ondelete="RESTRICT"),
        nullable=True,
    )
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    config: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False, default=dict)
    auth_type: Mapped[str | None] = mapped_column(String(16), nullable=True)
    oauth_status: Mapped[str | None] = mapped_column(String(16), nullable=True)
    last_sync_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    last_error: Mapped[str] = mapped_column(Text, nullable=False, default="")

    __table_args__ = (
        UniqueConstraint("organization_id", "type"),
        Index("idx_integrations_department_type", "department_id", "type"),
    )

    def __repr__(self) -> str:
        return (
            f"<IntegrationModel(id={self.id}, type={self.type}, "
            f"organization_id={self.organization_id})>"
        )
