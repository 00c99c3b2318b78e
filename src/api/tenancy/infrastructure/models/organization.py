"""SQLAlchemy ORM models for organizations and their memberships."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class OrganizationModel(Base, TimestampMixin):
    """ORM model for organizations table.

    Rows are provisioned by onboarding/billing; this service reads them and
    enforces RESTRICT deletes from every table that references them.
    """

    __tablename__ = "organizations"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    plan: Mapped[str] = mapped_column(String(32), nullable=False, default="starter")

    def __repr__(self) -> str:
        return f"<OrganizationModel(id={self.id}, slug={self.slug}, plan={self.plan})>"


class OrgMembershipModel(Base):
    """ORM model for org_memberships table.

    Unique Constraint:
    - (user_id, organization_id): one membership per user per organization
    """

    __tablename__ = "org_memberships"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    organization_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("organizations.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    role: Mapped[str] = mapped_column(String(16), nullable=False)
    joined_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "organization_id"),)

    def __repr__(self) -> str:
        return (
            f"<OrgMembershipModel(user_id={self.user_id}, "
            f"organization_id={self.organization_id}, role={self.role})>"
        )
