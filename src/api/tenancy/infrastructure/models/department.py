"""SQLAlchemy ORM models for departments and department memberships."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class DepartmentModel(Base, TimestampMixin):
    """ORM model for departments table.

    Foreign Key Constraints:
    - organization_id references organizations.id with RESTRICT delete.
      NULL for legacy departments created before organizations existed.

    Unique Constraint:
    - slug is globally unique
    """

    __tablename__ = "departments"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    organization_id: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("organizations.id", ondelete="RESTRICT"),
        nullable=True,
    )
    plan: Mapped[str] = mapped_column(String(32), nullable=False, default="free")

    __table_args__ = (
        Index("idx_departments_organization_created", "organization_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<DepartmentModel(id={self.id}, slug={self.slug})>"


class DeptMembershipModel(Base):
    """ORM model for dept_memberships table.

    Unique Constraint:
    - (user_id, department_id): enrollment is idempotent
    """

    __tablename__ = "dept_memberships"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    department_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("departments.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    role: Mapped[str] = mapped_column(String(16), nullable=False)
    joined_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "department_id"),)

    def __repr__(self) -> str:
        return (
            f"<DeptMembershipModel(user_id={self.user_id}, "
            f"department_id={self.department_id}, role={self.role})>"
        )
