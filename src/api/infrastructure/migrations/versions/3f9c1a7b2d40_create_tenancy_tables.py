"""create tenancy tables

Revision ID: 3f9c1a7b2d40
Revises:
Create Date: 2026-10-18 09:12:44.518203

Creates organizations, departments, memberships, agents, integrations and the
department-scoped record tables. Every reference to departments uses a
RESTRICT FK so a department can only be removed after the application-level
cascade has emptied every table that points at it.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f9c1a7b2d40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

DEPARTMENT_SCOPED_RECORD_TABLES = (
    "agent_templates",
    "tasks",
    "messages",
    "thread_reads",
    "activities",
    "documents",
    "notifications",
    "thread_subscriptions",
    "executor_runs",
    "ux_events",
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def _department_fk(table: str, nullable: bool = False) -> sa.Column:
    return sa.Column(
        "department_id",
        sa.String(26),
        sa.ForeignKey(
            "departments.id",
            name=f"fk_{table}_department_id_departments",
            ondelete="RESTRICT",
        ),
        nullable=nullable,
    )


def _organization_fk(table: str, nullable: bool = False) -> sa.Column:
    return sa.Column(
        "organization_id",
        sa.String(26),
        sa.ForeignKey(
            "organizations.id",
            name=f"fk_{table}_organization_id_organizations",
            ondelete="RESTRICT",
        ),
        nullable=nullable,
    )


def upgrade() -> None:
    """Create tenancy tables.

    Key constraints:
    - departments.slug is globally unique
    - (user_id, organization_id) and (user_id, department_id) are unique
      memberships
    - (department_id, session_key) on agents backs idempotent agent seeding
    - (organization_id, type) on integrations keeps one connector per
      organization
    """
    op.create_table(
        "organizations",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(64), nullable=False),
        sa.Column("plan", sa.String(32), nullable=False, server_default="starter"),
        *_timestamps(),
        sa.UniqueConstraint("slug", name="uq_organizations_slug"),
    )

    op.create_table(
        "org_memberships",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("user_id", sa.String(255), nullable=False),
        _organization_fk("org_memberships"),
        sa.Column("role", sa.String(16), nullable=False),
        sa.Column("joined_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint(
            "user_id",
            "organization_id",
            name="uq_org_memberships_user_id_organization_id",
        ),
    )
    op.create_index(
        "ix_org_memberships_organization_id", "org_memberships", ["organization_id"]
    )

    op.create_table(
        "departments",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(64), nullable=False),
        _organization_fk("departments", nullable=True),
        sa.Column("plan", sa.String(32), nullable=False, server_default="free"),
        *_timestamps(),
        sa.UniqueConstraint("slug", name="uq_departments_slug"),
    )
    # Backs newest-first listing per organization
    op.create_index(
        "idx_departments_organization_created",
        "departments",
        ["organization_id", "created_at"],
    )

    op.create_table(
        "dept_memberships",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("user_id", sa.String(255), nullable=False),
        _department_fk("dept_memberships"),
        sa.Column("role", sa.String(16), nullable=False),
        sa.Column("joined_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint(
            "user_id",
            "department_id",
            name="uq_dept_memberships_user_id_department_id",
        ),
    )
    op.create_index(
        "ix_dept_memberships_department_id", "dept_memberships", ["department_id"]
    )

    op.create_table(
        "agents",
        sa.Column("id", sa.String(26), primary_key=True),
        _department_fk("agents"),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(64), nullable=False),
        sa.Column("role", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("session_key", sa.String(255), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("last_seen_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint(
            "department_id",
            "session_key",
            name="uq_agents_department_id_session_key",
        ),
    )

    op.create_table(
        "integrations",
        sa.Column("id", sa.String(26), primary_key=True),
        _organization_fk("integrations", nullable=True),
        _department_fk("integrations", nullable=True),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column(
            "config",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("auth_type", sa.String(16), nullable=True),
        sa.Column("oauth_status", sa.String(16), nullable=True),
        sa.Column("last_sync_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_error", sa.Text, nullable=False, server_default=""),
        *_timestamps(),
        sa.UniqueConstraint(
            "organization_id", "type", name="uq_integrations_organization_id_type"
        ),
    )
    # Legacy per-department lookup
    op.create_index(
        "idx_integrations_department_type",
        "integrations",
        ["department_id", "type"],
    )

    for table in DEPARTMENT_SCOPED_RECORD_TABLES:
        op.create_table(
            table,
            sa.Column("id", sa.String(26), primary_key=True),
            _department_fk(table),
            sa.Column(
                "payload",
                postgresql.JSONB(),
                nullable=False,
                server_default=sa.text("'{}'::jsonb"),
            ),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        )
        op.create_index(f"ix_{table}_department_id", table, ["department_id"])


def downgrade() -> None:
    """Drop tenancy tables in reverse dependency order."""
    for table in reversed(DEPARTMENT_SCOPED_RECORD_TABLES):
        op.drop_index(f"ix_{table}_department_id", table_name=table)
        op.drop_table(table)

    op.drop_index("idx_integrations_department_type", table_name="integrations")
    op.drop_table("integrations")
    op.drop_table("agents")
    op.drop_index("ix_dept_memberships_department_id", table_name="dept_memberships")
    op.drop_table("dept_memberships")
    op.drop_index("idx_departments_organization_created", table_name="departments")
    op.drop_table("departments")
    op.drop_index("ix_org_memberships_organization_id", table_name="org_memberships")
    op.drop_table("org_memberships")
    op.drop_table("organizations")
