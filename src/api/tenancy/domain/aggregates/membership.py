"""Membership records linking users to organizations and departments."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from tenancy.domain.value_objects import (
    DepartmentId,
    MembershipId,
    OrganizationId,
    Role,
    UserId,
)


@dataclass(frozen=True)
class OrgMembership:
    """A user's role within an organization. One per (user, organization)."""

    id: MembershipId
    user_id: UserId
    organization_id: OrganizationId
    role: Role
    joined_at: datetime


@dataclass(frozen=True)
class DeptMembership:
    """A user's role within a department. One per (user, department)."""

    id: MembershipId
    user_id: UserId
    department_id: DepartmentId
    role: Role
    joined_at: datetime

    @classmethod
    def create(
        cls,
        user_id: UserId,
        department_id: DepartmentId,
        role: Role = Role.MEMBER,
    ) -> DeptMembership:
        """Enroll a user in a department, stamped with the current time."""
        return cls(
            id=MembershipId.generate(),
            user_id=user_id,
            department_id=department_id,
            role=role,
            joined_at=datetime.now(UTC),
        )
