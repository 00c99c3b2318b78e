"""Request and response models for department API endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from tenancy.application.value_objects import (
    CascadeReport,
    DepartmentWithRole,
    MembershipResult,
)
from tenancy.domain.aggregates import Department
from tenancy.domain.value_objects import DepartmentPlan, Role


class CreateDepartmentRequest(BaseModel):
    """Request to create a department.

    Attributes:
        name: Display name (1-255 characters)
        slug: Globally unique slug (1-64 characters)
        plan: Department plan, ``free`` when omitted
    """

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Department name",
        examples=["Marketing", "Customer Support"],
    )
    slug: str = Field(
        ...,
        min_length=1,
        max_length=64,
        description="Globally unique department slug",
        examples=["marketing"],
    )
    plan: DepartmentPlan | None = Field(default=None, description="Department plan")


class RenameDepartmentRequest(BaseModel):
    """Request to rename a department."""

    name: str = Field(..., max_length=255, description="New department name")


class AddMemberRequest(BaseModel):
    """Request to enroll a user in a department."""

    user_id: str = Field(..., min_length=1, max_length=255, description="User ID")
    role: Role = Field(default=Role.MEMBER, description="Department role")


class DepartmentResponse(BaseModel):
    """Response containing department details."""

    id: str = Field(..., description="Department ID (ULID format)")
    name: str = Field(..., description="Department name")
    slug: str = Field(..., description="Department slug")
    organization_id: str | None = Field(
        ..., description="Owning organization (None for legacy departments)"
    )
    plan: str = Field(..., description="Department plan")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    @classmethod
    def from_domain(cls, department: Department) -> DepartmentResponse:
        """Convert domain Department aggregate to API response."""
        organization_id = department.organization_id
        return cls(
            id=department.id.value,
            name=department.name,
            slug=department.slug,
            organization_id=organization_id.value if organization_id else None,
            plan=department.plan.value,
            created_at=department.created_at,
            updated_at=department.updated_at,
        )


class DepartmentListResponse(BaseModel):
    """Response containing a list of departments."""

    departments: list[DepartmentResponse]
    count: int

    @classmethod
    def from_domain(cls, departments: list[Department]) -> DepartmentListResponse:
        items = [DepartmentResponse.from_domain(d) for d in departments]
        return cls(departments=items, count=len(items))


class CreateDepartmentResponse(BaseModel):
    """Response returned after creating a department."""

    id: str = Field(..., description="Department ID (ULID format)")


class MyDepartmentResponse(DepartmentResponse):
    """A department together with the caller's department role."""

    role: str = Field(..., description="Caller's role in the department")

    @classmethod
    def from_result(cls, result: DepartmentWithRole) -> MyDepartmentResponse:
        base = DepartmentResponse.from_domain(result.department)
        return cls(**base.model_dump(), role=result.role.value)


class MyDepartmentListResponse(BaseModel):
    """Departments the caller belongs to."""

    departments: list[MyDepartmentResponse]
    count: int


class MembershipResponse(BaseModel):
    """Response returned after enrolling a member."""

    id: str
    user_id: str
    department_id: str
    role: str
    joined_at: datetime
    already_member: bool

    @classmethod
    def from_result(cls, result: MembershipResult) -> MembershipResponse:
        membership = result.membership
        return cls(
            id=membership.id.value,
            user_id=membership.user_id.value,
            department_id=membership.department_id.value,
            role=membership.role.value,
            joined_at=membership.joined_at,
            already_member=result.already_member,
        )


class CascadeReportResponse(BaseModel):
    """Rows removed per collection when a department is deleted."""

    department_id: str
    deleted: dict[str, int]
    total: int

    @classmethod
    def from_report(cls, report: CascadeReport) -> CascadeReportResponse:
        return cls(
            department_id=report.department_id,
            deleted=dict(report.deleted),
            total=report.total,
        )
