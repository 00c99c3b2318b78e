"""Maintenance routes for system operators.

These wrap service operations meant for trusted jobs. The boundary admits
only user ids on the configured operator allow-list.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from tenancy.application.services import DepartmentService
from tenancy.application.value_objects import RepairReport
from tenancy.dependencies.services import get_department_service
from tenancy.domain.value_objects import UserId
from tenancy.presentation.departments.models import DepartmentListResponse
from tenancy.presentation.errors import (
    TENANCY_ERRORS,
    parse_organization_id,
    to_http_exception,
)
from tenancy.presentation.guards import require_operator

router = APIRouter(prefix="/maintenance", tags=["maintenance"])


class RepairReportResponse(BaseModel):
    """Outcome of relinking every department to one organization."""

    organization_id: str
    organization_name: str
    total_departments: int
    updated: int
    already_linked: int

    @classmethod
    def from_report(cls, report: RepairReport) -> RepairReportResponse:
        return cls(
            organization_id=report.organization_id,
            organization_name=report.organization_name,
            total_departments=report.total_departments,
            updated=report.updated,
            already_linked=report.already_linked,
        )


@router.get(
    "/departments",
    response_model=DepartmentListResponse,
    summary="List every department",
    responses={
        401: {"description": "Authentication required"},
        403: {"description": "Caller is not a system operator"},
    },
)
async def list_all_departments(
    _: Annotated[UserId, Depends(require_operator)],
    service: Annotated[DepartmentService, Depends(get_department_service)],
) -> DepartmentListResponse:
    """List departments across all organizations."""
    return DepartmentListResponse.from_domain(await service.list_all_departments())


@router.post(
    "/organizations/{org_id}/link-departments",
    response_model=RepairReportResponse,
    summary="Link every department to an organization",
    description="Single-tenant repair for departments that predate organizations.",
    responses={
        401: {"description": "Authentication required"},
        403: {"description": "Caller is not a system operator"},
        404: {"description": "Organization not found"},
    },
)
async def link_departments(
    org_id: str,
    _: Annotated[UserId, Depends(require_operator)],
    service: Annotated[DepartmentService, Depends(get_department_service)],
) -> RepairReportResponse:
    """Point every department at the organization."""
    try:
        report = await service.link_departments_to_organization(
            parse_organization_id(org_id)
        )
    except TENANCY_ERRORS as e:
        raise to_http_exception(e) from e
    return RepairReportResponse.from_report(report)
