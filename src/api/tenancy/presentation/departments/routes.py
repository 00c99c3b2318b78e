"""Department lifecycle routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from tenancy.application.authorization import AuthorizationResolver
from tenancy.application.services import DepartmentService
from tenancy.dependencies.services import (
    get_authorization_resolver,
    get_department_service,
)
from tenancy.domain.aggregates import DeptMembership
from tenancy.domain.value_objects import Role, UserId
from tenancy.ports.exceptions import AccessDeniedError, DepartmentNotFoundError
from tenancy.presentation.departments.models import (
    AddMemberRequest,
    CascadeReportResponse,
    CreateDepartmentRequest,
    CreateDepartmentResponse,
    DepartmentListResponse,
    DepartmentResponse,
    MembershipResponse,
    MyDepartmentListResponse,
    MyDepartmentResponse,
    RenameDepartmentRequest,
)
from tenancy.presentation.errors import (
    TENANCY_ERRORS,
    parse_department_id,
    parse_organization_id,
    to_http_exception,
)
from tenancy.presentation.guards import (
    require_department_member,
    require_department_org_admin,
    require_org_admin,
    require_user,
)

router = APIRouter(tags=["departments"])

Service = Annotated[DepartmentService, Depends(get_department_service)]


@router.post(
    "/organizations/{org_id}/departments",
    response_model=CreateDepartmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a department",
    description="""
Create a department inside an organization and seed its default agent.

Requires an owner or admin of the organization. The organization's plan
limits how many departments it may hold; slugs are unique across every
organization.
""",
    responses={
        201: {"description": "Department created"},
        400: {"description": "Invalid name or slug"},
        401: {"description": "Authentication required"},
        402: {"description": "Plan department limit reached"},
        403: {"description": "Caller is not an organization admin"},
        409: {"description": "Slug already taken"},
    },
)
async def create_department(
    org_id: str,
    request: CreateDepartmentRequest,
    _: Annotated[Role, Depends(require_org_admin)],
    service: Service,
) -> CreateDepartmentResponse:
    """Create a department."""
    organization_id = parse_organization_id(org_id)
    try:
        department_id = await service.create_department(
            name=request.name,
            slug=request.slug,
            organization_id=organization_id,
            plan=request.plan,
        )
    except TENANCY_ERRORS as e:
        raise to_http_exception(e) from e
    return CreateDepartmentResponse(id=department_id.value)


@router.get(
    "/organizations/{org_id}/departments",
    response_model=DepartmentListResponse,
    summary="List an organization's departments",
    description="Newest first. Any organization member may list.",
    responses={
        400: {"description": "Invalid limit"},
        401: {"description": "Authentication required"},
        403: {"description": "Caller is not an organization member"},
    },
)
async def list_departments(
    org_id: str,
    service: Service,
    limit: Annotated[int | None, Query(description="Page size")] = None,
) -> DepartmentListResponse:
    """List departments of an organization."""
    organization_id = parse_organization_id(org_id)
    try:
        departments = await service.list_departments(organization_id, limit=limit)
    except TENANCY_ERRORS as e:
        raise to_http_exception(e) from e
    return DepartmentListResponse.from_domain(departments)


@router.get(
    "/departments/by-slug/{slug}",
    response_model=DepartmentResponse,
    summary="Get department by slug",
    responses={
        401: {"description": "Authentication required"},
        404: {"description": "Department not found"},
    },
)
async def get_department_by_slug(
    slug: str,
    resolver: Annotated[AuthorizationResolver, Depends(get_authorization_resolver)],
    service: Service,
) -> DepartmentResponse:
    """Get a department by its slug.

    Callers outside the department see 404 so taken slugs are not disclosed.
    """
    try:
        user_id = resolver.require_authenticated_user()
        department = await service.get_department_by_slug(slug)
        if department is None:
            raise DepartmentNotFoundError()
        try:
            await resolver.require_department_membership(user_id, department.id)
        except AccessDeniedError as e:
            raise DepartmentNotFoundError() from e
    except TENANCY_ERRORS as e:
        raise to_http_exception(e) from e
    return DepartmentResponse.from_domain(department)


@router.get(
    "/departments/{department_id}",
    response_model=DepartmentResponse,
    summary="Get department by ID",
    responses={
        401: {"description": "Authentication required"},
        403: {"description": "Caller is not a member of the department"},
        404: {"description": "Department not found"},
    },
)
async def get_department(
    department_id: str,
    _: Annotated[DeptMembership, Depends(require_department_member)],
    service: Service,
) -> DepartmentResponse:
    """Get a department by ID."""
    department = await service.get_department(parse_department_id(department_id))
    if department is None:
        raise to_http_exception(DepartmentNotFoundError())
    return DepartmentResponse.from_domain(department)


@router.patch(
    "/departments/{department_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Rename a department",
    responses={
        400: {"description": "Blank name"},
        401: {"description": "Authentication required"},
        403: {"description": "Caller is not an organization admin"},
        404: {"description": "Department not found"},
        409: {"description": "Department has no organization linked"},
    },
)
async def rename_department(
    department_id: str,
    request: RenameDepartmentRequest,
    service: Service,
) -> None:
    """Rename a department."""
    try:
        await service.update_department_name(
            parse_department_id(department_id), request.name
        )
    except TENANCY_ERRORS as e:
        raise to_http_exception(e) from e


@router.delete(
    "/departments/{department_id}",
    response_model=CascadeReportResponse,
    summary="Delete a department and everything it owns",
    description="""
Removes every department-scoped record (agents, tasks, messages, documents,
integrations, memberships and the rest) and the department itself in one
transaction. Nothing is deleted if any record survives the cascade.
""",
    responses={
        401: {"description": "Authentication required"},
        403: {"description": "Caller is not an organization admin"},
        404: {"description": "Department not found"},
        409: {"description": "Department not linked, or cascade incomplete"},
    },
)
async def delete_department(
    department_id: str,
    service: Service,
) -> CascadeReportResponse:
    """Delete a department."""
    try:
        report = await service.remove_department(parse_department_id(department_id))
    except TENANCY_ERRORS as e:
        raise to_http_exception(e) from e
    return CascadeReportResponse.from_report(report)


@router.post(
    "/departments/{department_id}/members",
    response_model=MembershipResponse,
    summary="Add a department member",
    description="Idempotent: re-adding a member returns the existing membership.",
    responses={
        400: {"description": "Invalid user ID"},
        401: {"description": "Authentication required"},
        403: {"description": "Caller is not an organization admin"},
        404: {"description": "Department not found"},
    },
)
async def add_member(
    department_id: str,
    request: AddMemberRequest,
    _: Annotated[Role, Depends(require_department_org_admin)],
    service: Service,
) -> MembershipResponse:
    """Enroll a user in a department."""
    try:
        user_id = UserId.from_string(request.user_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)
        ) from e

    try:
        result = await service.add_member(
            parse_department_id(department_id), user_id, role=request.role
        )
    except TENANCY_ERRORS as e:
        raise to_http_exception(e) from e
    return MembershipResponse.from_result(result)


@router.post(
    "/departments/{department_id}/seed",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Re-run post-creation hooks",
    description="Safe to repeat; hooks skip work that is already in place.",
    responses={
        401: {"description": "Authentication required"},
        403: {"description": "Caller is not an organization admin"},
        404: {"description": "Department not found"},
        500: {"description": "A hook failed"},
    },
)
async def seed_department(
    department_id: str,
    _: Annotated[Role, Depends(require_department_org_admin)],
    service: Service,
) -> None:
    """Re-run the post-creation hooks for a department."""
    try:
        await service.seed_department(parse_department_id(department_id))
    except TENANCY_ERRORS as e:
        raise to_http_exception(e) from e


@router.get(
    "/me/departments",
    response_model=MyDepartmentListResponse,
    summary="List the caller's departments",
    responses={401: {"description": "Authentication required"}},
)
async def list_my_departments(
    user_id: Annotated[UserId, Depends(require_user)],
    service: Service,
) -> MyDepartmentListResponse:
    """List departments the caller belongs to, with the caller's role."""
    results = await service.get_departments_for_user(user_id)
    items = [MyDepartmentResponse.from_result(result) for result in results]
    return MyDepartmentListResponse(departments=items, count=len(items))
