"""Organization integration routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from tenancy.application.services import IntegrationService
from tenancy.dependencies.services import get_integration_service
from tenancy.domain.value_objects import DepartmentId, IntegrationType
from tenancy.presentation.errors import (
    TENANCY_ERRORS,
    parse_department_id,
    parse_organization_id,
    to_http_exception,
)
from tenancy.presentation.integrations.models import (
    DisconnectIntegrationResponse,
    GmailConfigRequest,
    IntegrationListResponse,
    IntegrationResponse,
    UpsertIntegrationResponse,
)

router = APIRouter(
    prefix="/organizations/{org_id}/integrations",
    tags=["integrations"],
)

Service = Annotated[IntegrationService, Depends(get_integration_service)]


def _optional_department_id(value: str | None) -> DepartmentId | None:
    return parse_department_id(value) if value else None


@router.get(
    "",
    response_model=IntegrationListResponse,
    summary="List the organization's integrations",
    description="Secrets in each configuration are masked.",
    responses={
        401: {"description": "Authentication required"},
        403: {"description": "Caller is not an organization member"},
    },
)
async def list_integrations(org_id: str, service: Service) -> IntegrationListResponse:
    """List integrations of an organization."""
    try:
        integrations = await service.list_integrations(parse_organization_id(org_id))
    except TENANCY_ERRORS as e:
        raise to_http_exception(e) from e
    items = [IntegrationResponse.from_domain(i) for i in integrations]
    return IntegrationListResponse(integrations=items, count=len(items))


@router.put(
    "/gmail",
    response_model=UpsertIntegrationResponse,
    summary="Configure Gmail",
    description="""
Create or update the organization's Gmail OAuth app registration.

Existing configuration, including a stored OAuth grant, is preserved; only
the app registration is overwritten.
""",
    responses={
        400: {"description": "Missing client id or secret"},
        401: {"description": "Authentication required"},
        402: {"description": "Plan does not include Gmail"},
        403: {"description": "Caller is not an organization admin"},
        404: {"description": "Department not found"},
        409: {"description": "Department belongs to another organization"},
    },
)
async def configure_gmail(
    org_id: str,
    request: GmailConfigRequest,
    service: Service,
) -> UpsertIntegrationResponse:
    """Create or update the Gmail configuration."""
    organization_id = parse_organization_id(org_id)
    department_id = _optional_department_id(request.department_id)
    try:
        result = await service.upsert_gmail_config(
            organization_id=organization_id,
            client_id=request.client_id,
            client_secret=request.client_secret,
            redirect_uri=request.redirect_uri,
            department_id=department_id,
            name=request.name,
            app_return_url=request.app_return_url,
        )
    except TENANCY_ERRORS as e:
        raise to_http_exception(e) from e
    return UpsertIntegrationResponse.from_result(result)


@router.delete(
    "/gmail",
    response_model=DisconnectIntegrationResponse,
    summary="Disconnect Gmail",
    description="Drops the OAuth grant and keeps the app registration.",
    responses={
        401: {"description": "Authentication required"},
        403: {"description": "Caller is not an organization admin"},
    },
)
async def disconnect_gmail(
    org_id: str,
    service: Service,
    department_id: Annotated[str | None, Query()] = None,
) -> DisconnectIntegrationResponse:
    """Disconnect the Gmail OAuth grant."""
    organization_id = parse_organization_id(org_id)
    try:
        result = await service.disconnect_gmail(
            organization_id, _optional_department_id(department_id)
        )
    except TENANCY_ERRORS as e:
        raise to_http_exception(e) from e
    return DisconnectIntegrationResponse.from_result(result)


department_router = APIRouter(
    prefix="/departments/{department_id}/integrations",
    tags=["integrations"],
)


@department_router.get(
    "/{integration_type}",
    response_model=IntegrationResponse,
    summary="Resolve the integration a department uses",
    description="""
Returns the organization's integration of this type, or the department's own
legacy record when the organization has none.
""",
    responses={
        401: {"description": "Authentication required"},
        403: {"description": "Caller is not an organization member"},
        404: {"description": "Department or integration not found"},
        409: {"description": "Department has no organization linked"},
    },
)
async def get_department_integration(
    department_id: str,
    integration_type: IntegrationType,
    service: Service,
) -> IntegrationResponse:
    """Resolve a department's integration of one type."""
    try:
        integration = await service.get_integration_for_department(
            parse_department_id(department_id), integration_type
        )
    except TENANCY_ERRORS as e:
        raise to_http_exception(e) from e
    if integration is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{integration_type.label} is not configured.",
        )
    return IntegrationResponse.from_domain(integration)
