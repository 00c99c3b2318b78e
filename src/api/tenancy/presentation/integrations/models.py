"""Request and response models for integration API endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from tenancy.application.value_objects import DisconnectResult, UpsertResult
from tenancy.domain.aggregates import Integration


class GmailConfigRequest(BaseModel):
    """Request to configure the organization's Gmail OAuth app.

    Attributes:
        client_id: OAuth client id of the organization's Google app
        client_secret: OAuth client secret
        redirect_uri: OAuth redirect URI registered with Google
        department_id: Department that starts the OAuth flow, if any
        name: Display name, ``Gmail`` when omitted
        app_return_url: Where to send the user after the OAuth flow
    """

    client_id: str = Field(..., description="OAuth client id")
    client_secret: str = Field(..., description="OAuth client secret")
    redirect_uri: str = Field(default="", description="OAuth redirect URI")
    department_id: str | None = Field(
        default=None, description="Department starting the OAuth flow"
    )
    name: str | None = Field(default=None, max_length=255)
    app_return_url: str | None = Field(default=None)


class UpsertIntegrationResponse(BaseModel):
    """Response returned after writing an integration configuration."""

    integration_id: str
    created: bool

    @classmethod
    def from_result(cls, result: UpsertResult) -> UpsertIntegrationResponse:
        return cls(integration_id=result.integration_id.value, created=result.created)


class DisconnectIntegrationResponse(BaseModel):
    """Response returned after dropping an OAuth grant."""

    disconnected: bool

    @classmethod
    def from_result(cls, result: DisconnectResult) -> DisconnectIntegrationResponse:
        return cls(disconnected=result.disconnected)


class IntegrationResponse(BaseModel):
    """An integration with its configuration secrets masked."""

    id: str
    organization_id: str | None
    type: str
    name: str
    auth_type: str | None
    oauth_status: str | None
    connected: bool = Field(..., description="Whether an OAuth grant is stored")
    config: dict[str, Any] = Field(..., description="Configuration, secrets masked")
    last_sync_at: datetime | None
    last_error: str
    created_at: datetime

    @classmethod
    def from_domain(cls, integration: Integration) -> IntegrationResponse:
        """Convert domain Integration aggregate to API response."""
        return cls(
            id=integration.id.value,
            organization_id=(
                integration.organization_id.value
                if integration.organization_id
                else None
            ),
            type=integration.type.value,
            name=integration.name,
            auth_type=integration.auth_type.value if integration.auth_type else None,
            oauth_status=(
                integration.oauth_status.value if integration.oauth_status else None
            ),
            connected=integration.config.has_grant(),
            config=integration.config.redacted(),
            last_sync_at=integration.last_sync_at,
            last_error=integration.last_error,
            created_at=integration.created_at,
        )


class IntegrationListResponse(BaseModel):
    """Response containing an organization's integrations."""

    integrations: list[IntegrationResponse]
    count: int
