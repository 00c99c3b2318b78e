"""Integration aggregate (org-scoped connector configuration)."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from tenancy.domain.integration_config import IntegrationConfig
from tenancy.domain.value_objects import (
    AuthType,
    DepartmentId,
    IntegrationId,
    IntegrationType,
    OAuthStatus,
    OrganizationId,
)


@dataclass
class Integration:
    """Connector configuration owned by an organization.

    Business rules:
    - At most one record per (organization, type)
    - Writes always clear the legacy ``department_id`` hint
    - ``last_error`` is cleared and ``last_sync_at`` refreshed on every
      configuration write
    """

    id: IntegrationId
    organization_id: OrganizationId | None
    type: IntegrationType
    name: str
    config: IntegrationConfig
    auth_type: AuthType | None = None
    oauth_status: OAuthStatus | None = None
    department_id: DepartmentId | None = None
    last_sync_at: datetime | None = None
    last_error: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def create_oauth(
        cls,
        organization_id: OrganizationId,
        type: IntegrationType,
        name: str,
        config: Mapping[str, Any],
    ) -> Integration:
        """Create a new OAuth integration awaiting the user's grant."""
        now = datetime.now(UTC)
        return cls(
            id=IntegrationId.generate(),
            organization_id=organization_id,
            type=type,
            name=name,
            config=IntegrationConfig().merged(config),
            auth_type=AuthType.OAUTH2,
            oauth_status=OAuthStatus.NOT_CONNECTED,
            department_id=None,
            last_sync_at=now,
            last_error="",
            created_at=now,
        )

    def reconfigure(self, name: str, updates: Mapping[str, Any]) -> None:
        """Merge app registration updates into the existing configuration.

        The OAuth status is kept (a configured grant stays connected); a
        record that never had one becomes ``not_connected``.
        """
        self.name = name
        self.config = self.config.merged(updates)
        self.auth_type = AuthType.OAUTH2
        self.oauth_status = self.oauth_status or OAuthStatus.NOT_CONNECTED
        self._touch()

    def disconnect(self) -> None:
        """Drop the OAuth grant, keeping the app registration."""
        self.config = self.config.without_grant()
        self.oauth_status = OAuthStatus.NOT_CONNECTED
        self._touch()

    def _touch(self) -> None:
        self.department_id = None
        self.last_sync_at = datetime.now(UTC)
        self.last_error = ""
