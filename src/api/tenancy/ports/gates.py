"""Ports for collaborators consulted by the tenancy services.

The identity provider, the quota gate and the integration allowance gate are
owned by other subsystems; the services only depend on these contracts.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from tenancy.domain.value_objects import (
    DepartmentId,
    IntegrationType,
    LimitedResource,
    OrganizationId,
    UserId,
)


@runtime_checkable
class IdentityProvider(Protocol):
    """Source of the authenticated caller for the current request."""

    def current_user_id(self) -> UserId | None:
        """Return the caller's user id, or None when unauthenticated."""
        ...


@runtime_checkable
class QuotaGate(Protocol):
    """Plan quota enforcement."""

    async def check_limit(
        self,
        organization_id: OrganizationId,
        resource: LimitedResource,
        department_id: DepartmentId | None = None,
    ) -> None:
        """Allow one more ``resource`` for the organization or raise.

        ``department_id`` is required for per-department resources (agents).

        Raises:
            QuotaExceededError: If the organization's plan limit is reached
        """
        ...


@runtime_checkable
class IntegrationAllowanceGate(Protocol):
    """Plan-based integration availability."""

    async def assert_integration_allowed(
        self, organization_id: OrganizationId, type: IntegrationType
    ) -> None:
        """Raise unless the organization's plan includes ``type``.

        Raises:
            PlanRestrictedError: If the plan excludes the integration
        """
        ...
