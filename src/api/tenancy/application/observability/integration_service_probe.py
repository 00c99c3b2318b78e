"""Protocol for integration config store observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class IntegrationServiceProbe(Protocol):
    """Domain probe for integration configuration operations."""

    def integration_configured(
        self, organization_id: str, type: str, integration_id: str, created: bool
    ) -> None:
        """Record that an integration configuration was written."""
        ...

    def integration_write_conflict(self, organization_id: str, type: str) -> None:
        """Record that a concurrent insert won the (organization, type) slot."""
        ...

    def integration_disconnected(
        self, organization_id: str, type: str, disconnected: bool
    ) -> None:
        """Record a disconnect request (``disconnected`` False when nothing existed)."""
        ...

    def integrations_listed(self, organization_id: str, count: int) -> None:
        """Record that an organization's integrations were listed."""
        ...

    def with_context(self, context: ObservationContext) -> IntegrationServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultIntegrationServiceProbe:
    """Default implementation of IntegrationServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(
        self, context: ObservationContext
    ) -> DefaultIntegrationServiceProbe:
        return DefaultIntegrationServiceProbe(logger=self._logger, context=context)

    def integration_configured(
        self, organization_id: str, type: str, integration_id: str, created: bool
    ) -> None:
        self._logger.info(
            "integration_configured",
            organization_id=organization_id,
            type=type,
            integration_id=integration_id,
            created=created,
            **self._get_context_kwargs(),
        )

    def integration_write_conflict(self, organization_id: str, type: str) -> None:
        self._logger.warning(
            "integration_write_conflict",
            organization_id=organization_id,
            type=type,
            **self._get_context_kwargs(),
        )

    def integration_disconnected(
        self, organization_id: str, type: str, disconnected: bool
    ) -> None:
        self._logger.info(
            "integration_disconnected",
            organization_id=organization_id,
            type=type,
            disconnected=disconnected,
            **self._get_context_kwargs(),
        )

    def integrations_listed(self, organization_id: str, count: int) -> None:
        self._logger.debug(
            "integrations_listed",
            organization_id=organization_id,
            count=count,
            **self._get_context_kwargs(),
        )
