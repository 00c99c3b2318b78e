"""Domain probes for tenancy repository operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class DepartmentRepositoryProbe(Protocol):
    """Domain probe for department persistence."""

    def department_saved(self, department_id: str, created: bool) -> None:
        """Record that a department row was inserted or updated."""
        ...

    def department_deleted(self, department_id: str) -> None:
        """Record that a department row was deleted."""
        ...

    def collection_purged(self, collection: str, department_id: str, count: int) -> None:
        """Record that a department-scoped collection was emptied."""
        ...

    def with_context(self, context: ObservationContext) -> DepartmentRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultDepartmentRepositoryProbe:
    """Default implementation of DepartmentRepositoryProbe using structlog."""

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
    ) -> DefaultDepartmentRepositoryProbe:
        return DefaultDepartmentRepositoryProbe(logger=self._logger, context=context)

    def department_saved(self, department_id: str, created: bool) -> None:
        self._logger.debug(
            "department_saved",
            department_id=department_id,
            created=created,
            **self._get_context_kwargs(),
        )

    def department_deleted(self, department_id: str) -> None:
        self._logger.debug(
            "department_row_deleted",
            department_id=department_id,
            **self._get_context_kwargs(),
        )

    def collection_purged(self, collection: str, department_id: str, count: int) -> None:
        self._logger.debug(
            "department_collection_purged",
            collection=collection,
            department_id=department_id,
            count=count,
            **self._get_context_kwargs(),
        )


class IntegrationRepositoryProbe(Protocol):
    """Domain probe for integration persistence."""

    def integration_saved(
        self, integration_id: str, type: str, created: bool, config_keys: list[str]
    ) -> None:
        """Record that an integration row was written (key names only, never values)."""
        ...

    def with_context(self, context: ObservationContext) -> IntegrationRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultIntegrationRepositoryProbe:
    """Default implementation of IntegrationRepositoryProbe using structlog."""

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
    ) -> DefaultIntegrationRepositoryProbe:
        return DefaultIntegrationRepositoryProbe(logger=self._logger, context=context)

    def integration_saved(
        self, integration_id: str, type: str, created: bool, config_keys: list[str]
    ) -> None:
        self._logger.debug(
            "integration_saved",
            integration_id=integration_id,
            type=type,
            created=created,
            config_keys=config_keys,
            **self._get_context_kwargs(),
        )
