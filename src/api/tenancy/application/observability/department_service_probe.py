"""Protocol for department lifecycle observability.

Defines the interface for domain probes that capture application-level
domain events for department service operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class DepartmentServiceProbe(Protocol):
    """Domain probe for department service operations."""

    def department_created(
        self, department_id: str, slug: str, organization_id: str
    ) -> None:
        """Record that a department row was committed."""
        ...

    def duplicate_department_slug(self, slug: str) -> None:
        """Record that a slug collision rejected a creation."""
        ...

    def post_creation_hook_completed(
        self, hook: str, department_id: str, changed: bool
    ) -> None:
        """Record that a post-creation hook ran (``changed`` False if it was a no-op)."""
        ...

    def post_creation_hook_failed(
        self, hook: str, department_id: str, attempt: int, error: str
    ) -> None:
        """Record a failed post-creation hook attempt."""
        ...

    def department_not_found(self, department_id: str) -> None:
        """Record that a department lookup missed."""
        ...

    def departments_listed(self, organization_id: str | None, count: int) -> None:
        """Record a department listing (``organization_id`` None for full scans)."""
        ...

    def member_added(
        self, department_id: str, user_id: str, role: str, already_member: bool
    ) -> None:
        """Record a department enrollment."""
        ...

    def department_renamed(self, department_id: str, name: str) -> None:
        """Record that a department was renamed."""
        ...

    def department_cascade_deletion_started(
        self, department_id: str, collections: int
    ) -> None:
        """Record the start of a removal cascade."""
        ...

    def department_cascade_incomplete(
        self, department_id: str, remaining: dict[str, int]
    ) -> None:
        """Record that rows survived the cascade (transaction rolled back)."""
        ...

    def department_deleted(self, department_id: str, deleted: dict[str, int]) -> None:
        """Record that a department and its scoped data were removed."""
        ...

    def departments_linked(
        self, organization_id: str, updated: int, already_linked: int
    ) -> None:
        """Record a relink repair run."""
        ...

    def with_context(self, context: ObservationContext) -> DepartmentServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultDepartmentServiceProbe:
    """Default implementation of DepartmentServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(
        self, context: ObservationContext
    ) -> DefaultDepartmentServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultDepartmentServiceProbe(logger=self._logger, context=context)

    def department_created(
        self, department_id: str, slug: str, organization_id: str
    ) -> None:
        self._logger.info(
            "department_created",
            department_id=department_id,
            slug=slug,
            organization_id=organization_id,
            **self._get_context_kwargs(),
        )

    def duplicate_department_slug(self, slug: str) -> None:
        self._logger.warning(
            "duplicate_department_slug",
            slug=slug,
            **self._get_context_kwargs(),
        )

    def post_creation_hook_completed(
        self, hook: str, department_id: str, changed: bool
    ) -> None:
        self._logger.info(
            "post_creation_hook_completed",
            hook=hook,
            department_id=department_id,
            changed=changed,
            **self._get_context_kwargs(),
        )

    def post_creation_hook_failed(
        self, hook: str, department_id: str, attempt: int, error: str
    ) -> None:
        self._logger.error(
            "post_creation_hook_failed",
            hook=hook,
            department_id=department_id,
            attempt=attempt,
            error=error,
            **self._get_context_kwargs(),
        )

    def department_not_found(self, department_id: str) -> None:
        self._logger.debug(
            "department_not_found",
            department_id=department_id,
            **self._get_context_kwargs(),
        )

    def departments_listed(self, organization_id: str | None, count: int) -> None:
        self._logger.debug(
            "departments_listed",
            organization_id=organization_id,
            count=count,
            **self._get_context_kwargs(),
        )

    def member_added(
        self, department_id: str, user_id: str, role: str, already_member: bool
    ) -> None:
        self._logger.info(
            "department_member_added",
            department_id=department_id,
            user_id=user_id,
            role=role,
            already_member=already_member,
            **self._get_context_kwargs(),
        )

    def department_renamed(self, department_id: str, name: str) -> None:
        self._logger.info(
            "department_renamed",
            department_id=department_id,
            name=name,
            **self._get_context_kwargs(),
        )

    def department_cascade_deletion_started(
        self, department_id: str, collections: int
    ) -> None:
        self._logger.info(
            "department_cascade_deletion_started",
            department_id=department_id,
            collections=collections,
            **self._get_context_kwargs(),
        )

    def department_cascade_incomplete(
        self, department_id: str, remaining: dict[str, int]
    ) -> None:
        self._logger.error(
            "department_cascade_incomplete",
            department_id=department_id,
            remaining=remaining,
            **self._get_context_kwargs(),
        )

    def department_deleted(self, department_id: str, deleted: dict[str, int]) -> None:
        self._logger.info(
            "department_deleted",
            department_id=department_id,
            deleted=deleted,
            total_deleted=sum(deleted.values()),
            **self._get_context_kwargs(),
        )

    def departments_linked(
        self, organization_id: str, updated: int, already_linked: int
    ) -> None:
        self._logger.info(
            "departments_linked_to_organization",
            organization_id=organization_id,
            updated=updated,
            already_linked=already_linked,
            **self._get_context_kwargs(),
        )
