"""Protocol for authorization resolution observability.

Captures allow/deny decisions of the authorization resolver so that access
problems can be traced per user and scope.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AuthorizationProbe(Protocol):
    """Domain probe for authorization decisions."""

    def unauthenticated_request(self) -> None:
        """Record that a request carried no identity."""
        ...

    def access_granted(self, user_id: str, scope: str, scope_id: str, role: str) -> None:
        """Record that a membership check passed."""
        ...

    def access_denied(self, user_id: str, scope: str, scope_id: str, reason: str) -> None:
        """Record that a membership or role check failed."""
        ...

    def department_not_found(self, department_id: str) -> None:
        """Record that a checked department does not exist."""
        ...

    def department_not_linked(self, department_id: str) -> None:
        """Record that a department has no organization to authorize against."""
        ...

    def with_context(self, context: ObservationContext) -> AuthorizationProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAuthorizationProbe:
    """Default implementation of AuthorizationProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultAuthorizationProbe:
        """Create a new probe with observation context bound."""
        return DefaultAuthorizationProbe(logger=self._logger, context=context)

    def unauthenticated_request(self) -> None:
        self._logger.info("unauthenticated_request", **self._get_context_kwargs())

    def access_granted(self, user_id: str, scope: str, scope_id: str, role: str) -> None:
        self._logger.debug(
            "access_granted",
            user_id=user_id,
            scope=scope,
            scope_id=scope_id,
            role=role,
            **self._get_context_kwargs(),
        )

    def access_denied(self, user_id: str, scope: str, scope_id: str, reason: str) -> None:
        self._logger.warning(
            "access_denied",
            user_id=user_id,
            scope=scope,
            scope_id=scope_id,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def department_not_found(self, department_id: str) -> None:
        self._logger.info(
            "department_not_found",
            department_id=department_id,
            **self._get_context_kwargs(),
        )

    def department_not_linked(self, department_id: str) -> None:
        self._logger.warning(
            "department_not_linked",
            department_id=department_id,
            **self._get_context_kwargs(),
        )
