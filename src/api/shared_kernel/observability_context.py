"""Observation context for domain-oriented observability.

Observation contexts carry request-scoped metadata that every probe bound to
them adds to its log events.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Attributes:
        request_id: Unique identifier for the current request/operation.
        user_id: Identifier of the caller (if authenticated).
        organization_id: Organization the operation is scoped to (if any).
        department_id: Department the operation is scoped to (if any).
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(request_id="req-123", user_id="user-456")
        probe = DefaultDepartmentServiceProbe().with_context(
            context.with_department("01J...")
        )
    """

    request_id: str | None = None
    user_id: str | None = None
    organization_id: str | None = None
    department_id: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.user_id is not None:
            result["user_id"] = self.user_id
        if self.organization_id is not None:
            result["organization_id"] = self.organization_id
        if self.department_id is not None:
            result["department_id"] = self.department_id
        result.update(self.extra)
        return result

    def with_organization(self, organization_id: str) -> ObservationContext:
        """Create a new context scoped to an organization."""
        return replace(self, organization_id=organization_id)

    def with_department(self, department_id: str) -> ObservationContext:
        """Create a new context scoped to a department."""
        return replace(self, department_id=department_id)

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Create a new context with additional metadata."""
        return replace(self, extra={**self.extra, **kwargs})
