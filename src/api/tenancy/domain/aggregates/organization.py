"""Organization aggregate for the tenancy context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from tenancy.domain.value_objects import OrganizationId, OrganizationPlan


@dataclass(frozen=True)
class Organization:
    """Top-level tenant owning departments and integrations.

    Organizations are provisioned by the billing/onboarding flow; this
    service only reads them.
    """

    id: OrganizationId
    name: str
    slug: str
    plan: OrganizationPlan
    created_at: datetime
