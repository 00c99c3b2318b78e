"""Department aggregate for the tenancy context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from tenancy.domain.value_objects import (
    DepartmentId,
    DepartmentPlan,
    LinkedTo,
    OrganizationId,
    OrgLink,
    Unlinked,
)

MAX_SLUG_LENGTH = 64


@dataclass
class Department:
    """A workspace inside an organization that owns agents, tasks and data.

    Business rules:
    - The name is trimmed and must not be empty (1-255 characters) when
      created or renamed; stored rows load as they are
    - The slug is globally unique and immutable after creation; new slugs
      are trimmed, non-empty and at most 64 characters
    - Departments created before organizations existed may be ``Unlinked``
    """

    id: DepartmentId
    name: str
    slug: str
    org_link: OrgLink
    plan: DepartmentPlan
    created_at: datetime
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @staticmethod
    def _validated_name(name: str) -> str:
        trimmed = (name or "").strip()
        if not trimmed:
            raise ValueError("Department name is required.")
        if len(trimmed) > 255:
            raise ValueError("Department name cannot exceed 255 characters.")
        return trimmed

    @staticmethod
    def _validate_slug(slug: str) -> None:
        if not slug:
            raise ValueError("Department slug is required.")
        if len(slug) > MAX_SLUG_LENGTH:
            raise ValueError(
                f"Department slug cannot exceed {MAX_SLUG_LENGTH} characters."
            )

    @classmethod
    def create(
        cls,
        name: str,
        slug: str,
        organization_id: OrganizationId,
        plan: DepartmentPlan | None = None,
    ) -> Department:
        """Factory method for creating a new department linked to an organization.

        Args:
            name: Display name (trimmed)
            slug: Globally unique URL-safe slug
            organization_id: Owning organization
            plan: Subscription tier, ``free`` when omitted

        Raises:
            ValueError: If the name or slug is invalid
        """
        slug = (slug or "").strip()
        cls._validate_slug(slug)
        now = datetime.now(UTC)
        return cls(
            id=DepartmentId.generate(),
            name=cls._validated_name(name),
            slug=slug,
            org_link=LinkedTo(organization_id=organization_id),
            plan=plan or DepartmentPlan.FREE,
            created_at=now,
            updated_at=now,
        )

    @property
    def organization_id(self) -> OrganizationId | None:
        """The owning organization, or None when unlinked."""
        match self.org_link:
            case LinkedTo(organization_id=organization_id):
                return organization_id
            case Unlinked():
                return None

    def rename(self, name: str) -> None:
        """Change the display name.

        Raises:
            ValueError: If the trimmed name is empty
        """
        self.name = self._validated_name(name)
        self.updated_at = datetime.now(UTC)

    def link_to(self, organization_id: OrganizationId) -> bool:
        """Point the department at ``organization_id``.

        Returns:
            True if the link changed, False if it was already linked there
        """
        if self.org_link == LinkedTo(organization_id=organization_id):
            return False
        self.org_link = LinkedTo(organization_id=organization_id)
        self.updated_at = datetime.now(UTC)
        return True
