"""Value objects for the tenancy domain.

Value objects are immutable descriptors that provide type safety and domain
semantics for identifiers, roles, plans and the organization link of a
department.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Self

from ulid import ULID


@dataclass(frozen=True)
class _UlidIdentifier:
    """Base for ULID-backed identifiers.

    ULIDs sort by creation time, which keeps "newest first" listings cheap.
    """

    value: str

    def __str__(self) -> str:
        return self.value

    @classmethod
    def generate(cls) -> Self:
        """Generate a new identifier."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Create an identifier from its string form.

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid {cls.__name__}: {value}") from e
        return cls(value=value)


@dataclass(frozen=True)
class OrganizationId(_UlidIdentifier):
    """Identifier for an Organization."""


@dataclass(frozen=True)
class DepartmentId(_UlidIdentifier):
    """Identifier for a Department aggregate."""


@dataclass(frozen=True)
class MembershipId(_UlidIdentifier):
    """Identifier for an org or department membership record."""


@dataclass(frozen=True)
class AgentId(_UlidIdentifier):
    """Identifier for a department agent."""


@dataclass(frozen=True)
class IntegrationId(_UlidIdentifier):
    """Identifier for an integration configuration record."""


@dataclass(frozen=True)
class UserId:
    """Identifier for a user.

    Users are owned by the external identity provider, so the value is the
    provider's opaque subject string rather than a ULID.
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise ValueError("UserId cannot be empty")
        if len(self.value) > 255:
            raise ValueError("UserId cannot exceed 255 characters")

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_string(cls, value: str) -> UserId:
        return cls(value=value)


class Role(StrEnum):
    """Role held in an organization or a department."""

    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"

    @property
    def has_admin_privileges(self) -> bool:
        """Owners and admins may administer the scope."""
        return self in (Role.OWNER, Role.ADMIN)


class OrganizationPlan(StrEnum):
    """Billing plan of an organization; drives quota and integration gates."""

    STARTER = "starter"
    PRO = "pro"
    BUSINESS = "business"

    @classmethod
    def normalize(cls, value: str | None) -> OrganizationPlan:
        """Map unknown or missing plan names to the starter plan."""
        try:
            return cls(value) if value else cls.STARTER
        except ValueError:
            return cls.STARTER


class DepartmentPlan(StrEnum):
    """Subscription tier recorded on a department."""

    FREE = "free"
    PRO = "pro"
    ENTERPRISE = "enterprise"


class LimitedResource(StrEnum):
    """Resources counted by the quota gate."""

    DEPARTMENTS = "departments"
    AGENTS = "agents"
    TEAM_INVITES = "team_invites"


class IntegrationType(StrEnum):
    """Supported connector types."""

    TELEGRAM = "telegram"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GMAIL = "gmail"
    TAVILY = "tavily"
    RESEND = "resend"
    GITHUB = "github"
    NOTION = "notion"
    TWITTER = "twitter"
    DALLE = "dalle"

    @property
    def label(self) -> str:
        """Human readable connector name."""
        return _INTEGRATION_LABELS[self]


_INTEGRATION_LABELS = {
    IntegrationType.TELEGRAM: "Telegram",
    IntegrationType.OPENAI: "OpenAI",
    IntegrationType.ANTHROPIC: "Anthropic",
    IntegrationType.GMAIL: "Gmail",
    IntegrationType.TAVILY: "Tavily",
    IntegrationType.RESEND: "Resend",
    IntegrationType.GITHUB: "GitHub",
    IntegrationType.NOTION: "Notion",
    IntegrationType.TWITTER: "Twitter",
    IntegrationType.DALLE: "DALL-E",
}


class AuthType(StrEnum):
    """How an integration authenticates against the provider."""

    API_KEY = "api_key"
    OAUTH2 = "oauth2"


class OAuthStatus(StrEnum):
    """OAuth grant state of an integration."""

    NOT_CONNECTED = "not_connected"
    PENDING = "pending"
    CONNECTED = "connected"
    ERROR = "error"


class AgentStatus(StrEnum):
    """Runtime status of an agent."""

    IDLE = "idle"
    ACTIVE = "active"
    BLOCKED = "blocked"
    OFFLINE = "offline"


@dataclass(frozen=True)
class Unlinked:
    """A department with no owning organization (legacy rows)."""


@dataclass(frozen=True)
class LinkedTo:
    """A department owned by ``organization_id``."""

    organization_id: OrganizationId


OrgLink = Unlinked | LinkedTo


def org_link_from_optional(organization_id: OrganizationId | None) -> OrgLink:
    """Build an OrgLink from a nullable storage column."""
    if organization_id is None:
        return Unlinked()
    return LinkedTo(organization_id=organization_id)
