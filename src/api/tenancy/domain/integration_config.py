"""Typed configuration bag of an integration.

The bag is stored as an open JSON object. Known keys fall into three
categories (app registration, OAuth grant, OAuth context); keys outside those
categories are carried through untouched.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class AppRegistrationKey(StrEnum):
    """Credentials of the OAuth application registered by the organization."""

    CLIENT_ID = "clientId"
    CLIENT_SECRET = "clientSecret"
    REDIRECT_URI = "redirectUri"
    APP_RETURN_URL = "appReturnUrl"


class GrantKey(StrEnum):
    """Material issued by the provider once a user completes the OAuth flow."""

    ACCESS_TOKEN = "accessToken"
    REFRESH_TOKEN = "refreshToken"
    TOKEN_EXPIRES_AT = "tokenExpiresAt"
    SCOPES = "scopes"
    POWERS = "powers"
    CONNECTED_AT = "connectedAt"
    OAUTH_INTENT = "oauthIntent"


class ContextKey(StrEnum):
    """Where the OAuth flow was started from."""

    OAUTH_CONTEXT_DEPARTMENT_ID = "oauthContextDepartmentId"


GRANT_KEYS: frozenset[str] = frozenset(key.value for key in GrantKey)
APP_REGISTRATION_KEYS: frozenset[str] = frozenset(
    key.value for key in AppRegistrationKey
)

# Keys whose values must never appear in logs or API responses.
SECRET_KEYS: frozenset[str] = frozenset(
    {
        AppRegistrationKey.CLIENT_SECRET.value,
        GrantKey.ACCESS_TOKEN.value,
        GrantKey.REFRESH_TOKEN.value,
    }
)


@dataclass(frozen=True)
class IntegrationConfig(Mapping[str, Any]):
    """Immutable mapping view over an integration's configuration bag."""

    values: Mapping[str, Any] = field(default_factory=dict)

    def __getitem__(self, key: str) -> Any:
        return self.values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def merged(self, updates: Mapping[str, Any]) -> IntegrationConfig:
        """Return a copy with ``updates`` applied key by key.

        A ``None`` value removes the key; every other key of the current bag
        is preserved.
        """
        result = dict(self.values)
        for key, value in updates.items():
            if value is None:
                result.pop(str(key), None)
            else:
                result[str(key)] = value
        return IntegrationConfig(values=result)

    def without_grant(self) -> IntegrationConfig:
        """Return a copy with every OAuth grant key removed."""
        return IntegrationConfig(
            values={k: v for k, v in self.values.items() if k not in GRANT_KEYS}
        )

    def has_grant(self) -> bool:
        return any(key in self.values for key in GRANT_KEYS)

    def redacted(self) -> dict[str, Any]:
        """Plain dict with secret values masked."""
        return {
            key: ("***" if key in SECRET_KEYS and value else value)
            for key, value in self.values.items()
        }

    def as_dict(self) -> dict[str, Any]:
        return dict(self.values)
