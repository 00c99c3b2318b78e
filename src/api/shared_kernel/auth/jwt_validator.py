"""JWT validation for OIDC bearer tokens.

Validates RS256 tokens against the issuer's JWKS, which is discovered through
the OpenID configuration document and cached for a configurable TTL.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import httpx
from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError

if TYPE_CHECKING:
    from shared_kernel.auth.observability import BearerTokenProbe

_DECODE_OPTIONS = {
    "verify_signature": True,
    "verify_aud": True,
    "verify_iss": True,
    "verify_exp": True,
    "verify_iat": True,
}


@dataclass(frozen=True)
class TokenClaims:
    """Validated JWT claims."""

    sub: str
    preferred_username: str | None
    raw_claims: dict[str, Any] = field(default_factory=dict)


class InvalidTokenError(Exception):
    """Raised when JWT validation fails."""

    pass


class JWTValidator:
    """Validates bearer tokens issued by an OIDC provider.

    Checks signature, expiry, issuer and audience. The caller identity is read
    from a configurable claim so that providers using a claim other than
    ``sub`` for stable user ids are supported.
    """

    def __init__(
        self,
        issuer_url: str,
        audience: str,
        probe: BearerTokenProbe,
        user_id_claim: str = "sub",
        username_claim: str = "preferred_username",
        jwks_cache_ttl: timedelta = timedelta(hours=24),
    ):
        """Initialize the JWT validator.

        Args:
            issuer_url: The OIDC issuer URL (e.g., Keycloak realm URL).
            audience: Expected audience claim value.
            probe: Observability probe for logging events.
            user_id_claim: JWT claim to use for user ID (default: sub).
            username_claim: JWT claim to use for username.
            jwks_cache_ttl: How long to cache JWKS keys (default: 24 hours).
        """
        self._issuer_url = issuer_url.rstrip("/")
        self._audience = audience
        self._probe = probe
        self._user_id_claim = user_id_claim
        self._username_claim = username_claim
        self._jwks_cache_ttl = jwks_cache_ttl

        self._jwks: dict[str, Any] | None = None
        self._jwks_fetched_at: datetime | None = None
        self._jwks_lock = asyncio.Lock()

    async def validate_token(self, token: str) -> TokenClaims:
        """Validate a JWT and return its claims.

        Raises:
            InvalidTokenError: If the token is malformed, expired, signed by
                an unknown key or issued for another audience or issuer.
        """
        try:
            header = jwt.get_unverified_header(token)
        except JWTError as e:
            self._fail(f"Malformed token: {e}")
            raise InvalidTokenError(f"Invalid token format: {e}") from e

        if not header:
            self._fail("Missing token header")
            raise InvalidTokenError("Invalid token: missing header")

        claims = self._decode(token, await self._get_jwks())

        user_id = claims.get(self._user_id_claim)
        if user_id is None:
            self._fail(f"Missing {self._user_id_claim} claim")
            raise InvalidTokenError(f"Missing required claim: {self._user_id_claim}")

        username = claims.get(self._username_claim)
        self._probe.caller_authenticated(user_id=str(user_id))

        return TokenClaims(
            sub=str(user_id),
            preferred_username=str(username) if username is not None else None,
            raw_claims=dict(claims),
        )

    def _decode(self, token: str, jwks: dict[str, Any]) -> dict[str, Any]:
        try:
            return jwt.decode(
                token=token,
                key=jwks,
                algorithms=["RS256"],
                audience=self._audience,
                issuer=self._issuer_url,
                options=_DECODE_OPTIONS,
            )
        except ExpiredSignatureError as e:
            self._fail("Token expired")
            raise InvalidTokenError("Token has expired") from e
        except JWTClaimsError as e:
            message = str(e).lower()
            if "audience" in message:
                self._fail("Invalid audience")
                raise InvalidTokenError("Invalid audience claim") from e
            if "issuer" in message:
                self._fail("Invalid issuer")
                raise InvalidTokenError("Invalid issuer claim") from e
            self._fail(f"Claims error: {e}")
            raise InvalidTokenError(f"Invalid token claims: {e}") from e
        except JWTError as e:
            if "signature" in str(e).lower():
                self._fail("Invalid signature")
                raise InvalidTokenError("Invalid token signature") from e
            self._fail(f"JWT error: {e}")
            raise InvalidTokenError(f"Invalid token: {e}") from e

    def _fail(self, reason: str) -> None:
        self._probe.bearer_token_rejected(reason=reason)

    async def _get_jwks(self) -> dict[str, Any]:
        """Return cached JWKS, refreshing it once the TTL has elapsed."""
        if self._is_cache_valid():
            return self._jwks  # type: ignore[return-value]

        async with self._jwks_lock:
            # Another request may have refreshed while we waited.
            if self._is_cache_valid():
                return self._jwks  # type: ignore[return-value]
            return await self._fetch_jwks()

    def _is_cache_valid(self) -> bool:
        if self._jwks is None or self._jwks_fetched_at is None:
            return False
        return (datetime.now(tz=UTC) - self._jwks_fetched_at) < self._jwks_cache_ttl

    async def _fetch_jwks(self) -> dict[str, Any]:
        """Discover the JWKS URI and download the key set.

        Raises:
            InvalidTokenError: If discovery or download fails.
        """
        try:
            async with httpx.AsyncClient() as client:
                config_response = await client.get(
                    f"{self._issuer_url}/.well-known/openid-configuration"
                )
                config_response.raise_for_status()
                jwks_uri = config_response.json().get("jwks_uri")
                if not jwks_uri:
                    self._probe.signing_keys_unavailable(
                        error="Missing jwks_uri in OpenID configuration"
                    )
                    raise InvalidTokenError(
                        "OIDC provider missing jwks_uri in configuration"
                    )

                jwks_response = await client.get(jwks_uri)
                jwks_response.raise_for_status()
                jwks = jwks_response.json()
        except httpx.HTTPError as e:
            self._probe.signing_keys_unavailable(error=str(e))
            raise InvalidTokenError(
                f"Failed to fetch JWKS from OIDC provider: {e}"
            ) from e

        self._jwks = jwks
        self._jwks_fetched_at = datetime.now(tz=UTC)
        self._probe.signing_keys_refreshed(key_count=len(jwks.get("keys", [])))
        return jwks
