"""Shared infrastructure dependencies.

Provides process-wide infrastructure resources only. Does NOT import from
bounded contexts to maintain DDD boundaries.
"""

from datetime import timedelta
from functools import lru_cache

from infrastructure.settings import get_oidc_settings
from shared_kernel.auth import DefaultBearerTokenProbe, JWTValidator


@lru_cache
def get_jwt_validator() -> JWTValidator:
    """Get the application-scoped JWT validator (singleton).

    The validator keeps the issuer's JWKS cached between requests.
    """
    settings = get_oidc_settings()
    return JWTValidator(
        issuer_url=settings.issuer_url,
        audience=settings.audience,
        probe=DefaultBearerTokenProbe(issuer=settings.issuer_url),
        user_id_claim=settings.user_id_claim,
        username_claim=settings.username_claim,
        jwks_cache_ttl=timedelta(seconds=settings.jwks_cache_ttl_seconds),
    )
