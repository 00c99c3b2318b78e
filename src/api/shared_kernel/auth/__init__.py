"""Authentication shared kernel module."""

from shared_kernel.auth.jwt_validator import (
    InvalidTokenError,
    JWTValidator,
    TokenClaims,
)
from shared_kernel.auth.observability import (
    BearerTokenProbe,
    DefaultBearerTokenProbe,
)

__all__ = [
    "InvalidTokenError",
    "JWTValidator",
    "BearerTokenProbe",
    "DefaultBearerTokenProbe",
    "TokenClaims",
]
