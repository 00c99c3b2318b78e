"""Request identity resolved from the Authorization header.

A missing bearer token is not rejected here: the request gets an empty
identity and the authorization resolver answers with 401 when an operation
needs a caller. A bearer token that fails validation is rejected at once.
"""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from infrastructure.dependencies import get_jwt_validator
from shared_kernel.auth import InvalidTokenError, JWTValidator
from tenancy.application.value_objects import AuthenticatedUser
from tenancy.domain.value_objects import UserId

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class RequestIdentity:
    """IdentityProvider backed by the current request's bearer token."""

    user: AuthenticatedUser | None = None

    def current_user_id(self) -> UserId | None:
        return self.user.user_id if self.user else None


async def get_request_identity(
    validator: Annotated[JWTValidator, Depends(get_jwt_validator)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ] = None,
) -> RequestIdentity:
    """Validate the bearer token, if any, and expose the caller.

    Raises:
        HTTPException 401: If a bearer token is present but invalid
    """
    if credentials is None:
        return RequestIdentity()

    try:
        claims = await validator.validate_token(credentials.credentials)
        user_id = UserId.from_string(claims.sub)
    except (InvalidTokenError, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    return RequestIdentity(
        user=AuthenticatedUser(user_id=user_id, username=claims.preferred_username)
    )
