"""Per-request observation context for tenancy probes."""

from typing import Annotated

from fastapi import Depends, Header
from ulid import ULID

from shared_kernel.observability_context import ObservationContext
from tenancy.dependencies.identity import RequestIdentity, get_request_identity


def get_observation_context(
    identity: Annotated[RequestIdentity, Depends(get_request_identity)],
    x_request_id: Annotated[str | None, Header(alias="X-Request-ID")] = None,
) -> ObservationContext:
    """Build the context every service probe of this request is bound to.

    Reuses the caller's X-Request-ID when present so log lines can be joined
    with upstream services.
    """
    user_id = identity.current_user_id()
    return ObservationContext(
        request_id=x_request_id or str(ULID()),
        user_id=user_id.value if user_id else None,
    )
