"""Domain probe for caller authentication.

Every event carries the issuer the validator trusts, so rejected tokens can
be told apart from an unreachable identity provider.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class BearerTokenProbe(Protocol):
    """Authentication events raised while resolving the caller."""

    def caller_authenticated(self, user_id: str) -> None: ...

    def bearer_token_rejected(self, reason: str) -> None:
        """The request carries a token, but it names no caller."""
        ...

    def signing_keys_refreshed(self, key_count: int) -> None: ...

    def signing_keys_unavailable(self, error: str) -> None:
        """The issuer could not be reached; every token is refused until it is."""
        ...

    def with_context(self, context: ObservationContext) -> BearerTokenProbe: ...


class DefaultBearerTokenProbe:
    """structlog implementation of BearerTokenProbe."""

    def __init__(
        self,
        issuer: str,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._issuer = issuer
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _fields(self, **kwargs: Any) -> dict[str, Any]:
        fields = {"issuer": self._issuer, **kwargs}
        if self._context is not None:
            fields.update(self._context.as_dict())
        return fields

    def with_context(self, context: ObservationContext) -> DefaultBearerTokenProbe:
        return DefaultBearerTokenProbe(
            issuer=self._issuer, logger=self._logger, context=context
        )

    def caller_authenticated(self, user_id: str) -> None:
        self._logger.debug("caller_authenticated", **self._fields(user_id=user_id))

    def bearer_token_rejected(self, reason: str) -> None:
        self._logger.warning("bearer_token_rejected", **self._fields(reason=reason))

    def signing_keys_refreshed(self, key_count: int) -> None:
        self._logger.info(
            "signing_keys_refreshed", **self._fields(key_count=key_count)
        )

    def signing_keys_unavailable(self, error: str) -> None:
        self._logger.error("signing_keys_unavailable", **self._fields(error=error))
