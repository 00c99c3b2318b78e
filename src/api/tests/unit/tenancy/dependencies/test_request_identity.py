"""Unit tests for request identity and observation context dependencies."""

from __future__ import annotations

from typing import Annotated
from unittest.mock import create_autospec

import pytest
from fastapi import Depends, FastAPI, status
from fastapi.testclient import TestClient

from infrastructure.dependencies import get_jwt_validator
from shared_kernel.auth import InvalidTokenError, JWTValidator
from shared_kernel.auth.jwt_validator import TokenClaims
from shared_kernel.observability_context import ObservationContext
from tenancy.dependencies.context import get_observation_context


@pytest.fixture
def validator():
    return create_autospec(JWTValidator, instance=True)


@pytest.fixture
def client(validator) -> TestClient:
    app = FastAPI()
    app.dependency_overrides[get_jwt_validator] = lambda: validator

    @app.get("/whoami")
    async def whoami(
        context: Annotated[ObservationContext, Depends(get_observation_context)],
    ) -> dict:
        return context.as_dict()

    return TestClient(app)


def test_anonymous_request_gets_empty_identity(client, validator):
    response = client.get("/whoami")

    assert response.status_code == status.HTTP_200_OK
    assert "user_id" not in response.json()
    assert response.json()["request_id"]
    validator.validate_token.assert_not_awaited()


def test_valid_token_sets_user(client, validator):
    validator.validate_token.return_value = TokenClaims(
        sub="user-42", preferred_username="alice"
    )

    response = client.get("/whoami", headers={"Authorization": "Bearer good"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["user_id"] == "user-42"
    validator.validate_token.assert_awaited_once_with("good")


def test_invalid_token_is_rejected(client, validator):
    validator.validate_token.side_effect = InvalidTokenError("Token has expired")

    response = client.get("/whoami", headers={"Authorization": "Bearer bad"})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert response.json()["detail"] == "Token has expired"


def test_request_id_header_is_reused(client):
    response = client.get("/whoami", headers={"X-Request-ID": "req-abc"})

    assert response.json()["request_id"] == "req-abc"
