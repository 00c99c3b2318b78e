"""Fixtures for tenancy route tests.

Routes run against the in-memory world from the parent conftest: the
resolver and both services are swapped in through dependency overrides.
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from tenancy.dependencies.services import (
    get_authorization_resolver,
    get_department_service,
    get_integration_service,
)


def build_client(world) -> TestClient:
    """Create TestClient with the world's resolver and services."""
    from tenancy.presentation import router

    app = FastAPI()
    app.dependency_overrides[get_authorization_resolver] = lambda: world.resolver
    app.dependency_overrides[get_department_service] = (
        lambda: world.department_service
    )
    app.dependency_overrides[get_integration_service] = (
        lambda: world.integration_service
    )
    app.include_router(router)
    return TestClient(app)


@pytest.fixture
def client(world) -> TestClient:
    return build_client(world)


@pytest.fixture
def make_client():
    """Factory for clients over a custom world."""
    return build_client
