"""Integration routes and models."""

from tenancy.presentation.integrations.routes import department_router, router

__all__ = ["department_router", "router"]
