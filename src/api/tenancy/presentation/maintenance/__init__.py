"""Operator-only maintenance routes."""

from tenancy.presentation.maintenance.routes import router

__all__ = ["router"]
