"""Department routes and models."""

from tenancy.presentation.departments.routes import router

__all__ = ["router"]
