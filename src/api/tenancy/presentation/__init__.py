"""Tenancy presentation layer.

Routes are grouped by aggregate (departments, integrations) plus the
operator-only maintenance routes. Authorization is enforced per endpoint,
either by a guard dependency or inside the service.
"""

from __future__ import annotations

from fastapi import APIRouter

from tenancy.presentation import departments, integrations, maintenance

router = APIRouter(prefix="/tenancy")

router.include_router(departments.router)
router.include_router(integrations.router)
router.include_router(integrations.department_router)
router.include_router(maintenance.router)

__all__ = ["router"]
