"""Application services for the tenancy bounded context."""

from tenancy.application.services.department_service import DepartmentService
from tenancy.application.services.integration_service import IntegrationService

__all__ = [
    "DepartmentService",
    "IntegrationService",
]
