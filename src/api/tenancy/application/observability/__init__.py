"""Domain-Oriented Observability for the tenancy application layer."""

from tenancy.application.observability.authorization_probe import (
    AuthorizationProbe,
    DefaultAuthorizationProbe,
)
from tenancy.application.observability.department_service_probe import (
    DefaultDepartmentServiceProbe,
    DepartmentServiceProbe,
)
from tenancy.application.observability.integration_service_probe import (
    DefaultIntegrationServiceProbe,
    IntegrationServiceProbe,
)

__all__ = [
    "AuthorizationProbe",
    "DefaultAuthorizationProbe",
    "DepartmentServiceProbe",
    "DefaultDepartmentServiceProbe",
    "IntegrationServiceProbe",
    "DefaultIntegrationServiceProbe",
]
