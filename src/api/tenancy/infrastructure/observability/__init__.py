"""Domain-Oriented Observability for tenancy infrastructure."""

from tenancy.infrastructure.observability.repository_probes import (
    DefaultDepartmentRepositoryProbe,
    DefaultIntegrationRepositoryProbe,
    DepartmentRepositoryProbe,
    IntegrationRepositoryProbe,
)

__all__ = [
    "DepartmentRepositoryProbe",
    "DefaultDepartmentRepositoryProbe",
    "IntegrationRepositoryProbe",
    "DefaultIntegrationRepositoryProbe",
]
