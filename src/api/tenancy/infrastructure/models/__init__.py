"""SQLAlchemy ORM models for the tenancy bounded context."""

from tenancy.infrastructure.models.agent import AgentModel
from tenancy.infrastructure.models.department import (
    DepartmentModel,
    DeptMembershipModel,
)
from tenancy.infrastructure.models.integration import IntegrationModel
from tenancy.infrastructure.models.organization import (
    OrganizationModel,
    OrgMembershipModel,
)
from tenancy.infrastructure.models.scoped_records import (
    ActivityModel,
    AgentTemplateModel,
    DocumentModel,
    ExecutorRunModel,
    MessageModel,
    NotificationModel,
    TaskModel,
    ThreadReadModel,
    ThreadSubscriptionModel,
    UxEventModel,
)

__all__ = [
    "ActivityModel",
    "AgentModel",
    "AgentTemplateModel",
    "DepartmentModel",
    "DeptMembershipModel",
    "DocumentModel",
    "ExecutorRunModel",
    "IntegrationModel",
    "MessageModel",
    "NotificationModel",
    "OrgMembershipModel",
    "OrganizationModel",
    "TaskModel",
    "ThreadReadModel",
    "ThreadSubscriptionModel",
    "UxEventModel",
]
