"""Aggregates of the tenancy domain."""

from tenancy.domain.aggregates.agent import Agent, agent_session_key
from tenancy.domain.aggregates.department import Department
from tenancy.domain.aggregates.integration import Integration
from tenancy.domain.aggregates.membership import DeptMembership, OrgMembership
from tenancy.domain.aggregates.organization import Organization

__all__ = [
    "Agent",
    "Department",
    "DeptMembership",
    "Integration",
    "OrgMembership",
    "Organization",
    "agent_session_key",
]
