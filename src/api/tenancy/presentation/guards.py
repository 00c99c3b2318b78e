"""Route guards.

Each guard resolves the caller and checks one scope against the read
session before the handler runs. Guards only protect the HTTP boundary;
services keep their own checks where they have them.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from tenancy.application.authorization import AuthorizationResolver
from tenancy.dependencies.services import get_authorization_resolver
from tenancy.domain.aggregates import DeptMembership
from tenancy.domain.value_objects import Role, UserId
from tenancy.presentation.errors import (
    TENANCY_ERRORS,
    parse_department_id,
    parse_organization_id,
    to_http_exception,
)

Resolver = Annotated[AuthorizationResolver, Depends(get_authorization_resolver)]


async def require_user(resolver: Resolver) -> UserId:
    """Require any authenticated caller."""
    try:
        return resolver.require_authenticated_user()
    except TENANCY_ERRORS as e:
        raise to_http_exception(e) from e


async def require_org_admin(org_id: str, resolver: Resolver) -> Role:
    """Require an owner or admin of the organization in the path."""
    organization_id = parse_organization_id(org_id)
    try:
        user_id = resolver.require_authenticated_user()
        return await resolver.require_org_admin_membership(user_id, organization_id)
    except TENANCY_ERRORS as e:
        raise to_http_exception(e) from e


async def require_department_member(
    department_id: str, resolver: Resolver
) -> DeptMembership:
    """Require a direct member of the department in the path."""
    parsed_id = parse_department_id(department_id)
    try:
        user_id = resolver.require_authenticated_user()
        return await resolver.require_department_membership(user_id, parsed_id)
    except TENANCY_ERRORS as e:
        raise to_http_exception(e) from e


async def require_department_org_admin(department_id: str, resolver: Resolver) -> Role:
    """Require an owner or admin of the department's organization."""
    parsed_id = parse_department_id(department_id)
    try:
        user_id = resolver.require_authenticated_user()
        _, role = await resolver.require_department_org_admin_membership(
            user_id, parsed_id
        )
        return role
    except TENANCY_ERRORS as e:
        raise to_http_exception(e) from e


async def require_operator(resolver: Resolver) -> UserId:
    """Require a configured system operator."""
    try:
        user_id = resolver.require_authenticated_user()
        resolver.require_system_operator(user_id)
        return user_id
    except TENANCY_ERRORS as e:
        raise to_http_exception(e) from e
