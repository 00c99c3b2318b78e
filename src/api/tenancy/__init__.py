"""Tenancy bounded context.

Organizations contain departments; both carry membership records. This
context resolves caller authorization across the two scopes, manages the
department lifecycle (including the cascade over department-scoped data) and
stores org-scoped integration configuration.
"""
