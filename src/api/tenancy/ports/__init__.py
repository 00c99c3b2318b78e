"""Ports (interfaces) of the tenancy bounded context."""
