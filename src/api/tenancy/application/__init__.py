"""Application layer of the tenancy bounded context."""
