"""Unit tests for domain probes.

Tests that domain probes correctly capture domain events
following the Domain Oriented Observability pattern.
"""

from unittest.mock import MagicMock

import structlog

from infrastructure.observability import ObservationContext
from infrastructure.observability.probes import DefaultConnectionProbe
from shared_kernel.auth import DefaultBearerTokenProbe
from tenancy.application.observability import (
    DefaultAuthorizationProbe,
    DefaultDepartmentServiceProbe,
)
from tenancy.infrastructure.observability import DefaultIntegrationRepositoryProbe


class TestConnectionProbe:
    """Tests for ConnectionProbe protocol and implementation."""

    def test_default_probe_creates_with_default_logger(self):
        """Default probe should work without explicit logger."""
        probe = DefaultConnectionProbe()
        assert probe._logger is not None

    def test_engine_created_logs_info(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultConnectionProbe(logger=mock_logger)

        probe.engine_created(role="write", connection_string="postgresql://u@h:5432/d")

        mock_logger.info.assert_called_once_with(
            "database_engine_created",
            role="write",
            connection_string="postgresql://u@h:5432/d",
        )

    def test_pool_closed_logs_info(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultConnectionProbe(logger=mock_logger)

        probe.pool_closed(role="read")

        mock_logger.info.assert_called_once_with("connection_pool_closed", role="read")


class TestDepartmentServiceProbe:
    """Tests for DepartmentServiceProbe implementation."""

    def test_department_created_logs_info(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultDepartmentServiceProbe(logger=mock_logger)

        probe.department_created(
            department_id="dep-1", slug="support", organization_id="org-1"
        )

        mock_logger.info.assert_called_once_with(
            "department_created",
            department_id="dep-1",
            slug="support",
            organization_id="org-1",
        )

    def test_cascade_incomplete_logs_error(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultDepartmentServiceProbe(logger=mock_logger)

        probe.department_cascade_incomplete(department_id="dep-1", remaining={"tasks": 1})

        mock_logger.error.assert_called_once_with(
            "department_cascade_incomplete",
            department_id="dep-1",
            remaining={"tasks": 1},
        )

    def test_department_deleted_reports_total(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultDepartmentServiceProbe(logger=mock_logger)

        probe.department_deleted(department_id="dep-1", deleted={"agents": 1, "tasks": 4})

        assert mock_logger.info.call_args.kwargs["total_deleted"] == 5

    def test_with_context_binds_request_metadata(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        context = ObservationContext(request_id="req-1", user_id="user-1")
        probe = DefaultDepartmentServiceProbe(logger=mock_logger).with_context(context)

        probe.department_renamed(department_id="dep-1", name="Care")

        mock_logger.info.assert_called_once_with(
            "department_renamed",
            department_id="dep-1",
            name="Care",
            request_id="req-1",
            user_id="user-1",
        )

    def test_with_context_leaves_original_unbound(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        original = DefaultDepartmentServiceProbe(logger=mock_logger)
        original.with_context(ObservationContext(request_id="req-1"))

        original.department_renamed(department_id="dep-1", name="Care")

        assert "request_id" not in mock_logger.info.call_args.kwargs


class TestAuthorizationProbe:
    def test_access_denied_logs_warning(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultAuthorizationProbe(logger=mock_logger)

        probe.access_denied(
            user_id="user-1",
            scope="organization",
            scope_id="org-1",
            reason="no_membership",
        )

        mock_logger.warning.assert_called_once_with(
            "access_denied",
            user_id="user-1",
            scope="organization",
            scope_id="org-1",
            reason="no_membership",
        )


class TestIntegrationRepositoryProbe:
    def test_logs_key_names_only(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultIntegrationRepositoryProbe(logger=mock_logger)

        probe.integration_saved(
            integration_id="int-1",
            type="gmail",
            created=True,
            config_keys=["clientId", "clientSecret"],
        )

        mock_logger.debug.assert_called_once_with(
            "integration_saved",
            integration_id="int-1",
            type="gmail",
            created=True,
            config_keys=["clientId", "clientSecret"],
        )


class TestBearerTokenProbe:
    """Tests for BearerTokenProbe implementation."""

    ISSUER = "https://sso.example.com/realms/tenancy"

    def test_rejection_names_the_issuer(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultBearerTokenProbe(issuer=self.ISSUER, logger=mock_logger)

        probe.bearer_token_rejected(reason="Token expired")

        mock_logger.warning.assert_called_once_with(
            "bearer_token_rejected", issuer=self.ISSUER, reason="Token expired"
        )

    def test_unavailable_keys_log_error(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultBearerTokenProbe(issuer=self.ISSUER, logger=mock_logger)

        probe.signing_keys_unavailable(error="connection refused")

        mock_logger.error.assert_called_once_with(
            "signing_keys_unavailable", issuer=self.ISSUER, error="connection refused"
        )

    def test_with_context_keeps_issuer_and_adds_request(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultBearerTokenProbe(issuer=self.ISSUER, logger=mock_logger)

        bound = probe.with_context(ObservationContext(request_id="req-1"))
        bound.caller_authenticated(user_id="user-1")

        kwargs = mock_logger.debug.call_args.kwargs
        assert mock_logger.debug.call_args.args == ("caller_authenticated",)
        assert kwargs["issuer"] == self.ISSUER
        assert kwargs["user_id"] == "user-1"
        assert kwargs["request_id"] == "req-1"
