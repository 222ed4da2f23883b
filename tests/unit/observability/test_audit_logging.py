"""Unit tests for observability logging – AuditLogger, PrincipalProcessor, JsonLoggerFactory."""

from __future__ import annotations

import json
import logging

import pytest
import structlog
from structlog.testing import capture_logs

from datafilter.kernel.security import Principal, SecurityContext
from datafilter.observability.logging import (
    AuditLogger,
    AuditOutcome,
    JsonLoggerFactory,
    PrincipalProcessor,
    get_logger,
)


# ---------------------------------------------------------------------------
# AuditLogger
# ---------------------------------------------------------------------------


class TestAuditLogger:
    def test_denied_entry(self) -> None:
        with capture_logs() as logs:
            AuditLogger(service="clinic").log_access(
                Principal(subject="nurse"),
                "Encounter:42",
                "load",
                AuditOutcome.DENIED,
                dimension="location",
            )
        assert len(logs) == 1
        entry = logs[0]
        assert entry["event"] == "audit.access"
        assert entry["log_level"] == "warning"
        assert entry["service"] == "clinic"
        assert entry["principal_id"] == "nurse"
        assert entry["resource"] == "Encounter:42"
        assert entry["outcome"] == "denied"
        assert entry["dimension"] == "location"
        assert "timestamp" in entry

    def test_anonymous_principal(self) -> None:
        with capture_logs() as logs:
            AuditLogger().log_access(None, "Obs:1", "load", AuditOutcome.DENIED)
        assert logs[0]["principal_id"] == "anonymous"
        assert logs[0]["service"] == "datafilter"

    def test_plain_string_outcome(self) -> None:
        with capture_logs() as logs:
            AuditLogger().log_access(Principal(subject="a"), "Patient:1", "load", "custom")
        assert logs[0]["outcome"] == "custom"

    def test_default_outcome_is_success(self) -> None:
        with capture_logs() as logs:
            AuditLogger().log_access(Principal(subject="a"), "Patient:1", "load")
        assert logs[0]["outcome"] == AuditOutcome.SUCCESS.value

    def test_denied_shortcut(self) -> None:
        with capture_logs() as logs:
            AuditLogger().denied(Principal(subject="a"), "Visit:3", dimension="location")
        assert logs[0]["action"] == "load"
        assert logs[0]["outcome"] == "denied"
        assert logs[0]["dimension"] == "location"


# ---------------------------------------------------------------------------
# PrincipalProcessor
# ---------------------------------------------------------------------------


class TestPrincipalProcessor:
    def test_adds_principal(self) -> None:
        with SecurityContext.authenticated(Principal(subject="alice")):
            event = PrincipalProcessor()(None, "info", {"event": "x"})
        assert event["principal"] == "alice"
        assert "daemon" not in event

    def test_adds_daemon_flag(self) -> None:
        with SecurityContext.daemon():
            event = PrincipalProcessor()(None, "info", {"event": "x"})
        assert event["daemon"] is True
        assert "principal" not in event

    def test_does_not_override(self) -> None:
        with SecurityContext.authenticated(Principal(subject="alice")):
            event = PrincipalProcessor()(None, "info", {"event": "x", "principal": "bob"})
        assert event["principal"] == "bob"


# ---------------------------------------------------------------------------
# get_logger / JsonLoggerFactory
# ---------------------------------------------------------------------------


class TestGetLogger:
    def test_binds_initial_values(self) -> None:
        with capture_logs() as logs:
            get_logger("t", component="registry").info("hello")
        assert logs[0]["component"] == "registry"


class TestJsonLoggerFactory:
    @pytest.fixture(autouse=True)
    def _restore_logging(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        structlog.reset_defaults()
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_sets_root_level(self) -> None:
        JsonLoggerFactory.configure(level=logging.WARNING)
        assert logging.getLogger().level == logging.WARNING

    def test_renders_json_with_principal(self, capsys: pytest.CaptureFixture[str]) -> None:
        JsonLoggerFactory.configure(level=logging.INFO)
        # the stream handler writes to the stderr captured at configure time
        handler = logging.getLogger().handlers[0]
        with SecurityContext.authenticated(Principal(subject="alice")):
            structlog.get_logger("datafilter.test").info("datafilter.ping", n=1)
        handler.flush()
        line = capsys.readouterr().err.strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["event"] == "datafilter.ping"
        assert payload["principal"] == "alice"
        assert payload["level"] == "info"
