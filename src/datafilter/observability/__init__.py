"""Observability – logging and audit."""

from datafilter.observability.logging import AuditLogger, AuditOutcome, JsonLoggerFactory, get_logger

__all__ = ["AuditLogger", "AuditOutcome", "JsonLoggerFactory", "get_logger"]
