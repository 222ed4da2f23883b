"""Observability – structured logging helpers."""
from datafilter.observability.logging.factory import JsonLoggerFactory
from datafilter.observability.logging.processors import PrincipalProcessor, get_logger
from datafilter.observability.logging.audit import AuditLogger, AuditOutcome

__all__ = [
    "AuditLogger",
    "AuditOutcome",
    "JsonLoggerFactory",
    "PrincipalProcessor",
    "get_logger",
]
