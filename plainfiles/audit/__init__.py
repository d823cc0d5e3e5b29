"""Audit logging package."""

from plainfiles.audit.logger import AuditLogger, configure_logging

__all__ = ["AuditLogger", "configure_logging"]
