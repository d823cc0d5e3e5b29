"""
Audit Logger

DESIGN DECISION: Every login attempt and every change to the registry
is logged. This provides:
1. Traceability of who changed what
2. Evidence for why a user ended up blocked
3. A history the operator can read with any text editor

The audit logger:
- Writes one human-readable line per event to an append-only file
- Mirrors each event to the structured diagnostic log
- Does NOT swallow write failures: an audit trail with silent gaps is
  worse than a stopped run
"""

import logging
from typing import Optional, Union

import structlog

from plainfiles.models.audit import AuditAction, AuditEvent, AuditEventBuilder
from plainfiles.services.storage import AuditStorageInterface


# Configure structlog for local diagnostic logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "WARNING") -> None:
    """
    Route diagnostic logs to stderr at the given level.

    Safe to call more than once; only the level changes after the first call.
    """
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.WARNING))


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. The audit log file (the record of truth)
    2. Structured local log (for debugging)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("plainfiles.audit")

    def log(self, event: AuditEvent) -> AuditEvent:
        """
        Log an audit event.

        Raises:
            StorageWriteError: If the audit file cannot be appended to
        """
        self._logger.info("audit_event", **event.to_log_dict())

        if self._storage:
            self._storage.append_event(event)

        return event

    def record(
        self,
        username: str,
        action: Union[AuditAction, str],
        result: str,
    ) -> AuditEvent:
        """Append a free-form event: who, what, outcome."""
        if isinstance(action, AuditAction):
            action = action.value
        return self.log(AuditEvent(username=username, action=action, result=result))

    def log_login_succeeded(self, username: str) -> None:
        self.log(AuditEventBuilder.login_succeeded(username))

    def log_login_failed(self, username: str) -> None:
        self.log(AuditEventBuilder.login_failed(username))

    def log_user_blocked(self, username: str, attempts: int) -> None:
        self.log(AuditEventBuilder.user_blocked(username, attempts))
