"""
Audit Models for PlainFiles

Every login attempt and every change to the registry is logged.

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
The on-disk format is one human-readable line per event:

    2024-05-01 14:03:22 | User: alice | Action: ADD_PERSON | Result: ID=7
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class AuditAction(str, Enum):
    """Actions we audit."""
    LOGIN = "LOGIN"
    ADD_PERSON = "ADD_PERSON"
    EDIT_PERSON = "EDIT_PERSON"
    DELETE_PERSON = "DELETE_PERSON"
    SAVE = "SAVE"
    REPORT_BY_CITY = "REPORT_BY_CITY"


RESULT_OK = "OK"
RESULT_FAILED = "FAILED"


def blocked_result(attempts: int) -> str:
    """Result text for a user blocked after exhausting the login budget."""
    return f"FAILED_{attempts}_TIMES_USER_BLOCKED"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When the event occurred (local time)"
    )
    username: str = Field(
        ...,
        description="Operator the event is attributed to"
    )
    action: str = Field(
        ...,
        description="What was done (see AuditAction)"
    )
    result: str = Field(
        ...,
        description="Outcome of the action"
    )

    def to_log_line(self) -> str:
        """Render the event as one line of the audit log file."""
        return (
            f"{self.timestamp.strftime(TIMESTAMP_FORMAT)} | "
            f"User: {self.username} | "
            f"Action: {self.action} | "
            f"Result: {self.result}"
        )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "timestamp": self.timestamp.strftime(TIMESTAMP_FORMAT),
            "username": self.username,
            "action": self.action,
            "result": self.result,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.login_succeeded("alice")
        event = AuditEventBuilder.person_added("alice", 7)
    """

    @staticmethod
    def login_succeeded(username: str) -> AuditEvent:
        return AuditEvent(
            username=username,
            action=AuditAction.LOGIN.value,
            result=RESULT_OK,
        )

    @staticmethod
    def login_failed(username: str) -> AuditEvent:
        return AuditEvent(
            username=username,
            action=AuditAction.LOGIN.value,
            result=RESULT_FAILED,
        )

    @staticmethod
    def user_blocked(username: str, attempts: int) -> AuditEvent:
        return AuditEvent(
            username=username,
            action=AuditAction.LOGIN.value,
            result=blocked_result(attempts),
        )

    @staticmethod
    def person_added(username: str, person_id: int) -> AuditEvent:
        return AuditEvent(
            username=username,
            action=AuditAction.ADD_PERSON.value,
            result=f"ID={person_id}",
        )

    @staticmethod
    def person_edited(username: str, person_id: int) -> AuditEvent:
        return AuditEvent(
            username=username,
            action=AuditAction.EDIT_PERSON.value,
            result=f"ID={person_id}",
        )

    @staticmethod
    def person_deleted(username: str, person_id: int) -> AuditEvent:
        return AuditEvent(
            username=username,
            action=AuditAction.DELETE_PERSON.value,
            result=f"ID={person_id}",
        )

    @staticmethod
    def changes_saved(username: str) -> AuditEvent:
        return AuditEvent(
            username=username,
            action=AuditAction.SAVE.value,
            result=RESULT_OK,
        )

    @staticmethod
    def city_report(username: str, grand_total: Decimal) -> AuditEvent:
        return AuditEvent(
            username=username,
            action=AuditAction.REPORT_BY_CITY.value,
            result=f"TOTAL={format(grand_total, 'f')}",
        )
