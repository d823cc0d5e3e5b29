"""
Data Models Package

This package contains all Pydantic models used in PlainFiles.
All data flowing through the system must conform to these schemas.
"""

from plainfiles.models.person import (
    CityGroup,
    Person,
    PersonUpdate,
    ValidationIssue,
    ValidationResult,
)
from plainfiles.models.credential import (
    AuthResult,
    AuthState,
    Credential,
)
from plainfiles.models.audit import (
    AuditAction,
    AuditEvent,
    AuditEventBuilder,
)

__all__ = [
    # Person models
    "CityGroup",
    "Person",
    "PersonUpdate",
    "ValidationIssue",
    "ValidationResult",
    # Credential models
    "AuthResult",
    "AuthState",
    "Credential",
    # Audit models
    "AuditAction",
    "AuditEvent",
    "AuditEventBuilder",
]
