"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the in-memory stores ignorant of the file format
2. Swap flat files for a real database later
3. Test stores against temporary files without touching real data

The interface is intentionally simple - whole-collection reads and
writes, plus a line append for the audit log. No partial updates.
"""

from abc import ABC, abstractmethod
from typing import Iterable

from plainfiles.models.audit import AuditEvent
from plainfiles.models.credential import Credential
from plainfiles.models.person import Person


class PersonStorageInterface(ABC):
    """Backing storage for the person registry."""

    @abstractmethod
    def read_people(self) -> list[Person]:
        """
        Read every parsable person record, in storage order.

        Malformed entries are skipped, not reported.
        A missing backing file yields an empty list.

        Raises:
            StorageReadError: If the backing file exists but cannot be read
        """
        pass

    @abstractmethod
    def write_people(self, people: Iterable[Person]) -> None:
        """
        Replace the stored collection with people.

        Raises:
            StorageWriteError: If the write fails
        """
        pass


class CredentialStorageInterface(ABC):
    """Backing storage for user credentials."""

    @abstractmethod
    def read_credentials(self) -> list[Credential]:
        """
        Read every parsable credential, in storage order.

        A missing backing file yields an empty list.

        Raises:
            StorageReadError: If the backing file exists but cannot be read
        """
        pass

    @abstractmethod
    def write_credentials(self, credentials: Iterable[Credential]) -> None:
        """
        Replace the stored collection with credentials.

        Raises:
            StorageWriteError: If the write fails
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> None:
        """
        Append an audit event to the log.

        Raises:
            StorageWriteError: If the append fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """Backing file exists but could not be read."""
    pass


class StorageWriteError(StorageError):
    """Backing file could not be written or appended to."""
    pass
