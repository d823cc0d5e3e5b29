"""Services package."""

from plainfiles.services.storage import (
    AuditStorageInterface,
    CredentialStorageInterface,
    FlatFileAuditStorage,
    FlatFileCredentialStorage,
    FlatFilePersonStorage,
    PersonStorageInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)

__all__ = [
    # Storage services
    "AuditStorageInterface",
    "CredentialStorageInterface",
    "FlatFileAuditStorage",
    "FlatFileCredentialStorage",
    "FlatFilePersonStorage",
    "PersonStorageInterface",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
]
