"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Currently implements plain delimited text files as the backend.
"""

from plainfiles.services.storage.interface import (
    AuditStorageInterface,
    CredentialStorageInterface,
    PersonStorageInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from plainfiles.services.storage.flat_file import (
    FlatFileAuditStorage,
    FlatFileCredentialStorage,
    FlatFilePersonStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "CredentialStorageInterface",
    "PersonStorageInterface",
    # Exceptions
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Flat file implementation
    "FlatFileAuditStorage",
    "FlatFileCredentialStorage",
    "FlatFilePersonStorage",
]
