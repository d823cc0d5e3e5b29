"""In-memory stores for people and credentials."""

from plainfiles.stores.credential_store import CredentialStore
from plainfiles.stores.person_store import PersonStore

__all__ = ["CredentialStore", "PersonStore"]
