"""
Credential Store

In-memory collection of operator credentials backed by a
CredentialStorageInterface.

Blocking a user is persisted immediately; everything else waits for
an explicit save_all().
"""

from typing import Optional

import structlog

from plainfiles.models.credential import Credential
from plainfiles.services.storage import CredentialStorageInterface


logger = structlog.get_logger(__name__)


class CredentialStore:
    """Lookup, authentication and blocking of operators."""

    def __init__(self, storage: CredentialStorageInterface):
        self._storage = storage
        self._credentials: list[Credential] = []

    def _index_of(self, username: str) -> Optional[int]:
        # First match wins if the file holds duplicates
        for index, credential in enumerate(self._credentials):
            if credential.matches_username(username):
                return index
        return None

    def load_all(self) -> None:
        """Replace the collection with the backing file's contents."""
        self._credentials = self._storage.read_credentials()
        logger.info("credentials_loaded", count=len(self._credentials))

    def save_all(self) -> None:
        """Overwrite the backing file with the current collection."""
        self._storage.write_credentials(self._credentials)

    def get_all(self) -> tuple[Credential, ...]:
        return tuple(self._credentials)

    def find(self, username: str) -> Optional[Credential]:
        """Case-insensitive lookup."""
        if not username.strip():
            return None
        index = self._index_of(username)
        return self._credentials[index] if index is not None else None

    def authenticate(self, username: str, password: str) -> Optional[Credential]:
        """
        Check a username/password pair.

        Returns the credential on success, None otherwise. Blocked users
        never authenticate, even with the right password.
        """
        if not username.strip() or not password.strip():
            return None

        credential = self.find(username)
        if credential is None:
            return None

        if not credential.is_active:
            return None

        if credential.password == password:
            return credential

        return None

    def block_user(self, username: str) -> None:
        """Deactivate username and persist the whole collection right away."""
        if not username.strip():
            return

        index = self._index_of(username)
        if index is None:
            return

        self._credentials[index] = self._credentials[index].model_copy(
            update={"is_active": False}
        )
        self.save_all()
        logger.warning("user_blocked", username=self._credentials[index].username)
