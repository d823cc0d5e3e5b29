"""
Main Orchestrator for PlainFiles

This module ties together all the components and defines the
session an operator works in:

1. Login (bounded attempts, lockout)
2. Registry operations (list, add, edit, delete, save, report)

DESIGN DECISION: The orchestrator enforces the boundaries:
- No registry operation without an authenticated operator
- Every state-changing action is audited, after it succeeds
- Stores never talk to each other; the session coordinates them
"""

from typing import Callable, Optional

from plainfiles.audit import AuditLogger
from plainfiles.auth import Authenticator, CredentialPrompt
from plainfiles.config import AppSettings, AuthSettings, StorageSettings
from plainfiles.models.audit import AuditEventBuilder
from plainfiles.models.credential import AuthResult, Credential
from plainfiles.models.person import Person, PersonUpdate, ValidationResult
from plainfiles.reports import CityReport, build_city_report
from plainfiles.services.storage import (
    FlatFileAuditStorage,
    FlatFileCredentialStorage,
    FlatFilePersonStorage,
)
from plainfiles.stores import CredentialStore, PersonStore


class NotAuthenticatedError(Exception):
    """A registry operation was attempted without a logged-in operator."""
    pass


class RegistrySession:
    """
    One operator's working session over the registry.

    Flow:
    1. login() until AUTHENTICATED or DENIED
    2. Registry operations, each audited under the operator's name
    3. save() to persist; nothing is written before that
    """

    def __init__(
        self,
        person_store: PersonStore,
        credential_store: CredentialStore,
        audit_logger: AuditLogger,
    ):
        self._people = person_store
        self._credentials = credential_store
        self._audit = audit_logger
        self._current_user: Optional[Credential] = None

    @property
    def current_user(self) -> Optional[Credential]:
        return self._current_user

    @property
    def people(self) -> PersonStore:
        return self._people

    @property
    def credentials(self) -> CredentialStore:
        return self._credentials

    def _require_user(self) -> Credential:
        if self._current_user is None:
            raise NotAuthenticatedError("Log in before working with the registry")
        return self._current_user

    def login(self, authenticator: Authenticator) -> AuthResult:
        """Run the login protocol; on success the operator becomes current."""
        result = authenticator.attempt_login(self._credentials, self._audit)
        self._current_user = result.user if result.is_authenticated else None
        return result

    def list_people(self) -> tuple[Person, ...]:
        self._require_user()
        return self._people.get_all()

    def find_person(self, person_id: int) -> Optional[Person]:
        self._require_user()
        return self._people.get_by_id(person_id)

    def add_person(self, person: Person) -> ValidationResult:
        user = self._require_user()
        result = self._people.try_add(person)
        if result.is_valid:
            self._audit.log(AuditEventBuilder.person_added(user.username, person.id))
        return result

    def edit_person(self, person_id: int, update: PersonUpdate) -> ValidationResult:
        user = self._require_user()
        result = self._people.try_update(person_id, update)
        if result.is_valid:
            self._audit.log(AuditEventBuilder.person_edited(user.username, person_id))
        return result

    def delete_person(self, person_id: int) -> bool:
        user = self._require_user()
        removed = self._people.delete(person_id)
        if removed:
            self._audit.log(AuditEventBuilder.person_deleted(user.username, person_id))
        return removed

    def save(self) -> None:
        """
        Persist people, then credentials.

        The two files are written independently; a failure on the second
        leaves the first already saved.
        """
        user = self._require_user()
        self._people.save_all()
        self._credentials.save_all()
        self._audit.log(AuditEventBuilder.changes_saved(user.username))

    def report_by_city(self) -> CityReport:
        """Build the city report; only a non-empty report is audited."""
        user = self._require_user()
        report = build_city_report(self._people)
        if not report.is_empty:
            self._audit.log(AuditEventBuilder.city_report(user.username, report.grand_total))
        return report


def create_app_components(
    storage_settings: Optional[StorageSettings] = None,
    app_settings: Optional[AppSettings] = None,
) -> RegistrySession:
    """
    Factory function to create all application components.

    Builds the flat-file backends, loads both stores and wires the
    session. Settings default to the environment.

    Returns:
        A RegistrySession with no operator logged in yet
    """
    storage_settings = storage_settings or StorageSettings()
    app_settings = app_settings or AppSettings()

    person_store = PersonStore(
        FlatFilePersonStorage(storage_settings.people_path),
        no_city_label=app_settings.no_city_label,
    )
    credential_store = CredentialStore(
        FlatFileCredentialStorage(storage_settings.users_path)
    )
    audit_logger = AuditLogger(FlatFileAuditStorage(storage_settings.log_path))

    credential_store.load_all()
    person_store.load_all()

    return RegistrySession(person_store, credential_store, audit_logger)


def create_authenticator(
    prompt: CredentialPrompt,
    auth_settings: Optional[AuthSettings] = None,
    sleep: Optional[Callable[[float], None]] = None,
) -> Authenticator:
    """Authenticator configured from AuthSettings."""
    auth_settings = auth_settings or AuthSettings()
    return Authenticator(
        prompt=prompt,
        max_attempts=auth_settings.max_attempts,
        retry_delay_seconds=auth_settings.retry_delay_seconds,
        sleep=sleep,
    )
