"""
Flat File Storage Implementation

DESIGN DECISION: Plain comma-delimited text files are the storage backend:
1. Operators can read and fix the data in any text editor
2. No database setup required
3. Blocked users are unblocked by editing one word in Users.txt

TRADEOFFS:
- No transactions: every save rewrites the whole file
- No locking: one operator, one process
- No escaping: PersonValidator rejects a comma inside a text field

Parsing is best-effort. Lines with too few fields or an unparsable
number are skipped and only show up in the diagnostic log.
"""

import re
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Iterable, Optional

import structlog

from plainfiles.models.audit import AuditEvent
from plainfiles.models.credential import Credential
from plainfiles.models.person import Person
from plainfiles.services.storage.interface import (
    AuditStorageInterface,
    CredentialStorageInterface,
    PersonStorageInterface,
    StorageReadError,
    StorageWriteError,
)


logger = structlog.get_logger(__name__)

DELIMITER = ","

# Column order for the people file
PERSON_COLUMNS = [
    "id",
    "first_name",
    "last_name",
    "phone",
    "city",
    "balance",
]

# Column order for the users file
CREDENTIAL_COLUMNS = [
    "username",
    "password",
    "is_active",
]

_INTEGER = re.compile(r"[+-]?\d+")


def parse_int(text: str) -> Optional[int]:
    """Parse a plain integer; None if the text isn't one."""
    text = text.strip()
    if not _INTEGER.fullmatch(text):
        return None
    return int(text)


def parse_decimal(text: str) -> Optional[Decimal]:
    """Parse a locale-independent decimal (dot separator); None if invalid."""
    text = text.strip()
    if "_" in text:
        return None
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def format_decimal(value: Decimal) -> str:
    """Fixed-point, no grouping, no exponent."""
    return format(value, "f")


def parse_active_flag(text: str) -> bool:
    """
    Parse the is_active column.

    Anything other than true/false (any case) counts as active, so a
    damaged flag never locks an operator out.
    """
    normalized = text.strip().lower()
    if normalized == "false":
        return False
    return True


def _read_lines(path: Path) -> list[str]:
    if not path.exists():
        return []
    try:
        return path.read_text(encoding="utf-8-sig").splitlines()
    except OSError as e:
        raise StorageReadError(f"Failed to read {path}: {e}") from e


def _write_lines(path: Path, lines: Iterable[str]) -> None:
    content = "".join(f"{line}\n" for line in lines)
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise StorageWriteError(f"Failed to write {path}: {e}") from e


class FlatFilePersonStorage(PersonStorageInterface):
    """
    People file: one person per line.

        id,first_name,last_name,phone,city,balance
    """

    def __init__(self, path: Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _person_to_row(self, person: Person) -> list[str]:
        """Convert a Person to its column values."""
        return [
            str(person.id),
            person.first_name,
            person.last_name,
            person.phone,
            person.city,
            format_decimal(person.balance),
        ]

    def _row_to_person(self, row: list[str]) -> Optional[Person]:
        """Convert column values to a Person; None if the row is malformed."""
        if len(row) < len(PERSON_COLUMNS):
            return None

        person_id = parse_int(row[0])
        if person_id is None:
            return None

        balance = parse_decimal(row[5])
        if balance is None:
            return None

        return Person(
            id=person_id,
            first_name=row[1],
            last_name=row[2],
            phone=row[3],
            city=row[4],
            balance=balance,
        )

    def read_people(self) -> list[Person]:
        """Read all well-formed people from the file."""
        people = []
        for line_number, line in enumerate(_read_lines(self._path), start=1):
            if not line.strip():
                continue

            person = self._row_to_person(line.split(DELIMITER))
            if person is None:
                logger.debug(
                    "person_line_skipped",
                    path=str(self._path),
                    line_number=line_number,
                    reason="malformed",
                )
                continue

            people.append(person)

        return people

    def write_people(self, people: Iterable[Person]) -> None:
        """Overwrite the file with people."""
        _write_lines(
            self._path,
            (DELIMITER.join(self._person_to_row(p)) for p in people),
        )


class FlatFileCredentialStorage(CredentialStorageInterface):
    """
    Users file: one credential per line.

        username,password,true|false
    """

    def __init__(self, path: Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _credential_to_row(self, credential: Credential) -> list[str]:
        return [
            credential.username,
            credential.password,
            "true" if credential.is_active else "false",
        ]

    def _row_to_credential(self, row: list[str]) -> Optional[Credential]:
        if len(row) < len(CREDENTIAL_COLUMNS):
            return None

        return Credential(
            username=row[0].strip(),
            password=row[1].strip(),
            is_active=parse_active_flag(row[2]),
        )

    def read_credentials(self) -> list[Credential]:
        """Read all well-formed credentials from the file."""
        credentials = []
        for line_number, line in enumerate(_read_lines(self._path), start=1):
            if not line.strip():
                continue

            credential = self._row_to_credential(line.split(DELIMITER))
            if credential is None:
                logger.debug(
                    "credential_line_skipped",
                    path=str(self._path),
                    line_number=line_number,
                )
                continue

            credentials.append(credential)

        return credentials

    def write_credentials(self, credentials: Iterable[Credential]) -> None:
        """Overwrite the file with credentials."""
        _write_lines(
            self._path,
            (DELIMITER.join(self._credential_to_row(c)) for c in credentials),
        )


class FlatFileAuditStorage(AuditStorageInterface):
    """
    Audit log file: one event per line, append-only.
    """

    def __init__(self, path: Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def append_event(self, event: AuditEvent) -> None:
        """Append one line; failures propagate."""
        try:
            with open(self._path, "a", encoding="utf-8") as handle:
                handle.write(event.to_log_line() + "\n")
        except OSError as e:
            raise StorageWriteError(
                f"Failed to write audit event to {self._path}: {e}"
            ) from e
