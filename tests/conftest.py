"""Shared fixtures: throwaway data directories and scripted login prompts."""

from pathlib import Path

import pytest

from plainfiles.audit import AuditLogger
from plainfiles.services.storage import (
    FlatFileAuditStorage,
    FlatFileCredentialStorage,
    FlatFilePersonStorage,
)
from plainfiles.stores import CredentialStore, PersonStore


PEOPLE_TXT = (
    "1,Ana,Lopez,5551234,Bogota,1000.50\n"
    "2,Luis,Gomez,300-555-1234,Medellin,250\n"
    "3,Marta,Diaz,3105550000,,75.25\n"
    "4,Pedro,Ruiz,6045551111,Bogota,10\n"
)

USERS_TXT = (
    "alice,secret,true\n"
    "bob,hunter2,false\n"
)


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """A data directory seeded with people and users."""
    (tmp_path / "people.txt").write_text(PEOPLE_TXT, encoding="utf-8")
    (tmp_path / "Users.txt").write_text(USERS_TXT, encoding="utf-8")
    return tmp_path


@pytest.fixture
def person_store(data_dir: Path) -> PersonStore:
    store = PersonStore(FlatFilePersonStorage(data_dir / "people.txt"))
    store.load_all()
    return store


@pytest.fixture
def credential_store(data_dir: Path) -> CredentialStore:
    store = CredentialStore(FlatFileCredentialStorage(data_dir / "Users.txt"))
    store.load_all()
    return store


@pytest.fixture
def audit_log_path(data_dir: Path) -> Path:
    return data_dir / "log.txt"


@pytest.fixture
def audit_logger(audit_log_path: Path) -> AuditLogger:
    return AuditLogger(FlatFileAuditStorage(audit_log_path))


class ScriptedPrompt:
    """Feeds canned (username, password) pairs and records what it was asked."""

    def __init__(self, *answers: tuple[str, str]):
        self._answers = list(answers)
        self.remaining_seen: list[int] = []

    def __call__(self, remaining: int) -> tuple[str, str]:
        self.remaining_seen.append(remaining)
        return self._answers.pop(0)


@pytest.fixture
def scripted_prompt():
    return ScriptedPrompt


def read_log_lines(path: Path) -> list[str]:
    if not path.exists():
        return []
    return path.read_text(encoding="utf-8").splitlines()


@pytest.fixture
def read_log():
    return read_log_lines
