"""
Credential and Authentication Models

Passwords are stored and compared as plain text. There is no hashing:
the credentials file is edited by an administrator and the tool is
single-operator.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Credential(BaseModel):
    """
    A user allowed to operate the registry.

    Serialized as one line of the users file:
        username,password,true|false
    """
    model_config = ConfigDict(frozen=True)

    username: str = Field(
        ...,
        description="Login name, matched case-insensitively"
    )
    password: str = Field(
        ...,
        description="Password, matched exactly"
    )
    is_active: bool = Field(
        default=True,
        description="False once the user has been blocked"
    )

    def matches_username(self, username: str) -> bool:
        return self.username.casefold() == username.casefold()


class AuthState(str, Enum):
    """
    Login protocol states.

    AUTHENTICATED and DENIED are terminal.
    """
    AWAITING_CREDENTIALS = "awaiting_credentials"
    AUTHENTICATED = "authenticated"
    DENIED = "denied"


class AuthResult(BaseModel):
    """Outcome of a login run."""

    state: AuthState
    user: Optional[Credential] = None
    attempts_used: int = Field(default=0, ge=0)
    last_username: str = Field(
        default="",
        description="Username typed on the final attempt"
    )

    @property
    def is_authenticated(self) -> bool:
        return self.state == AuthState.AUTHENTICATED and self.user is not None
