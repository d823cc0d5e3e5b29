"""
Bounded-Attempt Login

State machine:

    AWAITING_CREDENTIALS --success--> AUTHENTICATED
    AWAITING_CREDENTIALS --failure, attempts left--> AWAITING_CREDENTIALS
    AWAITING_CREDENTIALS --failure, budget exhausted--> DENIED

On exhaustion the username typed last is blocked permanently. Unblocking
means editing the users file by hand.

The authenticator never touches the console. Collecting credentials is
delegated to a prompt callable supplied by the front-end.
"""

import time
from typing import Callable, Optional

import structlog

from plainfiles.audit import AuditLogger
from plainfiles.models.credential import AuthResult, AuthState
from plainfiles.stores import CredentialStore


logger = structlog.get_logger(__name__)

DEFAULT_MAX_ATTEMPTS = 3

# Called with the number of attempts remaining; returns (username, password)
CredentialPrompt = Callable[[int], tuple[str, str]]


class Authenticator:
    """
    Drives one login run to a terminal state.

    Args:
        prompt: Collects credentials from the operator
        max_attempts: Failures allowed before the user is blocked
        retry_delay_seconds: Pause after a failed attempt
        sleep: Injected for tests
    """

    def __init__(
        self,
        prompt: CredentialPrompt,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        retry_delay_seconds: float = 0.0,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._prompt = prompt
        self._max_attempts = max_attempts
        self._retry_delay = retry_delay_seconds
        self._sleep = sleep or time.sleep
        self._state = AuthState.AWAITING_CREDENTIALS

    @property
    def state(self) -> AuthState:
        return self._state

    def attempt_login(
        self,
        credential_store: CredentialStore,
        audit_logger: AuditLogger,
    ) -> AuthResult:
        """
        Prompt until the operator authenticates or the budget runs out.

        Every attempt is audited. Exhausting the budget blocks the last
        username entered and persists the credentials file.
        """
        self._state = AuthState.AWAITING_CREDENTIALS
        remaining = self._max_attempts
        attempts = 0
        username = ""

        while self._state == AuthState.AWAITING_CREDENTIALS:
            username, password = self._prompt(remaining)
            attempts += 1

            user = credential_store.authenticate(username, password)
            if user is not None:
                self._state = AuthState.AUTHENTICATED
                audit_logger.log_login_succeeded(username)
                return AuthResult(
                    state=self._state,
                    user=user,
                    attempts_used=attempts,
                    last_username=username,
                )

            remaining -= 1
            logger.info("login_attempt_failed", username=username, remaining=remaining)

            if remaining > 0:
                audit_logger.log_login_failed(username)
                if self._retry_delay > 0:
                    self._sleep(self._retry_delay)
            else:
                credential_store.block_user(username)
                audit_logger.log_user_blocked(username, self._max_attempts)
                self._state = AuthState.DENIED

        return AuthResult(
            state=self._state,
            attempts_used=attempts,
            last_username=username,
        )
