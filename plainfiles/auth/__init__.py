"""Authentication package."""

from plainfiles.auth.authenticator import Authenticator, CredentialPrompt

__all__ = ["Authenticator", "CredentialPrompt"]
