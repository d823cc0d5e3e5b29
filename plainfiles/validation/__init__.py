"""Validation package."""

from plainfiles.validation.validator import PersonValidator

__all__ = ["PersonValidator"]
