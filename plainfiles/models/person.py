"""
Core Data Models for PlainFiles

These models define the schemas for the person registry.

DESIGN DECISION: Models carry TYPES, not business rules.
A Person that breaks a field rule (empty name, short phone, zero balance)
can still be constructed so the validator can report exactly which rule
failed, in a fixed priority order, instead of pydantic raising on the
first field it happens to check.

Records are immutable. Edits go through PersonUpdate and produce a new
record; nobody mutates a stored record behind the store's back.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# PERSON MODELS
# =============================================================================

class Person(BaseModel):
    """
    A single entry in the person registry.

    Serialized as one line of the people file:
        id,first_name,last_name,phone,city,balance
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: int = Field(
        ...,
        description="Primary key (positive, unique)"
    )
    first_name: str = Field(
        default="",
        description="First name"
    )
    last_name: str = Field(
        default="",
        description="Last name"
    )
    phone: str = Field(
        default="",
        description="Phone number, free format (7-15 digits)"
    )
    city: str = Field(
        default="",
        description="City; may be blank"
    )
    balance: Decimal = Field(
        ...,
        description="Account balance"
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def phone_digits(self) -> str:
        """Digits of the phone number, ignoring separators."""
        return "".join(c for c in self.phone if c.isdecimal())


class PersonUpdate(BaseModel):
    """
    Proposed changes to an existing person.

    Every field is optional. None means "keep the current value".
    The id is not editable.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    city: Optional[str] = None
    balance: Optional[Decimal] = None

    def changes(self) -> dict:
        """Only the fields that were actually proposed."""
        return self.model_dump(exclude_none=True)

    def apply_to(self, person: Person) -> Person:
        """Return a copy of person with the proposed changes applied."""
        return person.model_copy(update=self.changes())

    @property
    def is_empty(self) -> bool:
        return not self.changes()


class CityGroup(BaseModel):
    """People sharing a city, in registry order."""

    city: str = Field(
        ...,
        description="City label (blank cities use the configured label)"
    )
    people: list[Person] = Field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return sum((p.balance for p in self.people), Decimal("0"))

    @property
    def count(self) -> int:
        return len(self.people)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'duplicate', 'invalid_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )


class ValidationResult(BaseModel):
    """
    Outcome of validating (and possibly applying) a record change.

    Validation stops at the first violated rule, so a failed result
    carries exactly one issue.
    """

    is_valid: bool = Field(
        ...,
        description="Did every rule pass?"
    )
    issue: Optional[ValidationIssue] = Field(
        default=None,
        description="The first violated rule, if any"
    )

    @property
    def reason(self) -> str:
        """Human-readable failure reason; empty on success."""
        return self.issue.message if self.issue else ""

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(is_valid=True)

    @classmethod
    def fail(cls, field: str, issue_type: str, message: str) -> "ValidationResult":
        return cls(
            is_valid=False,
            issue=ValidationIssue(field=field, issue_type=issue_type, message=message),
        )
