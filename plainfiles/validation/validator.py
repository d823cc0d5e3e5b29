"""
Person Validation

DESIGN DECISION: Rules are checked in a FIXED order and validation stops
at the first violated rule:

1. ID is positive
2. ID is unique (new records only)
3. First name is not empty
4. Last name is not empty
5. Phone is not empty
6. Phone has between 7 and 15 digits
7. Balance is greater than zero
8. No text field contains the file delimiter

The first failure is the one reported to the operator, so the order is
part of the contract. Edits skip rule 2 because the id never changes.

IMPORTANT: Validation NEVER silently fixes issues and NEVER raises.
It reports them for the caller to surface.
"""

from decimal import Decimal
from typing import Callable, Iterable, Optional

from plainfiles.models.person import Person, ValidationResult
from plainfiles.services.storage.flat_file import DELIMITER


MIN_PHONE_DIGITS = 7
MAX_PHONE_DIGITS = 15

# Text fields written to the people file, with their display labels
TEXT_FIELDS = [
    ("first_name", "First name"),
    ("last_name", "Last name"),
    ("phone", "Phone"),
    ("city", "City"),
]


class PersonValidator:
    """
    Validates person records against the registry's field rules.

    Stateless; the caller supplies the ids already in use when checking
    a new record.
    """

    def _check_id(
        self,
        person: Person,
        existing_ids: Optional[Iterable[int]],
    ) -> Optional[ValidationResult]:
        if person.id <= 0:
            return ValidationResult.fail(
                field="id",
                issue_type="invalid_value",
                message="ID must be a positive integer.",
            )
        if existing_ids is not None and person.id in set(existing_ids):
            return ValidationResult.fail(
                field="id",
                issue_type="duplicate",
                message=f"A person with ID {person.id} already exists.",
            )
        return None

    def _check_names(self, person: Person) -> Optional[ValidationResult]:
        if not person.first_name.strip():
            return ValidationResult.fail(
                field="first_name",
                issue_type="missing",
                message="First name cannot be empty.",
            )
        if not person.last_name.strip():
            return ValidationResult.fail(
                field="last_name",
                issue_type="missing",
                message="Last name cannot be empty.",
            )
        return None

    def _check_phone(self, person: Person) -> Optional[ValidationResult]:
        if not person.phone.strip():
            return ValidationResult.fail(
                field="phone",
                issue_type="missing",
                message="Phone cannot be empty.",
            )
        digits = len(person.phone_digits)
        if digits < MIN_PHONE_DIGITS or digits > MAX_PHONE_DIGITS:
            return ValidationResult.fail(
                field="phone",
                issue_type="invalid_format",
                message=(
                    f"Phone must contain between {MIN_PHONE_DIGITS} "
                    f"and {MAX_PHONE_DIGITS} digits."
                ),
            )
        return None

    def _check_balance(self, person: Person) -> Optional[ValidationResult]:
        if person.balance <= Decimal("0"):
            return ValidationResult.fail(
                field="balance",
                issue_type="invalid_value",
                message="Balance must be greater than zero.",
            )
        return None

    def _check_delimiter(self, person: Person) -> Optional[ValidationResult]:
        for field, label in TEXT_FIELDS:
            if DELIMITER in getattr(person, field):
                return ValidationResult.fail(
                    field=field,
                    issue_type="invalid_format",
                    message=f"{label} cannot contain '{DELIMITER}'.",
                )
        return None

    def _run(self, checks: list[Callable[[], Optional[ValidationResult]]]) -> ValidationResult:
        for check in checks:
            failure = check()
            if failure is not None:
                return failure
        return ValidationResult.ok()

    def validate_new(
        self,
        person: Person,
        existing_ids: Iterable[int],
    ) -> ValidationResult:
        """
        Validate a record about to be added.

        Args:
            person: The proposed record
            existing_ids: Ids already present in the registry

        Returns:
            ValidationResult carrying the first violated rule, if any
        """
        return self._run([
            lambda: self._check_id(person, existing_ids),
            lambda: self._check_names(person),
            lambda: self._check_phone(person),
            lambda: self._check_balance(person),
            lambda: self._check_delimiter(person),
        ])

    def validate_existing(self, person: Person) -> ValidationResult:
        """Validate an edited record (no uniqueness check)."""
        return self._run([
            lambda: self._check_names(person),
            lambda: self._check_phone(person),
            lambda: self._check_balance(person),
            lambda: self._check_delimiter(person),
        ])
