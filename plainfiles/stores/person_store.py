"""
Person Registry Store

In-memory, ordered collection of person records backed by a
PersonStorageInterface.

GUARANTEES:
- Every record held satisfies the field rules in PersonValidator
- Ids are unique across the collection
- Load order is preserved; edits keep position; deletes remove
- Nothing reaches the backing file until save_all()
"""

from decimal import Decimal
from typing import Optional

import structlog

from plainfiles.models.person import CityGroup, Person, PersonUpdate, ValidationResult
from plainfiles.services.storage import PersonStorageInterface
from plainfiles.validation import PersonValidator


logger = structlog.get_logger(__name__)

DEFAULT_NO_CITY_LABEL = "NO CITY"


class PersonStore:
    """
    The person registry.

    Mutations return a ValidationResult instead of raising, so the caller
    decides how to show the failure reason.
    """

    def __init__(
        self,
        storage: PersonStorageInterface,
        validator: Optional[PersonValidator] = None,
        no_city_label: str = DEFAULT_NO_CITY_LABEL,
    ):
        self._storage = storage
        self._validator = validator or PersonValidator()
        self._no_city_label = no_city_label
        self._people: list[Person] = []

    def _index_of(self, person_id: int) -> Optional[int]:
        for index, person in enumerate(self._people):
            if person.id == person_id:
                return index
        return None

    def load_all(self) -> None:
        """
        Replace the collection with the backing file's contents.

        Rows that parse but break a field rule (or repeat an id) are
        dropped so the store invariant holds from the start.
        """
        loaded: list[Person] = []
        seen_ids: set[int] = set()

        for person in self._storage.read_people():
            result = self._validator.validate_new(person, seen_ids)
            if not result.is_valid:
                logger.debug(
                    "person_line_skipped",
                    person_id=person.id,
                    reason=result.reason,
                )
                continue
            loaded.append(person)
            seen_ids.add(person.id)

        self._people = loaded
        logger.info("people_loaded", count=len(self._people))

    def save_all(self) -> None:
        """Overwrite the backing file with the current collection."""
        self._storage.write_people(self._people)
        logger.info("people_saved", count=len(self._people))

    def get_all(self) -> tuple[Person, ...]:
        """Snapshot of the registry; records are immutable."""
        return tuple(self._people)

    def get_by_id(self, person_id: int) -> Optional[Person]:
        index = self._index_of(person_id)
        return self._people[index] if index is not None else None

    def try_add(self, person: Person) -> ValidationResult:
        """
        Validate and append a new record.

        On failure the collection is unchanged and the result carries
        the first violated rule.
        """
        result = self._validator.validate_new(
            person,
            (p.id for p in self._people),
        )
        if result.is_valid:
            self._people.append(person)
        return result

    def try_update(self, person_id: int, update: PersonUpdate) -> ValidationResult:
        """
        Apply proposed changes to an existing record.

        Phase one builds the candidate and validates it; phase two
        replaces the stored record in place. If validation fails the
        store is untouched and the proposal is discarded.
        """
        index = self._index_of(person_id)
        if index is None:
            return ValidationResult.fail(
                field="id",
                issue_type="not_found",
                message=f"No person found with ID {person_id}.",
            )

        candidate = update.apply_to(self._people[index])
        result = self._validator.validate_existing(candidate)
        if result.is_valid:
            self._people[index] = candidate
        return result

    def delete(self, person_id: int) -> bool:
        """Remove the record with person_id; returns False if there was none."""
        index = self._index_of(person_id)
        if index is None:
            return False
        del self._people[index]
        return True

    def city_label(self, person: Person) -> str:
        return person.city if person.city.strip() else self._no_city_label

    def grouped_by_city(self) -> list[CityGroup]:
        """
        Group people by city, ordered by city label (ordinal).

        Blank cities are grouped under the no-city label. Registry order
        is kept inside each group.
        """
        groups: dict[str, CityGroup] = {}
        for person in self._people:
            label = self.city_label(person)
            if label not in groups:
                groups[label] = CityGroup(city=label)
            groups[label].people.append(person)

        return [groups[label] for label in sorted(groups)]

    def total_balance(self) -> Decimal:
        return sum((p.balance for p in self._people), Decimal("0"))

    def __len__(self) -> int:
        return len(self._people)
