"""
Report by City

DESIGN DECISION: Report numbers come straight from the store.
The report never recomputes grouping on its own, so the per-city totals
and the grand total always agree with PersonStore.total_balance().
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from plainfiles.models.person import CityGroup
from plainfiles.stores import PersonStore


class CityReport(BaseModel):
    """People grouped by city with subtotals and a grand total."""

    groups: list[CityGroup] = Field(default_factory=list)
    grand_total: Decimal = Decimal("0")
    person_count: int = Field(default=0, ge=0)

    @property
    def is_empty(self) -> bool:
        return self.person_count == 0

    def subtotals(self) -> dict[str, Decimal]:
        """City label -> total balance, in report order."""
        return {group.city: group.total for group in self.groups}


def build_city_report(store: PersonStore) -> CityReport:
    """Group the registry by city and total it."""
    return CityReport(
        groups=store.grouped_by_city(),
        grand_total=store.total_balance(),
        person_count=len(store),
    )
