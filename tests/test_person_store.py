"""
Tests for PersonStore over FlatFilePersonStorage

Everything runs against files under tmp_path.
"""

from decimal import Decimal
from pathlib import Path

import pytest

from plainfiles.models.person import Person, PersonUpdate
from plainfiles.services.storage import (
    FlatFilePersonStorage,
    StorageReadError,
    StorageWriteError,
)
from plainfiles.stores import PersonStore


def make_store(path: Path, **kwargs) -> PersonStore:
    store = PersonStore(FlatFilePersonStorage(path), **kwargs)
    store.load_all()
    return store


def make_person(person_id: int, city: str = "Cali", balance: str = "10") -> Person:
    return Person(
        id=person_id,
        first_name="Juan",
        last_name="Perez",
        phone="3001234567",
        city=city,
        balance=Decimal(balance),
    )


class TestLoad:
    """Loading the people file."""

    def test_malformed_line_is_skipped(self, tmp_path):
        """A short line is dropped and the rest still loads."""
        path = tmp_path / "people.txt"
        path.write_text(
            "1,Ana,Lopez,5551234,Bogota,1000.50\n2,OnlyTwo,Fields\n",
            encoding="utf-8",
        )

        store = make_store(path)

        assert len(store) == 1
        assert store.get_by_id(1).first_name == "Ana"
        assert store.total_balance() == Decimal("1000.50")

    def test_missing_file_loads_empty(self, tmp_path):
        """A missing file is an empty registry, not an error."""
        store = make_store(tmp_path / "nope.txt")
        assert len(store) == 0
        assert store.get_all() == ()

    def test_unparsable_numbers_are_skipped(self, tmp_path):
        path = tmp_path / "people.txt"
        path.write_text(
            "abc,Ana,Lopez,5551234,Bogota,10\n"
            "2,Luis,Gomez,5551234,Cali,ten\n"
            "3,Eva,Ruiz,5551234,Cali,1_000\n"
            "4,Marta,Diaz,5551234,Cali,NaN\n"
            "5,Pedro,Paz,5551234,Cali,12.5\n",
            encoding="utf-8",
        )

        store = make_store(path)

        assert [p.id for p in store.get_all()] == [5]

    def test_blank_lines_and_extra_fields(self, tmp_path):
        """Blank lines are ignored; fields past the sixth are ignored."""
        path = tmp_path / "people.txt"
        path.write_text(
            "\n1,Ana,Lopez,5551234,Bogota,10,extra,stuff\n   \n",
            encoding="utf-8",
        )

        store = make_store(path)

        assert len(store) == 1
        assert store.get_by_id(1).balance == Decimal("10")

    def test_fields_are_trimmed(self, tmp_path):
        path = tmp_path / "people.txt"
        path.write_text(" 1 , Ana , Lopez , 5551234 , Bogota , 10.5 \n", encoding="utf-8")

        person = make_store(path).get_by_id(1)

        assert person.first_name == "Ana"
        assert person.city == "Bogota"
        assert person.balance == Decimal("10.5")

    def test_byte_order_mark_is_tolerated(self, tmp_path):
        path = tmp_path / "people.txt"
        path.write_bytes("1,Ana,Lopez,5551234,Bogota,10\n".encode("utf-8-sig"))

        assert make_store(path).get_by_id(1) is not None

    def test_rule_breaking_rows_are_dropped(self, tmp_path):
        """Parsable rows that break a field rule never enter the store."""
        path = tmp_path / "people.txt"
        path.write_text(
            "1,Ana,Lopez,5551234,Bogota,0\n"
            "2,,Lopez,5551234,Bogota,10\n"
            "3,Eva,Ruiz,12,Bogota,10\n"
            "4,Luis,Gomez,5551234,Cali,10\n",
            encoding="utf-8",
        )

        assert [p.id for p in make_store(path).get_all()] == [4]

    def test_duplicate_ids_keep_the_first(self, tmp_path):
        path = tmp_path / "people.txt"
        path.write_text(
            "1,Ana,Lopez,5551234,Bogota,10\n"
            "1,Eva,Ruiz,5551234,Cali,20\n",
            encoding="utf-8",
        )

        store = make_store(path)

        assert len(store) == 1
        assert store.get_by_id(1).first_name == "Ana"

    def test_load_replaces_current_contents(self, person_store):
        person_store.try_add(make_person(99))
        person_store.load_all()
        assert person_store.get_by_id(99) is None
        assert len(person_store) == 4

    def test_read_failure_raises(self, tmp_path):
        """A path that exists but can't be read as a file is fatal."""
        store = PersonStore(FlatFilePersonStorage(tmp_path))
        with pytest.raises(StorageReadError):
            store.load_all()


class TestSave:
    """Writing the people file."""

    def test_save_format(self, tmp_path):
        path = tmp_path / "people.txt"
        store = make_store(path)
        store.try_add(
            Person(
                id=1,
                first_name="Ana",
                last_name="Lopez",
                phone="5551234",
                city="Bogota",
                balance=Decimal("1000.50"),
            )
        )

        store.save_all()

        assert path.read_text(encoding="utf-8") == "1,Ana,Lopez,5551234,Bogota,1000.50\n"

    def test_balance_written_without_exponent(self, tmp_path):
        path = tmp_path / "people.txt"
        store = make_store(path)
        store.try_add(make_person(1, balance="1E+3"))

        store.save_all()

        assert path.read_text(encoding="utf-8").strip().endswith(",1000")

    def test_round_trip(self, person_store, data_dir):
        """Saving then reloading gives the same records in the same order."""
        before = person_store.get_all()
        person_store.save_all()

        reloaded = make_store(data_dir / "people.txt")

        assert reloaded.get_all() == before

    def test_nothing_written_before_save(self, person_store, data_dir):
        path = data_dir / "people.txt"
        original = path.read_text(encoding="utf-8")

        person_store.try_add(make_person(50))
        person_store.delete(1)

        assert path.read_text(encoding="utf-8") == original

    def test_save_empty_registry_truncates(self, person_store, data_dir):
        for person in person_store.get_all():
            person_store.delete(person.id)

        person_store.save_all()

        assert (data_dir / "people.txt").read_text(encoding="utf-8") == ""

    def test_write_failure_raises(self, tmp_path):
        store = PersonStore(FlatFilePersonStorage(tmp_path / "missing" / "people.txt"))
        store.try_add(make_person(1))
        with pytest.raises(StorageWriteError):
            store.save_all()


class TestQueries:
    """Read access to the registry."""

    def test_get_all_keeps_load_order(self, person_store):
        assert [p.id for p in person_store.get_all()] == [1, 2, 3, 4]

    def test_get_all_is_a_snapshot(self, person_store):
        """Callers cannot grow the registry through the returned value."""
        people = person_store.get_all()
        with pytest.raises(AttributeError):
            people.append(make_person(99))
        assert len(person_store) == 4

    def test_get_by_id_missing(self, person_store):
        assert person_store.get_by_id(404) is None


class TestAdd:
    """try_add."""

    def test_add_appends(self, person_store):
        result = person_store.try_add(make_person(5))

        assert result.is_valid
        assert person_store.get_all()[-1].id == 5
        assert person_store.get_by_id(5) == make_person(5)

    def test_invalid_id_leaves_store_unchanged(self, person_store):
        result = person_store.try_add(make_person(0))

        assert not result.is_valid
        assert result.reason == "ID must be a positive integer."
        assert len(person_store) == 4

    def test_duplicate_id_rejected(self, person_store):
        result = person_store.try_add(make_person(1))

        assert result.reason == "A person with ID 1 already exists."
        assert person_store.get_by_id(1).first_name == "Ana"

    @pytest.mark.parametrize("overrides", [
        {"city": "Bogota, DC"},
        {"last_name": "Lopez, Jr", "city": "99"},
    ])
    def test_comma_in_field_rejected(self, tmp_path, overrides):
        """A record that could not be read back is never accepted."""
        path = tmp_path / "people.txt"
        store = make_store(path)
        fields = dict(
            id=1,
            first_name="Ana",
            last_name="Lopez",
            phone="5551234",
            city="Bogota",
            balance=Decimal("10"),
        )
        fields.update(overrides)

        result = store.try_add(Person(**fields))
        store.save_all()

        assert not result.is_valid
        assert "cannot contain ','" in result.reason
        assert make_store(path).get_all() == store.get_all() == ()

    def test_accepted_records_round_trip(self, tmp_path):
        path = tmp_path / "people.txt"
        store = make_store(path)
        store.try_add(make_person(1, city="Bogota DC"))
        store.save_all()

        assert make_store(path).get_all() == store.get_all()


class TestUpdate:
    """try_update."""

    def test_update_replaces_in_place(self, person_store):
        result = person_store.try_update(2, PersonUpdate(city="Cali", balance=Decimal("300")))

        assert result.is_valid
        updated = person_store.get_by_id(2)
        assert updated.city == "Cali"
        assert updated.balance == Decimal("300")
        assert updated.first_name == "Luis"
        assert [p.id for p in person_store.get_all()] == [1, 2, 3, 4]

    def test_update_with_comma_rejected(self, person_store):
        before = person_store.get_by_id(2)

        result = person_store.try_update(2, PersonUpdate(city="Cali, Valle"))

        assert result.reason == "City cannot contain ','."
        assert person_store.get_by_id(2) == before

    def test_failed_update_leaves_record_untouched(self, person_store):
        before = person_store.get_by_id(2)

        result = person_store.try_update(
            2, PersonUpdate(city="Cali", balance=Decimal("-5"))
        )

        assert result.reason == "Balance must be greater than zero."
        assert person_store.get_by_id(2) == before

    def test_empty_update_keeps_record(self, person_store):
        before = person_store.get_by_id(3)
        assert person_store.try_update(3, PersonUpdate()).is_valid
        assert person_store.get_by_id(3) == before

    def test_unknown_id(self, person_store):
        result = person_store.try_update(404, PersonUpdate(city="Cali"))

        assert not result.is_valid
        assert result.issue.issue_type == "not_found"
        assert len(person_store) == 4


class TestDelete:
    """delete."""

    def test_delete_existing(self, person_store):
        assert person_store.delete(2) is True
        assert person_store.get_by_id(2) is None
        assert [p.id for p in person_store.get_all()] == [1, 3, 4]

    def test_delete_missing_is_a_no_op(self, person_store):
        assert person_store.delete(404) is False
        assert len(person_store) == 4


class TestGrouping:
    """grouped_by_city and total_balance."""

    def test_groups_sorted_by_label(self, person_store):
        groups = person_store.grouped_by_city()
        assert [g.city for g in groups] == ["Bogota", "Medellin", "NO CITY"]

    def test_registry_order_kept_inside_group(self, person_store):
        bogota = person_store.grouped_by_city()[0]
        assert [p.id for p in bogota.people] == [1, 4]
        assert bogota.total == Decimal("1010.50")

    def test_blank_city_uses_no_city_label(self, person_store):
        no_city = person_store.grouped_by_city()[-1]
        assert [p.id for p in no_city.people] == [3]

    def test_custom_no_city_label(self, data_dir):
        store = make_store(data_dir / "people.txt", no_city_label="(none)")
        assert "(none)" in [g.city for g in store.grouped_by_city()]

    def test_group_totals_sum_to_grand_total(self, person_store):
        groups = person_store.grouped_by_city()
        assert sum((g.total for g in groups), Decimal("0")) == person_store.total_balance()
        assert person_store.total_balance() == Decimal("1335.75")

    def test_ordinal_sort(self, tmp_path):
        """Upper-case labels sort before lower-case ones."""
        store = make_store(tmp_path / "people.txt")
        for person_id, city in enumerate(["medellin", "Cali", "Bogota"], start=1):
            store.try_add(make_person(person_id, city=city))

        assert [g.city for g in store.grouped_by_city()] == ["Bogota", "Cali", "medellin"]

    def test_empty_registry(self, tmp_path):
        store = make_store(tmp_path / "people.txt")
        assert store.grouped_by_city() == []
        assert store.total_balance() == Decimal("0")
