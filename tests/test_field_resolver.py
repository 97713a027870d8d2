"""Tests for field-name heuristics."""

from datetime import datetime

from faker import Faker
import pytest

from field_resolver import (
    CATALOG,
    PRIMITIVE_DOMAINS,
    default_mockery_mapper,
    find_matching_generator,
)


@pytest.fixture
def faker() -> Faker:
    f = Faker("en_US")
    f.seed_instance(0)
    return f


@pytest.mark.parametrize("key_name", ["first_name", "firstName", "First-Name", "jobTitle", "company_name", "street_address"])
def test_catalog_matches_normalized_names(faker, key_name):
    generator = find_matching_generator(key_name, faker)
    assert generator is not None
    assert isinstance(generator(), str)


@pytest.mark.parametrize("key_name", ["lorem", "shuffle", "seed", "notAField", "words", "profile"])
def test_unknown_or_non_primitive_names_resolve_to_nothing(faker, key_name):
    assert find_matching_generator(key_name, faker) is None


def test_default_mapper_is_consulted_first(faker):
    assert isinstance(default_mockery_mapper("Number", faker)(), int)
    assert isinstance(find_matching_generator("boolean", faker)(), bool)
    assert isinstance(find_matching_generator("city", faker)(), str)


def test_custom_mapper_wins(faker):

    def mapper(key_name, faker):
        if key_name == "city":
            return lambda: "Gotham"
        return None

    assert find_matching_generator("city", faker, mapper)() == "Gotham"
    # falls through to the catalog when the mapper has nothing
    assert find_matching_generator("last_name", faker, mapper) is not None


def test_catalog_entries_declare_a_domain():
    for entry in CATALOG:
        assert entry.domain in PRIMITIVE_DOMAINS | {"list", "bytes", "mapping"}


DATED_NAMES = [
    "date_of_birth", "birthday", "date_time", "time", "year", "month",
    "month_name", "day_of_week", "iso8601", "unix_time", "timestamp",
    "credit_card_expire",
]


@pytest.mark.parametrize("key_name", DATED_NAMES)
def test_dated_entries_follow_the_reference_date(key_name):
    reference = datetime(2001, 3, 4, 5, 6, 7)

    values = []
    for _ in range(2):
        f = Faker("en_US")
        f.seed_instance(99)
        values.append(find_matching_generator(key_name, f, reference_date=reference)())

    assert values[0] == values[1]


def test_dated_entries_never_pass_the_reference_date(faker):
    reference = datetime(1999, 12, 31)

    assert find_matching_generator("date_time", faker, reference_date=reference)() <= reference
    assert find_matching_generator("birthday", faker, reference_date=reference)() <= reference.date()
    assert int(find_matching_generator("year", faker, reference_date=reference)()) <= 1999
    assert find_matching_generator("unix_time", faker, reference_date=reference)() <= 946684800
