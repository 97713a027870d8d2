"""
Field-name heuristics: a field called `city` or `first_name` should get a
city or a first name rather than a random word.

Lookup order:
    1. the mockery mapper (caller supplied, or `default_mockery_mapper`)
    2. the static CATALOG of named Faker generators, matched on the
       normalized field name, restricted to primitive value domains

Faker's date providers default to "now". Every one of them in the catalog
is pinned to a reference date instead, so a seed fixes their output too.
"""
from __future__ import annotations

import dataclasses as dc
import functools
from datetime import datetime, timedelta
from typing import Optional, Dict, Tuple, Callable, Any

from faker import Faker

from type import FakerFunction, MockeryMapper
from utils import normalize_key, start_of_today

PRIMITIVE_DOMAINS = frozenset({"string", "number", "boolean", "date"})

MAXIMUM_AGE_DAYS = 115 * 365
CARD_VALIDITY_DAYS = 10 * 365

@dc.dataclass(frozen=True)
class CatalogEntry:
    category: str
    name: str
    domain: str
    generate: Callable[[Faker, datetime], Any]

    @property
    def key(self) -> str:
        return normalize_key(self.name)

def _faker(
        category: str,
        name: str,
        domain: str = "string",
        method: Optional[str] = None,
) -> CatalogEntry:
    attr = method or name
    return CatalogEntry(
        category=category,
        name=name,
        domain=domain,
        generate=lambda f, ref: getattr(f, attr)(),
    )

def _dated(
        category: str,
        name: str,
        domain: str,
        generate: Callable[[Faker, datetime], Any],
) -> CatalogEntry:
    return CatalogEntry(category, name, domain, generate)

def _birth_date(f: Faker, ref: datetime) -> Any:
    return f.date_between_dates(ref - timedelta(days=MAXIMUM_AGE_DAYS), ref)

def _card_expiry(f: Faker, ref: datetime) -> str:
    expires = f.date_time_between_dates(ref, ref + timedelta(days=CARD_VALIDITY_DAYS))
    return expires.strftime("%m/%y")

CATALOG: Tuple[CatalogEntry, ...] = (
    # person
    _faker("person", "first_name"),
    _faker("person", "last_name"),
    _faker("person", "full_name", method="name"),
    _faker("person", "prefix"),
    _faker("person", "suffix"),
    _faker("person", "job"),
    _faker("person", "job_title", method="job"),
    _faker("person", "user_name"),
    _faker("person", "username", method="user_name"),
    _dated("person", "date_of_birth", "date", _birth_date),
    _dated("person", "birthday", "date", _birth_date),
    # internet
    _faker("internet", "safe_email"),
    _faker("internet", "free_email"),
    _faker("internet", "company_email"),
    _faker("internet", "domain_name"),
    _faker("internet", "domain_word"),
    _faker("internet", "hostname"),
    _faker("internet", "ipv4"),
    _faker("internet", "ipv6"),
    _faker("internet", "ip_address", method="ipv4"),
    _faker("internet", "mac_address"),
    _faker("internet", "uri"),
    _faker("internet", "slug"),
    _faker("internet", "user_agent"),
    _faker("internet", "password"),
    _faker("internet", "image_url"),
    _faker("internet", "avatar", method="image_url"),
    # location
    _faker("location", "address"),
    _faker("location", "street_address"),
    _faker("location", "street_name"),
    _faker("location", "building_number"),
    _faker("location", "city"),
    _faker("location", "state"),
    _faker("location", "country"),
    _faker("location", "country_code"),
    _faker("location", "postcode"),
    _faker("location", "zip_code", method="postcode"),
    _faker("location", "zipcode", method="postcode"),
    _faker("location", "latitude", "number"),
    _faker("location", "longitude", "number"),
    # company
    _faker("company", "company"),
    _faker("company", "company_name", method="company"),
    _faker("company", "company_suffix"),
    _faker("company", "catch_phrase"),
    _faker("company", "bs"),
    # phone
    _faker("phone", "msisdn"),
    # lorem
    _faker("lorem", "word"),
    _faker("lorem", "sentence"),
    _faker("lorem", "paragraph"),
    _faker("lorem", "text"),
    _faker("lorem", "description", method="paragraph"),
    _faker("lorem", "title", method="sentence"),
    _faker("lorem", "words", "list"),
    # date
    _dated("date", "date_time", "date", lambda f, ref: f.date_time(end_datetime=ref)),
    _dated("date", "time", "string", lambda f, ref: f.time(end_datetime=ref)),
    _dated("date", "year", "string", lambda f, ref: f.date("%Y", end_datetime=ref)),
    _dated("date", "month", "string", lambda f, ref: f.date("%m", end_datetime=ref)),
    _dated("date", "month_name", "string", lambda f, ref: f.date("%B", end_datetime=ref)),
    _dated("date", "day_of_week", "string", lambda f, ref: f.date("%A", end_datetime=ref)),
    _faker("date", "timezone"),
    _dated("date", "iso8601", "string", lambda f, ref: f.iso8601(end_datetime=ref)),
    _dated("date", "unix_time", "number", lambda f, ref: f.unix_time(end_datetime=ref)),
    _dated("date", "timestamp", "number", lambda f, ref: f.unix_time(end_datetime=ref)),
    # finance
    _faker("finance", "iban"),
    _faker("finance", "bban"),
    _faker("finance", "swift"),
    _faker("finance", "currency_code"),
    _faker("finance", "currency_name"),
    _faker("finance", "currency", method="currency_code"),
    _faker("finance", "credit_card_number"),
    _faker("finance", "credit_card_provider"),
    _dated("finance", "credit_card_expire", "string", _card_expiry),
    _faker("finance", "price", method="pricetag"),
    # color
    _faker("color", "color_name"),
    _faker("color", "hex_color"),
    _faker("color", "rgb_color"),
    _faker("color", "safe_color_name"),
    # file
    _faker("file", "file_name"),
    _faker("file", "file_extension"),
    _faker("file", "file_path"),
    _faker("file", "mime_type"),
    # misc
    _faker("misc", "uuid4"),
    _faker("misc", "md5"),
    _faker("misc", "sha1"),
    _faker("misc", "sha256"),
    _faker("misc", "locale"),
    _faker("misc", "language_code"),
    _faker("misc", "language_name"),
    _faker("misc", "binary", "bytes"),
    _faker("misc", "profile", "mapping"),
)

def _index(catalog: Tuple[CatalogEntry, ...]) -> Dict[str, CatalogEntry]:
    index: Dict[str, CatalogEntry] = {}
    for entry in catalog:
        if entry.domain not in PRIMITIVE_DOMAINS:
            continue
        # first declared entry wins
        index.setdefault(entry.key, entry)
    return index

_CATALOG_INDEX = _index(CATALOG)

def default_mockery_mapper(
        key_name: str,
        faker: Faker,
) -> Optional[FakerFunction]:

    key_to_fn: Dict[str, FakerFunction] = {
        "image": faker.image_url,
        "imageurl": faker.image_url,
        "number": faker.pyint,
        "float": faker.pyfloat,
        "hexadecimal": functools.partial(faker.hexify, "0x^^^^^^^^"),
        "uuid": faker.uuid4,
        "boolean": faker.pybool,
        "city": faker.city,
    }

    if not key_name:
        return None

    return key_to_fn.get(key_name.lower())

def find_matching_generator(
        key_name: str,
        faker: Faker,
        mockery_mapper: Optional[MockeryMapper] = None,
        reference_date: Optional[datetime] = None,
) -> Optional[FakerFunction]:

    mapper = mockery_mapper or default_mockery_mapper
    mapped = mapper(key_name, faker)
    if mapped:
        return mapped

    lowered = key_name.lower()
    entry = _CATALOG_INDEX.get(lowered) or _CATALOG_INDEX.get(normalize_key(key_name))
    if entry is None:
        return None

    return functools.partial(
        entry.generate,
        faker,
        reference_date or start_of_today(),
    )
