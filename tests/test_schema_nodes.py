"""Tests for schema builders and structural validation."""

from datetime import datetime
from enum import Enum

import pytest

import schema_nodes as s
from type import ABSENT, SchemaValidationError, TypeTag


class Level(Enum):
    LOW = "low"
    HIGH = "high"


def test_builders_never_mutate():
    base = s.string()
    bounded = base.min(2).max(5)

    assert base.checks == ()
    assert [c.kind for c in bounded.checks] == ["min", "max"]
    assert bounded.check("max").value == 5


def test_last_check_of_a_kind_wins():
    node = s.number().min(1).min(7)
    assert node.check("min").value == 7


def test_wrappers_and_unwrap():
    node = s.string().optional()
    assert node.tag == TypeTag.OPTIONAL
    assert node.unwrap().tag == TypeTag.STRING

    with pytest.raises(TypeError):
        s.string().unwrap()


def test_with_rest_only_on_tuples():
    with pytest.raises(TypeError):
        s.array(s.string()).with_rest(s.string())


def test_discriminated_union_requires_the_discriminator():
    with pytest.raises(ValueError):
        s.discriminated_union("kind", [s.obj(other=s.string())])


def test_empty_enum_and_union_rejected():
    with pytest.raises(ValueError):
        s.enum([])
    with pytest.raises(ValueError):
        s.union([])


def test_default_values_are_copied():
    node = s.array(s.string()).default(["a"])
    first = node.default_factory()
    first.append("b")
    assert node.default_factory() == ["a"]


def test_record_shorthand_uses_string_keys():
    node = s.record(s.number())
    assert node.key.tag == TypeTag.STRING
    assert node.value.tag == TypeTag.NUMBER


class TestValidation:

    def test_object(self):
        schema = s.obj(
            name=s.string().min(1),
            age=s.number().int().gte(0),
            nickname=s.string().optional(),
        )

        assert schema.safe_parse({"name": "Ada", "age": 36}).success

        result = schema.safe_parse({"name": "", "age": 1.5})
        assert not result.success
        assert [issue.path for issue in result.issues] == [["name"], ["age"]]

    def test_missing_required_field(self):
        result = s.obj(name=s.string()).safe_parse({})
        assert result.issues[0].message == "Required"

    def test_string_formats(self):
        assert not s.string().email().safe_parse("nope").success
        assert s.string().email().safe_parse("a@b.io").success
        assert s.string().url().safe_parse("https://example.com").success
        assert not s.string().uuid().safe_parse("1234").success
        assert s.string().datetime().safe_parse("2024-01-01T10:00:00Z").success
        assert s.string().regex(r"^\d+$").safe_parse("123").success

    def test_number_rejects_booleans_and_nan(self):
        assert not s.number().safe_parse(True).success
        assert not s.number().safe_parse(float("nan")).success
        assert s.nan().safe_parse(float("nan")).success

    def test_exclusive_bounds(self):
        assert not s.number().gt(0).safe_parse(0).success
        assert s.number().gte(0).safe_parse(0).success

    def test_collections(self):
        assert s.array(s.number()).max(2).safe_parse([1, 2]).success
        assert not s.array(s.number()).max(2).safe_parse([1, 2, 3]).success
        assert s.set_of(s.string()).safe_parse({"a"}).success
        assert not s.set_of(s.string()).safe_parse(("a",)).success
        assert not s.set_of(s.obj(a=s.number())).safe_parse([{"a": 1}, {"a": 1}]).success
        assert s.set_of(s.obj(a=s.number())).safe_parse([{"a": 1}, {"a": 2}]).success
        assert s.record(s.boolean()).safe_parse({"x": True}).success
        assert not s.map_of(s.number(), s.string()).safe_parse({"1": "a"}).success

    def test_tuple(self):
        pair = s.tuple_of([s.string(), s.number()])
        assert pair.safe_parse(("a", 1)).success
        assert not pair.safe_parse(("a", 1, 2)).success
        assert pair.with_rest(s.number()).safe_parse(("a", 1, 2, 3)).success

    def test_unions_and_members(self):
        assert s.union([s.string(), s.number()]).safe_parse(3).success
        assert not s.union([s.string(), s.number()]).safe_parse(None).success
        assert s.enum(["a", "b"]).safe_parse("b").success
        assert s.native_enum(Level).safe_parse(Level.HIGH).success
        assert s.native_enum(Level).safe_parse("low").success

    def test_literal_checks_type(self):
        assert s.literal(1).safe_parse(1).success
        assert not s.literal(1).safe_parse(True).success

    def test_wrappers(self):
        assert s.string().nullable().safe_parse(None).success
        assert s.string().optional().safe_parse(ABSENT).success
        assert s.string().default("x").safe_parse(ABSENT).success
        assert s.void().safe_parse(ABSENT).success
        assert not s.void().safe_parse("x").success

    def test_dates(self):
        window = s.date().min(datetime(2020, 1, 1)).max(datetime(2021, 1, 1))
        assert window.safe_parse(datetime(2020, 6, 1)).success
        assert not window.safe_parse(datetime(2022, 6, 1)).success
        assert not window.safe_parse("2020-06-01").success

    def test_lazy_resolves_on_validation(self):
        node = s.lazy(lambda: s.number())
        assert node.safe_parse(1).success
        assert not node.safe_parse("1").success

    def test_parse_raises(self):
        with pytest.raises(SchemaValidationError) as exc:
            s.obj(age=s.number()).parse({"age": "old"})

        assert exc.value.issues[0].path == ["age"]
        assert "age: Expected number, received str" in str(exc.value)

    def test_custom_tags_accept_anything(self):
        assert s.custom("money").safe_parse(object()).success
