"""Tests for helper functions."""

from datetime import datetime

import pytest

from type import ABSENT, ResolvedPromise
from utils import normalize_key, safe_mkdir, seed_to_int, stable_hash, to_jsonable


class TestNormalizeKey:

    @pytest.mark.parametrize("name", ["first_name", "First-Name", "firstName", "first name"])
    def test_separators_and_case_are_ignored(self, name):
        assert normalize_key(name) == "firstname"


class TestSeedToInt:

    def test_int_passes_through(self):
        assert seed_to_int(123) == 123

    def test_sequence_is_folded_stably(self):
        assert seed_to_int([1, 2, 3]) == seed_to_int((1, 2, 3))
        assert seed_to_int([1, 2, 3]) != seed_to_int([3, 2, 1])

    def test_bool_is_rejected(self):
        with pytest.raises(TypeError):
            seed_to_int(True)


def test_stable_hash_is_deterministic():
    assert stable_hash("a", {"b": 1}) == stable_hash("a", {"b": 1})
    assert len(stable_hash("a")) == 16


def test_safe_mkdir_creates_nested_dirs(tmp_path):
    target = safe_mkdir(str(tmp_path / "a" / "b"))
    assert target.is_dir()


def test_to_jsonable_handles_generated_values():
    value = {
        "missing": ABSENT,
        "when": datetime(2024, 1, 2, 3, 4, 5),
        "tags": {"b", "a"},
        "pair": (1, True),
        "nan": float("nan"),
        "later": ResolvedPromise(5),
    }

    out = to_jsonable(value)

    assert "missing" not in out
    assert out["when"] == "2024-01-02T03:04:05"
    assert out["tags"] == ["a", "b"]
    assert out["pair"] == [1, True]
    assert out["nan"] is None
    assert out["later"] == 5
