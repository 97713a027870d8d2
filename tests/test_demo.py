"""Smoke tests for the command line entry point."""

import json
from pathlib import Path

import pytest

from demo import main, read_schema_file, save_mocks

USER_SCHEMA = str(Path(__file__).resolve().parent.parent / "schemas" / "user.json")


def test_generates_and_saves(tmp_path):
    out = tmp_path / "mocks"
    code = main([
        "--schema", USER_SCHEMA,
        "--count", "2",
        "--seed", "7",
        "--output-dir", str(out),
    ])

    assert code == 0
    files = sorted(out.glob("*.json"))
    assert len(files) == 2

    payload = json.loads(files[0].read_text(encoding="utf-8"))
    assert payload["seed"] == 7
    assert "email" in payload["data"]


def test_seeded_runs_write_identical_files(tmp_path):
    for run in ("a", "b"):
        assert main(["--schema", USER_SCHEMA, "--seed", "3", "--output-dir", str(tmp_path / run)]) == 0

    names_a = sorted(p.name for p in (tmp_path / "a").iterdir())
    names_b = sorted(p.name for p in (tmp_path / "b").iterdir())
    assert names_a == names_b


def test_named_definition_and_yaml(tmp_path):
    schema = tmp_path / "item.yaml"
    schema.write_text(
        "definitions:\n"
        "  Item:\n"
        "    type: object\n"
        "    required: [sku]\n"
        "    properties:\n"
        "      sku: {type: string, pattern: '[A-Z]{3}'}\n",
        encoding="utf-8",
    )
    assert main(["--schema", str(schema), "--definition", "Item", "--count", "1"]) == 0


def test_list_generators():
    assert main(["--list-generators"]) == 0


def test_missing_schema_argument():
    assert main([]) == 2


def test_unreadable_schema(tmp_path):
    assert main(["--schema", str(tmp_path / "missing.json")]) == 1
    empty = tmp_path / "empty.json"
    empty.write_text("", encoding="utf-8")
    assert main(["--schema", str(empty)]) == 1


def test_unknown_definition():
    assert main(["--schema", USER_SCHEMA, "--definition", "Nope"]) == 1


def test_strict_mode_fails_on_untyped_fields(tmp_path):
    schema = tmp_path / "loose.json"
    schema.write_text(json.dumps({"type": "object", "required": ["blob"], "properties": {"blob": {}}}))
    assert main(["--schema", str(schema), "--strict"]) == 1
    assert main(["--schema", str(schema)]) == 0


def test_read_schema_file_rejects_bad_yaml(tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("a: [1, 2", encoding="utf-8")
    with pytest.raises(ValueError):
        read_schema_file(bad)


def test_save_mocks_uses_stable_names(tmp_path):
    first = save_mocks(tmp_path / "one", [{"a": 1}, {"a": 2}], seed=1)
    second = save_mocks(tmp_path / "two", [{"a": 1}, {"a": 2}], seed=1)
    assert [p.name for p in first] == [p.name for p in second]
