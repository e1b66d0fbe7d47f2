"""Unit tests for atomic file I/O."""

import json
import pytest

from tasktrack.data.io import atomic_write, load_model, load_yaml_file, DATA_JSON, DATA_TEXT
from tasktrack.models import Project
from tasktrack.recovery import CorruptionError, FatalError


def _leftover_temp_files(directory):
    return [p for p in directory.iterdir() if p.name.endswith(".tmp")]


class TestAtomicWrite:
    """Test atomic_write for each data format."""

    def test_write_json(self, tmp_path):
        target = tmp_path / "record.json"
        assert atomic_write(DATA_JSON, target, {"name": "ünïcode", "n": 1})
        assert json.loads(target.read_text(encoding="utf-8")) == {"name": "ünïcode", "n": 1}
        assert _leftover_temp_files(tmp_path) == []

    def test_write_text(self, tmp_path):
        target = tmp_path / "plan.md"
        atomic_write(DATA_TEXT, target, "# Plan\n")
        assert target.read_text() == "# Plan\n"

    def test_replaces_existing_content(self, tmp_path):
        target = tmp_path / "record.json"
        atomic_write(DATA_JSON, target, {"version": 1})
        atomic_write(DATA_JSON, target, {"version": 2})
        assert json.loads(target.read_text()) == {"version": 2}

    def test_create_dirs(self, tmp_path):
        target = tmp_path / "a" / "b" / "record.json"
        atomic_write(DATA_JSON, target, {}, create_dirs=True)
        assert target.exists()

    def test_unserializable_data_is_fatal(self, tmp_path):
        """A failed serialization keeps the old file and leaves no temp file."""
        target = tmp_path / "record.json"
        atomic_write(DATA_JSON, target, {"ok": True})

        with pytest.raises(FatalError, match="serialization failed"):
            atomic_write(DATA_JSON, target, {"bad": object()})

        assert json.loads(target.read_text()) == {"ok": True}
        assert _leftover_temp_files(tmp_path) == []

    def test_unsupported_format(self, tmp_path):
        with pytest.raises(FatalError, match="Unsupported Data Format"):
            atomic_write(99, tmp_path / "x", {})
        assert _leftover_temp_files(tmp_path) == []


class TestLoadModel:
    """Test loading records into models."""

    def test_missing_file(self, tmp_path):
        assert load_model(Project, tmp_path / "missing.json") is None

    def test_valid_record(self, tmp_path):
        target = tmp_path / "p.json"
        target.write_text(json.dumps({
            "name": "p", "status": "active", "created": "2024-01-01",
            "updated": "2024-01-01", "tasks": [],
        }))
        project = load_model(Project, target)
        assert project.name == "p"

    def test_invalid_json(self, tmp_path):
        target = tmp_path / "p.json"
        target.write_text("{not json")
        with pytest.raises(CorruptionError):
            load_model(Project, target)

    def test_wrong_shape(self, tmp_path):
        target = tmp_path / "p.json"
        target.write_text(json.dumps({"name": "p", "status": "unknown"}))
        with pytest.raises(CorruptionError):
            load_model(Project, target)


class TestLoadYamlFile:

    def test_missing(self, tmp_path):
        assert load_yaml_file(tmp_path / "nope.yml") is None

    def test_empty_file_is_empty_dict(self, tmp_path):
        target = tmp_path / "empty.yml"
        target.write_text("")
        assert load_yaml_file(target) == {}

    def test_not_a_mapping(self, tmp_path):
        target = tmp_path / "list.yml"
        target.write_text("- a\n- b\n")
        with pytest.raises(CorruptionError):
            load_yaml_file(target)

    def test_syntax_error(self, tmp_path):
        target = tmp_path / "bad.yml"
        target.write_text("key: [unclosed\n")
        with pytest.raises(CorruptionError):
            load_yaml_file(target)
