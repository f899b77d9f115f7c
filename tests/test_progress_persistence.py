"""Tests for checkpoint persistence (save/load execution contexts)."""

import json
from pathlib import Path

import pytest

from flatfile_resumable import BytesResource, ExecutionContext, FlatFileItemReader
from flatfile_resumable.progress import (
    FORMAT_VERSION,
    delete_context_keys,
    load_context,
    save_context,
    update_context_key,
)


@pytest.fixture
def sample_context() -> ExecutionContext:
    """Create sample ExecutionContext for testing."""
    return ExecutionContext(
        {
            "orders.read.count": 500,
            "orders.read.count.max": 1000,
            "refunds.read.count": 12,
        }
    )


class TestSaveContext:
    """Tests for save_context function."""

    def test_saves_valid_json(self, tmp_path: Path, sample_context: ExecutionContext):
        """Saved checkpoint is valid JSON."""
        checkpoint_path = tmp_path / "test.checkpoint"
        save_context(checkpoint_path, sample_context)

        with open(checkpoint_path) as f:
            data = json.load(f)

        assert data["format_version"] == FORMAT_VERSION
        assert data["entries"] == sample_context.to_dict()

    def test_uses_compact_json(self, tmp_path: Path, sample_context: ExecutionContext):
        """JSON is written without extra whitespace."""
        checkpoint_path = tmp_path / "test.checkpoint"
        save_context(checkpoint_path, sample_context)

        content = checkpoint_path.read_text()
        assert ": " not in content
        assert ", " not in content

    def test_clears_dirty_flag(self, tmp_path: Path):
        """Saving marks the context clean."""
        context = ExecutionContext()
        context.put_int("a.read.count", 1)
        assert context.dirty

        save_context(tmp_path / "test.checkpoint", context)
        assert not context.dirty

    def test_overwrites_existing(self, tmp_path: Path, sample_context: ExecutionContext):
        """Can overwrite an existing checkpoint file."""
        checkpoint_path = tmp_path / "test.checkpoint"
        checkpoint_path.write_text("old content")

        save_context(checkpoint_path, sample_context)
        assert load_context(checkpoint_path) == sample_context

    def test_empty_context(self, tmp_path: Path):
        """Handles an empty context."""
        checkpoint_path = tmp_path / "test.checkpoint"
        save_context(checkpoint_path, ExecutionContext())

        with open(checkpoint_path) as f:
            data = json.load(f)

        assert data["entries"] == {}


class TestLoadContext:
    """Tests for load_context function."""

    def test_loads_saved_context(self, tmp_path: Path, sample_context: ExecutionContext):
        """Can load a saved context."""
        checkpoint_path = tmp_path / "test.checkpoint"
        save_context(checkpoint_path, sample_context)

        result = load_context(checkpoint_path)

        assert result is not None
        assert result.get_int("orders.read.count") == 500
        assert result.get_int("orders.read.count.max") == 1000
        assert not result.dirty

    def test_missing_file_returns_none(self, tmp_path: Path):
        """Returns None for missing file."""
        assert load_context(tmp_path / "missing.checkpoint") is None

    def test_invalid_json_returns_none(self, tmp_path: Path):
        """Returns None for invalid JSON."""
        checkpoint_path = tmp_path / "invalid.checkpoint"
        checkpoint_path.write_text("not valid json {{{")

        assert load_context(checkpoint_path) is None

    def test_wrong_version_returns_none(self, tmp_path: Path):
        """Returns None for wrong format version."""
        checkpoint_path = tmp_path / "old.checkpoint"
        checkpoint_path.write_text(json.dumps({"format_version": "0.1", "entries": {}}))

        assert load_context(checkpoint_path) is None

    def test_missing_entries_returns_empty(self, tmp_path: Path):
        """Returns an empty context when the entries section is missing."""
        checkpoint_path = tmp_path / "no_entries.checkpoint"
        checkpoint_path.write_text(json.dumps({"format_version": FORMAT_VERSION}))

        result = load_context(checkpoint_path)
        assert result is not None
        assert len(result) == 0

    def test_non_integer_entry_returns_none(self, tmp_path: Path):
        """Returns None when an entry is not an integer."""
        checkpoint_path = tmp_path / "bad.checkpoint"
        data = {"format_version": FORMAT_VERSION, "entries": {"a.read.count": "12"}}
        checkpoint_path.write_text(json.dumps(data))

        assert load_context(checkpoint_path) is None

    def test_non_object_returns_none(self, tmp_path: Path):
        """Returns None when the file holds something other than an object."""
        checkpoint_path = tmp_path / "list.checkpoint"
        checkpoint_path.write_text("[1, 2, 3]")

        assert load_context(checkpoint_path) is None

    def test_empty_file_returns_none(self, tmp_path: Path):
        """Returns None for empty file."""
        checkpoint_path = tmp_path / "empty.checkpoint"
        checkpoint_path.write_text("")

        assert load_context(checkpoint_path) is None


class TestUpdateContextKey:
    """Tests for update_context_key function."""

    def test_creates_new_file(self, tmp_path: Path):
        """Creates checkpoint file if it doesn't exist."""
        checkpoint_path = tmp_path / "new.checkpoint"

        update_context_key(checkpoint_path, "orders.read.count", 3)

        result = load_context(checkpoint_path)
        assert result is not None
        assert result.get_int("orders.read.count") == 3

    def test_preserves_other_entries(
        self, tmp_path: Path, sample_context: ExecutionContext
    ):
        """Updating one entry doesn't affect others."""
        checkpoint_path = tmp_path / "test.checkpoint"
        save_context(checkpoint_path, sample_context)

        update_context_key(checkpoint_path, "orders.read.count", 999)

        result = load_context(checkpoint_path)
        assert result is not None
        assert result.get_int("orders.read.count") == 999
        assert result.get_int("refunds.read.count") == 12


class TestDeleteContextKeys:
    """Tests for delete_context_keys function."""

    def test_deletes_existing_keys(self, tmp_path: Path, sample_context: ExecutionContext):
        """Deletes the given keys and keeps the rest."""
        checkpoint_path = tmp_path / "test.checkpoint"
        save_context(checkpoint_path, sample_context)

        deleted = delete_context_keys(
            checkpoint_path, ["orders.read.count", "orders.read.count.max"]
        )

        assert deleted == 2
        loaded = load_context(checkpoint_path)
        assert loaded is not None
        assert loaded.to_dict() == {"refunds.read.count": 12}

    def test_returns_zero_for_missing_keys(
        self, tmp_path: Path, sample_context: ExecutionContext
    ):
        """Returns 0 when no key exists."""
        checkpoint_path = tmp_path / "test.checkpoint"
        save_context(checkpoint_path, sample_context)

        assert delete_context_keys(checkpoint_path, ["nonexistent"]) == 0

    def test_returns_zero_for_missing_file(self, tmp_path: Path):
        """Returns 0 when file doesn't exist."""
        assert delete_context_keys(tmp_path / "missing.checkpoint", ["a"]) == 0


class TestExecutionContext:
    """Tests for the in-memory context."""

    def test_get_and_put(self):
        context = ExecutionContext()
        context.put_int("a", 1)
        context["b"] = 2

        assert context.get_int("a") == 1
        assert context["b"] == 2
        assert "a" in context
        assert context.contains_key("b")
        assert sorted(context) == ["a", "b"]

    def test_get_missing_key(self):
        context = ExecutionContext()
        with pytest.raises(KeyError):
            context.get_int("missing")
        assert context.get_int("missing", 7) == 7

    def test_rejects_non_integers(self):
        context = ExecutionContext()
        with pytest.raises(TypeError):
            context.put_int("a", "1")  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            context.put_int("a", True)

    def test_dirty_flag(self):
        context = ExecutionContext({"a": 1})
        assert not context.dirty

        context.put_int("a", 1)
        assert not context.dirty

        context.put_int("a", 2)
        assert context.dirty

        context.clear_dirty_flag()
        context.remove("a")
        assert context.dirty

    def test_remove(self):
        context = ExecutionContext({"a": 1})
        assert context.remove("a") == 1
        assert context.remove("a") is None
        assert len(context) == 0


class TestResumeThroughFile:
    """A reader checkpoint survives a save/load cycle."""

    def test_resume_from_saved_context(self, tmp_path: Path):
        checkpoint_path = tmp_path / "job.checkpoint"
        data = "a\nb\nc\nd\n"

        context = ExecutionContext()
        reader = FlatFileItemReader(BytesResource(data), name="letters")
        reader.open(context)
        reader.read()
        reader.read()
        reader.update(context)
        reader.close()
        save_context(checkpoint_path, context)

        restored = load_context(checkpoint_path)
        assert restored is not None

        reader = FlatFileItemReader(BytesResource(data), name="letters")
        reader.open(restored)
        assert list(reader) == ["c", "d"]
