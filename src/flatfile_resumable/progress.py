"""Checkpoint persistence (save/load an execution context to disk)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from .context import ExecutionContext

# Checkpoint file format version
FORMAT_VERSION = "1.0"


def save_context(checkpoint_path: Path, context: ExecutionContext) -> None:
    """Save all context entries to disk in JSON format.

    Clears the context's dirty flag once written.

    Args:
        checkpoint_path: Where to save the checkpoint file
        context: The context to persist
    """
    data = {
        "format_version": FORMAT_VERSION,
        "entries": context.to_dict(),
    }

    with open(checkpoint_path, "w", encoding="utf-8") as f:
        json.dump(data, f, separators=(",", ":"))

    context.clear_dirty_flag()


def load_context(checkpoint_path: Path) -> ExecutionContext | None:
    """Load a context from disk.

    Args:
        checkpoint_path: Path to the checkpoint file

    Returns:
        The stored ExecutionContext, or None if load fails
    """
    try:
        with open(checkpoint_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        if data.get("format_version") != FORMAT_VERSION:
            return None

        return ExecutionContext(data.get("entries", {}))

    except (json.JSONDecodeError, AttributeError, TypeError, FileNotFoundError):
        return None


def update_context_key(checkpoint_path: Path, key: str, value: int) -> None:
    """Update a single entry, preserving all other entries in the file.

    Args:
        checkpoint_path: Path to the checkpoint file
        key: The context key to write
        value: The integer value to store
    """
    context = load_context(checkpoint_path) or ExecutionContext()
    context.put_int(key, value)
    save_context(checkpoint_path, context)


def delete_context_keys(checkpoint_path: Path, keys: Iterable[str]) -> int:
    """Delete entries from the checkpoint file.

    Args:
        checkpoint_path: Path to the checkpoint file
        keys: The context keys to delete

    Returns:
        Number of entries that were found and deleted
    """
    context = load_context(checkpoint_path)
    if context is None:
        return 0

    deleted = sum(1 for key in keys if context.remove(key) is not None)
    if deleted:
        save_context(checkpoint_path, context)
    return deleted
