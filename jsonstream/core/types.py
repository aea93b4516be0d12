"""Shared type aliases for jsonstream."""

from collections.abc import Callable
from typing import Any

Record = dict[str, Any]
"""A single JSON object flowing through the pipeline."""

RecordMapper = Callable[[Any], Any]
"""Function applied to every element of a top-level JSON array."""

Chunk = bytes | str
"""A contiguous span delivered by a reader; not aligned to JSON values."""
