"""Record mapper factories."""

from typing import Any

from jsonstream.core.types import Record, RecordMapper

_MISSING_POLICIES = ("skip", "null", "error")


def select_fields(*fields: str, missing: str = "skip") -> RecordMapper:
    """
    Build a mapper that keeps only the given keys of each record.

    Args:
        *fields: Keys to keep, in output order.
        missing: What to do when a record lacks a key.
            - "skip": leave the key out (default)
            - "null": emit the key with None
            - "error": raise KeyError

    Returns:
        A mapper function.

    Example:
        >>> select_fields("id", "title")({"id": 1, "title": "A", "extra": "x"})
        {'id': 1, 'title': 'A'}
    """
    if not fields:
        raise ValueError("select_fields requires at least one field name")
    if missing not in _MISSING_POLICIES:
        raise ValueError(
            f"Unknown missing policy: {missing}. "
            f"Supported: {', '.join(_MISSING_POLICIES)}"
        )

    def mapper(record: Any) -> Record:
        if not isinstance(record, dict):
            raise TypeError(
                f"Expected a JSON object, got {type(record).__name__}"
            )
        out: Record = {}
        for key in fields:
            if key in record:
                out[key] = record[key]
            elif missing == "null":
                out[key] = None
            elif missing == "error":
                raise KeyError(key)
        return out

    mapper.__name__ = f"select_fields({', '.join(fields)})"
    return mapper


id_title = select_fields("id", "title")
