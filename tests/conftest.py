import json
import sys

import pytest
from loguru import logger


SAMPLE_RECORDS = [
    {"id": 1, "title": "A", "extra": "x"},
    {"id": 2, "title": "B", "extra": "y"},
]


@pytest.fixture
def sample_records():
    return [dict(r) for r in SAMPLE_RECORDS]


@pytest.fixture
def write_json(tmp_path):
    """Write a value (or raw text) to a file under tmp_path."""

    def _write(value, name: str = "data.json"):
        path = tmp_path / name
        text = value if isinstance(value, str) else json.dumps(value)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def restore_logger():
    """Reset loguru sinks after tests that reconfigure logging."""
    yield
    logger.remove()
    logger.add(sys.stderr)
