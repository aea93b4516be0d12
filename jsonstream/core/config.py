"""Configuration for stream transform runs."""

import codecs
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

DEFAULT_CHUNK_SIZE = 64 * 1024


class Framing(Enum):
    """How raw chunks are turned back into JSON values."""

    INCREMENTAL = "incremental"
    """Reassemble values across chunk boundaries with an incremental parser."""

    CHUNK = "chunk"
    """Parse every chunk on its own; output is one JSON text per chunk."""


@dataclass
class RunConfig:
    """Configuration for a single pipeline run."""

    framing: str = "incremental"
    """Chunk framing: 'incremental' or 'chunk'."""

    chunk_size: int = DEFAULT_CHUNK_SIZE
    """Number of bytes (or characters in text mode) read per chunk."""

    encoding: str | None = "utf-8"
    """Source encoding. None reads raw bytes."""

    close_destination: bool = True
    """Close the destination writer when the transformer output ends."""

    indent: int | None = None
    """Indentation for serialized records. None writes compact JSON."""

    log_level: str = "INFO"
    """Logging level."""

    def __post_init__(self) -> None:
        self.get_framing()
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.encoding is not None:
            _check_encoding(self.encoding)

    def get_framing(self) -> Framing:
        """Get the framing enum value."""
        try:
            return Framing(self.framing)
        except ValueError:
            raise ValueError(
                f"Unsupported framing: {self.framing}. "
                "Supported framings: incremental, chunk"
            ) from None


def _check_encoding(name: str) -> str:
    try:
        codecs.lookup(name)
    except LookupError:
        raise ValueError(f"Unknown encoding: '{name}'") from None
    return name


_ENV_VARS = {
    "framing": "JSONSTREAM_FRAMING",
    "chunk_size": "JSONSTREAM_CHUNK_SIZE",
    "encoding": "JSONSTREAM_ENCODING",
    "close_destination": "JSONSTREAM_CLOSE_DESTINATION",
    "log_level": "JSONSTREAM_LOG_LEVEL",
}


class StreamSettings(BaseModel):
    """
    Settings loaded from the environment (and an optional .env file).
    """

    framing: str = Field(
        default="incremental",
        description="Chunk framing, 'incremental' or 'chunk'",
    )
    chunk_size: int = Field(
        default=DEFAULT_CHUNK_SIZE,
        description="Read size per chunk",
    )
    encoding: str = Field(default="utf-8", description="Source file encoding")
    close_destination: bool = Field(
        default=True,
        description="Close the destination file once the transform ends",
    )
    log_level: str = Field(default="INFO", description="Loguru level name")

    @field_validator("framing")
    def validate_framing(cls, v):
        allowed = [f.value for f in Framing]
        if v not in allowed:
            raise ValueError(f"framing must be one of {allowed}, got '{v}'")
        return v

    @field_validator("chunk_size")
    def validate_chunk_size(cls, v):
        if v <= 0:
            raise ValueError("chunk_size must be a positive integer")
        return v

    @field_validator("encoding")
    def validate_encoding(cls, v):
        return _check_encoding(v)

    @field_validator("log_level")
    def validate_log_level(cls, v):
        return v.upper()

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "StreamSettings":
        """
        Build settings from JSONSTREAM_* environment variables.

        Args:
            env_file: Optional .env file loaded first. Variables already set
                in the process environment take precedence.

        Returns:
            Validated settings.
        """
        load_dotenv(env_file)
        values = {}
        for field_name, env_var in _ENV_VARS.items():
            raw = os.getenv(env_var)
            if raw is not None and raw != "":
                values[field_name] = raw
        return cls(**values)

    def to_run_config(self) -> RunConfig:
        """Convert settings into a RunConfig."""
        return RunConfig(
            framing=self.framing,
            chunk_size=self.chunk_size,
            encoding=self.encoding,
            close_destination=self.close_destination,
            log_level=self.log_level,
        )
