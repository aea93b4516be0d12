"""Sinks for transformed output."""

from jsonstream.sinks.file import WritableFile

__all__ = ["WritableFile"]
