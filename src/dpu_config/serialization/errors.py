"""Exceptions raised by the serialization layer."""

from __future__ import annotations


class SerializationFailure(Exception):
    """An object or a serialized blob could not be converted."""

    pass
