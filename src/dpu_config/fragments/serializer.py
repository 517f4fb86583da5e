"""Fragment serializers used by the configuration registry.

A ``ConfigSerializer`` never raises for a single fragment: anything that
cannot be converted comes back as None, with the cause logged.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, TypeVar

from dpu_config.serialization.containment import can_contain
from dpu_config.serialization.errors import SerializationFailure
from dpu_config.serialization.xml import XmlCodec

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ConfigSerializer(ABC):
    """Interface for fragment serializers."""

    @abstractmethod
    def can_deserialize(self, text: str | None, type_or_tag: type | str) -> bool:
        """Return True if ``text`` may hold the given type (a hint only)."""
        pass

    @abstractmethod
    def deserialize(self, text: str | None, cls: type[T]) -> T | None:
        """Convert text into a configuration object, or None if it can't."""
        pass

    @abstractmethod
    def serialize(self, value: Any) -> str | None:
        """Convert a configuration object into text, or None if it can't."""
        pass


class XmlConfigSerializer(ConfigSerializer):
    """Fragment serializer backed by an ``XmlCodec``."""

    def __init__(self, codec: XmlCodec | None = None) -> None:
        self.codec = codec or XmlCodec()

    def can_deserialize(self, text: str | None, type_or_tag: type | str) -> bool:
        return can_contain(text, type_or_tag, self.codec)

    def deserialize(self, text: str | None, cls: type[T]) -> T | None:
        if text is None:
            return None
        try:
            return self.codec.deserialize(cls, text)
        except SerializationFailure:
            logger.info(f"Can't deserialize configuration as {cls.__qualname__}", exc_info=True)
            return None

    def serialize(self, value: Any) -> str | None:
        if value is None:
            return None
        try:
            return self.codec.serialize(value)
        except SerializationFailure:
            logger.info(
                f"Can't serialize configuration of type {type(value).__qualname__}",
                exc_info=True,
            )
            return None
