"""Registry of named configuration fragments.

A ``ConfigManager`` holds one master configuration: any number of
independently typed fragments, each stored as serialized text under a
symbolic name, and serialized together as a single blob.

Example:
    manager = ConfigManager()
    manager.set(DPU_CONFIG_NAME, DpuConfig(retries=3))
    manager.set("fault_tolerance", FaultTolerance.Config_V1())
    text = manager.serialize_all()

    loaded = ConfigManager.deserialize_all(text)
    config = loaded.get(DPU_CONFIG_NAME, DpuConfig)
    missing = loaded.get("rdf_validation", RdfValidation.Config_V1)  # None

Failures are split by level. A container that does not parse makes
``deserialize_all`` raise ``SerializationFailure``. A broken fragment inside
a good container only makes ``get`` return None for that name.

Not thread-safe: use one manager per configuration operation.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any, TypeVar

from dpu_config.config import settings
from dpu_config.fragments.master import MasterConfigObject
from dpu_config.fragments.serializer import ConfigSerializer, XmlConfigSerializer
from dpu_config.fragments.transformers import ConfigTransformer
from dpu_config.observability.logging import LogContext
from dpu_config.serialization.xml import XmlCodec

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Reserved fragment name for a plugin's primary configuration
DPU_CONFIG_NAME = "dpu_config"


class ConfigManager:
    """Named collection of configuration fragments."""

    def __init__(
        self,
        codec: XmlCodec | None = None,
        serializers: Sequence[ConfigSerializer] | None = None,
        transformers: Iterable[ConfigTransformer] | None = None,
        master_type_name: str | None = None,
    ) -> None:
        """Initialize an empty registry.

        Args:
            codec: Codec for the container (and for fragments unless
                serializers are given); a new one is created if omitted
            serializers: Fragment serializers, the first one writes
            transformers: Transformers applied when fragments are read
            master_type_name: Alias for the container type, bound on the codec

        Raises:
            ValueError: If the codec already binds the container alias to
                another class
        """
        self.codec = codec or XmlCodec()
        alias = master_type_name or settings.master_type_name
        owner = self.codec.type_for_alias(alias)
        if owner is not None and owner is not MasterConfigObject:
            raise ValueError(f"Alias '{alias}' is already bound to {owner.__qualname__}")
        self.codec.add_alias(MasterConfigObject, alias)
        self._serializers: list[ConfigSerializer] = (
            list(serializers) if serializers else [XmlConfigSerializer(self.codec)]
        )
        self._transformers: list[ConfigTransformer] = []
        self._master = MasterConfigObject()
        for transformer in transformers or []:
            self.add_transformer(transformer)

    @property
    def master(self) -> MasterConfigObject:
        """The underlying master configuration."""
        return self._master

    @property
    def transformers(self) -> list[ConfigTransformer]:
        """Attached transformers (read-only copy)."""
        return self._transformers.copy()

    def add_transformer(self, transformer: ConfigTransformer) -> None:
        """Attach a transformer; it applies to subsequent reads."""
        transformer.configure(self)
        self._transformers.append(transformer)

    def names(self) -> list[str]:
        """Names of all stored fragments, including empty ones."""
        return list(self._master.configurations)

    def __contains__(self, name: object) -> bool:
        return name in self._master.configurations

    def __len__(self) -> int:
        return len(self._master.configurations)

    def set(self, name: str, value: Any) -> None:
        """Store a fragment, replacing any previous one under ``name``.

        A value that is None or cannot be serialized is stored as an empty
        fragment.
        """
        text = self._serializers[0].serialize(value)
        if value is not None and text is None:
            logger.warning(f"Fragment '{name}' stored empty, value could not be serialized")
        self._master.configurations[name] = text

    def set_string(self, name: str, text: str | None) -> None:
        """Store an already serialized fragment."""
        self._master.configurations[name] = text

    def remove(self, name: str) -> None:
        """Remove a fragment; unknown names are ignored."""
        self._master.configurations.pop(name, None)

    def get_string(self, name: str) -> str | None:
        """Return the serialized fragment after string transformers ran."""
        text = self._master.configurations.get(name)
        for transformer in self._transformers:
            text = transformer.transform_string(name, text)
        return text

    def get(self, name: str, cls: type[T]) -> T | None:
        """Return the fragment stored under ``name`` as an instance of ``cls``.

        Returns:
            The fragment, or None if it is missing, empty or unreadable
        """
        with LogContext(fragment=name):
            text = self.get_string(name)
            if text is None:
                return None

            for serializer in self._serializers:
                if not serializer.can_deserialize(text, cls):
                    continue
                value = serializer.deserialize(text, cls)
                if value is not None:
                    for transformer in self._transformers:
                        transformer.transform_object(name, value)
                    return value

            logger.info(f"Fragment '{name}' can't be read as {cls.__qualname__}")
            return None

    def get_first(self, name: str, candidates: Iterable[type[Any]]) -> Any | None:
        """Return the fragment as the first candidate type that reads it.

        Candidates whose tag does not occur in the fragment are skipped
        without an attempt to deserialize.
        """
        for cls in candidates:
            value = self.get(name, cls)
            if value is not None:
                return value
        return None

    def serialize_all(self) -> str:
        """Serialize every fragment as one blob. Does not modify the registry."""
        return self.codec.serialize(self._master)

    @classmethod
    def deserialize_all(
        cls,
        text: str,
        codec: XmlCodec | None = None,
        serializers: Sequence[ConfigSerializer] | None = None,
        transformers: Iterable[ConfigTransformer] | None = None,
        master_type_name: str | None = None,
    ) -> ConfigManager:
        """Rebuild a registry from a blob produced by ``serialize_all``.

        Raises:
            SerializationFailure: If the container cannot be read
        """
        manager = cls(
            codec=codec,
            serializers=serializers,
            transformers=transformers,
            master_type_name=master_type_name,
        )
        for transformer in manager._transformers:
            text = transformer.transform_string(MasterConfigObject.CONFIG_NAME, text)
        manager._master = manager.codec.deserialize(MasterConfigObject, text)
        logger.debug(f"Loaded master configuration with {len(manager)} fragment(s)")
        return manager
