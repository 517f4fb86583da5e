"""Base classes for configurable plugins and their extensions.

A plugin's configuration is one master configuration string. The plugin's
own settings live in the ``dpu_config`` fragment; every extension keeps its
settings in a fragment of its own.

Example:
    class FaultTolerance(ConfigurableExtension["FaultTolerance.Config_V1"]):
        config_name = "fault_tolerance"

        @dataclass
        class Config_V1:
            enabled: bool = False
            max_retry_count: int = -1

        config_class = Config_V1

    class Zipper(ConfigurablePlugin[ZipperConfig]):
        name = "zipper"
        version = "1.0.0"
        config_class = ZipperConfig

        def validate_config(self, config: ZipperConfig) -> None:
            if config.level < 0:
                raise ConfigurationError("level must not be negative")

    dpu = Zipper(extensions=[FaultTolerance()])
    dpu.configure(dpu.default_configuration())
"""

from __future__ import annotations

import logging
from abc import ABC
from typing import Any, Generic, TypeVar
from uuid import uuid4

from dpu_config.fragments.manager import DPU_CONFIG_NAME, ConfigManager
from dpu_config.fragments.transformers import ConfigTransformer
from dpu_config.observability.logging import LogContext
from dpu_config.plugins.errors import ConfigurationError
from dpu_config.serialization.errors import SerializationFailure
from dpu_config.serialization.xml import XmlCodec

logger = logging.getLogger(__name__)

C = TypeVar("C")


class ConfigurableExtension(Generic[C]):
    """Optional add-on whose settings are stored next to the plugin's.

    Subclasses define:
    - config_name: Fragment name in the master configuration
    - config_class: Pydantic model or dataclass with defaults for all fields
    """

    config_name: str = ""
    config_class: type[C]

    def __init__(self) -> None:
        self.config: C | None = None

    def default_config(self) -> C:
        """Configuration used when the fragment is missing."""
        return self.config_class()

    def read_config(self, manager: ConfigManager) -> C:
        """Read this extension's fragment, falling back to the default."""
        value = manager.get(self.config_name, self.config_class)
        if value is None:
            logger.debug(f"No usable configuration for extension {self.config_name}, using default")
            return self.default_config()
        return value


class ConfigurablePlugin(ABC, Generic[C]):
    """Base class for plugins configured from a master configuration string.

    Each plugin must define:
    - name: Unique plugin identifier
    - config_class: Class of the primary configuration

    Plugins can override:
    - create_codec: Register aliases for renamed configuration classes
    - default_config: Primary configuration used by default
    - validate_config: Semantic checks, raising ConfigurationError
    """

    # Required metadata
    name: str = ""
    version: str = "0.0.0"

    # Optional metadata
    description: str = ""
    author: str = ""

    config_class: type[C]

    def __init__(
        self,
        extensions: list[ConfigurableExtension[Any]] | None = None,
        transformers: list[ConfigTransformer] | None = None,
    ) -> None:
        """Initialize plugin."""
        self.extensions: list[ConfigurableExtension[Any]] = list(extensions or [])
        self.transformers: list[ConfigTransformer] = list(transformers or [])
        self._config: C | None = None

    @property
    def qualified_name(self) -> str:
        """Full plugin name with version."""
        return f"{self.name}@{self.version}"

    @property
    def config(self) -> C:
        """Current primary configuration (defaults until configured)."""
        if self._config is None:
            self._config = self.default_config()
        return self._config

    def create_codec(self) -> XmlCodec:
        """Create the codec used for one configuration session."""
        return XmlCodec()

    def default_config(self) -> C:
        """Primary configuration used by default."""
        return self.config_class()

    def validate_config(self, config: C) -> None:
        """Check a deserialized configuration.

        Raises:
            ConfigurationError: If the configuration is not acceptable
        """
        pass

    def configure(self, serialized: str | None) -> None:
        """Configure the plugin from a master configuration string.

        None leaves the current configuration unchanged. On failure the
        current configuration is unchanged as well.

        Args:
            serialized: Master configuration string

        Raises:
            ConfigurationError: If the string is not a valid configuration
        """
        if serialized is None:
            logger.debug(f"Plugin {self.name}: no configuration given, keeping current")
            return

        with LogContext(plugin=self.name, session_id=uuid4().hex[:8]):
            try:
                manager = ConfigManager.deserialize_all(
                    serialized,
                    codec=self.create_codec(),
                    transformers=self.transformers,
                )
            except SerializationFailure as e:
                raise ConfigurationError(f"Can't load configuration of {self.name}: {e}") from e

            config = manager.get(DPU_CONFIG_NAME, self.config_class)
            if config is None:
                if manager.get_string(DPU_CONFIG_NAME) is not None:
                    raise ConfigurationError(
                        f"Can't parse configuration of {self.name} "
                        f"as {self.config_class.__qualname__}"
                    )
                logger.info(f"Plugin {self.name}: configuration missing, using default")
                config = self.default_config()

            self.validate_config(config)
            extension_configs = [ext.read_config(manager) for ext in self.extensions]

            self._config = config
            for extension, extension_config in zip(self.extensions, extension_configs):
                extension.config = extension_config
            logger.info(f"Plugin {self.qualified_name} configured")

    def _to_string(self, config: C, extension_configs: list[Any]) -> str:
        manager = ConfigManager(codec=self.create_codec())
        manager.set(DPU_CONFIG_NAME, config)
        if manager.get_string(DPU_CONFIG_NAME) is None:
            raise ConfigurationError(f"Configuration of {self.name} can't be serialized")
        for extension, extension_config in zip(self.extensions, extension_configs):
            manager.set(extension.config_name, extension_config)
        try:
            return manager.serialize_all()
        except SerializationFailure as e:
            raise ConfigurationError(f"Configuration of {self.name} can't be serialized") from e

    def default_configuration(self) -> str:
        """Master configuration string with every default.

        Raises:
            ConfigurationError: If the defaults cannot be serialized
        """
        return self._to_string(
            self.default_config(),
            [extension.default_config() for extension in self.extensions],
        )

    def current_configuration(self) -> str:
        """Master configuration string with the current settings."""
        return self._to_string(
            self.config,
            [
                extension.config if extension.config is not None else extension.default_config()
                for extension in self.extensions
            ],
        )
