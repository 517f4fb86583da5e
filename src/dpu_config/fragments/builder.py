"""Build serialized master configurations, mainly for tests.

Example:
    config = DpuConfig(retries=3)
    dpu = MyDpu()
    dpu.configure(ConfigurationBuilder().set_dpu_configuration(config).to_string())
"""

from __future__ import annotations

from typing import Any

from dpu_config.fragments.manager import DPU_CONFIG_NAME, ConfigManager
from dpu_config.serialization.xml import XmlCodec


class ConfigurationBuilder:
    """Fluent builder for a master configuration string."""

    def __init__(self, codec: XmlCodec | None = None) -> None:
        self._manager = ConfigManager(codec=codec)

    def set_dpu_configuration(self, configuration: Any) -> "ConfigurationBuilder":
        """Set the plugin's primary configuration."""
        return self.set_configuration(DPU_CONFIG_NAME, configuration)

    def set_configuration(self, name: str, configuration: Any) -> "ConfigurationBuilder":
        """Set a named configuration fragment (e.g. an extension's)."""
        self._manager.set(name, configuration)
        return self

    def to_string(self) -> str:
        """Serialize the master configuration."""
        return self._manager.serialize_all()

    def __str__(self) -> str:
        return self.to_string()
