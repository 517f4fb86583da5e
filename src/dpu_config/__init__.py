"""Typed configuration serialization and fragment registry for DPU plugins.

Example:
    from dpu_config import ConfigManager, DPU_CONFIG_NAME

    manager = ConfigManager()
    manager.set(DPU_CONFIG_NAME, DpuConfig(retries=3))
    text = manager.serialize_all()

    restored = ConfigManager.deserialize_all(text).get(DPU_CONFIG_NAME, DpuConfig)
"""

from dpu_config.fragments import (
    DPU_CONFIG_NAME,
    ConfigManager,
    ConfigSerializer,
    ConfigTransformer,
    ConfigurationBuilder,
    MasterConfigObject,
    TagRenameTransformer,
    XmlConfigSerializer,
)
from dpu_config.plugins import (
    ConfigurableExtension,
    ConfigurablePlugin,
    ConfigurationError,
    PluginError,
)
from dpu_config.serialization import SerializationFailure, XmlCodec, can_contain, type_tag

__version__ = "0.1.0"

__all__ = [
    # Serialization
    "SerializationFailure",
    "XmlCodec",
    "can_contain",
    "type_tag",
    # Fragments
    "DPU_CONFIG_NAME",
    "ConfigManager",
    "ConfigSerializer",
    "ConfigTransformer",
    "ConfigurationBuilder",
    "MasterConfigObject",
    "TagRenameTransformer",
    "XmlConfigSerializer",
    # Plugins
    "ConfigurableExtension",
    "ConfigurablePlugin",
    "ConfigurationError",
    "PluginError",
]
