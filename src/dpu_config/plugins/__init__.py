"""Configurable plugins.

Example - configuring a plugin:

    from dpu_config.plugins import ConfigurablePlugin, ConfigurationError

    class MyDpu(ConfigurablePlugin[MyConfig]):
        name = "my-dpu"
        version = "1.0.0"
        config_class = MyConfig

    dpu = MyDpu()
    dpu.configure(stored_configuration)  # None keeps the current config
    dpu.config.retries
"""

from dpu_config.plugins.base import ConfigurableExtension, ConfigurablePlugin
from dpu_config.plugins.errors import ConfigurationError, PluginError

__all__ = [
    "ConfigurableExtension",
    "ConfigurablePlugin",
    "ConfigurationError",
    "PluginError",
]
