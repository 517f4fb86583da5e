"""Multi-fragment configuration registry.

Provides:
- ConfigManager: named fragments serialized as one master configuration
- ConfigSerializer / XmlConfigSerializer: None-safe fragment serialization
- ConfigTransformer / TagRenameTransformer: adjust fragments while reading
- ConfigurationBuilder: build master configuration strings for tests
"""

from dpu_config.fragments.builder import ConfigurationBuilder
from dpu_config.fragments.manager import DPU_CONFIG_NAME, ConfigManager
from dpu_config.fragments.master import MasterConfigObject
from dpu_config.fragments.serializer import ConfigSerializer, XmlConfigSerializer
from dpu_config.fragments.transformers import ConfigTransformer, TagRenameTransformer

__all__ = [
    "DPU_CONFIG_NAME",
    "ConfigManager",
    "ConfigSerializer",
    "ConfigTransformer",
    "ConfigurationBuilder",
    "MasterConfigObject",
    "TagRenameTransformer",
    "XmlConfigSerializer",
]
