"""Typed configuration serialization.

Provides:
- Type tags that identify configuration classes in serialized text
- An XML codec with per-instance aliases
- A substring-based containment pre-check

Example:
    from dpu_config.serialization import XmlCodec, can_contain

    codec = XmlCodec()
    text = codec.serialize(config)
    if can_contain(text, DpuConfig, codec):
        config = codec.deserialize(DpuConfig, text)
"""

from dpu_config.serialization.containment import can_contain
from dpu_config.serialization.errors import SerializationFailure
from dpu_config.serialization.tags import NESTED_SEPARATOR, type_tag
from dpu_config.serialization.xml import XmlCodec, is_supported_type, root_tag

__all__ = [
    "NESTED_SEPARATOR",
    "SerializationFailure",
    "XmlCodec",
    "can_contain",
    "is_supported_type",
    "root_tag",
    "type_tag",
]
