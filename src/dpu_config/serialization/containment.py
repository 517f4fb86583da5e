"""Cheap pre-check of whether a blob may hold a given type.

This is a substring test, not a parse. A positive answer is only a hint:
the blob must still go through a real deserialization, which reports a
``SerializationFailure`` for false positives.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dpu_config.serialization.tags import type_tag

if TYPE_CHECKING:
    from dpu_config.serialization.xml import XmlCodec


def can_contain(
    blob: str | None,
    type_or_tag: type | str,
    codec: XmlCodec | None = None,
) -> bool:
    """Check whether ``blob`` contains the tag of a type.

    Args:
        blob: Serialized text, may be None
        type_or_tag: Class to look for, or a tag string used as-is
        codec: Codec whose aliases apply; canonical tags are used without one

    Returns:
        True if the tag occurs in the blob as a literal substring
    """
    if blob is None:
        return False
    if isinstance(type_or_tag, str):
        tag = type_or_tag
    elif codec is not None:
        tag = codec.tag_for(type_or_tag)
    else:
        tag = type_tag(type_or_tag)
    return tag in blob
