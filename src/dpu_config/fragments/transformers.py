"""Configuration transformers.

Transformers see every fragment on its way out of a ``ConfigManager``:
``transform_string`` before it is deserialized, ``transform_object`` after.
The whole container passes through ``transform_string`` under
``MasterConfigObject.CONFIG_NAME`` before it is parsed.

Example - reading a configuration class that moved to another module:

    rename = TagRenameTransformer({"old.module.Config": NewConfig})
    manager = ConfigManager.deserialize_all(text, transformers=[rename])
    config = manager.get("dpu_config", NewConfig)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from dpu_config.fragments.master import MasterConfigObject
from dpu_config.serialization.tags import type_tag

if TYPE_CHECKING:
    from dpu_config.fragments.manager import ConfigManager

logger = logging.getLogger(__name__)


class ConfigTransformer(ABC):
    """Base class for configuration transformers."""

    def configure(self, manager: "ConfigManager") -> None:
        """Called when the transformer is attached to a manager."""
        pass

    @abstractmethod
    def transform_string(self, name: str, text: str | None) -> str | None:
        """Transform a fragment (or the container) before it is parsed.

        Args:
            name: Fragment name
            text: Serialized fragment, may be None

        Returns:
            Text to parse instead
        """
        pass

    def transform_object(self, name: str, value: Any) -> None:
        """Adjust a fragment in place after it is deserialized."""
        pass


class TagRenameTransformer(ConfigTransformer):
    """Replace old type tags with new ones in serialized text.

    Renames apply in insertion order as literal substitutions. Targets may be
    tag strings or classes (their canonical tag is used). The container
    itself is left alone; each fragment is renamed when it is read.
    """

    def __init__(self, renames: Mapping[str, str | type]) -> None:
        self.renames: dict[str, str] = {
            old: new if isinstance(new, str) else type_tag(new) for old, new in renames.items()
        }

    def transform_string(self, name: str, text: str | None) -> str | None:
        if text is None or name == MasterConfigObject.CONFIG_NAME:
            return text
        for old, new in self.renames.items():
            if old in text:
                logger.debug(f"Renaming tag {old} -> {new} in {name}")
                text = text.replace(old, new)
        return text
