from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, Field


class MasterConfigObject(BaseModel):
    """Serialized fragments stored under symbolic names.

    A value of None marks a fragment that was set but has no content. The
    container is written under the alias ``settings.master_type_name``.
    """

    # Name under which transformers see the whole container
    CONFIG_NAME: ClassVar[str] = "master_config_object"

    configurations: dict[str, str | None] = Field(default_factory=dict)
