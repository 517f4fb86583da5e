"""Global pytest configuration and fixtures."""

from __future__ import annotations

import pytest

from dpu_config.fragments.manager import ConfigManager
from dpu_config.serialization.xml import XmlCodec


@pytest.fixture
def codec() -> XmlCodec:
    """Fresh codec with pretty-printed output."""
    return XmlCodec(indent=True)


@pytest.fixture
def manager(codec: XmlCodec) -> ConfigManager:
    """Empty registry sharing the ``codec`` fixture."""
    return ConfigManager(codec=codec)
