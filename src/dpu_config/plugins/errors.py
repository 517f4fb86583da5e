"""Exceptions raised by configurable plugins."""

from __future__ import annotations


class PluginError(Exception):
    """Base exception for plugin errors."""

    pass


class ConfigurationError(PluginError):
    """A configuration string is invalid for the plugin.

    Raised for containers that do not load, primary fragments that are
    present but unreadable, and configurations that fail validation.
    """

    pass
