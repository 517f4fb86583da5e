"""Type tags used to identify configuration classes in serialized text.

A tag is the dotted ``module.qualname`` of a class with every underscore
doubled. For a nested class the last dot is then replaced by ``_-``, so
``pkg.mod.Outer.Inner`` does not collide with a module-level ``Inner`` in a
``pkg.mod.Outer`` module.

Examples:
    pkg.config.DpuConfig        -> pkg.config.DpuConfig
    pkg.my_mod.Config_V1        -> pkg.my__mod.Config__V1
    pkg.ext.FaultTolerance.Config_V1 -> pkg.ext.FaultTolerance_-Config__V1
"""

from __future__ import annotations

NESTED_SEPARATOR = "_-"


def type_tag(cls: type) -> str:
    """Return the canonical tag of a class.

    Underscores are escaped before the nested separator is substituted, and
    only the last dot is converted.

    Raises:
        TypeError: If ``cls`` is not a class
    """
    if not isinstance(cls, type):
        raise TypeError(f"Type tag requires a class, got {cls!r}")

    tag = f"{cls.__module__}.{cls.__qualname__}".replace("_", "__")
    if "." in cls.__qualname__:
        head, _, tail = tag.rpartition(".")
        tag = f"{head}{NESTED_SEPARATOR}{tail}"
    return tag
