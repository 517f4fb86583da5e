"""XML codec for typed configuration objects.

Converts pydantic models and dataclasses to XML text and back. The root
element of every document is the type tag of the encoded class (or the
alias registered on the codec), so the tag is always present in the text.

Document layout:

    <pkg.config.DpuConfig>
      <retries kind="int">3</retries>
      <ratio kind="float">0.5</ratio>
      <enabled kind="bool">true</enabled>
      <comment null="true" />
      <targets kind="list">
        <item>a</item>
        <item>b</item>
      </targets>
      <headers kind="map">
        <entry key="Accept">text/turtle</entry>
      </headers>
      <note kind="b64">YQ1i</note>
    </pkg.config.DpuConfig>

Numbers and booleans carry their JSON type in ``kind`` and are rebuilt
before pydantic validates the payload, so union fields keep their type.
Strings that XML text cannot hold unchanged (control characters, carriage
returns) are stored as base64 with ``kind="b64"``. Elements without a
``kind`` are plain strings and are coerced by pydantic, so a document
written for one class can be read into another class with the same field
names (see ``add_alias``).

Uses stdlib xml.etree.ElementTree; payloads come from trusted plugin
authors and no defense against hostile XML is attempted.
"""

from __future__ import annotations

import base64
import dataclasses
import logging
import re
from typing import Any, TypeVar
from xml.etree import ElementTree as ET

from pydantic import BaseModel, PydanticUserError, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from dpu_config.config import settings
from dpu_config.serialization.errors import SerializationFailure
from dpu_config.serialization.tags import type_tag

logger = logging.getLogger(__name__)

T = TypeVar("T")

NULL_ATTR = "null"
KIND_ATTR = "kind"
KIND_LIST = "list"
KIND_MAP = "map"
KIND_INT = "int"
KIND_FLOAT = "float"
KIND_BOOL = "bool"
KIND_B64 = "b64"
ITEM_TAG = "item"
ENTRY_TAG = "entry"
KEY_ATTR = "key"

# Element names we emit: tags, aliases and field names
_XML_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_.\-]*$")

# Text that survives an XML 1.0 round trip; parsers normalize "\r" to "\n"
_XML_TEXT = re.compile(r"[\t\n\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]*")

# Attribute values, where parsers also normalize tabs and newlines
_XML_ATTR = re.compile(r"[\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]*")

_BOOLS = {"true": True, "false": False}


def is_supported_type(cls: Any) -> bool:
    """Check whether the codec can handle instances of ``cls``."""
    return isinstance(cls, type) and (issubclass(cls, BaseModel) or dataclasses.is_dataclass(cls))


def root_tag(text: str | None) -> str | None:
    """Return the root element name of a document, or None if it does not parse."""
    if not text:
        return None
    try:
        return ET.fromstring(text).tag  # nosec B314
    except ET.ParseError:
        return None


class XmlCodec:
    """Serialize configuration objects to XML and back.

    Aliases are private to the instance. A producer and a consumer may bind
    the same alias to two differently named classes with compatible fields;
    this is how a renamed or relocated configuration class stays readable.

    Not thread-safe: one codec belongs to one configuration session.
    """

    def __init__(self, indent: bool | None = None) -> None:
        self.indent = settings.xml_indent if indent is None else indent
        self._aliases: dict[type, str] = {}
        self._alias_types: dict[str, type] = {}
        self._adapters: dict[type, TypeAdapter[Any]] = {}

    @property
    def aliases(self) -> dict[type, str]:
        """Registered aliases (read-only copy)."""
        return dict(self._aliases)

    def add_alias(self, cls: type, alias: str) -> None:
        """Use ``alias`` instead of the canonical tag for ``cls``.

        Rebinding a class or an alias replaces the earlier binding.

        Args:
            cls: Configuration class
            alias: Element name to use in serialized text

        Raises:
            ValueError: If alias is not a valid XML element name
        """
        if not alias or not _XML_NAME.match(alias):
            raise ValueError(f"Invalid alias: {alias!r}")

        previous = self._aliases.pop(cls, None)
        if previous is not None:
            self._alias_types.pop(previous, None)
        previous_type = self._alias_types.pop(alias, None)
        if previous_type is not None:
            self._aliases.pop(previous_type, None)

        self._aliases[cls] = alias
        self._alias_types[alias] = cls
        logger.debug(f"Alias '{alias}' bound to {cls.__qualname__}")

    def type_for_alias(self, alias: str) -> type | None:
        """Return the class bound to ``alias`` on this codec, if any."""
        return self._alias_types.get(alias)

    def tag_for(self, cls: type) -> str:
        """Return the active tag for ``cls``: its alias or its canonical tag."""
        alias = self._aliases.get(cls)
        if alias is not None:
            return alias
        return type_tag(cls)

    def serialize(self, obj: Any) -> str:
        """Convert a configuration object to XML text.

        Args:
            obj: Pydantic model or dataclass instance

        Returns:
            XML document whose root element is the active tag

        Raises:
            SerializationFailure: If the object is None or cannot be encoded
        """
        if obj is None:
            raise SerializationFailure("Cannot serialize None")

        cls = type(obj)
        adapter = self._adapter(cls)
        tag = self.tag_for(cls)
        if not _XML_NAME.match(tag):
            raise SerializationFailure(f"Tag '{tag}' is not a valid element name")

        try:
            data = adapter.dump_python(obj, mode="json", by_alias=True)
        except (PydanticSerializationError, TypeError, ValueError) as e:
            raise SerializationFailure(f"Cannot encode {cls.__qualname__}: {e}") from e

        root = ET.Element(tag)
        for key, value in data.items():
            if not _XML_NAME.match(key):
                raise SerializationFailure(f"Field '{key}' is not a valid element name")
            self._value_to_element(value, ET.SubElement(root, key))

        if self.indent:
            ET.indent(root, space="  ")
        return ET.tostring(root, encoding="unicode")

    def deserialize(self, cls: type[T], text: str) -> T:
        """Convert XML text back into an instance of ``cls``.

        Unknown elements are ignored and missing fields take their defaults.

        Args:
            cls: Expected configuration class
            text: Serialized document

        Returns:
            New instance of ``cls``

        Raises:
            SerializationFailure: If the text is malformed, is tagged for
                another type, or does not validate against ``cls``
        """
        adapter = self._adapter(cls)
        if text is None:
            raise SerializationFailure("Cannot deserialize None")

        try:
            root = ET.fromstring(text)  # nosec B314
        except ET.ParseError as e:
            raise SerializationFailure(f"Malformed XML: {e}") from e

        expected = self.tag_for(cls)
        if root.tag != expected:
            raise SerializationFailure(f"Expected <{expected}> but found <{root.tag}>")

        try:
            data = {child.tag: self._element_to_value(child) for child in root}
        except ValueError as e:
            raise SerializationFailure(f"Invalid value in <{root.tag}>: {e}") from e

        try:
            return adapter.validate_python(data)
        except ValidationError as e:
            raise SerializationFailure(f"Invalid {cls.__qualname__}: {e}") from e

    def _adapter(self, cls: Any) -> TypeAdapter[Any]:
        """Get (and cache) the pydantic adapter for a class."""
        if not is_supported_type(cls):
            raise SerializationFailure(f"Unsupported configuration type: {cls!r}")

        adapter = self._adapters.get(cls)
        if adapter is None:
            try:
                adapter = TypeAdapter(cls)
            except PydanticUserError as e:
                raise SerializationFailure(f"Unsupported configuration type: {cls!r}") from e
            self._adapters[cls] = adapter
        return adapter

    def _value_to_element(self, value: Any, element: ET.Element) -> None:
        """Write a JSON-mode value into an element."""
        if value is None:
            element.set(NULL_ATTR, "true")

        elif isinstance(value, dict):
            element.set(KIND_ATTR, KIND_MAP)
            for key, item in value.items():
                key = str(key)
                if not _XML_ATTR.fullmatch(key):
                    raise SerializationFailure(f"Map key {key!r} cannot be stored in XML")
                entry = ET.SubElement(element, ENTRY_TAG)
                entry.set(KEY_ATTR, key)
                self._value_to_element(item, entry)

        elif isinstance(value, list):
            element.set(KIND_ATTR, KIND_LIST)
            for item in value:
                self._value_to_element(item, ET.SubElement(element, ITEM_TAG))

        elif isinstance(value, bool):
            # bool before int, it is a subclass
            element.set(KIND_ATTR, KIND_BOOL)
            element.text = "true" if value else "false"

        elif isinstance(value, int):
            element.set(KIND_ATTR, KIND_INT)
            element.text = str(value)

        elif isinstance(value, float):
            element.set(KIND_ATTR, KIND_FLOAT)
            element.text = repr(value)

        else:
            text = str(value)
            if _XML_TEXT.fullmatch(text):
                element.text = text
            else:
                element.set(KIND_ATTR, KIND_B64)
                element.text = base64.b64encode(text.encode("utf-8", "surrogatepass")).decode("ascii")

    def _element_to_value(self, element: ET.Element) -> Any:
        """Read a plain value back from an element.

        Raises:
            ValueError: If a typed scalar does not parse
        """
        if element.get(NULL_ATTR) == "true":
            return None

        kind = element.get(KIND_ATTR)
        if kind == KIND_MAP:
            return {
                entry.get(KEY_ATTR, ""): self._element_to_value(entry)
                for entry in element
            }
        if kind == KIND_LIST:
            return [self._element_to_value(item) for item in element]

        text = element.text or ""
        if kind == KIND_BOOL:
            if text not in _BOOLS:
                raise ValueError(f"Invalid boolean: {text!r}")
            return _BOOLS[text]
        if kind == KIND_INT:
            return int(text)
        if kind == KIND_FLOAT:
            return float(text)
        if kind == KIND_B64:
            return base64.b64decode(text, validate=True).decode("utf-8", "surrogatepass")
        return text
