"""Tests for the configuration fragment registry."""

from dataclasses import dataclass
from typing import Any

import pytest
from pydantic import BaseModel, Field

from dpu_config.config import settings
from dpu_config.fragments.manager import DPU_CONFIG_NAME, ConfigManager
from dpu_config.fragments.master import MasterConfigObject
from dpu_config.fragments.transformers import ConfigTransformer
from dpu_config.serialization.errors import SerializationFailure
from dpu_config.serialization.tags import type_tag
from dpu_config.serialization.xml import XmlCodec, root_tag


class PrimaryConfig(BaseModel):
    query: str = "SELECT * WHERE { ?s ?p ?o }"
    limit: int = 100


@dataclass
class AddonConfig:
    enabled: bool = False
    max_retry_count: int = -1


class Counter(BaseModel):
    count: int = 0


class CounterExtra(BaseModel):
    count: int = 0
    extra: str = ""


class KeyedConfig(BaseModel):
    values: dict[str, str] = Field(default_factory=dict)


class CountingCodec(XmlCodec):
    """Codec that records which classes it was asked to read."""

    def __init__(self) -> None:
        super().__init__()
        self.read: list[type] = []

    def deserialize(self, cls: Any, text: str) -> Any:
        self.read.append(cls)
        return super().deserialize(cls, text)


class TestSetAndGet:
    """Tests for set/get on a single registry."""

    def test_get_returns_equal_copy(self, manager: ConfigManager) -> None:
        """A stored fragment comes back field-equal."""
        primary = PrimaryConfig(limit=5)
        manager.set(DPU_CONFIG_NAME, primary)

        value = manager.get(DPU_CONFIG_NAME, PrimaryConfig)

        assert value == primary
        assert value is not primary

    def test_get_missing(self, manager: ConfigManager) -> None:
        """Unknown names are absent."""
        assert manager.get("missing", PrimaryConfig) is None
        assert manager.get_string("missing") is None

    def test_set_replaces(self, manager: ConfigManager) -> None:
        """Setting a name twice keeps the latest value."""
        manager.set(DPU_CONFIG_NAME, PrimaryConfig(limit=1))
        manager.set(DPU_CONFIG_NAME, PrimaryConfig(limit=2))

        assert manager.get(DPU_CONFIG_NAME, PrimaryConfig) == PrimaryConfig(limit=2)
        assert len(manager) == 1

    def test_set_none_stores_empty_fragment(self, manager: ConfigManager) -> None:
        """None is stored as an empty fragment, read back as None."""
        manager.set("addon", None)

        assert "addon" in manager
        assert manager.get_string("addon") is None
        assert manager.get("addon", AddonConfig) is None

    def test_set_unsupported_stores_empty_fragment(self, manager: ConfigManager) -> None:
        """Values that cannot be serialized are stored as empty fragments."""
        manager.set("addon", object())

        assert "addon" in manager
        assert manager.get_string("addon") is None

    def test_remove(self, manager: ConfigManager) -> None:
        """Removed fragments are absent; removing twice is harmless."""
        manager.set("addon", AddonConfig())
        manager.remove("addon")
        manager.remove("addon")

        assert "addon" not in manager
        assert manager.get("addon", AddonConfig) is None

    def test_get_as_wrong_type(self, manager: ConfigManager) -> None:
        """Reading a fragment as another type gives None."""
        manager.set("addon", AddonConfig())

        assert manager.get("addon", PrimaryConfig) is None

    def test_names(self, manager: ConfigManager) -> None:
        """names lists every stored fragment."""
        manager.set(DPU_CONFIG_NAME, PrimaryConfig())
        manager.set("addon", None)

        assert sorted(manager.names()) == ["addon", DPU_CONFIG_NAME]


class TestGetFirst:
    """Tests for picking a type among candidates."""

    def test_skips_candidates_not_contained(self) -> None:
        """Candidates whose tag is absent are never deserialized."""
        codec = CountingCodec()
        manager = ConfigManager(codec=codec)
        manager.set("fragment", CounterExtra(count=2))

        value = manager.get_first("fragment", [PrimaryConfig, AddonConfig, CounterExtra])

        assert value == CounterExtra(count=2)
        assert codec.read == [CounterExtra]

    def test_false_positive_falls_through(self) -> None:
        """A candidate matching by substring only is tried, fails, and is skipped."""
        codec = CountingCodec()
        manager = ConfigManager(codec=codec)
        manager.set("fragment", CounterExtra(count=2, extra="x"))

        value = manager.get_first("fragment", [Counter, CounterExtra])

        assert isinstance(value, CounterExtra)
        assert codec.read == [Counter, CounterExtra]

    def test_no_candidate_matches(self, manager: ConfigManager) -> None:
        """None when no candidate reads the fragment."""
        manager.set("fragment", AddonConfig())

        assert manager.get_first("fragment", [PrimaryConfig, Counter]) is None


class TestContainer:
    """Tests for serialize_all / deserialize_all."""

    def test_round_trip(self, manager: ConfigManager) -> None:
        """Every fragment survives; missing names stay absent."""
        primary = PrimaryConfig(limit=7)
        addon = AddonConfig(enabled=True, max_retry_count=3)
        manager.set("primary", primary)
        manager.set("addon1", addon)

        loaded = ConfigManager.deserialize_all(manager.serialize_all())

        assert loaded.get("primary", PrimaryConfig) == primary
        assert loaded.get("addon1", AddonConfig) == addon
        assert loaded.get("missing", PrimaryConfig) is None

    def test_empty_registry(self, manager: ConfigManager) -> None:
        """An empty registry is a valid container."""
        loaded = ConfigManager.deserialize_all(manager.serialize_all())

        assert len(loaded) == 0
        assert loaded.names() == []

    def test_empty_fragment_survives(self, manager: ConfigManager) -> None:
        """Empty fragments keep their name and stay empty."""
        manager.set("addon", None)

        loaded = ConfigManager.deserialize_all(manager.serialize_all())

        assert "addon" in loaded
        assert loaded.get_string("addon") is None

    def test_serialize_all_does_not_mutate(self, manager: ConfigManager) -> None:
        """Serializing twice gives the same text and the same names."""
        manager.set("primary", PrimaryConfig())

        first = manager.serialize_all()
        second = manager.serialize_all()

        assert first == second
        assert manager.names() == ["primary"]

    def test_container_is_tagged(self, manager: ConfigManager) -> None:
        """The container uses the master alias and embeds fragment tags."""
        manager.set("primary", PrimaryConfig())

        text = manager.serialize_all()

        assert root_tag(text) == settings.master_type_name
        assert type_tag(PrimaryConfig) in text

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "<MasterConfigObject><configurations kind=\"map\">",
            "not xml at all",
            "<SomethingElse />",
        ],
    )
    def test_corrupted_container(self, text: str) -> None:
        """Containers that do not load fail as a whole."""
        with pytest.raises(SerializationFailure):
            ConfigManager.deserialize_all(text)

    def test_fragment_is_not_a_container(self, codec: XmlCodec) -> None:
        """A single fragment is not accepted as a container."""
        with pytest.raises(SerializationFailure):
            ConfigManager.deserialize_all(codec.serialize(PrimaryConfig()))

    def test_broken_fragment_is_isolated(self, manager: ConfigManager) -> None:
        """A bad fragment does not affect its siblings."""
        manager.set("primary", PrimaryConfig(limit=3))
        manager.set_string("broken", f"<{type_tag(AddonConfig)}><enabled>")

        loaded = ConfigManager.deserialize_all(manager.serialize_all())

        assert loaded.get("broken", AddonConfig) is None
        assert loaded.get("primary", PrimaryConfig) == PrimaryConfig(limit=3)

    def test_extra_fragments_are_tolerated(self, manager: ConfigManager) -> None:
        """Readers only ask for what they know."""
        manager.set("primary", PrimaryConfig())
        manager.set("unknown_addon", Counter(count=1))

        loaded = ConfigManager.deserialize_all(manager.serialize_all())

        assert loaded.get("primary", PrimaryConfig) == PrimaryConfig()

    def test_custom_master_type_name(self) -> None:
        """The container alias is configurable and must match on both sides."""
        manager = ConfigManager(master_type_name="Master")
        manager.set("primary", PrimaryConfig())
        text = manager.serialize_all()

        assert root_tag(text) == "Master"
        assert ConfigManager.deserialize_all(text, master_type_name="Master").get(
            "primary", PrimaryConfig
        ) == PrimaryConfig()
        with pytest.raises(SerializationFailure):
            ConfigManager.deserialize_all(text)

    def test_fragment_aliases_across_codecs(self) -> None:
        """Fragment aliases work through the container."""
        producer_codec = XmlCodec()
        producer_codec.add_alias(Counter, "counter")
        producer = ConfigManager(codec=producer_codec)
        producer.set("primary", Counter(count=4))

        consumer_codec = XmlCodec()
        consumer_codec.add_alias(CounterExtra, "counter")
        consumer = ConfigManager.deserialize_all(producer.serialize_all(), codec=consumer_codec)

        assert consumer.get("primary", CounterExtra) == CounterExtra(count=4)

    def test_unusual_strings_do_not_break_siblings(self, manager: ConfigManager) -> None:
        """Control characters and carriage returns round-trip inside the container."""
        manager.set("good", PrimaryConfig(query="ok"))
        manager.set("control", PrimaryConfig(query="a\x01b"))
        manager.set("crlf", PrimaryConfig(query="a\r\nb"))

        loaded = ConfigManager.deserialize_all(manager.serialize_all())

        assert loaded.get("good", PrimaryConfig) == PrimaryConfig(query="ok")
        assert loaded.get("control", PrimaryConfig) == PrimaryConfig(query="a\x01b")
        assert loaded.get("crlf", PrimaryConfig) == PrimaryConfig(query="a\r\nb")

    def test_unstorable_fragment_is_empty(self, manager: ConfigManager) -> None:
        """A fragment the codec rejects is stored empty; siblings still load."""
        manager.set("good", PrimaryConfig(limit=2))
        manager.set("bad", KeyedConfig(values={"a\x01b": "x"}))

        loaded = ConfigManager.deserialize_all(manager.serialize_all())

        assert "bad" in loaded
        assert loaded.get("bad", KeyedConfig) is None
        assert loaded.get("good", PrimaryConfig) == PrimaryConfig(limit=2)

    def test_conflicting_container_alias(self) -> None:
        """A codec that binds the container alias to another class is refused."""
        codec = XmlCodec()
        codec.add_alias(Counter, settings.master_type_name)

        with pytest.raises(ValueError):
            ConfigManager(codec=codec)
        assert codec.type_for_alias(settings.master_type_name) is Counter

    def test_codec_shared_by_managers(self, codec: XmlCodec) -> None:
        """Two managers may share one codec."""
        first = ConfigManager(codec=codec)
        second = ConfigManager(codec=codec)
        first.set("primary", PrimaryConfig(limit=9))

        assert ConfigManager.deserialize_all(first.serialize_all(), codec=codec).get(
            "primary", PrimaryConfig
        ) == PrimaryConfig(limit=9)
        assert second.codec is first.codec


class TestTransformerHooks:
    """Tests for transformer integration."""

    def test_transformers_see_reads(self, manager: ConfigManager) -> None:
        """String and object hooks run on get; configure runs on attach."""

        class Recorder(ConfigTransformer):
            def __init__(self) -> None:
                self.attached_to: ConfigManager | None = None
                self.strings: list[str] = []
                self.objects: list[str] = []

            def configure(self, manager: ConfigManager) -> None:
                self.attached_to = manager

            def transform_string(self, name: str, text: str | None) -> str | None:
                self.strings.append(name)
                return text

            def transform_object(self, name: str, value: Any) -> None:
                self.objects.append(name)
                value.limit = 1

        recorder = Recorder()
        manager.add_transformer(recorder)
        manager.set("primary", PrimaryConfig(limit=50))

        value = manager.get("primary", PrimaryConfig)

        assert recorder.attached_to is manager
        assert recorder.strings == ["primary"]
        assert recorder.objects == ["primary"]
        assert value is not None and value.limit == 1
        assert manager.transformers == [recorder]

    def test_container_passes_through_transformers(self, manager: ConfigManager) -> None:
        """deserialize_all gives transformers the whole container first."""
        seen: list[str] = []

        class Recorder(ConfigTransformer):
            def transform_string(self, name: str, text: str | None) -> str | None:
                seen.append(name)
                return text

        manager.set("primary", PrimaryConfig())

        loaded = ConfigManager.deserialize_all(manager.serialize_all(), transformers=[Recorder()])
        loaded.get("primary", PrimaryConfig)

        assert seen == [MasterConfigObject.CONFIG_NAME, "primary"]
