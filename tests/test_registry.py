"""
Tests for the provider registry:
- Registration, lookup and the fixed default
- Static catalog aggregation and model lookup
- Concurrent dynamic refresh with per-provider failure isolation
"""

import asyncio
import threading
from typing import List

import pytest

from modelrelay.core.ai.base import (
    BaseProvider,
    CatalogEntry,
    CatalogFetchError,
    GenerationHandle,
    model_entry,
)
from modelrelay.core.ai.credentials import ProviderSetting, ResolvedCredential
from modelrelay.core.ai.registry import ProviderRegistry, create_default_registry
from modelrelay.core.ai.providers.default_provider import EchoHandle


def run_async(coro):
    return asyncio.run(coro)


class FakeProvider(BaseProvider):
    requires_secret = False

    def __init__(self, name: str, models=(), dynamic=None, error=None):
        self.name = name
        self.static_models = tuple(model_entry(m, m, name, 1000) for m in models)
        self._dynamic = list(dynamic or [])
        self._error = error
        self.fetch_threads: List[str] = []
        super().__init__()

    @property
    def supports_dynamic_models(self) -> bool:
        return self._dynamic is not None and (bool(self._dynamic) or self._error is not None)

    def list_dynamic_models(self, api_keys=None, settings=None, env=None):
        self.fetch_threads.append(threading.current_thread().name)
        if self._error is not None:
            raise self._error
        return [model_entry(m, m, self.name, 2000) for m in self._dynamic]

    def _create_handle(self, model: str, credential: ResolvedCredential) -> GenerationHandle:
        return EchoHandle(self.name, model, credential)


def test_default_is_registered_and_returned():
    default = FakeProvider("Alpha")
    registry = ProviderRegistry(default)
    assert registry.get_default() is default
    assert registry.get("Alpha") is default
    assert registry.names() == ["Alpha"]


def test_get_unknown_returns_none():
    registry = ProviderRegistry(FakeProvider("Alpha"))
    assert registry.get("Nope") is None
    assert registry.get(None) is None
    assert registry.get("") is None


def test_register_is_upsert_by_name():
    registry = ProviderRegistry(FakeProvider("Alpha"))
    first = FakeProvider("Beta", models=["b1"])
    second = FakeProvider("Beta", models=["b2"])
    registry.register(first)
    registry.register(second)

    assert registry.get("Beta") is second
    assert [p.name for p in registry.get_all()] == ["Alpha", "Beta"]
    assert [e.name for e in registry.aggregated_catalog()] == ["b2"]


def test_aggregated_catalog_keeps_registration_order():
    registry = ProviderRegistry(FakeProvider("Alpha", models=["a1", "a2"]))
    registry.register(FakeProvider("Beta", models=["b1"]))
    assert [(e.provider, e.name) for e in registry.aggregated_catalog()] == [
        ("Alpha", "a1"), ("Alpha", "a2"), ("Beta", "b1"),
    ]


def test_find_model_prefers_requested_provider():
    registry = ProviderRegistry(FakeProvider("Alpha", models=["shared"]))
    registry.register(FakeProvider("Beta", models=["shared", "only-b"]))

    assert registry.find_model("shared").provider == "Alpha"
    assert registry.find_model("shared", provider_name="Beta").provider == "Beta"
    assert registry.find_model("only-b", provider_name="Alpha").provider == "Beta"
    assert registry.find_model("missing") is None


def test_refresh_isolates_failures_and_merges():
    good = FakeProvider("Good", models=["static-g", "dyn-1"], dynamic=["dyn-1", "dyn-2"])
    bad = FakeProvider("Bad", models=["static-b"], error=CatalogFetchError("Bad", "boom"))
    registry = ProviderRegistry(FakeProvider("Alpha", models=["a1"]))
    registry.register(good)
    registry.register(bad)

    catalog = run_async(registry.refresh_catalog())
    keys = [(e.provider, e.name) for e in catalog]

    # dynamic entries first, duplicates collapse onto the dynamic entry
    assert keys == [
        ("Good", "dyn-1"), ("Good", "dyn-2"),
        ("Alpha", "a1"), ("Good", "static-g"), ("Bad", "static-b"),
    ]
    assert catalog[0].max_token_allowed == 2000
    assert bad.fetch_threads and good.fetch_threads


def test_refresh_isolates_unexpected_errors(caplog):
    crashing = FakeProvider("Crashing", models=["static-c"], error=OverflowError("cannot convert float infinity"))
    good = FakeProvider("Good", dynamic=["dyn-1"])
    registry = ProviderRegistry(crashing)
    registry.register(good)

    catalog = run_async(registry.refresh_catalog())

    assert [(e.provider, e.name) for e in catalog] == [("Good", "dyn-1"), ("Crashing", "static-c")]
    assert "Crashing" in caplog.text


def test_refresh_skips_disabled_providers():
    enabled = FakeProvider("On", dynamic=["on-1"])
    disabled = FakeProvider("Off", models=["off-static"], dynamic=["off-1"])
    registry = ProviderRegistry(enabled)
    registry.register(disabled)

    catalog = run_async(registry.refresh_catalog(provider_settings={"Off": ProviderSetting(enabled=False)}))

    assert [(e.provider, e.name) for e in catalog] == [("On", "on-1"), ("Off", "off-static")]
    assert disabled.fetch_threads == []
    assert enabled.fetch_threads


def test_refresh_runs_fetches_off_the_event_loop():
    main_thread = threading.current_thread().name
    provider = FakeProvider("Good", dynamic=["d"])
    registry = ProviderRegistry(provider)
    run_async(registry.refresh_catalog())
    assert provider.fetch_threads[0] != main_thread


def test_refresh_does_not_mutate_static_catalog():
    registry = ProviderRegistry(FakeProvider("Good", models=["s"], dynamic=["d"]))
    run_async(registry.refresh_catalog())
    assert [e.name for e in registry.aggregated_catalog()] == ["s"]


def test_check_credential():
    registry = create_default_registry()
    assert registry.check_credential("OpenAI", env={"OPENAI_API_KEY": "sk"})
    assert not registry.check_credential("OpenAI", env={})
    assert registry.check_credential("Ollama", env={})
    assert not registry.check_credential("Nowhere", env={})


def test_create_default_registry_has_all_builtins():
    registry = create_default_registry()
    assert registry.get_default().name == "Anthropic"
    assert registry.names()[0] == "Anthropic"
    for name in ("Default", "OpenAI", "Groq", "Hyperbolic", "Ollama", "LMStudio"):
        assert registry.get(name) is not None
    assert any(isinstance(e, CatalogEntry) and e.name == "gpt-4" for e in registry.aggregated_catalog())


def test_create_default_registry_custom_default_and_timeout():
    registry = create_default_registry(default_provider="Ollama", fetch_timeout=2.5)
    assert registry.get_default().name == "Ollama"
    assert all(p.fetch_timeout == 2.5 for p in registry.get_all())


def test_create_default_registry_unknown_default():
    with pytest.raises(ValueError, match="Nowhere"):
        create_default_registry(default_provider="Nowhere")
