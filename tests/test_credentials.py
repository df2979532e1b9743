"""
Tests for credential resolution:
- Secret precedence (explicit map > settings > environment)
- Endpoint precedence (settings > endpoint env key > default)
- Empty values treated as absent
- Secret masking in repr
"""

from modelrelay.core.ai.credentials import (
    CredentialResolver,
    ProviderSetting,
    ResolvedCredential,
    has_env_credential,
)


def _resolver(**kwargs) -> CredentialResolver:
    defaults = dict(
        provider_name="OpenAI",
        credential_key="OPENAI_API_KEY",
        default_base_url="https://api.openai.com/v1",
    )
    defaults.update(kwargs)
    return CredentialResolver(**defaults)


def test_explicit_map_beats_settings_and_env():
    resolver = _resolver()
    secret = resolver.resolve_secret(
        api_keys={"OpenAI": "from-map"},
        settings=ProviderSetting(api_key="from-settings"),
        env={"OPENAI_API_KEY": "from-env"},
    )
    assert secret == "from-map"


def test_settings_beat_env():
    resolver = _resolver()
    secret = resolver.resolve_secret(
        api_keys={"Anthropic": "other-provider"},
        settings=ProviderSetting(api_key="from-settings"),
        env={"OPENAI_API_KEY": "from-env"},
    )
    assert secret == "from-settings"


def test_env_is_last_tier():
    resolver = _resolver()
    assert resolver.resolve_secret(env={"OPENAI_API_KEY": "from-env"}) == "from-env"


def test_no_secret_anywhere_is_none():
    assert _resolver().resolve_secret(api_keys={}, settings=None, env={}) is None


def test_empty_strings_count_as_absent():
    resolver = _resolver()
    secret = resolver.resolve_secret(
        api_keys={"OpenAI": ""},
        settings=ProviderSetting(api_key="   "),
        env={"OPENAI_API_KEY": "from-env"},
    )
    assert secret == "from-env"


def test_endpoint_settings_override_default():
    resolver = _resolver()
    endpoint = resolver.resolve_endpoint(settings=ProviderSetting(base_url="http://proxy:8080/v1/"), env={})
    assert endpoint == "http://proxy:8080/v1"


def test_endpoint_env_key_between_settings_and_default():
    resolver = _resolver(
        provider_name="Ollama",
        credential_key="",
        default_base_url="http://127.0.0.1:11434",
        base_url_key="OLLAMA_API_BASE_URL",
    )
    env = {"OLLAMA_API_BASE_URL": "http://gpu-box:11434/"}

    assert resolver.resolve_endpoint(env=env) == "http://gpu-box:11434"
    assert resolver.resolve_endpoint(settings=ProviderSetting(base_url="http://other:1"), env=env) == "http://other:1"
    assert resolver.resolve_endpoint(env={}) == "http://127.0.0.1:11434"


def test_endpoint_falls_back_to_default():
    assert _resolver().resolve_endpoint(settings=ProviderSetting(), env={}) == "https://api.openai.com/v1"


def test_resolve_returns_both_independently():
    resolver = _resolver()
    cred = resolver.resolve(
        api_keys={"OpenAI": "sk-1"},
        settings=ProviderSetting(base_url="http://proxy"),
        env={},
    )
    assert cred == ResolvedCredential(endpoint="http://proxy", secret="sk-1")


def test_resolved_credential_repr_masks_secret():
    cred = ResolvedCredential(endpoint="http://x", secret="sk-very-secret")
    assert "sk-very-secret" not in repr(cred)
    assert "***" in repr(cred)


def test_provider_setting_from_dict_accepts_camel_case():
    setting = ProviderSetting.from_dict({"baseUrl": "http://b", "apiKey": "k", "enabled": False, "foo": 1})
    assert setting.base_url == "http://b"
    assert setting.api_key == "k"
    assert setting.enabled is False
    assert setting.extra == {"foo": 1}


def test_provider_setting_from_dict_with_both_spellings():
    setting = ProviderSetting.from_dict({
        "base_url": "http://snake",
        "baseUrl": "http://camel",
        "api_key": "k-snake",
        "apiKey": "k-camel",
    })
    assert setting.base_url == "http://snake"
    assert setting.api_key == "k-snake"
    assert setting.extra == {}


def test_provider_setting_from_dict_empty_snake_falls_back_to_camel():
    setting = ProviderSetting.from_dict({"base_url": "", "baseUrl": "http://camel", "api_key": None, "apiKey": "k"})
    assert setting.base_url == "http://camel"
    assert setting.api_key == "k"
    assert setting.extra == {}


def test_has_env_credential():
    assert has_env_credential("OPENAI_API_KEY", {"OPENAI_API_KEY": "x"})
    assert not has_env_credential("OPENAI_API_KEY", {"OPENAI_API_KEY": ""})
    assert not has_env_credential("", {"": "x"})
