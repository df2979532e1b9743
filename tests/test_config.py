"""
Tests for configuration loading (ConfigService + RelayConfig).
"""

import json

import pytest

from modelrelay.config.settings import (
    CONFIG_ENV_VAR,
    ContextBudgetPolicy,
    RelayConfig,
    load_config,
    resolve_config_path,
    save_config,
)
from modelrelay.core.context_assembler import DEFAULT_IGNORE_PATTERNS
from modelrelay.services.config_service import ConfigService


def test_defaults():
    config = RelayConfig()
    assert config.default_provider == "Anthropic"
    assert config.default_model == "claude-3-5-sonnet-latest"
    assert config.max_tokens == 8000
    assert config.work_dir == "/home/project"
    assert config.ignore_patterns == DEFAULT_IGNORE_PATTERNS
    assert config.context_max_tokens == 0
    assert config.context_budget_policy is ContextBudgetPolicy.WARN


def test_from_dict_converts_types_and_keeps_unknown_keys():
    config = RelayConfig.from_dict({
        "default_provider": "OpenAI",
        "max_tokens": "4096",
        "ignore_patterns": ["*.tmp"],
        "context_budget_policy": "drop_files",
        "catalog_fetch_timeout": 3,
        "theme": "dark",
    })
    assert config.default_provider == "OpenAI"
    assert config.max_tokens == 4096
    assert config.ignore_patterns == ("*.tmp",)
    assert config.context_budget_policy is ContextBudgetPolicy.DROP_FILES
    assert config.catalog_fetch_timeout == 3.0
    assert config.extra == {"theme": "dark"}


def test_invalid_policy_raises():
    with pytest.raises(ValueError):
        RelayConfig.from_dict({"context_budget_policy": "truncate"})


def test_missing_file_yields_defaults(tmp_path):
    config = load_config(tmp_path / "absent.json")
    assert config == RelayConfig()


def test_invalid_json_raises(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError, match="valid JSON"):
        load_config(path)


def test_non_object_raises(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)


def test_save_then_load(tmp_path):
    path = tmp_path / "nested" / "config.json"
    original = RelayConfig(default_provider="Groq", context_max_tokens=1200)
    assert save_config(original, path)

    assert json.loads(path.read_text(encoding="utf-8"))["context_budget_policy"] == "warn"
    assert load_config(path) == original


def test_env_var_selects_config_path(tmp_path, monkeypatch):
    path = tmp_path / "from-env.json"
    path.write_text(json.dumps({"default_model": "gpt-4"}), encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

    assert resolve_config_path() == path
    assert load_config().default_model == "gpt-4"
    # explicit path still wins
    assert resolve_config_path(tmp_path / "x.json") == tmp_path / "x.json"


def test_config_service_dot_notation(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"providers": {"Ollama": {"base_url": "http://gpu"}}}), encoding="utf-8")
    service = ConfigService(config_path=path)
    service.load()

    assert service.get("providers.Ollama.base_url") == "http://gpu"
    assert service.get("providers.Missing.base_url", "dflt") == "dflt"
    assert service.get("providers.Ollama.base_url.deeper") is None
