"""Anthropic provider (OpenAI-compatible endpoint)."""

from modelrelay.core.ai.base import model_entry
from modelrelay.core.ai.openai_compatible import OpenAICompatibleProvider

_CODE = ("text-generation", "code-generation")


class AnthropicProvider(OpenAICompatibleProvider):
    name = "Anthropic"
    credential_key = "ANTHROPIC_API_KEY"
    default_base_url = "https://api.anthropic.com/v1"
    get_api_key_link = "https://console.anthropic.com/settings/keys"
    static_models = (
        model_entry("claude-3-5-sonnet-latest", "Claude 3.5 Sonnet (new)", "Anthropic", 8000, _CODE),
        model_entry("claude-3-5-sonnet-20240620", "Claude 3.5 Sonnet (old)", "Anthropic", 8000, _CODE),
        model_entry("claude-3-5-haiku-latest", "Claude 3.5 Haiku (new)", "Anthropic", 8000, _CODE),
        model_entry("claude-3-opus-latest", "Claude 3 Opus", "Anthropic", 8000, _CODE),
        model_entry("claude-3-sonnet-20240229", "Claude 3 Sonnet", "Anthropic", 8000, _CODE),
        model_entry("claude-3-haiku-20240307", "Claude 3 Haiku", "Anthropic", 8000, _CODE),
    )
