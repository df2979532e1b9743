"""
OpenAI Provider Implementation

Static catalog plus dynamic discovery through ``GET /models``.
"""

from modelrelay.core.ai.base import model_entry
from modelrelay.core.ai.openai_compatible import OpenAICompatibleProvider

_CODE = ("text-generation", "code-generation")


class OpenAIProvider(OpenAICompatibleProvider):
    name = "OpenAI"
    credential_key = "OPENAI_API_KEY"
    default_base_url = "https://api.openai.com/v1"
    get_api_key_link = "https://platform.openai.com/api-keys"
    models_path = "/models"
    static_models = (
        model_entry("gpt-4-turbo-preview", "GPT-4 Turbo", "OpenAI", 128000, _CODE),
        model_entry("gpt-4-vision-preview", "GPT-4 Vision", "OpenAI", 128000, _CODE + ("vision",)),
        model_entry("gpt-4", "GPT-4", "OpenAI", 8192, _CODE),
        model_entry("gpt-3.5-turbo", "GPT-3.5 Turbo", "OpenAI", 4096, _CODE),
    )
