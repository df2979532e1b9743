"""
Hyperbolic provider.

The listing endpoint marks chat-capable models with ``supports_chat``.
"""

from typing import Any, Dict

from modelrelay.core.ai.base import model_entry
from modelrelay.core.ai.openai_compatible import OpenAICompatibleProvider

_CODE = ("text-generation", "code-generation")


class HyperbolicProvider(OpenAICompatibleProvider):
    name = "Hyperbolic"
    credential_key = "HYPERBOLIC_API_KEY"
    default_base_url = "https://api.hyperbolic.xyz/v1"
    get_api_key_link = "https://app.hyperbolic.xyz/settings"
    models_path = "/models"
    static_models = (
        model_entry("Qwen/Qwen2.5-Coder-32B-Instruct", "Qwen 2.5 Coder 32B Instruct", "Hyperbolic", 8192, _CODE),
        model_entry("Qwen/Qwen2.5-72B-Instruct", "Qwen2.5-72B-Instruct", "Hyperbolic", 8192, _CODE),
        model_entry("deepseek-ai/DeepSeek-V2.5", "DeepSeek-V2.5", "Hyperbolic", 8192, _CODE),
        model_entry("Qwen/QwQ-32B-Preview", "QwQ-32B-Preview", "Hyperbolic", 8192, _CODE),
        model_entry("Qwen/Qwen2-VL-72B-Instruct", "Qwen2-VL-72B-Instruct", "Hyperbolic", 8192, _CODE),
    )

    def _is_chat_model(self, item: Dict[str, Any]) -> bool:
        return item.get("object") == "model" and bool(item.get("supports_chat"))
