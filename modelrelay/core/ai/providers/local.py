"""
Local providers (Ollama, LM Studio).

Neither needs a secret. Both serve the OpenAI dialect under ``/v1`` and are
discovered dynamically; their static catalogs are empty.
"""

from typing import Any, List

from modelrelay.core.ai.base import CatalogEntry, GenerationHandle
from modelrelay.core.ai.credentials import ResolvedCredential
from modelrelay.core.ai.openai_compatible import OpenAICompatibleHandle, OpenAICompatibleProvider


class _LocalProvider(OpenAICompatibleProvider):
    requires_secret = False

    def _create_handle(self, model: str, credential: ResolvedCredential) -> GenerationHandle:
        endpoint = f"{credential.endpoint}/v1" if credential.endpoint else None
        return OpenAICompatibleHandle(
            self.name, model, ResolvedCredential(endpoint=endpoint, secret=credential.secret)
        )


class OllamaProvider(_LocalProvider):
    name = "Ollama"
    base_url_key = "OLLAMA_API_BASE_URL"
    default_base_url = "http://127.0.0.1:11434"
    get_api_key_link = "https://ollama.com/download"
    models_path = "/api/tags"

    def _parse_models(self, payload: Any) -> List[CatalogEntry]:
        entries: List[CatalogEntry] = []
        for item in payload["models"]:
            model_id = item["name"]
            if not self._is_chat_model({"id": model_id}):
                continue
            entries.append(self._dynamic_entry(model_id, None))
        return entries


class LMStudioProvider(_LocalProvider):
    name = "LMStudio"
    base_url_key = "LMSTUDIO_API_BASE_URL"
    default_base_url = "http://127.0.0.1:1234"
    get_api_key_link = "https://lmstudio.ai/"
    models_path = "/v1/models"
