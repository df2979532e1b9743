"""
OpenAI-Compatible Provider Implementation

Most backends expose the OpenAI chat-completions wire format, so they share
one handle (built on ``AsyncOpenAI``) and one model-listing routine.
"""

import logging
from typing import AsyncGenerator, List, Dict, Any, Mapping, Optional

import requests
from openai import AsyncOpenAI

from modelrelay.core.ai.base import (
    BaseProvider,
    CatalogEntry,
    CatalogFetchError,
    GenerationHandle,
    TEXT_GENERATION,
)
from modelrelay.core.ai.credentials import ProviderSetting, ResolvedCredential

logger = logging.getLogger(__name__)

DEFAULT_DYNAMIC_MAX_TOKENS = 8000

# Model ids that show up in /models listings but cannot chat.
NON_CHAT_MARKERS = (
    "embed",
    "whisper",
    "tts",
    "dall-e",
    "moderation",
    "transcribe",
    "davinci",
    "babbage",
)


class OpenAICompatibleHandle(GenerationHandle):
    """Generation handle that streams through ``AsyncOpenAI``."""

    def _client(self) -> AsyncOpenAI:
        # local servers accept any key, the SDK refuses an empty one
        return AsyncOpenAI(
            api_key=self.credential.secret or "not-needed",
            base_url=self.credential.endpoint,
        )

    async def stream(
        self,
        system_prompt: str,
        max_tokens: int,
        messages: List[Dict[str, Any]],
        **options: Any,
    ) -> AsyncGenerator[str, None]:
        """Stream responses from an OpenAI-compatible endpoint."""
        payload: List[Dict[str, Any]] = []
        if system_prompt:
            payload.append({"role": "system", "content": system_prompt})
        payload.extend(messages)

        stream = await self._client().chat.completions.create(
            model=self.model,
            messages=payload,
            max_tokens=max_tokens,
            stream=True,
            **options,
        )

        async for chunk in stream:
            if chunk.choices:
                content = chunk.choices[0].delta.content
                if content:
                    yield content


class OpenAICompatibleProvider(BaseProvider):
    """
    Provider speaking the OpenAI REST dialect.

    Set ``models_path`` to enable dynamic catalog discovery.
    """

    models_path: Optional[str] = None

    @property
    def supports_dynamic_models(self) -> bool:
        return self.models_path is not None

    def _create_handle(self, model: str, credential: ResolvedCredential) -> GenerationHandle:
        return OpenAICompatibleHandle(self.name, model, credential)

    # ------------------------------------------------------------------
    # Dynamic catalog
    # ------------------------------------------------------------------
    def list_dynamic_models(
        self,
        api_keys: Optional[Mapping[str, str]] = None,
        settings: Optional[ProviderSetting] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> List[CatalogEntry]:
        """
        Fetch the backend's live model list.

        Returns an empty list when no secret is available or the request
        times out.

        Raises:
            CatalogFetchError: On HTTP or payload errors
        """
        if not self.supports_dynamic_models:
            return []

        credential = self.resolve_credentials(api_keys=api_keys, settings=settings, env=env)
        if self.requires_secret and not credential.secret:
            logger.debug(f"{self.name}: no API key, skipping dynamic model listing")
            return []
        if not credential.endpoint:
            return []

        payload = self._fetch_json(credential.endpoint + self.models_path, credential.secret)
        if payload is None:
            return []

        try:
            entries = self._parse_models(payload)
        except (KeyError, TypeError, AttributeError, ValueError, OverflowError) as e:
            raise CatalogFetchError(self.name, f"unexpected model listing format: {e}")

        logger.info(f"{self.name}: discovered {len(entries)} models")
        return entries

    def _fetch_json(self, url: str, secret: Optional[str]) -> Optional[Any]:
        headers = {"Authorization": f"Bearer {secret}"} if secret else {}
        try:
            resp = requests.get(url, headers=headers, timeout=self.fetch_timeout)
            resp.raise_for_status()
            return resp.json()
        except requests.Timeout:
            logger.warning(f"{self.name}: model listing timed out after {self.fetch_timeout}s")
            return None
        except requests.RequestException as e:
            raise CatalogFetchError(self.name, f"model listing failed: {e}")
        except ValueError as e:
            raise CatalogFetchError(self.name, f"model listing is not JSON: {e}")

    def _parse_models(self, payload: Any) -> List[CatalogEntry]:
        entries: List[CatalogEntry] = []
        for item in payload["data"]:
            if not self._is_chat_model(item):
                continue
            context_length = item.get("context_length") or item.get("context_window")
            entries.append(self._dynamic_entry(item["id"], context_length))
        return entries

    def _is_chat_model(self, item: Dict[str, Any]) -> bool:
        if item.get("object", "model") != "model":
            return False
        model_id = str(item.get("id", "")).lower()
        return bool(model_id) and not any(marker in model_id for marker in NON_CHAT_MARKERS)

    def _dynamic_entry(self, model_id: str, context_length: Optional[int]) -> CatalogEntry:
        if context_length:
            label = f"{model_id} - context {int(context_length) // 1000}k"
        else:
            label = f"{model_id} - context N/A"
        limit = int(context_length) if context_length else DEFAULT_DYNAMIC_MAX_TOKENS
        return CatalogEntry(
            name=model_id,
            label=label,
            provider=self.name,
            max_token_allowed=limit,
            max_tokens=limit,
            capabilities=(TEXT_GENERATION, "code-generation"),
        )
