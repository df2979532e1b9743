"""
Default Provider

Credential-free fallback provider. Its handle echoes the last message back,
which keeps the pipeline usable with no backend configured.
"""

from typing import AsyncGenerator, List, Dict, Any

from modelrelay.core.ai.base import BaseProvider, GenerationHandle, model_entry
from modelrelay.core.ai.credentials import ResolvedCredential


class EchoHandle(GenerationHandle):
    """Returns the text of the last message as the whole response."""

    async def stream(
        self,
        system_prompt: str,
        max_tokens: int,
        messages: List[Dict[str, Any]],
        **options: Any,
    ) -> AsyncGenerator[str, None]:
        if not messages:
            return
        content = messages[-1].get("content") or ""
        if isinstance(content, list):
            content = "".join(
                part.get("text") or "" for part in content if part.get("type") == "text"
            )
        if content:
            yield content


class DefaultProvider(BaseProvider):
    name = "Default"
    requires_secret = False
    static_models = (
        model_entry("default", "Default", "Default", 4000),
    )

    def _create_handle(self, model: str, credential: ResolvedCredential) -> GenerationHandle:
        return EchoHandle(self.name, model, credential)
