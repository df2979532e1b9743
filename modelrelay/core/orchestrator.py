"""
Request Orchestrator

Entry point of the pipeline. Given a conversation plus optional per-request
credentials, provider settings, workspace snapshot and prompt id, it:

  1. applies in-band directives to pick the active model/provider
  2. resolves the provider (unknown -> default)
  3. computes the token budget from the catalog (unknown -> fallback)
  4. resolves the system prompt (unknown template -> default)
  5. appends the workspace context, if a snapshot was supplied
  6. binds the provider to the model

Only ``MissingCredentialError`` from step 6 aborts a request; every other
miss degrades to a documented default.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, AsyncGenerator, Dict, List, Mapping, Optional, Union

from modelrelay.config.settings import ContextBudgetPolicy, RelayConfig
from modelrelay.core.ai.base import BaseProvider, CatalogEntry, GenerationHandle
from modelrelay.core.ai.credentials import ProviderSetting
from modelrelay.core.ai.registry import ProviderRegistry
from modelrelay.core.context_assembler import ContextAssembler, FileBlock, WorkspaceSnapshot
from modelrelay.core.conversation import ConversationTurn, estimate_tokens, to_openai_messages
from modelrelay.core.directives import DirectiveParser, apply_directives
from modelrelay.core.prompts import PromptLibrary, PromptOptions

logger = logging.getLogger(__name__)

TurnLike = Union[ConversationTurn, Mapping[str, Any]]
SettingLike = Union[ProviderSetting, Mapping[str, Any]]


@dataclass
class InvocationParameters:
    """Everything the generation primitive needs for one call."""
    system_prompt: str
    token_budget: int
    bound_model: GenerationHandle
    messages: List[ConversationTurn]
    model: str
    provider: str
    context_files: List[str] = field(default_factory=list)

    def chat_messages(self) -> List[Dict[str, Any]]:
        return to_openai_messages(self.messages)

    def describe(self) -> Dict[str, Any]:
        """Secret-free summary, safe to print or log."""
        return {
            "provider": self.provider,
            "model": self.model,
            "endpoint": self.bound_model.endpoint,
            "token_budget": self.token_budget,
            "system_prompt_chars": len(self.system_prompt),
            "context_files": list(self.context_files),
            "messages": self.chat_messages(),
        }


@dataclass
class ChatRequest:
    """Inbound request as handed over by the transport layer."""
    messages: List[ConversationTurn]
    api_keys: Dict[str, str] = field(default_factory=dict)
    provider_settings: Dict[str, ProviderSetting] = field(default_factory=dict)
    files: Optional[WorkspaceSnapshot] = None
    prompt_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChatRequest":
        return cls(
            messages=_normalize_turns(data.get("messages") or []),
            api_keys=dict(data.get("api_keys") or data.get("apiKeys") or {}),
            provider_settings=_normalize_settings(
                data.get("provider_settings") or data.get("providerSettings")
            ),
            files=data.get("files"),
            prompt_id=data.get("prompt_id") or data.get("promptId"),
        )


def _normalize_turns(turns: List[TurnLike]) -> List[ConversationTurn]:
    return [t if isinstance(t, ConversationTurn) else ConversationTurn.from_dict(t) for t in turns]


def _normalize_settings(
    settings: Optional[Mapping[str, SettingLike]],
) -> Dict[str, ProviderSetting]:
    normalized: Dict[str, ProviderSetting] = {}
    for name, value in (settings or {}).items():
        normalized[name] = value if isinstance(value, ProviderSetting) else ProviderSetting.from_dict(value)
    return normalized


class RequestOrchestrator:
    """
    Turns a request into ``InvocationParameters`` and triggers generation.

    Holds no per-request state, so one instance can serve concurrent
    requests.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        config: Optional[RelayConfig] = None,
        prompt_library: Optional[PromptLibrary] = None,
        assembler: Optional[ContextAssembler] = None,
        parser: Optional[DirectiveParser] = None,
        env: Optional[Mapping[str, str]] = None,
    ):
        self.registry = registry
        self.config = config or RelayConfig()
        self.prompt_library = prompt_library or PromptLibrary()
        self.assembler = assembler or ContextAssembler(
            ignore_patterns=self.config.ignore_patterns,
            work_dir=self.config.work_dir,
        )
        self.parser = parser or DirectiveParser()
        self.env = env

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def run(
        self,
        messages: List[TurnLike],
        api_keys: Optional[Mapping[str, str]] = None,
        provider_settings: Optional[Mapping[str, SettingLike]] = None,
        files: Optional[WorkspaceSnapshot] = None,
        prompt_id: Optional[str] = None,
    ) -> InvocationParameters:
        """
        Resolve the invocation parameters for one request.

        Raises:
            MissingCredentialError: If the resolved provider has no secret
        """
        turns = _normalize_turns(messages)
        settings = _normalize_settings(provider_settings)
        catalog = self.registry.aggregated_catalog()
        known_models = {entry.name for entry in catalog}

        selection = apply_directives(
            turns,
            self.parser,
            is_known_model=known_models.__contains__,
            default_model=self.config.default_model,
            default_provider=self.config.default_provider,
        )

        provider = self._resolve_provider(selection.provider)
        entry = self.registry.find_model(selection.model, provider_name=provider.name, catalog=catalog)
        token_budget = self._token_budget(selection.model, entry)

        system_prompt = self._system_prompt(prompt_id)
        context_files: List[str] = []
        if files is not None:
            context, context_files = self._workspace_context(files, token_budget)
            if context:
                system_prompt = f"{system_prompt}\n\n{context}"

        handle = provider.bind(
            selection.model,
            api_keys=api_keys,
            settings=settings.get(provider.name),
            env=self.env,
        )
        logger.info(
            f"Prepared request for {provider.name}/{selection.model} "
            f"(budget={token_budget}, context_files={len(context_files)})"
        )

        return InvocationParameters(
            system_prompt=system_prompt,
            token_budget=token_budget,
            bound_model=handle,
            messages=selection.turns,
            model=selection.model,
            provider=provider.name,
            context_files=context_files,
        )

    def run_request(self, request: ChatRequest) -> InvocationParameters:
        return self.run(
            request.messages,
            api_keys=request.api_keys,
            provider_settings=request.provider_settings,
            files=request.files,
            prompt_id=request.prompt_id,
        )

    async def stream_text(self, request: ChatRequest, **options: Any) -> AsyncGenerator[str, None]:
        """Run the pipeline and make the single generation call."""
        params = self.run_request(request)
        async for chunk in params.bound_model.stream(
            params.system_prompt,
            params.token_budget,
            params.chat_messages(),
            **options,
        ):
            yield chunk

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------
    def _resolve_provider(self, name: str) -> BaseProvider:
        provider = self.registry.get(name)
        if provider is None:
            provider = self.registry.get_default()
            logger.warning(f"Unknown provider '{name}', falling back to {provider.name}")
        return provider

    def _token_budget(self, model: str, entry: Optional[CatalogEntry]) -> int:
        if entry is None:
            logger.debug(f"Model '{model}' not in catalog, using fallback budget {self.config.max_tokens}")
            return self.config.max_tokens
        # a zero or missing ceiling means "unknown", never "zero tokens"
        return entry.max_token_allowed or self.config.max_tokens

    def _system_prompt(self, prompt_id: Optional[str]) -> str:
        options = PromptOptions(
            cwd=self.config.work_dir,
            modification_tag_name=self.config.modification_tag_name,
        )
        if prompt_id:
            prompt = self.prompt_library.get_prompt(prompt_id, options)
            if prompt is not None:
                return prompt
            logger.warning(f"Unknown prompt template '{prompt_id}', using default prompt")
        return self.prompt_library.get_default_prompt(options)

    def _workspace_context(self, files: WorkspaceSnapshot, token_budget: int):
        blocks = self.assembler.collect(files)
        context = self.assembler.render(blocks)
        # without a configured context limit, the request's token budget applies
        limit = self.config.context_max_tokens if self.config.context_max_tokens > 0 else token_budget
        if not context or limit <= 0:
            return context, [b.path for b in blocks]

        estimate = estimate_tokens(context)
        if estimate <= limit:
            return context, [b.path for b in blocks]

        if self.config.context_budget_policy is ContextBudgetPolicy.WARN:
            logger.warning(
                f"Workspace context (~{estimate} tokens) exceeds the "
                f"{limit}-token context limit; forwarding it unchanged"
            )
            return context, [b.path for b in blocks]

        kept = self._drop_files_to_fit(blocks, limit)
        return self.assembler.render(kept), [b.path for b in kept]

    def _drop_files_to_fit(self, blocks: List[FileBlock], limit: int) -> List[FileBlock]:
        kept = list(blocks)
        while kept and estimate_tokens(self.assembler.render(kept)) > limit:
            dropped = kept.pop()
            logger.warning(f"Dropping {dropped.path} from workspace context to fit {limit} tokens")
        return kept
