"""
Base AI Provider Interface

Abstract base class and shared data types for all model providers.
Implements strategy pattern for provider abstraction: the registry and the
orchestrator only ever talk to ``BaseProvider``.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict
from typing import AsyncGenerator, List, Dict, Any, Mapping, Optional, Tuple

from modelrelay.core.ai.credentials import (
    CredentialResolver,
    ProviderSetting,
    ResolvedCredential,
)

logger = logging.getLogger(__name__)

TEXT_GENERATION = "text-generation"


class MissingCredentialError(RuntimeError):
    """
    Raised when a provider is bound without any available secret.

    This is the only error that aborts request assembly.
    """

    def __init__(self, provider_name: str, credential_key: str):
        self.provider_name = provider_name
        self.credential_key = credential_key
        super().__init__(
            f"Missing API key for {provider_name} provider. "
            f"Please add {credential_key} to use this provider."
        )


class CatalogFetchError(RuntimeError):
    """Raised when a provider's model-listing endpoint cannot be read."""

    def __init__(self, provider_name: str, message: str):
        self.provider_name = provider_name
        super().__init__(f"{provider_name}: {message}")


@dataclass(frozen=True)
class CatalogEntry:
    """A described model served by one provider."""
    name: str
    label: str
    provider: str
    max_token_allowed: int
    max_tokens: int
    kind: str = TEXT_GENERATION
    capabilities: Tuple[str, ...] = (TEXT_GENERATION,)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["capabilities"] = list(self.capabilities)
        return data


def model_entry(
    name: str,
    label: str,
    provider: str,
    max_tokens: int,
    capabilities: Tuple[str, ...] = (TEXT_GENERATION,),
) -> CatalogEntry:
    """Shorthand for static catalogs where both token ceilings match."""
    return CatalogEntry(
        name=name,
        label=label,
        provider=provider,
        max_token_allowed=max_tokens,
        max_tokens=max_tokens,
        capabilities=tuple(capabilities),
    )


class GenerationHandle(ABC):
    """
    A model bound to resolved credentials, ready for generation.

    The handle is the only thing the orchestrator passes on to the
    streaming primitive.
    """

    def __init__(self, provider_name: str, model: str, credential: ResolvedCredential):
        self.provider_name = provider_name
        self.model = model
        self.credential = credential

    @property
    def endpoint(self) -> Optional[str]:
        return self.credential.endpoint

    @abstractmethod
    def stream(
        self,
        system_prompt: str,
        max_tokens: int,
        messages: List[Dict[str, Any]],
        **options: Any,
    ) -> AsyncGenerator[str, None]:
        """
        Stream generated text for the given chat messages.

        Args:
            system_prompt: Fully resolved system prompt
            max_tokens: Token budget for this generation
            messages: OpenAI-style chat messages (without the system message)
            **options: Extra provider parameters (temperature, ...)

        Yields:
            Content chunks as strings
        """

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(provider={self.provider_name!r}, "
            f"model={self.model!r}, endpoint={self.endpoint!r})"
        )


class BaseProvider(ABC):
    """
    Abstract base class for all model providers.

    Subclasses declare:
      - ``name``: globally unique provider name
      - ``credential_key``: environment key holding the secret
      - ``default_base_url``: endpoint used when nothing overrides it
      - ``base_url_key``: optional environment key for an endpoint override
      - ``static_models``: the fixed catalog
    """

    name: str = ""
    credential_key: str = ""
    default_base_url: Optional[str] = None
    base_url_key: Optional[str] = None
    requires_secret: bool = True
    get_api_key_link: Optional[str] = None
    static_models: Tuple[CatalogEntry, ...] = ()

    def __init__(self, fetch_timeout: float = 10.0):
        self.fetch_timeout = fetch_timeout
        self._resolver = CredentialResolver(
            provider_name=self.name,
            credential_key=self.credential_key,
            default_base_url=self.default_base_url,
            base_url_key=self.base_url_key,
        )

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------
    def list_static_models(self) -> List[CatalogEntry]:
        """Return the fixed catalog declared for this provider."""
        return list(self.static_models)

    @property
    def supports_dynamic_models(self) -> bool:
        return False

    def list_dynamic_models(
        self,
        api_keys: Optional[Mapping[str, str]] = None,
        settings: Optional[ProviderSetting] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> List[CatalogEntry]:
        """
        Fetch the backend's live model catalog.

        Providers without a listing endpoint return an empty list.

        Raises:
            CatalogFetchError: If the listing endpoint fails or returns garbage
        """
        return []

    # ------------------------------------------------------------------
    # Credentials / binding
    # ------------------------------------------------------------------
    def resolve_credentials(
        self,
        api_keys: Optional[Mapping[str, str]] = None,
        settings: Optional[ProviderSetting] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> ResolvedCredential:
        return self._resolver.resolve(api_keys=api_keys, settings=settings, env=env)

    def bind(
        self,
        model: str,
        api_keys: Optional[Mapping[str, str]] = None,
        settings: Optional[ProviderSetting] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> GenerationHandle:
        """
        Attach resolved credentials to a model.

        Args:
            model: Model identity to bind
            api_keys: Per-request credential map keyed by provider name
            settings: Per-request settings for this provider
            env: Environment mapping (defaults to ``os.environ``)

        Returns:
            GenerationHandle for the model

        Raises:
            MissingCredentialError: If the provider needs a secret and none resolved
        """
        credential = self.resolve_credentials(api_keys=api_keys, settings=settings, env=env)
        if self.requires_secret and not credential.secret:
            raise MissingCredentialError(self.name, self.credential_key)
        logger.debug(f"Binding {self.name}/{model} at {credential.endpoint}")
        return self._create_handle(model, credential)

    @abstractmethod
    def _create_handle(self, model: str, credential: ResolvedCredential) -> GenerationHandle:
        """Construct the provider-specific generation handle."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
