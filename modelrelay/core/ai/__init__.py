"""
AI Provider Abstraction Layer

Provides a uniform contract for every model backend plus the registry that
owns them. Uses strategy pattern for provider switching.
"""

from modelrelay.core.ai.base import (
    BaseProvider,
    CatalogEntry,
    CatalogFetchError,
    GenerationHandle,
    MissingCredentialError,
)
from modelrelay.core.ai.credentials import CredentialResolver, ProviderSetting, ResolvedCredential
from modelrelay.core.ai.openai_compatible import OpenAICompatibleProvider, OpenAICompatibleHandle
from modelrelay.core.ai.registry import ProviderRegistry, create_default_registry

__all__ = [
    "BaseProvider",
    "CatalogEntry",
    "CatalogFetchError",
    "GenerationHandle",
    "MissingCredentialError",
    "CredentialResolver",
    "ProviderSetting",
    "ResolvedCredential",
    "OpenAICompatibleProvider",
    "OpenAICompatibleHandle",
    "ProviderRegistry",
    "create_default_registry",
]
