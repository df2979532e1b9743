"""Built-in provider variants."""

from modelrelay.core.ai.providers.default_provider import DefaultProvider
from modelrelay.core.ai.providers.anthropic_provider import AnthropicProvider
from modelrelay.core.ai.providers.openai_provider import OpenAIProvider
from modelrelay.core.ai.providers.hyperbolic_provider import HyperbolicProvider
from modelrelay.core.ai.providers.hosted import (
    GoogleProvider,
    GroqProvider,
    MistralProvider,
    DeepseekProvider,
    XAIProvider,
    PerplexityProvider,
    HuggingFaceProvider,
    GithubProvider,
)
from modelrelay.core.ai.providers.local import OllamaProvider, LMStudioProvider

BUILTIN_PROVIDERS = (
    DefaultProvider,
    AnthropicProvider,
    OpenAIProvider,
    GoogleProvider,
    GroqProvider,
    MistralProvider,
    DeepseekProvider,
    XAIProvider,
    PerplexityProvider,
    HuggingFaceProvider,
    GithubProvider,
    HyperbolicProvider,
    OllamaProvider,
    LMStudioProvider,
)

__all__ = [
    "BUILTIN_PROVIDERS",
    "DefaultProvider",
    "AnthropicProvider",
    "OpenAIProvider",
    "GoogleProvider",
    "GroqProvider",
    "MistralProvider",
    "DeepseekProvider",
    "XAIProvider",
    "PerplexityProvider",
    "HuggingFaceProvider",
    "GithubProvider",
    "HyperbolicProvider",
    "OllamaProvider",
    "LMStudioProvider",
]
