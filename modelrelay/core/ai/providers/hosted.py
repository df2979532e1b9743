"""
Hosted OpenAI-compatible providers.

These backends differ only in endpoint, credential key and static catalog.
"""

from modelrelay.core.ai.base import model_entry
from modelrelay.core.ai.openai_compatible import OpenAICompatibleProvider

_TEXT = ("text-generation",)
_CODE = ("text-generation", "code-generation")


class GoogleProvider(OpenAICompatibleProvider):
    name = "Google"
    credential_key = "GOOGLE_GENERATIVE_AI_API_KEY"
    default_base_url = "https://generativelanguage.googleapis.com/v1beta/openai"
    get_api_key_link = "https://aistudio.google.com/app/apikey"
    static_models = (
        model_entry("gemini-1.5-flash-latest", "Gemini 1.5 Flash", "Google", 8192, _CODE),
        model_entry("gemini-2.0-flash-exp", "Gemini 2.0 Flash", "Google", 8192, _CODE),
        model_entry("gemini-1.5-flash-002", "Gemini 1.5 Flash-002", "Google", 8192, _TEXT),
        model_entry("gemini-1.5-flash-8b", "Gemini 1.5 Flash-8b", "Google", 8192, _TEXT),
        model_entry("gemini-1.5-pro-latest", "Gemini 1.5 Pro", "Google", 8192, _TEXT),
        model_entry("gemini-1.5-pro-002", "Gemini 1.5 Pro-002", "Google", 8192, _TEXT),
        model_entry("gemini-exp-1206", "Gemini exp-1206", "Google", 8192, _TEXT),
    )


class GroqProvider(OpenAICompatibleProvider):
    name = "Groq"
    credential_key = "GROQ_API_KEY"
    default_base_url = "https://api.groq.com/openai/v1"
    get_api_key_link = "https://console.groq.com/keys"
    static_models = (
        model_entry("mixtral-8x7b-32768", "Mixtral 8x7B-32K", "Groq", 32768, _TEXT),
        model_entry("llama2-70b-4096", "Llama2 70B", "Groq", 4096, _TEXT),
        model_entry("gemma-7b-it", "Gemma 7B-IT", "Groq", 8192, _TEXT),
    )


class MistralProvider(OpenAICompatibleProvider):
    name = "Mistral"
    credential_key = "MISTRAL_API_KEY"
    default_base_url = "https://api.mistral.ai/v1"
    get_api_key_link = "https://console.mistral.ai/api-keys/"
    static_models = (
        model_entry("open-mistral-7b", "Mistral 7B", "Mistral", 8000, _TEXT),
        model_entry("open-mixtral-8x7b", "Mistral 8x7B", "Mistral", 8000, _TEXT),
        model_entry("open-mixtral-8x22b", "Mistral 8x22B", "Mistral", 8000, _TEXT),
        model_entry("open-codestral-mamba", "Codestral Mamba", "Mistral", 8000, _CODE),
        model_entry("open-mistral-nemo", "Mistral Nemo", "Mistral", 8000, _TEXT),
        model_entry("ministral-8b-latest", "Mistral 8B", "Mistral", 8000, _TEXT),
        model_entry("mistral-small-latest", "Mistral Small", "Mistral", 8000, _TEXT),
        model_entry("codestral-latest", "Codestral", "Mistral", 8000, _CODE),
        model_entry("mistral-large-latest", "Mistral Large Latest", "Mistral", 8000, _TEXT),
    )


class DeepseekProvider(OpenAICompatibleProvider):
    name = "Deepseek"
    credential_key = "DEEPSEEK_API_KEY"
    default_base_url = "https://api.deepseek.com/beta"
    get_api_key_link = "https://platform.deepseek.com/apiKeys"
    static_models = (
        model_entry("deepseek-coder", "Deepseek-Coder", "Deepseek", 8000, _CODE),
        model_entry("deepseek-chat", "Deepseek-Chat", "Deepseek", 8000, _CODE),
    )


class XAIProvider(OpenAICompatibleProvider):
    name = "xAI"
    credential_key = "XAI_API_KEY"
    default_base_url = "https://api.x.ai/v1"
    get_api_key_link = "https://docs.x.ai/docs/quickstart#creating-an-api-key"
    static_models = (
        model_entry("grok-1", "Grok-1", "xAI", 8192, _CODE),
        model_entry("grok-0", "Grok-0", "xAI", 8192, _TEXT),
    )


class PerplexityProvider(OpenAICompatibleProvider):
    name = "Perplexity"
    credential_key = "PERPLEXITY_API_KEY"
    default_base_url = "https://api.perplexity.ai"
    get_api_key_link = "https://www.perplexity.ai/settings/api"
    static_models = (
        model_entry("pplx-70b-online", "PPLX 70B Online", "Perplexity", 4096, _TEXT),
        model_entry("pplx-7b-online", "PPLX 7B Online", "Perplexity", 4096, _TEXT),
        model_entry("pplx-70b-chat", "PPLX 70B Chat", "Perplexity", 4096, _TEXT),
    )


class HuggingFaceProvider(OpenAICompatibleProvider):
    name = "HuggingFace"
    credential_key = "HuggingFace_API_KEY"
    default_base_url = "https://api-inference.huggingface.co/v1"
    get_api_key_link = "https://huggingface.co/settings/tokens"
    static_models = (
        model_entry("meta-llama/Llama-2-70b-chat-hf", "Llama 2 70B", "HuggingFace", 4096, _CODE),
        model_entry("tiiuae/falcon-180B-chat", "Falcon 180B", "HuggingFace", 4096, _TEXT),
        model_entry("codellama/CodeLlama-70b-Instruct-hf", "CodeLlama 70B", "HuggingFace", 4096, _CODE),
        model_entry("google/gemma-7b-it", "Gemma 7B", "HuggingFace", 8192, _TEXT),
    )


class GithubProvider(OpenAICompatibleProvider):
    name = "Github"
    credential_key = "GITHUB_API_KEY"
    default_base_url = "https://models.inference.ai.azure.com"
    get_api_key_link = "https://github.com/settings/personal-access-tokens"
    # find more in https://github.com/marketplace?type=models
    static_models = (
        model_entry("gpt-4o", "GPT-4o", "Github", 128000, _CODE),
        model_entry("gpt-4o-mini", "GPT-4o Mini", "Github", 128000, _CODE),
        model_entry("o1", "o1", "Github", 200000, _CODE),
        model_entry("o1-mini", "o1-mini", "Github", 128000, _CODE),
    )
