"""
Credential Resolver

Resolves the (endpoint, secret) pair for one provider.

Secret precedence, highest first:
  1. Explicit per-request credential map keyed by provider name
  2. Per-request provider settings
  3. Environment, keyed by the provider's credential key

Endpoint precedence:
  1. Per-request provider settings
  2. Environment, keyed by the provider's endpoint key (if it declares one)
  3. The provider's default endpoint

Empty strings are treated as absent at every tier.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional


@dataclass
class ProviderSetting:
    """Per-request settings for one provider (endpoint/secret overrides)."""
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    enabled: bool = True
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ProviderSetting":
        data = dict(data or {})
        # both spellings are consumed so neither leaks into extra
        base_url, camel_base_url = data.pop("base_url", None), data.pop("baseUrl", None)
        api_key, camel_api_key = data.pop("api_key", None), data.pop("apiKey", None)
        base_url = base_url or camel_base_url
        api_key = api_key or camel_api_key
        enabled = bool(data.pop("enabled", True))
        data.pop("name", None)
        return cls(base_url=base_url, api_key=api_key, enabled=enabled, extra=data)


@dataclass(frozen=True)
class ResolvedCredential:
    """Transient credential value, scoped to one invocation."""
    endpoint: Optional[str]
    secret: Optional[str]

    def __repr__(self) -> str:
        # never print the secret
        masked = "***" if self.secret else None
        return f"ResolvedCredential(endpoint={self.endpoint!r}, secret={masked!r})"


def _present(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value)
    return value if value.strip() else None


class CredentialResolver:
    """Applies the fixed precedence chain for one provider."""

    def __init__(
        self,
        provider_name: str,
        credential_key: str = "",
        default_base_url: Optional[str] = None,
        base_url_key: Optional[str] = None,
    ):
        self.provider_name = provider_name
        self.credential_key = credential_key
        self.default_base_url = default_base_url
        self.base_url_key = base_url_key

    def resolve_secret(
        self,
        api_keys: Optional[Mapping[str, str]] = None,
        settings: Optional[ProviderSetting] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> Optional[str]:
        env = os.environ if env is None else env
        explicit = _present((api_keys or {}).get(self.provider_name))
        if explicit:
            return explicit
        if settings is not None:
            from_settings = _present(settings.api_key)
            if from_settings:
                return from_settings
        if self.credential_key:
            return _present(env.get(self.credential_key))
        return None

    def resolve_endpoint(
        self,
        settings: Optional[ProviderSetting] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> Optional[str]:
        env = os.environ if env is None else env
        endpoint = _present(settings.base_url) if settings is not None else None
        if not endpoint and self.base_url_key:
            endpoint = _present(env.get(self.base_url_key))
        if not endpoint:
            endpoint = self.default_base_url
        if endpoint and endpoint.endswith("/"):
            endpoint = endpoint.rstrip("/")
        return endpoint

    def resolve(
        self,
        api_keys: Optional[Mapping[str, str]] = None,
        settings: Optional[ProviderSetting] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> ResolvedCredential:
        """
        Resolve endpoint and secret independently.

        Args:
            api_keys: Explicit credential map (provider name -> secret)
            settings: Settings for this provider
            env: Environment mapping (defaults to ``os.environ``)

        Returns:
            ResolvedCredential
        """
        return ResolvedCredential(
            endpoint=self.resolve_endpoint(settings=settings, env=env),
            secret=self.resolve_secret(api_keys=api_keys, settings=settings, env=env),
        )


def has_env_credential(credential_key: str, env: Optional[Mapping[str, str]] = None) -> bool:
    """Whether the environment tier alone can supply a secret."""
    if not credential_key:
        return False
    env = os.environ if env is None else env
    return _present(env.get(credential_key)) is not None
