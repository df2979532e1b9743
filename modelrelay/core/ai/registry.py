"""
Provider Registry

Owns the set of known providers, resolves providers by name with a fixed
default, and aggregates catalogs for model lookup.

Supports:
- Idempotent registration (re-registering a name replaces the entry)
- Static catalog aggregation (no network)
- Concurrent dynamic catalog refresh with per-provider failure isolation
"""

import asyncio
import logging
from typing import Dict, List, Mapping, Optional, Tuple

from modelrelay.core.ai.base import BaseProvider, CatalogEntry, CatalogFetchError
from modelrelay.core.ai.credentials import ProviderSetting, has_env_credential
from modelrelay.core.ai.providers import BUILTIN_PROVIDERS

logger = logging.getLogger(__name__)


def _is_enabled(settings: Optional[ProviderSetting]) -> bool:
    return settings is None or settings.enabled


class ProviderRegistry:
    """
    Registry for model providers.

    The default provider is registered at construction, so ``get_default``
    always succeeds.
    """

    def __init__(self, default_provider: BaseProvider):
        self._providers: Dict[str, BaseProvider] = {}
        self._default_name = default_provider.name
        self.register(default_provider)

    def register(self, provider: BaseProvider) -> None:
        """
        Register a provider instance (upsert by name).

        Args:
            provider: Provider instance
        """
        if provider.name in self._providers:
            logger.warning(f"Provider {provider.name} already registered, replacing")
        self._providers[provider.name] = provider
        logger.info(f"Registered provider: {provider.name}")

    def get(self, name: Optional[str]) -> Optional[BaseProvider]:
        if not name:
            return None
        return self._providers.get(name)

    def get_default(self) -> BaseProvider:
        return self._providers[self._default_name]

    def get_all(self) -> List[BaseProvider]:
        return list(self._providers.values())

    def names(self) -> List[str]:
        return list(self._providers)

    def check_credential(self, provider_name: str, env: Optional[Mapping[str, str]] = None) -> bool:
        """
        Whether the environment alone supplies a secret for a provider.

        Unknown providers report False; providers that need no secret report True.
        """
        provider = self.get(provider_name)
        if provider is None:
            return False
        if not provider.requires_secret:
            return True
        return has_env_credential(provider.credential_key, env)

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------
    def aggregated_catalog(self) -> List[CatalogEntry]:
        """Flatten every provider's static catalog, in registration order."""
        catalog: List[CatalogEntry] = []
        for provider in self._providers.values():
            catalog.extend(provider.list_static_models())
        return catalog

    def find_model(
        self,
        name: str,
        provider_name: Optional[str] = None,
        catalog: Optional[List[CatalogEntry]] = None,
    ) -> Optional[CatalogEntry]:
        """
        Look up a catalog entry by model name.

        Model names are only unique per provider; an entry owned by
        ``provider_name`` wins over the first match from any provider.
        """
        entries = catalog if catalog is not None else self.aggregated_catalog()
        first: Optional[CatalogEntry] = None
        for entry in entries:
            if entry.name != name:
                continue
            if provider_name and entry.provider == provider_name:
                return entry
            if first is None:
                first = entry
        return first

    async def refresh_catalog(
        self,
        api_keys: Optional[Mapping[str, str]] = None,
        provider_settings: Optional[Mapping[str, ProviderSetting]] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> List[CatalogEntry]:
        """
        Build the full catalog, fetching dynamic catalogs concurrently.

        A provider whose fetch fails contributes no dynamic entries; the
        others are unaffected.
        Providers disabled in their settings are not queried.

        Returns:
            Dynamic entries followed by static entries, unique per
            (provider, model name)
        """
        provider_settings = provider_settings or {}
        dynamic = [
            p for p in self._providers.values()
            if p.supports_dynamic_models and _is_enabled(provider_settings.get(p.name))
        ]

        results = await asyncio.gather(
            *(
                self._fetch_dynamic(p, api_keys, provider_settings.get(p.name), env)
                for p in dynamic
            )
        )

        merged: List[CatalogEntry] = []
        seen = set()
        for entry in [e for batch in results for e in batch] + self.aggregated_catalog():
            key: Tuple[str, str] = (entry.provider, entry.name)
            if key in seen:
                continue
            seen.add(key)
            merged.append(entry)
        return merged

    async def _fetch_dynamic(
        self,
        provider: BaseProvider,
        api_keys: Optional[Mapping[str, str]],
        settings: Optional[ProviderSetting],
        env: Optional[Mapping[str, str]],
    ) -> List[CatalogEntry]:
        try:
            return await asyncio.to_thread(
                provider.list_dynamic_models, api_keys, settings, env
            )
        except CatalogFetchError as e:
            logger.error(f"Error getting dynamic models {provider.name}: {e}")
            return []
        except Exception as e:
            logger.error(f"Unexpected error getting dynamic models {provider.name}: {e}", exc_info=True)
            return []


def create_default_registry(
    default_provider: str = "Anthropic",
    fetch_timeout: float = 10.0,
) -> ProviderRegistry:
    """
    Build a registry holding every built-in provider.

    Args:
        default_provider: Name of the provider returned by ``get_default``
        fetch_timeout: Timeout (seconds) for dynamic catalog requests

    Raises:
        ValueError: If ``default_provider`` is not a built-in provider
    """
    providers = [cls(fetch_timeout=fetch_timeout) for cls in BUILTIN_PROVIDERS]
    by_name = {p.name: p for p in providers}
    if default_provider not in by_name:
        raise ValueError(
            f"Default provider '{default_provider}' is not available. "
            f"Choose one of: {', '.join(by_name)}"
        )

    registry = ProviderRegistry(by_name[default_provider])
    for provider in providers:
        if provider.name != default_provider:
            registry.register(provider)
    return registry
