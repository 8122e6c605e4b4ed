"""
Hosting provider registry.

Each provider module exports a ProviderConfig bundling its pricing engine,
default inputs, plan presets and persistence keys.
"""

from typing import Dict, List

from ..core.provider_config import ProviderConfig
from .cloudflare import CLOUDFLARE_CONFIG
from .vercel import VERCEL_CONFIG

PROVIDERS: Dict[str, ProviderConfig] = {
    "cloudflare": CLOUDFLARE_CONFIG,
    "vercel": VERCEL_CONFIG,
}


def get_provider(name: str) -> ProviderConfig:
    """Get the configuration for a provider.

    Args:
        name: Provider identifier, case-insensitive

    Returns:
        ProviderConfig for the provider

    Raises:
        ValueError: If the provider is not supported
    """
    key = (name or "").strip().lower()
    if key not in PROVIDERS:
        raise ValueError(f"Unsupported provider: {name}")
    return PROVIDERS[key]


def list_providers() -> List[str]:
    """Provider identifiers in registration order."""
    return list(PROVIDERS)


__all__ = ["CLOUDFLARE_CONFIG", "VERCEL_CONFIG", "PROVIDERS", "get_provider", "list_providers"]
