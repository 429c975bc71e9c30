"""Cloud capability providers.

Each provider implements the operations behind the gateway's tools for one
backend. Providers hold no protocol logic and never see tool names.
"""

from shared.config import Settings
from providers.base import CloudProvider
from providers.memory import InMemoryProvider


def build_provider(settings: Settings) -> CloudProvider:
    """Create the provider selected by ``gateway.provider``."""
    if settings.gateway.provider == "memory":
        return InMemoryProvider()

    from providers.azure import AzureProvider

    return AzureProvider(settings.azure)


__all__ = ["CloudProvider", "InMemoryProvider", "build_provider"]
