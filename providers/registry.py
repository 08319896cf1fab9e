"""
Registry of the configured bank account data providers.
"""
import logging
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from django.core.exceptions import ImproperlyConfigured

from .base.provider import Provider

logger = logging.getLogger(__name__)


def filter_providers(
    providers: Sequence[Provider], requested_names: Optional[Iterable[str]] = None
) -> List[Provider]:
    """
    Select the providers to call for a request.

    Args:
        providers: All configured providers, in configured order
        requested_names: Names asked for by the caller, or None for all

    Returns:
        The matching providers in configured order. Unknown names are dropped,
        duplicate names do not duplicate providers, and an empty list of names
        selects nothing.
    """
    if requested_names is None:
        return list(providers)

    wanted = set(requested_names)
    return [provider for provider in providers if provider.name in wanted]


class ProviderRegistry:
    """Read-only, ordered lookup of providers by name."""

    def __init__(self, providers: Iterable[Provider]):
        self._providers = tuple(providers)
        self._by_name: Dict[str, Provider] = {}
        for provider in self._providers:
            if provider.name in self._by_name:
                raise ImproperlyConfigured(f"Duplicate provider name: {provider.name}")
            self._by_name[provider.name] = provider

    def __len__(self) -> int:
        return len(self._providers)

    def __iter__(self) -> Iterator[Provider]:
        return iter(self._providers)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __repr__(self) -> str:
        return f"ProviderRegistry({', '.join(self.names())})"

    @property
    def providers(self) -> List[Provider]:
        return list(self._providers)

    def names(self) -> List[str]:
        return [provider.name for provider in self._providers]

    def get(self, name: str) -> Optional[Provider]:
        return self._by_name.get(name)

    def filter(self, requested_names: Optional[Iterable[str]] = None) -> List[Provider]:
        """Select providers by name. See :func:`filter_providers`."""
        if requested_names is not None:
            requested_names = list(requested_names)
            unknown = sorted(set(requested_names) - self._by_name.keys())
            if unknown:
                logger.debug(f"Ignoring unknown providers: {unknown}")

        return filter_providers(self._providers, requested_names)
