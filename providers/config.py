"""
Provider configuration.

The provider list comes from the ``PROVIDERS`` setting (populated from the
environment variable of the same name) as a YAML document::

    providers:
    - name: provider1
      url: https://provider1.com/v1/api/account/validate
    - name: provider2
      url: https://provider2.com/v2/api/account/validate

Everything here runs once at process start. Any problem raises
``ImproperlyConfigured`` so the service refuses to start instead of answering
requests with a broken provider list.
"""
import logging
from dataclasses import dataclass
from typing import Any, Optional, Tuple

import yaml
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from .base.provider import Provider

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER_TIMEOUT = 1.0
DEFAULT_RESPONSE_BUDGET = 2.0
DEFAULT_MAX_WORKERS = 32


@dataclass(frozen=True)
class ProviderSettings:
    """Resolved provider configuration, built once and passed around explicitly."""

    providers: Tuple[Provider, ...]
    timeout: float = DEFAULT_PROVIDER_TIMEOUT
    response_budget: float = DEFAULT_RESPONSE_BUDGET
    max_workers: int = DEFAULT_MAX_WORKERS


def parse_providers(raw: Optional[str]) -> Tuple[Provider, ...]:
    """
    Parse the YAML provider document into an ordered tuple of providers.

    Args:
        raw: The YAML text from the ``PROVIDERS`` setting

    Returns:
        Providers in configured order

    Raises:
        ImproperlyConfigured: If the document is missing, invalid, empty, or
            contains entries without a name or url
    """
    if raw is None or not str(raw).strip():
        raise ImproperlyConfigured("ENVVAR PROVIDERS is required")

    try:
        document = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ImproperlyConfigured("ENVVAR PROVIDERS is invalid yaml") from exc

    if not isinstance(document, dict) or not isinstance(document.get("providers"), list):
        raise ImproperlyConfigured("ENVVAR PROVIDERS must contain a 'providers' list")

    providers = []
    for index, entry in enumerate(document["providers"]):
        if not isinstance(entry, dict):
            raise ImproperlyConfigured(f"Provider entry {index} must be a mapping with name and url")

        name = entry.get("name")
        url = entry.get("url")
        if not isinstance(name, str) or not name.strip():
            raise ImproperlyConfigured(f"Provider entry {index} is missing a name")
        if not isinstance(url, str) or not url.strip():
            raise ImproperlyConfigured(f"Provider '{name}' is missing a url")

        providers.append(Provider(name=name.strip(), url=url.strip()))

    if not providers:
        raise ImproperlyConfigured("ENVVAR PROVIDERS does not configure any providers")

    return tuple(providers)


def _positive_number(value: Any, setting_name: str, cast=float):
    try:
        number = cast(value)
    except (TypeError, ValueError) as exc:
        raise ImproperlyConfigured(f"{setting_name} must be a number, got {value!r}") from exc
    if number <= 0:
        raise ImproperlyConfigured(f"{setting_name} must be positive, got {value!r}")
    return number


def load_provider_settings(source=None) -> ProviderSettings:
    """
    Build the provider settings from Django settings (or any object exposing
    the same attributes).
    """
    source = source if source is not None else settings

    providers = parse_providers(getattr(source, "PROVIDERS", None))
    timeout = _positive_number(
        getattr(source, "PROVIDER_TIMEOUT_SECONDS", DEFAULT_PROVIDER_TIMEOUT),
        "PROVIDER_TIMEOUT_SECONDS",
    )
    response_budget = _positive_number(
        getattr(source, "RESPONSE_BUDGET_SECONDS", DEFAULT_RESPONSE_BUDGET),
        "RESPONSE_BUDGET_SECONDS",
    )
    max_workers = _positive_number(
        getattr(source, "AGGREGATOR_MAX_WORKERS", DEFAULT_MAX_WORKERS),
        "AGGREGATOR_MAX_WORKERS",
        cast=int,
    )

    # The per-call timeout has to leave room for scheduling and serialization.
    if timeout >= response_budget:
        raise ImproperlyConfigured(
            f"PROVIDER_TIMEOUT_SECONDS ({timeout}) must be smaller than "
            f"RESPONSE_BUDGET_SECONDS ({response_budget})"
        )

    if len(providers) > max_workers:
        logger.warning(
            f"{len(providers)} providers configured but AGGREGATOR_MAX_WORKERS is {max_workers}; "
            "some provider calls will queue behind others"
        )

    return ProviderSettings(
        providers=providers,
        timeout=timeout,
        response_budget=response_budget,
        max_workers=max_workers,
    )
