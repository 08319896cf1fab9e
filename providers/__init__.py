"""
Bank account data providers package.

This package holds the provider configuration, the registry of configured
providers and the HTTP client that asks a single provider for its verdict.
"""
from django.apps import apps as django_apps


def get_registry():
    """
    Get the process-wide provider registry built at startup.

    Returns:
        The ProviderRegistry loaded from the PROVIDERS setting
    """
    return django_apps.get_app_config("providers").registry


def get_provider_settings():
    """Get the resolved provider settings (timeouts, worker cap, providers)."""
    return django_apps.get_app_config("providers").provider_settings


def list_providers():
    """
    Get a list of all configured provider names.

    Returns:
        List of provider names, in configured order
    """
    return get_registry().names()
