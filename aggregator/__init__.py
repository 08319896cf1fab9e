"""
Aggregation of provider verdicts for a bank account number.
"""
from typing import Iterable, Optional

from django.apps import apps as django_apps


def get_aggregator():
    """Get the shared Aggregator built when the app registry was ready."""
    return django_apps.get_app_config("aggregator").aggregator


def validate_account(account_number: str, provider_names: Optional[Iterable[str]] = None):
    """
    Validate an account number against the configured providers.

    Args:
        account_number: The already validated, non-empty account number
        provider_names: Names of the providers to ask, or None for all of them

    Returns:
        A ValidationResponse with one outcome per selected provider
    """
    from providers import get_registry

    providers_to_call = get_registry().filter(provider_names)
    return get_aggregator().aggregate(account_number, providers_to_call)
