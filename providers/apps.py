import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class ProvidersConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'providers'
    verbose_name = 'Providers'

    def ready(self):
        """
        Load the provider configuration once, when Django starts.

        Raises ImproperlyConfigured if the provider list is missing or invalid,
        which stops the process before it can serve requests.
        """
        from .client import ProviderClient
        from .config import load_provider_settings
        from .registry import ProviderRegistry

        self.provider_settings = load_provider_settings()
        self.registry = ProviderRegistry(self.provider_settings.providers)
        self.client = ProviderClient(
            timeout=self.provider_settings.timeout,
            pool_size=self.provider_settings.max_workers,
        )

        logger.info(
            f"Loaded {len(self.registry)} providers: {', '.join(self.registry.names())} "
            f"(timeout {self.provider_settings.timeout}s, "
            f"budget {self.provider_settings.response_budget}s)"
        )
