from django.apps import AppConfig, apps


class AggregatorConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'aggregator'
    verbose_name = 'Aggregator'

    def ready(self):
        """
        Build the shared aggregator on top of the providers app's client.
        """
        from .aggregator import Aggregator

        providers_config = apps.get_app_config("providers")
        self.aggregator = Aggregator(
            client=providers_config.client,
            timeout=providers_config.provider_settings.timeout,
            max_workers=providers_config.provider_settings.max_workers,
        )
