"""
apps.configuration.apps
"""
from django.apps import AppConfig
from django.conf import settings


class ConfigurationConfig(AppConfig):
    name = "apps.configuration"
    label = "configuration"
    verbose_name = "Katello Configuration"

    def ready(self) -> None:
        from .services import build_loader  # noqa: PLC0415

        self.loader = build_loader(
            settings.KATELLO_CONFIG_PATHS,
            passphrase_key=settings.KATELLO_PASSPHRASE_KEY,
        )
        # Fail startup on an invalid configuration rather than on first use.
        if settings.KATELLO_LOAD_ON_STARTUP:
            self.loader.config()
