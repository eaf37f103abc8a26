"""
Production settings – security-hardened overrides over base settings.
All sensitive values come from environment variables or katello.yml.
"""
from decouple import Csv, config

from apps.configuration.services import build_loader, django_database

from .base import *  # noqa: F401, F403

DEBUG = False

ALLOWED_HOSTS = config("ALLOWED_HOSTS", cast=Csv())

KATELLO_ENV = "production"

# Database credentials come from the production section of katello.yml;
# encrypted passwords need KATELLO_PASSPHRASE_KEY.
DATABASES = {
    "default": django_database(
        build_loader(
            KATELLO_CONFIG_PATHS, passphrase_key=KATELLO_PASSPHRASE_KEY,  # noqa: F405
        ).database_configs()[KATELLO_ENV]
    ),
}

# ---------------------------------------------------------------------------
# HTTPS / security hardening
# ---------------------------------------------------------------------------
SECURE_SSL_REDIRECT = config("SECURE_SSL_REDIRECT", default=True, cast=bool)
SECURE_HSTS_SECONDS = 31536000
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_HSTS_PRELOAD = True
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = "DENY"
