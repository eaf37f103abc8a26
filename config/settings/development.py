"""
Development settings – extends base settings with debug-friendly overrides.
"""
from decouple import config

from common.log_config import build_logging

from apps.configuration.services import build_loader, django_database

from .base import *  # noqa: F401, F403

DEBUG = config("DEBUG", default=True, cast=bool)

KATELLO_ENV = "development"

# Database credentials come from the development section of katello.yml.
DATABASES = {
    "default": django_database(
        build_loader(
            KATELLO_CONFIG_PATHS, passphrase_key=KATELLO_PASSPHRASE_KEY,  # noqa: F405
        ).database_configs()[KATELLO_ENV]
    ),
}

# In development only: allow all hosts if DEBUG is True
if DEBUG:
    ALLOWED_HOSTS = ["*"]

SECURE_SSL_REDIRECT = False

# Engine logs at debug level unless KATELLO_LOG_LEVEL says otherwise.
LOGGING = build_logging(LOG_LEVEL, engine_level=config("KATELLO_LOG_LEVEL", default="DEBUG"))  # noqa: F405

# Allow browsable API renderer in development
REST_FRAMEWORK["DEFAULT_RENDERER_CLASSES"] = [  # noqa: F405
    "rest_framework.renderers.JSONRenderer",
    "rest_framework.renderers.BrowsableAPIRenderer",
]
