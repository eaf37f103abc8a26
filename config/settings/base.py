"""
Base Django settings for the Katello server.
All environment variables are read via python-decouple.

Environment modules (development, production, test) extend this one and
set ``KATELLO_ENV`` and ``DATABASES``.
"""
from pathlib import Path

from decouple import Csv, config

from common.log_config import build_logging, configure_structlog

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# ---------------------------------------------------------------------------
# Security – loaded from environment, never hardcoded
# ---------------------------------------------------------------------------
SECRET_KEY = config("SECRET_KEY")

ALLOWED_HOSTS = config("ALLOWED_HOSTS", default="localhost,127.0.0.1", cast=Csv())

# ---------------------------------------------------------------------------
# Katello configuration files
# ---------------------------------------------------------------------------
# Candidate files, first existing one wins: the in-tree default, then the
# file installed by puppet.
KATELLO_CONFIG_PATHS = config(
    "KATELLO_CONFIG_PATHS",
    default=f"{BASE_DIR / 'config' / 'katello.yml'},/etc/katello/katello.yml",
    cast=Csv(),
)

# Base64 AES-256 key for "$1$" encrypted database passwords.
KATELLO_PASSPHRASE_KEY = config("KATELLO_PASSPHRASE_KEY", default="")

# Load and validate the configuration while Django starts.
KATELLO_LOAD_ON_STARTUP = config("KATELLO_LOAD_ON_STARTUP", default=True, cast=bool)

KATELLO_ENV = "production"

# ---------------------------------------------------------------------------
# Application definition
# ---------------------------------------------------------------------------
# No admin, sessions or messages: the API is read-only and anonymous.
DJANGO_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.staticfiles",
]

THIRD_PARTY_APPS = [
    "rest_framework",
    "drf_spectacular",
]

LOCAL_APPS = [
    "apps.configuration",
]

INSTALLED_APPS = DJANGO_APPS + THIRD_PARTY_APPS + LOCAL_APPS

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    "common.middleware.StructuredLoggingMiddleware",
]

ROOT_URLCONF = "config.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
            ],
        },
    },
]

WSGI_APPLICATION = "config.wsgi.application"

# ---------------------------------------------------------------------------
# Internationalisation
# ---------------------------------------------------------------------------
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# ---------------------------------------------------------------------------
# Static files
# ---------------------------------------------------------------------------
STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# ---------------------------------------------------------------------------
# Django REST Framework
# ---------------------------------------------------------------------------
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
    "EXCEPTION_HANDLER": "common.exceptions.custom_exception_handler",
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
}

# ---------------------------------------------------------------------------
# drf-spectacular (OpenAPI 3)
# ---------------------------------------------------------------------------
SPECTACULAR_SETTINGS = {
    "TITLE": "Katello API",
    "DESCRIPTION": "Status endpoints of a Katello server.",
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
    "COMPONENT_SPLIT_REQUEST": True,
}

# ---------------------------------------------------------------------------
# Logging (structlog, JSON to stdout)
# ---------------------------------------------------------------------------
LOG_LEVEL = config("LOG_LEVEL", default="INFO")
KATELLO_LOG_LEVEL = config("KATELLO_LOG_LEVEL", default=LOG_LEVEL)

LOGGING = build_logging(LOG_LEVEL, engine_level=KATELLO_LOG_LEVEL)
configure_structlog()
