"""
apps.configuration.services
~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Wiring between the configuration engine and Django.

Views and other apps must reach configuration through these functions.

Responsibilities
----------------
- Building a :class:`~apps.configuration.engine.Loader` from settings.
- Resolving the current environment once Django is ready.
- Giving access to the loader owned by the ``configuration`` app.
- Translating database settings into Django ``DATABASES`` entries.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path

from django.apps import apps as django_apps
from django.core.exceptions import AppRegistryNotReady, ImproperlyConfigured

from apps.configuration.engine import (
    KATELLO_VALIDATION,
    ConfigurationError,
    Loader,
    Node,
    PasswordCipher,
    VersionResolver,
)

#: Katello database adapters mapped to Django backends.
DATABASE_BACKENDS: dict[str, str] = {
    "postgresql": "django.db.backends.postgresql",
    "postgres": "django.db.backends.postgresql",
    "sqlite3": "django.db.backends.sqlite3",
    "mysql": "django.db.backends.mysql",
}


def build_loader(
    config_file_paths: Sequence[str | Path],
    *,
    passphrase_key: str | None = None,
) -> Loader:
    """
    Create a Loader for the Katello rule set.

    Args:
        config_file_paths: Candidate configuration files, first match wins.
        passphrase_key: Base64 AES key for ``$1$`` encrypted passwords.
    """
    return Loader(
        config_file_paths,
        KATELLO_VALIDATION,
        environment_resolver=django_environment,
        decrypt=PasswordCipher(passphrase_key),
        version_resolver=VersionResolver(),
    )


def django_environment() -> str:
    """
    Return the current environment name (``settings.KATELLO_ENV``).

    Raises:
        ConfigurationError: When called before Django's app registry is
            ready.  Early code must use :func:`early_config` instead.
    """
    try:
        django_apps.check_apps_ready()
    except AppRegistryNotReady as exc:
        raise ConfigurationError(
            "Django is not initialized yet, try to use early_config() instead"
        ) from exc
    from django.conf import settings  # noqa: PLC0415

    return settings.KATELLO_ENV


def get_loader() -> Loader:
    """Return the Loader owned by the ``configuration`` app."""
    return django_apps.get_app_config("configuration").loader


def katello_config() -> Node:
    """Full configuration for the current environment."""
    return get_loader().config()


def early_config() -> Node:
    """Environment-agnostic configuration."""
    return get_loader().early_config()


def database_configs() -> dict[str, dict[str, str | None]]:
    """Database settings keyed by environment name."""
    return get_loader().database_configs()


def django_database(database_config: Mapping[str, str | None]) -> dict:
    """
    Convert one entry of :meth:`Loader.database_configs` into a Django
    ``DATABASES`` entry.

    Raises:
        ImproperlyConfigured: For an adapter Django has no backend for.
    """
    adapter = database_config.get("adapter") or ""
    try:
        engine = DATABASE_BACKENDS[adapter]
    except KeyError:
        raise ImproperlyConfigured(f"Unsupported database adapter '{adapter}'.") from None

    database = {
        "ENGINE": engine,
        "NAME": database_config.get("database") or "",
        "USER": database_config.get("username") or "",
        "PASSWORD": database_config.get("password") or "",
        "HOST": database_config.get("host") or "",
        "PORT": database_config.get("port") or "",
        "CONN_MAX_AGE": 60,
    }
    if engine == "django.db.backends.postgresql":
        options = ["-c search_path=public"]
        if database_config.get("min_messages"):
            options.append(f"-c client_min_messages={database_config['min_messages']}")
        database["OPTIONS"] = {"options": " ".join(options)}
    return database
