"""
apps.configuration.engine.rules
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
The validation contract every loaded Katello configuration must satisfy.

Derived values (``is_katello``, ``app_name``, the ``use_*`` defaults,
``email_reply_address``, ``katello_version``) are filled in by the loader
before these rules run.
"""
from __future__ import annotations

from .validator import (
    AreBooleans,
    HasKeys,
    HasValues,
    IsNotEmpty,
    Nested,
    When,
    concrete_environment,
    node_flag,
)

#: Environment used for packaging and builds; it never connects to a database.
BUILD_ENVIRONMENT = "build"

APP_MODES = ("katello", "headpin")
URL_PREFIXES = ("/headpin", "/sam", "/cfse", "/katello")
LOG_LEVELS = ("debug", "info", "warn", "error", "fatal")

REQUIRED_KEYS = (
    "app_name", "candlepin", "notification", "debug_pulp_proxy", "debug_rest",
    "available_locales", "use_cp", "simple_search_tokens", "database",
    "debug_cp_proxy", "is_headpin", "host", "ldap_roles", "cloud_forms",
    "use_pulp", "cdn_proxy", "use_ssl", "warden", "is_katello", "url_prefix",
    "foreman", "search", "use_foreman", "password_reset_expiration",
    "redhat_repository_url", "port", "elastic_url", "rest_client_timeout",
    "elastic_index", "allow_roles_logging", "katello_version", "pulp",
    "tire_log", "log_level", "log_level_sql", "email_reply_address",
    "embed_yard_documentation",
)

BOOLEAN_KEYS = (
    "use_cp", "use_foreman", "use_pulp", "use_elasticsearch", "use_ssl",
    "ldap_roles", "debug_rest", "debug_cp_proxy", "debug_pulp_proxy",
    "logical_insight",
)

DATABASE_KEYS = ("adapter", "host", "encoding", "username", "password", "database")

KATELLO_VALIDATION = (
    HasKeys(*REQUIRED_KEYS),
    HasValues("app_mode", APP_MODES),
    HasValues("url_prefix", URL_PREFIXES),
    HasValues("log_level", LOG_LEVELS),
    HasValues("log_level_sql", LOG_LEVELS),
    # headpin talks to thumbslug directly
    When(node_flag("is_katello", False), IsNotEmpty("thumbslug_url")),
    AreBooleans(*BOOLEAN_KEYS),
    When(
        concrete_environment(excluding=BUILD_ENVIRONMENT),
        Nested("database", HasKeys(*DATABASE_KEYS)),
    ),
)
