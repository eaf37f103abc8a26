"""
Test settings – in-memory SQLite, no configuration loading on startup.

Tests build their own Loaders from temporary files; the in-tree
katello.yml is still the default candidate.
"""
import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")

from .base import *  # noqa: E402, F401, F403

DEBUG = False

KATELLO_ENV = "test"
KATELLO_LOAD_ON_STARTUP = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}
