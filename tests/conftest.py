"""
tests.conftest
~~~~~~~~~~~~~~
Shared fixtures: write documents to disk and build Loaders for them.
"""
from __future__ import annotations

import pytest
import yaml

from apps.configuration.engine import KATELLO_VALIDATION, Loader
from tests.documents import TEST_VERSION, make_document


# ===========================================================================
# Fixtures
# ===========================================================================

@pytest.fixture
def write_config(tmp_path):
    """Write a document (dict or raw text) to ``katello.yml`` and return its path."""

    def _write(document, name: str = "katello.yml"):
        path = tmp_path / name
        text = document if isinstance(document, str) else yaml.safe_dump(document, sort_keys=False)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_loader(write_config):
    """Build a Loader over a written document with a fixed version string."""

    def _make(document=None, *, environment: str = "production", **kwargs) -> Loader:
        path = write_config(make_document() if document is None else document)
        kwargs.setdefault("version_resolver", lambda package: TEST_VERSION)
        return Loader(
            [str(path)],
            KATELLO_VALIDATION,
            environment_resolver=lambda: environment,
            **kwargs,
        )

    return _make
