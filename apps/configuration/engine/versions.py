"""
apps.configuration.engine.versions
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Resolution of the running Katello version.

Sources are tried in order: installed package metadata first, then the
revision of the source checkout.  A failing source is logged and skipped;
when every source fails the version is :data:`UNKNOWN_VERSION`.
"""
from __future__ import annotations

import subprocess
from collections.abc import Sequence
from importlib import metadata
from pathlib import Path
from typing import Protocol

import structlog

logger = structlog.get_logger(__name__)

UNKNOWN_VERSION = "Unknown"


class VersionSource(Protocol):
    """Looks up the version of *package*, or returns ``None`` if it cannot."""

    def lookup(self, package: str) -> str | None:
        ...


class PackageMetadataSource:
    """Reads the version from the installed distribution's metadata."""

    def lookup(self, package: str) -> str | None:
        try:
            return metadata.version(package)
        except metadata.PackageNotFoundError:
            return None


class GitRevisionSource:
    """
    Reports the short hash of ``HEAD`` in the source checkout.

    Args:
        cwd: Directory inside the checkout.  Defaults to this file's
            directory.
        timeout: Seconds to wait for ``git``.
    """

    def __init__(self, cwd: str | Path | None = None, timeout: float = 5.0) -> None:
        self.cwd = Path(cwd) if cwd else Path(__file__).resolve().parent
        self.timeout = timeout

    def lookup(self, package: str) -> str | None:
        try:
            completed = subprocess.run(
                ["git", "rev-parse", "--short", "HEAD"],
                cwd=self.cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=True,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            logger.debug("git_revision_unavailable", error=str(exc))
            return None
        revision = completed.stdout.strip()
        return f"git hash ({revision})" if revision else None


class VersionResolver:
    """Tries each :class:`VersionSource` in order."""

    def __init__(self, sources: Sequence[VersionSource] | None = None) -> None:
        if sources is None:
            sources = (PackageMetadataSource(), GitRevisionSource())
        self.sources = tuple(sources)

    def resolve(self, package: str) -> str:
        for source in self.sources:
            try:
                version = source.lookup(package)
            except Exception as exc:  # noqa: BLE001
                logger.warning(
                    "version_source_failed",
                    source=type(source).__name__,
                    package=package,
                    error=str(exc),
                )
                continue
            if version:
                logger.debug(
                    "version_resolved",
                    source=type(source).__name__,
                    package=package,
                    version=version,
                )
                return version
        return UNKNOWN_VERSION

    __call__ = resolve
