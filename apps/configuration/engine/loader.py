"""
apps.configuration.engine.loader
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Loads Katello configuration from the first existing candidate file.

Pipeline (executed in this exact order):

    1. **Discovery** - pick the first existing path from the candidates.
    2. **Parse** - render the file as a Django template (``{{ env.NAME }}``
       reads the process environment), parse the result as YAML and convert
       it into a :class:`~apps.configuration.engine.node.Node`.
    3. **Secret pre-pass** - decrypt ``<environment>.database.password`` for
       every top-level section, once, on the raw tree.
    4. **Merge** - deep-merge ``common``, then the environment's section.
    5. **Derivation** - mode predicates, defaults and the version string.
    6. **Validation** - run the rule set; any failure aborts loading.
    7. **Freeze** - the finished tree becomes read-only.
    8. **Memoize** - each public view is computed at most once.

Three views are exposed: :meth:`Loader.config` (environment bound),
:meth:`Loader.early_config` (no environment, usable before Django is set
up) and :meth:`Loader.database_configs`.

This module has no ORM, view or serializer imports; only Django's
standalone template engine is used for expansion.
"""
from __future__ import annotations

import os
import threading
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

import structlog
import yaml
from django.template import Context, Engine, TemplateSyntaxError

from .exceptions import (
    ConfigurationError,
    InvalidStructure,
    SourceNotFound,
    ValidationFailure,
)
from .node import Deferred, Node
from .validator import Rule, Validator
from .versions import VersionResolver

logger = structlog.get_logger(__name__)

COMMON_SECTION = "common"
DATABASE_ENVIRONMENTS = ("production", "development", "test")

_TEMPLATE_ENGINE = Engine(autoescape=False, string_if_invalid="")


class Loader:
    """
    Builds and memoizes configuration trees.

    Args:
        config_file_paths: Candidate files; the first existing one wins.
        rules: Validation rule set applied to every loaded tree.
        environment_resolver: Returns the current environment name.  Only
            called by :meth:`config`.
        decrypt: Turns a stored database password into plaintext.
        version_resolver: Maps a package name to a version string.
        database_environments: Environments reported by
            :meth:`database_configs`.
        template_context: Extra variables available to template expressions.

    Example::

        loader = Loader(
            ["/srv/katello/config/katello.yml", "/etc/katello/katello.yml"],
            KATELLO_VALIDATION,
            environment_resolver=lambda: "production",
        )
        loader.config()["host"]
    """

    def __init__(
        self,
        config_file_paths: Sequence[str | Path],
        rules: Sequence[Rule],
        *,
        environment_resolver: Callable[[], str] | None = None,
        decrypt: Callable[[str], str] | None = None,
        version_resolver: Callable[[str], str] | None = None,
        database_environments: Sequence[str] = DATABASE_ENVIRONMENTS,
        template_context: Mapping[str, Any] | None = None,
    ) -> None:
        if not config_file_paths:
            raise ValueError("config_file_paths must not be empty")
        self.config_file_paths = [str(path) for path in config_file_paths]
        self.rules = tuple(rules)
        self.environment_resolver = environment_resolver
        self.decrypt = decrypt or (lambda value: value)
        self.version_resolver = version_resolver or VersionResolver()
        self.database_environments = tuple(database_environments)
        self.template_context = dict(template_context or {})

        self._lock = threading.RLock()
        self._cache: dict[str, Any] = {}

    # ------------------------------------------------------------------
    # Public views
    # ------------------------------------------------------------------

    def config(self) -> Node:
        """Configuration for the current environment."""
        return self._memoized("config", lambda: self.load(self._environment()))

    def early_config(self) -> Node:
        """Configuration with only ``common`` applied, for use before Django is ready."""
        return self._memoized("early_config", self.load)

    def database_configs(self) -> dict[str, dict[str, str | None]]:
        """
        Database settings per environment.

        Each entry is the ``common`` database block overlaid by the
        environment's own block, with values converted to ``str``.
        Environments without a ``database`` block of their own are left out.
        """
        return self._memoized("database_configs", self._build_database_configs)

    def config_data(self) -> Node:
        """The parsed file with passwords decrypted; nothing merged yet."""
        return self._memoized("config_data", self._read_config_data)

    @property
    def config_file_path(self) -> str:
        return self._memoized("config_file_path", self._discover)

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def load(self, environment: str | None = None) -> Node:
        """
        Run merge, derivation and validation for *environment*.

        The returned tree is frozen.  Not memoized; the public views cache
        its result.
        """
        data = self.config_data()
        node = Node()
        node.deep_merge(data[COMMON_SECTION])
        if environment:
            node.deep_merge(data[environment])
        self.post_process(node)
        try:
            Validator(node, environment, rules=self.rules)
        except ValidationFailure as exc:
            logger.error(
                "config_validation_failed",
                environment=environment,
                key_path=exc.key_path,
                problem=exc.problem,
            )
            raise
        node.freeze()
        logger.info(
            "config_loaded",
            environment=environment or "early",
            path=self.config_file_path,
        )
        return node

    def post_process(self, node: Node) -> None:
        """Fill in derived values; must run before validation."""
        node["is_katello"] = Deferred(lambda: _value(node, "app_mode") == "katello")
        node["is_headpin"] = Deferred(lambda: _value(node, "app_mode") == "headpin")
        katello = node["is_katello"]

        if not _value(node, "app_name"):
            node["app_name"] = "Katello" if katello else "Headpin"

        if _value(node, "use_cp") is None:
            node["use_cp"] = True
        for key in ("use_pulp", "use_foreman", "use_elasticsearch"):
            if _value(node, key) is None:
                node[key] = katello

        if not _value(node, "email_reply_address") and node.has_key("host"):
            node["email_reply_address"] = f"no-reply@{node['host']}"

        package = "katello-common" if katello else "katello-headpin"
        node["katello_version"] = self.version_resolver(package)

    def _discover(self) -> str:
        for path in self.config_file_paths:
            if os.path.exists(path):
                logger.info("config_source_selected", path=path)
                return path
        raise SourceNotFound(self.config_file_paths)

    def _read_config_data(self) -> Node:
        path = self.config_file_path
        text = Path(path).read_text(encoding="utf-8")
        rendered = self._expand(text, path)
        try:
            parsed = yaml.safe_load(rendered)
        except yaml.YAMLError as exc:
            raise InvalidStructure(f"{path} is not valid YAML: {exc}") from exc
        data = Node(parsed if parsed is not None else {})

        for section, section_config in data.items():
            if isinstance(section_config, Node) and section_config.present("database"):
                self._decrypt_password(section, section_config["database"])
        return data.freeze()

    def _expand(self, text: str, path: str) -> str:
        context = {
            "env": dict(os.environ),
            "root": str(Path(path).resolve().parent),
            **self.template_context,
        }
        try:
            template = _TEMPLATE_ENGINE.from_string(text)
        except TemplateSyntaxError as exc:
            raise InvalidStructure(f"{path} has an invalid template expression: {exc}") from exc
        return template.render(Context(context))

    def _decrypt_password(self, section: str, database: Node) -> None:
        if not isinstance(database, Node) or not database.present("password"):
            return
        database["password"] = self.decrypt(database["password"])
        logger.debug("database_password_decrypted", section=section)

    def _build_database_configs(self) -> dict[str, dict[str, str | None]]:
        data = self.config_data()
        common = _database_block(data, COMMON_SECTION)
        configs: dict[str, dict[str, str | None]] = {}
        for environment in self.database_environments:
            if not data.present(environment, "database"):
                continue
            merged = {**common, **_database_block(data, environment)}
            configs[environment] = {
                str(key): None if value is None else str(value)
                for key, value in merged.items()
            }
        return configs

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _environment(self) -> str:
        if self.environment_resolver is None:
            raise ConfigurationError("no environment_resolver configured, use early_config() instead")
        return self.environment_resolver()

    def _memoized(self, name: str, factory: Callable[[], Any]) -> Any:
        # Unlocked fast path; entries are only ever added, never replaced.
        try:
            return self._cache[name]
        except KeyError:
            pass
        with self._lock:
            if name not in self._cache:
                self._cache[name] = factory()
            return self._cache[name]


def _value(node: Node, key: str) -> Any:
    """Value at *key*, or ``None`` when the key is not defined."""
    return node[key] if node.has_key(key) else None


def _database_block(data: Node, section: str) -> dict[str, Any]:
    """The ``database`` mapping of *section*; missing or blank reads as empty."""
    if not data.present(section, "database"):
        return {}
    block = data[section]["database"]
    if not isinstance(block, Node):
        raise InvalidStructure(f"'{section}.database' must be a mapping, not {block!r}")
    return block.to_dict()
