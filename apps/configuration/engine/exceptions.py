"""
apps.configuration.engine.exceptions
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Error hierarchy for configuration loading.

Every error raised while building a configuration tree derives from
:class:`ConfigurationError`.  None of them are recoverable inside the
engine: they propagate and abort the loading call.
"""
from __future__ import annotations


class ConfigurationError(Exception):
    """Base class for every configuration engine error."""


class NotFound(ConfigurationError, KeyError):
    """Raised when a required key is read but not defined."""

    def __init__(self, key: object) -> None:
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"missing key '{self.key}' in configuration"


class InvalidKeyType(ConfigurationError, TypeError):
    """Raised when a non-string key is used to read or assign a value."""

    def __init__(self, key: object) -> None:
        self.key = key
        super().__init__(f"{key!r} should be a str")


class InvalidStructure(ConfigurationError, TypeError):
    """Raised when input cannot be converted into a configuration tree."""


class ValidationFailure(ConfigurationError):
    """
    Raised by :class:`~apps.configuration.engine.validator.Validator` on the
    first violated rule.

    Attributes:
        key_path: Dot-separated path of the offending key, e.g.
            ``"database.password"``.
        environment: Environment name, or ``None`` for early configuration.
        problem: The violated constraint, e.g. ``"is required"``.
    """

    def __init__(self, key_path: str, environment: str | None, problem: str) -> None:
        self.key_path = key_path
        self.environment = environment
        self.problem = problem
        scope = (
            f"'{environment}' environment" if environment else "early configuration"
        )
        super().__init__(f"Key: '{key_path}' in {scope} {problem}")


class SourceNotFound(ConfigurationError, FileNotFoundError):
    """Raised when none of the candidate configuration files exists."""

    def __init__(self, candidates: list[str]) -> None:
        self.candidates = list(candidates)
        super().__init__(
            f"no config file found, candidates: {' '.join(self.candidates)}"
        )

    def __str__(self) -> str:
        return self.args[0]


class SecretDecryptionError(ConfigurationError):
    """Raised when an encrypted password cannot be decrypted."""


class ReadOnlyNode(ConfigurationError, TypeError):
    """Raised when a frozen Node is written to."""

    def __init__(self, key: object = None) -> None:
        self.key = key
        target = "" if key is None else f", cannot set '{key}'"
        super().__init__(f"configuration is read-only{target}")
