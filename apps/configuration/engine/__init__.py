"""
apps.configuration.engine package.

Framework-independent configuration engine: the Node tree, the validation
rule DSL, the loader pipeline and its collaborators.
"""
from .exceptions import (  # noqa: F401
    ConfigurationError,
    InvalidKeyType,
    InvalidStructure,
    NotFound,
    ReadOnlyNode,
    SecretDecryptionError,
    SourceNotFound,
    ValidationFailure,
)
from .loader import Loader  # noqa: F401
from .node import Deferred, Node  # noqa: F401
from .passwords import PasswordCipher  # noqa: F401
from .rules import BUILD_ENVIRONMENT, KATELLO_VALIDATION  # noqa: F401
from .versions import UNKNOWN_VERSION, VersionResolver  # noqa: F401
