"""
apps.configuration.engine.passwords
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Encryption of passwords stored in configuration files.

Encrypted values are written as ``$1$<base64(nonce || ciphertext)>`` using
AES-256-GCM.  Values without the ``$1$`` prefix are plaintext and pass
through :meth:`PasswordCipher.decrypt` unchanged, so development files can
keep plain passwords.

The key is 32 random bytes, base64-encoded, e.g.::

    python -c "import base64, os; print(base64.b64encode(os.urandom(32)).decode())"
"""
from __future__ import annotations

import base64
import binascii
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .exceptions import SecretDecryptionError

ENCRYPTED_PREFIX = "$1$"
_NONCE_BYTES = 12


class PasswordCipher:
    """
    Encrypts and decrypts configuration passwords.

    Args:
        key: Base64-encoded 32-byte key.  May be empty when every password
            in the configuration is plaintext.
    """

    def __init__(self, key: str | bytes | None = None) -> None:
        self._aead: AESGCM | None = None
        if key:
            try:
                raw = base64.b64decode(key, validate=True)
            except (binascii.Error, ValueError) as exc:
                raise SecretDecryptionError("passphrase key is not valid base64") from exc
            if len(raw) != 32:
                raise SecretDecryptionError(
                    f"passphrase key must decode to 32 bytes, got {len(raw)}"
                )
            self._aead = AESGCM(raw)

    @staticmethod
    def is_encrypted(value: object) -> bool:
        return isinstance(value, str) and value.startswith(ENCRYPTED_PREFIX)

    def encrypt(self, plaintext: str) -> str:
        nonce = os.urandom(_NONCE_BYTES)
        ciphertext = self._require_key().encrypt(nonce, plaintext.encode("utf-8"), None)
        return ENCRYPTED_PREFIX + base64.b64encode(nonce + ciphertext).decode("ascii")

    def decrypt(self, value: str) -> str:
        """Return the plaintext of *value*; plaintext input is returned as-is."""
        if not self.is_encrypted(value):
            return value
        try:
            blob = base64.b64decode(value[len(ENCRYPTED_PREFIX):], validate=True)
        except (binascii.Error, ValueError) as exc:
            raise SecretDecryptionError("encrypted password is not valid base64") from exc
        nonce, ciphertext = blob[:_NONCE_BYTES], blob[_NONCE_BYTES:]
        try:
            return self._require_key().decrypt(nonce, ciphertext, None).decode("utf-8")
        except InvalidTag as exc:
            raise SecretDecryptionError(
                "encrypted password does not match the passphrase key"
            ) from exc

    __call__ = decrypt

    def _require_key(self) -> AESGCM:
        if self._aead is None:
            raise SecretDecryptionError(
                "an encrypted password was found but KATELLO_PASSPHRASE_KEY is not set"
            )
        return self._aead
