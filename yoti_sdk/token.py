"""
Decryption of inbound opaque tokens (connect tokens, session references).

The API hands the relying party an RSA-encrypted token, typically as a
redirect query parameter. It uses a URL-safe alphabet where "-", "_" and
"," stand in for "+", "/" and "=". Decrypting it with the application key
yields the reference used to fetch the shared profile.
"""

from __future__ import annotations

import base64
import binascii
import logging

from yoti_sdk.errors import DecryptionFailure, TokenDecryptionFailure
from yoti_sdk.keys import KeyMaterial

logger = logging.getLogger(__name__)

_URL_SAFE_TO_STANDARD = str.maketrans("-_,", "+/=")


def to_standard_base64(token: str) -> str:
    """Map the token's URL-safe alphabet back to standard base64."""
    return token.translate(_URL_SAFE_TO_STANDARD)


def _is_printable_ascii(data: bytes) -> bool:
    return all(0x21 <= b <= 0x7E for b in data)


def decrypt_token(token: str, key: KeyMaterial) -> str:
    """
    Decrypt an opaque token with the application's private key.

    Args:
        token: URL-safe encoded ciphertext
        key: KeyMaterial holding the private key

    Returns:
        Plaintext reference, usable as a resource identifier

    Raises:
        TokenDecryptionFailure: If the token is empty or malformed, the key
            does not match, or the plaintext is empty
    """
    if not isinstance(token, str) or not token.strip():
        raise TokenDecryptionFailure("Could not decrypt token: token is empty")

    try:
        ciphertext = base64.b64decode(to_standard_base64(token.strip()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise TokenDecryptionFailure("Could not decrypt token: invalid encoding") from e

    if not ciphertext:
        raise TokenDecryptionFailure("Could not decrypt token: token is empty")

    try:
        plaintext = key.decrypt(ciphertext)
    except DecryptionFailure as e:
        raise TokenDecryptionFailure("Could not decrypt token") from e

    if not plaintext:
        raise TokenDecryptionFailure("Could not decrypt token: plaintext is empty")

    # A mismatched key under implicit rejection yields random bytes, not an error
    if not _is_printable_ascii(plaintext):
        raise TokenDecryptionFailure("Could not decrypt token: plaintext is not a token")

    logger.debug("Decrypted token")
    return plaintext.decode("ascii")


class TokenCipher:
    """Decrypts opaque tokens with a fixed KeyMaterial."""

    def __init__(self, key: KeyMaterial) -> None:
        self._key = key

    def decrypt(self, token: str) -> str:
        """See decrypt_token()."""
        return decrypt_token(token, self._key)
