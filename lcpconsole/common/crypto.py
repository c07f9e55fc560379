"""Common cryptographic utilities.
"""

import base64

from cryptography.hazmat.primitives import hashes

USERKEY_ALGO = "http://www.w3.org/2001/04/xmlenc#sha256"


class CryptoUtils:
    """Utility class for user key derivation."""

    @staticmethod
    def hash_passphrase(passphrase: str) -> str:
        """Return the hex SHA-256 digest used as the stored user key."""
        digest = hashes.Hash(hashes.SHA256())
        digest.update(passphrase.encode("utf-8"))
        return digest.finalize().hex()

    @staticmethod
    def user_key_value(password_hash: str) -> str:
        """Encode a hex user key as the base64 value of a partial license."""
        try:
            raw = bytes.fromhex(password_hash)
        except ValueError as e:
            msg = "User password is not a hex encoded key"
            raise ValueError(msg) from e
        return base64.b64encode(raw).decode("ascii")
