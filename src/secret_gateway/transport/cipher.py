"""Decryption of encrypted configuration values such as the proxy password."""

import base64

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..domain.exceptions import DecryptionError

KDF_ITERATIONS = 100000


def derive_key(passphrase: str, salt: bytes) -> bytes:
    """Derive a Fernet key from a passphrase."""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=KDF_ITERATIONS,
    )
    return base64.urlsafe_b64encode(kdf.derive(passphrase.encode()))


class ConfigCipher:
    """Symmetric cipher for values stored encrypted in the filter configuration."""

    def __init__(self, key: bytes):
        self._fernet = Fernet(key)

    @classmethod
    def from_passphrase(
        cls, passphrase: str, salt: str = "secret_gateway_config"
    ) -> "ConfigCipher":
        return cls(derive_key(passphrase, salt.encode()))

    @staticmethod
    def generate_key() -> bytes:
        return Fernet.generate_key()

    def encrypt(self, plaintext: str) -> str:
        return self._fernet.encrypt(plaintext.encode()).decode()

    def decrypt(self, token: str | bytes, field: str) -> str:
        """Decrypt one configuration field. Raises DecryptionError on failure."""
        if isinstance(token, str):
            token = token.encode()
        try:
            return self._fernet.decrypt(token).decode()
        except InvalidToken:
            raise DecryptionError(field, "invalid token or wrong key")
        except (TypeError, ValueError, UnicodeDecodeError) as e:
            raise DecryptionError(field, str(e))
