"""Key Vault cryptography client seam.

``MasterKey`` only needs something that can encrypt and decrypt with a named
algorithm. The Azure SDK ``CryptographyClient`` satisfies this; tests supply
an in-memory double through the same factory signature.
"""
from __future__ import annotations

from typing import Any, Callable, Protocol

from azure.core.credentials import TokenCredential
from azure.keyvault.keys.crypto import CryptographyClient, EncryptionAlgorithm

ALGORITHM = EncryptionAlgorithm.rsa_oaep_256


class KeyCryptoClient(Protocol):
    def encrypt(self, algorithm: EncryptionAlgorithm, plaintext: bytes, **kwargs: Any) -> Any:
        """Return an object exposing the result as ``.ciphertext``."""

    def decrypt(self, algorithm: EncryptionAlgorithm, ciphertext: bytes, **kwargs: Any) -> Any:
        """Return an object exposing the result as ``.plaintext``."""


ClientFactory = Callable[[str, TokenCredential], KeyCryptoClient]


def azure_crypto_client(key_id: str, credential: TokenCredential) -> KeyCryptoClient:
    """Build a transient client bound to a fully-qualified key id."""
    return CryptographyClient(key_id, credential)


__all__ = ["ALGORITHM", "ClientFactory", "KeyCryptoClient", "azure_crypto_client"]
