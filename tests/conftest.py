"""Shared fixtures: an in-memory Key Vault double and certificate builders."""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any, List, Tuple

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.x509.oid import NameOID

_OAEP_SHA256 = padding.OAEP(
    mgf=padding.MGF1(algorithm=hashes.SHA256()),
    algorithm=hashes.SHA256(),
    label=None,
)


class StaticCredential:
    """Stand-in for a TokenCredential; the fake vault never asks for tokens."""

    def get_token(self, *scopes: str, **kwargs: Any):
        raise AssertionError("the in-memory vault does not authenticate")


class FakeCryptoClient:
    def __init__(self, vault: "FakeVault", key_id: str) -> None:
        self.vault = vault
        self.key_id = key_id

    def encrypt(self, algorithm, plaintext: bytes, **kwargs: Any):
        self.vault.calls.append(("encrypt", self.key_id, algorithm))
        ciphertext = self.vault.private_key.public_key().encrypt(plaintext, _OAEP_SHA256)
        return SimpleNamespace(ciphertext=ciphertext, key_id=self.key_id, algorithm=algorithm)

    def decrypt(self, algorithm, ciphertext: bytes, **kwargs: Any):
        self.vault.calls.append(("decrypt", self.key_id, algorithm))
        plaintext = self.vault.private_key.decrypt(ciphertext, _OAEP_SHA256)
        return SimpleNamespace(plaintext=plaintext, key_id=self.key_id, algorithm=algorithm)


@dataclass
class FakeVault:
    """Client factory backed by a local RSA key, recording every call."""

    private_key: rsa.RSAPrivateKey
    calls: List[Tuple[str, str, Any]] = field(default_factory=list)
    credentials: List[Any] = field(default_factory=list)

    def __call__(self, key_id: str, credential: Any) -> FakeCryptoClient:
        self.credentials.append(credential)
        return FakeCryptoClient(self, key_id)


@pytest.fixture(scope="session")
def rsa_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def vault(rsa_key: rsa.RSAPrivateKey) -> FakeVault:
    return FakeVault(private_key=rsa_key)


@pytest.fixture
def credential() -> StaticCredential:
    return StaticCredential()


def make_certificate(private_key: rsa.RSAPrivateKey, common_name: str = "azure-keysource-test") -> x509.Certificate:
    subject = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = dt.datetime.now(dt.timezone.utc)
    return (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(subject)
        .public_key(private_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - dt.timedelta(days=1))
        .not_valid_after(now + dt.timedelta(days=30))
        .sign(private_key, hashes.SHA256())
    )


def certificate_pem(private_key: rsa.RSAPrivateKey, password: bytes | None = None) -> bytes:
    if password:
        encryption = serialization.BestAvailableEncryption(password)
    else:
        encryption = serialization.NoEncryption()
    key_pem = private_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        encryption,
    )
    cert_pem = make_certificate(private_key).public_bytes(serialization.Encoding.PEM)
    return cert_pem + key_pem


@pytest.fixture(scope="session")
def certificate(rsa_key: rsa.RSAPrivateKey) -> x509.Certificate:
    return make_certificate(rsa_key)


@pytest.fixture(scope="session")
def pem_bundle(rsa_key: rsa.RSAPrivateKey) -> bytes:
    return certificate_pem(rsa_key)


@pytest.fixture(scope="session")
def encrypted_pem_bundle(rsa_key: rsa.RSAPrivateKey) -> Tuple[bytes, bytes]:
    password = b"correct horse"
    return certificate_pem(rsa_key, password), password
