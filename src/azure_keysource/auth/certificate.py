"""Client certificate parsing for certificate based service principals.

Accepts PEM bundles (certificate chain plus private key, the key optionally
encrypted) and PKCS#12 archives. The parsed material is re-serialised to an
unencrypted PEM bundle for the Azure identity client, so the password never
leaves this module.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Tuple

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes
from cryptography.hazmat.primitives.serialization import pkcs12

from ..exceptions import CredentialBuildError

_PEM_MARKER = b"-----BEGIN"
_PEM_KEY_RE = re.compile(
    rb"-----BEGIN (?P<label>[A-Z0-9 ]*PRIVATE KEY)-----.+?-----END (?P=label)-----",
    re.DOTALL,
)


@dataclass(frozen=True)
class ParsedCertificate:
    certificates: Tuple[x509.Certificate, ...]
    private_key: PrivateKeyTypes

    def to_pem(self) -> bytes:
        """Unencrypted PKCS#8 key followed by the certificate chain, leaf first."""
        key = self.private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
        chain = b"".join(
            cert.public_bytes(serialization.Encoding.PEM) for cert in self.certificates
        )
        return key + chain


def _parse_pem(data: bytes, password: bytes | None) -> ParsedCertificate:
    try:
        certificates = tuple(x509.load_pem_x509_certificates(data))
    except ValueError as exc:
        raise CredentialBuildError(f"no certificate found in PEM data: {exc}") from exc

    match = _PEM_KEY_RE.search(data)
    if match is None:
        raise CredentialBuildError("no private key found in PEM data")
    block = match.group(0)

    # The password only applies to encrypted keys; plain keys ignore it.
    encrypted = b"ENCRYPTED" in block
    try:
        private_key = serialization.load_pem_private_key(
            block, password=password if encrypted else None
        )
    except (TypeError, ValueError) as exc:
        raise CredentialBuildError(f"failed to load certificate private key: {exc}") from exc
    return ParsedCertificate(certificates=certificates, private_key=private_key)


def _parse_pkcs12(data: bytes, password: bytes | None) -> ParsedCertificate:
    try:
        private_key, certificate, additional = pkcs12.load_key_and_certificates(data, password)
    except (TypeError, ValueError) as exc:
        raise CredentialBuildError(f"failed to load PKCS#12 certificate: {exc}") from exc
    if private_key is None:
        raise CredentialBuildError("no private key found in PKCS#12 data")
    if certificate is None:
        raise CredentialBuildError("no certificate found in PKCS#12 data")
    return ParsedCertificate(
        certificates=(certificate, *additional),
        private_key=private_key,
    )


def parse_certificates(data: bytes | str, password: bytes | str | None = None) -> ParsedCertificate:
    """Parse a PEM or PKCS#12 client certificate.

    Raises
    ------
    CredentialBuildError
        If no certificate or private key can be extracted, or the password
        does not decrypt the key.
    """

    if isinstance(data, str):
        data = data.encode("utf-8")
    if isinstance(password, str):
        password = password.encode("utf-8")
    password = password or None

    if _PEM_MARKER in data:
        return _parse_pem(data, password)
    return _parse_pkcs12(data, password)


__all__ = ["ParsedCertificate", "parse_certificates"]
