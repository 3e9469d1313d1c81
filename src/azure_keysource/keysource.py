# Azure Key Vault master key: wraps and unwraps a document's data key.
from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from azure.core.credentials import TokenCredential
from azure.core.exceptions import AzureError

from .config import CONFIG
from .logging import get_logger
from .exceptions import (
    CredentialAlreadySetError,
    KeyRecordError,
    MissingCredentialError,
    RemoteServiceError,
)
from .remote import ALGORITHM, ClientFactory, KeyCryptoClient, azure_crypto_client
from .utils import b64d, b64e

logger = get_logger(__name__)

KEY_TYPE = "azure_kv"

_RFC3339 = "%Y-%m-%dT%H:%M:%SZ"
_KEY_URL_RE = re.compile(r"^(https://[^/]+)/keys/([^/]+)/([^/]+)$")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _parse_rfc3339(value: str) -> datetime:
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return _as_utc(datetime.fromisoformat(text))


@dataclass
class MasterKey:
    """An Azure Key Vault key used to encrypt and decrypt a data key.

    ``encrypted_key`` holds the Key Vault ciphertext as unpadded base64url and
    stays empty until :meth:`encrypt` succeeds. The credential is not part of
    the persisted record; it is set once via :meth:`set_credential` (usually
    through :func:`azure_keysource.auth.apply_auth_config`).
    """

    vault_url: str
    name: str
    version: str
    encrypted_key: str = ""
    creation_date: datetime = field(default_factory=_utcnow)
    client_factory: ClientFactory = field(default=azure_crypto_client, repr=False, compare=False)
    _credential: Optional[TokenCredential] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.creation_date = _as_utc(self.creation_date)

    def __str__(self) -> str:
        return self.key_id

    #* Identity
    @property
    def key_id(self) -> str:
        """Fully-qualified key reference: ``{vault_url}/keys/{name}/{version}``."""
        return f"{self.vault_url}/keys/{self.name}/{self.version}"

    def to_string(self) -> str:
        return self.key_id

    def type_to_identify(self) -> str:
        return KEY_TYPE

    #* Credential
    @property
    def has_credential(self) -> bool:
        return self._credential is not None

    def set_credential(self, credential: TokenCredential) -> None:
        if self._credential is not None:
            raise CredentialAlreadySetError(f"credential already set for {self.key_id}")
        self._credential = credential

    def _client(self, operation: str) -> KeyCryptoClient:
        if self._credential is None:
            raise MissingCredentialError(
                f"cannot {operation} data with {self.key_id}: no credential has been set"
            )
        try:
            return self.client_factory(self.key_id, self._credential)
        except (AzureError, ValueError) as exc:
            raise RemoteServiceError(
                f"failed to construct client to {operation} data: {exc}"
            ) from exc

    #* Data key
    def encrypted_data_key(self) -> bytes:
        return self.encrypted_key.encode("utf-8")

    def set_encrypted_data_key(self, enc: bytes) -> None:
        """Store ``enc``, which must be the unpadded base64url form produced by :meth:`encrypt`."""
        try:
            value = enc.decode("ascii")
            b64d(value)
        except ValueError as exc:
            raise KeyRecordError(f"encrypted data key is not base64url text: {exc}") from exc
        self.encrypted_key = value

    def encrypt(self, data_key: bytes) -> None:
        """Encrypt ``data_key`` with Key Vault and store the result."""
        client = self._client("encrypt")
        try:
            result = client.encrypt(ALGORITHM, data_key)
        except AzureError as exc:
            logger.error("encryption failed", key_id=self.key_id, error=str(exc))
            raise RemoteServiceError(f"failed to encrypt data: {exc}") from exc
        self.encrypted_key = b64e(result.ciphertext)
        logger.info("encryption succeeded", key_id=self.key_id)

    def encrypt_if_needed(self, data_key: bytes) -> None:
        if not self.encrypted_key:
            self.encrypt(data_key)

    def decrypt(self) -> bytes:
        """Decrypt ``encrypted_key`` with Key Vault and return the data key."""
        client = self._client("decrypt")
        try:
            ciphertext = b64d(self.encrypted_key)
        except ValueError as exc:
            raise RemoteServiceError(f"failed to decrypt data: malformed encrypted key: {exc}") from exc
        try:
            result = client.decrypt(ALGORITHM, ciphertext)
        except AzureError as exc:
            logger.error("decryption failed", key_id=self.key_id, error=str(exc))
            raise RemoteServiceError(f"failed to decrypt data: {exc}") from exc
        logger.info("decryption succeeded", key_id=self.key_id)
        return result.plaintext

    #* Lifecycle
    def needs_rotation(self, now: datetime | None = None) -> bool:
        current = _as_utc(now) if now is not None else _utcnow()
        return current - _as_utc(self.creation_date) > CONFIG.rotation.max_age

    #* Serialization
    def to_map(self) -> Dict[str, Any]:
        return {
            "vaultUrl": self.vault_url,
            "key": self.name,
            "version": self.version,
            "created_at": _as_utc(self.creation_date).strftime(_RFC3339),
            "enc": self.encrypted_key,
        }

    @classmethod
    def from_map(
        cls,
        payload: Mapping[str, Any],
        client_factory: ClientFactory = azure_crypto_client,
    ) -> "MasterKey":
        missing = [name for name in ("vaultUrl", "key", "version", "created_at") if not payload.get(name)]
        if missing:
            raise KeyRecordError(f"key record missing fields: {', '.join(missing)}")
        created_at = payload["created_at"]
        if isinstance(created_at, datetime):
            creation_date = _as_utc(created_at)
        else:
            try:
                creation_date = _parse_rfc3339(str(created_at))
            except ValueError as exc:
                raise KeyRecordError(f"invalid created_at timestamp: {created_at!r}") from exc
        return cls(
            vault_url=str(payload["vaultUrl"]),
            name=str(payload["key"]),
            version=str(payload["version"]),
            encrypted_key=str(payload.get("enc") or ""),
            creation_date=creation_date,
            client_factory=client_factory,
        )

    @classmethod
    def from_url(cls, url: str, client_factory: ClientFactory = azure_crypto_client) -> "MasterKey":
        """Parse ``https://<vault>/keys/<name>/<version>`` into a new key."""
        match = _KEY_URL_RE.match(url.strip().rstrip("/"))
        if match is None:
            raise KeyRecordError(f"could not parse {url!r} as a valid Azure Key Vault key URL")
        vault_url, name, version = match.groups()
        return cls(vault_url=vault_url, name=name, version=version, client_factory=client_factory)

    @classmethod
    def from_urls(cls, urls: str, client_factory: ClientFactory = azure_crypto_client) -> List["MasterKey"]:
        """Parse a comma separated list of key URLs, skipping empty entries."""
        return [
            cls.from_url(url, client_factory=client_factory)
            for url in urls.split(",")
            if url.strip()
        ]


__all__ = ["KEY_TYPE", "MasterKey"]
