"""Azure authentication file model and loaders."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..exceptions import ConfigParseError, DecodeError
from ..utils.encoding import decode_bytes


class AuthConfig(BaseModel):
    """Selection of fields from an Azure authentication file.

    The camelCase aliases match the files written by Azure tooling. The
    ``appId``/``tenant``/``password`` trio is the service principal format
    produced by ``az ad sp create-for-rbac``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    tenant_id: Optional[str] = Field(default=None, alias="tenantId")
    client_id: Optional[str] = Field(default=None, alias="clientId")
    client_secret: Optional[str] = Field(default=None, alias="clientSecret", repr=False)
    client_certificate: Optional[str] = Field(default=None, alias="clientCertificate", repr=False)
    client_certificate_password: Optional[str] = Field(
        default=None, alias="clientCertificatePassword", repr=False
    )
    client_certificate_send_chain: bool = Field(default=False, alias="clientCertificateSendChain")
    authority_host: Optional[str] = Field(default=None, alias="authorityHost")

    # az CLI service principal fields
    app_id: Optional[str] = Field(default=None, alias="appId")
    tenant: Optional[str] = Field(default=None, alias="tenant")
    password: Optional[str] = Field(default=None, alias="password", repr=False)


def load_auth_config_from_bytes(data: bytes) -> AuthConfig:
    """Decode ``data`` (UTF-8 or UTF-16) and parse it into an :class:`AuthConfig`.

    JSON and YAML documents are both accepted. An empty document yields an
    empty config.
    """

    try:
        text = decode_bytes(data)
    except DecodeError as exc:
        raise DecodeError(f"failed to decode Azure authentication file bytes: {exc}") from exc

    try:
        payload = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigParseError(f"failed to unmarshal Azure authentication file: {exc}") from exc

    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ConfigParseError(
            "failed to unmarshal Azure authentication file: "
            f"expected a mapping, got {type(payload).__name__}"
        )

    try:
        return AuthConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigParseError(f"failed to unmarshal Azure authentication file: {exc}") from exc


def load_auth_config_from_file(path: Path | str) -> AuthConfig:
    return load_auth_config_from_bytes(Path(path).expanduser().read_bytes())


__all__ = ["AuthConfig", "load_auth_config_from_bytes", "load_auth_config_from_file"]
