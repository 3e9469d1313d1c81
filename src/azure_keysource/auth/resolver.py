"""Credential selection from an Azure authentication file.

Credentials are detected in a fixed order, the first match wins:

1. ``ClientSecretCredential`` when ``tenantId``, ``clientId`` and
   ``clientSecret`` are set.
2. ``CertificateCredential`` when ``tenantId``, ``clientId`` and
   ``clientCertificate`` (optionally ``clientCertificatePassword``) are set.
3. ``ClientSecretCredential`` from the az CLI service principal fields
   ``tenant``, ``appId`` and ``password``.
4. ``ManagedIdentityCredential`` for a user-assigned identity when
   ``clientId`` is set without ``tenantId``.
"""
from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Callable, NamedTuple, Tuple

from azure.core.credentials import TokenCredential
from azure.identity import (
    AzureAuthorityHosts,
    CertificateCredential,
    ClientSecretCredential,
    ManagedIdentityCredential,
)

from ..exceptions import CredentialBuildError, InvalidCredentialConfig
from ..logging import get_logger
from .certificate import parse_certificates
from .config import AuthConfig

if TYPE_CHECKING:
    from ..keysource import MasterKey

logger = get_logger(__name__)

DEFAULT_AUTHORITY_HOST = AzureAuthorityHosts.AZURE_PUBLIC_CLOUD


class CredentialKind(str, Enum):
    CLIENT_SECRET = "client_secret"
    CLIENT_CERTIFICATE = "client_certificate"
    AZ_SERVICE_PRINCIPAL = "az_service_principal"
    MANAGED_IDENTITY = "managed_identity"


class _Strategy(NamedTuple):
    kind: CredentialKind
    matches: Callable[[AuthConfig], bool]
    build: Callable[[AuthConfig], TokenCredential]


def authority_host(config: AuthConfig) -> str:
    """Return the configured authority host, or the Azure public cloud."""
    if config.authority_host:
        return config.authority_host
    return DEFAULT_AUTHORITY_HOST


def _has_client_secret(c: AuthConfig) -> bool:
    return bool(c.tenant_id and c.client_id and c.client_secret)


def _has_client_certificate(c: AuthConfig) -> bool:
    return bool(c.tenant_id and c.client_id and c.client_certificate)


def _has_az_service_principal(c: AuthConfig) -> bool:
    return bool(c.tenant and c.app_id and c.password)


def _has_managed_identity(c: AuthConfig) -> bool:
    return bool(c.client_id and not c.tenant_id)


def _build_client_secret(c: AuthConfig) -> TokenCredential:
    return ClientSecretCredential(
        c.tenant_id, c.client_id, c.client_secret, authority=authority_host(c)
    )


def _build_client_certificate(c: AuthConfig) -> TokenCredential:
    parsed = parse_certificates(c.client_certificate, c.client_certificate_password)
    return CertificateCredential(
        c.tenant_id,
        c.client_id,
        certificate_data=parsed.to_pem(),
        send_certificate_chain=c.client_certificate_send_chain,
        authority=authority_host(c),
    )


def _build_az_service_principal(c: AuthConfig) -> TokenCredential:
    return ClientSecretCredential(c.tenant, c.app_id, c.password, authority=authority_host(c))


def _build_managed_identity(c: AuthConfig) -> TokenCredential:
    return ManagedIdentityCredential(client_id=c.client_id)


_STRATEGIES: Tuple[_Strategy, ...] = (
    _Strategy(CredentialKind.CLIENT_SECRET, _has_client_secret, _build_client_secret),
    _Strategy(CredentialKind.CLIENT_CERTIFICATE, _has_client_certificate, _build_client_certificate),
    _Strategy(CredentialKind.AZ_SERVICE_PRINCIPAL, _has_az_service_principal, _build_az_service_principal),
    _Strategy(CredentialKind.MANAGED_IDENTITY, _has_managed_identity, _build_managed_identity),
)

_INVALID_CONFIG_MESSAGE = (
    "invalid data: requires a 'clientId' field, a combination of 'tenantId', 'clientId' "
    "and 'clientSecret', 'tenantId', 'clientId' and 'clientCertificate', "
    "or 'tenant', 'appId' and 'password'"
)


def _select(config: AuthConfig) -> _Strategy:
    for strategy in _STRATEGIES:
        if strategy.matches(config):
            return strategy
    raise InvalidCredentialConfig(_INVALID_CONFIG_MESSAGE)


def select_credential_kind(config: AuthConfig) -> CredentialKind:
    """Report which credential ``resolve`` would build, without building it."""
    return _select(config).kind


def resolve(config: AuthConfig) -> TokenCredential:
    """Build the credential selected by ``config``.

    Raises
    ------
    InvalidCredentialConfig
        If no supported field combination is present.
    CredentialBuildError
        If the selected credential cannot be constructed.
    """

    strategy = _select(config)
    logger.debug("credential strategy selected", strategy=strategy.kind.value)
    try:
        return strategy.build(config)
    except CredentialBuildError:
        raise
    except (TypeError, ValueError) as exc:
        raise CredentialBuildError(
            f"failed to build {strategy.kind.value} credential: {exc}"
        ) from exc


def apply_auth_config(config: AuthConfig, key: "MasterKey") -> None:
    """Resolve ``config`` and set the resulting credential on ``key``."""
    key.set_credential(resolve(config))


__all__ = [
    "CredentialKind",
    "DEFAULT_AUTHORITY_HOST",
    "apply_auth_config",
    "authority_host",
    "resolve",
    "select_credential_kind",
]
