from .certificate import ParsedCertificate, parse_certificates
from .config import AuthConfig, load_auth_config_from_bytes, load_auth_config_from_file
from .resolver import (
    DEFAULT_AUTHORITY_HOST,
    CredentialKind,
    apply_auth_config,
    authority_host,
    resolve,
    select_credential_kind,
)

__all__ = [
    "AuthConfig",
    "CredentialKind",
    "DEFAULT_AUTHORITY_HOST",
    "ParsedCertificate",
    "apply_auth_config",
    "authority_host",
    "load_auth_config_from_bytes",
    "load_auth_config_from_file",
    "parse_certificates",
    "resolve",
    "select_credential_kind",
]
