"""Azure Key Vault master key backend.

Wraps an Azure Key Vault key to encrypt and decrypt the symmetric data key of
an encrypted document, with credentials selected from an Azure authentication
file.
"""
from __future__ import annotations

from .auth import (
    AuthConfig,
    CredentialKind,
    apply_auth_config,
    authority_host,
    load_auth_config_from_bytes,
    load_auth_config_from_file,
    resolve,
    select_credential_kind,
)
from .exceptions import (
    ConfigParseError,
    CredentialAlreadySetError,
    CredentialBuildError,
    CredentialStateError,
    DecodeError,
    InvalidCredentialConfig,
    KeyRecordError,
    KeySourceError,
    MissingCredentialError,
    RemoteServiceError,
)
from .keysource import KEY_TYPE, MasterKey
from .logging import configure_logging
from .version import __version__

__all__ = [
    "AuthConfig",
    "ConfigParseError",
    "CredentialAlreadySetError",
    "CredentialBuildError",
    "CredentialKind",
    "CredentialStateError",
    "DecodeError",
    "InvalidCredentialConfig",
    "KEY_TYPE",
    "KeyRecordError",
    "KeySourceError",
    "MasterKey",
    "MissingCredentialError",
    "RemoteServiceError",
    "__version__",
    "apply_auth_config",
    "authority_host",
    "configure_logging",
    "load_auth_config_from_bytes",
    "load_auth_config_from_file",
    "resolve",
    "select_credential_kind",
]
