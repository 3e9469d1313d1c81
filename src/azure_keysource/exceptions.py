from __future__ import annotations

"""Central exception hierarchy"""


class KeySourceError(Exception):
    """Base exception for all failures"""


class DecodeError(KeySourceError):
    """Raised when authentication file bytes cannot be transcoded to text"""


class ConfigParseError(KeySourceError):
    """Raised when the decoded authentication file is not valid structured data"""


class InvalidCredentialConfig(KeySourceError):
    """Raised when no supported combination of credential fields is present"""


class CredentialBuildError(KeySourceError):
    """Raised when a credential cannot be constructed from otherwise valid fields"""


class RemoteServiceError(KeySourceError):
    """Raised for transport, authentication or service failures in Key Vault"""


class CredentialStateError(KeySourceError):
    """Raised when a master key is used with an unexpected credential state"""


class MissingCredentialError(CredentialStateError):
    """Raised when encrypt/decrypt is attempted before a credential is set"""


class CredentialAlreadySetError(CredentialStateError):
    """Raised when a credential is assigned to a master key a second time"""


class KeyRecordError(KeySourceError):
    """Raised when a persisted key record or key URL is malformed"""


__all__ = [
    "KeySourceError",
    "DecodeError",
    "ConfigParseError",
    "InvalidCredentialConfig",
    "CredentialBuildError",
    "RemoteServiceError",
    "CredentialStateError",
    "MissingCredentialError",
    "CredentialAlreadySetError",
    "KeyRecordError",
]
