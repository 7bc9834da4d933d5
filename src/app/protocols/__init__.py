"""Protocolos e contratos do core da aplicação."""

from .channel_directory import (
    Channel,
    ChannelDirectoryProtocol,
    PostOk,
    PostRejected,
    PostResult,
    PostServerError,
    PostTimeout,
)
from .credential_store import (
    CorruptRecordError,
    CredentialConflictError,
    CredentialNotFoundError,
    CredentialStoreError,
    CredentialStoreProtocol,
)

__all__ = [
    "Channel",
    "ChannelDirectoryProtocol",
    "CorruptRecordError",
    "CredentialConflictError",
    "CredentialNotFoundError",
    "CredentialStoreError",
    "CredentialStoreProtocol",
    "PostOk",
    "PostRejected",
    "PostResult",
    "PostServerError",
    "PostTimeout",
]
