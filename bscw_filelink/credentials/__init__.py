"""
Credential acquisition for BSCW FileLink.
"""

from bscw_filelink.credentials.backend import CredentialBackend, LocalBackend, RemoteProxyBackend
from bscw_filelink.credentials.messages import MessageChannel, MessageType
from bscw_filelink.credentials.prompt import PasswordPromptBroker, PopupLauncher
from bscw_filelink.credentials.provider import CredentialProvider
from bscw_filelink.credentials.router import LocalMessageChannel, MessageRouter
from bscw_filelink.credentials.vault import CredentialVault, InMemoryVault, origin_of

__all__ = [
    "CredentialBackend",
    "CredentialProvider",
    "CredentialVault",
    "InMemoryVault",
    "LocalBackend",
    "LocalMessageChannel",
    "MessageChannel",
    "MessageRouter",
    "MessageType",
    "PasswordPromptBroker",
    "PopupLauncher",
    "RemoteProxyBackend",
    "origin_of",
]
