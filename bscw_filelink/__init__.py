"""
BSCW FileLink Python Client.

Uploads mail attachments to a BSCW folder and replaces them with
time-limited public links.

Example:
    ```python
    from bscw_filelink import BscwFilelinkClient, InMemoryVault

    async with BscwFilelinkClient(vault=InMemoryVault(ask_user), popup_launcher=popups) as client:
        response = await client.upload_path("account1", "file-1", "report.pdf")
        if not response["aborted"]:
            print(response["url"])
    ```
"""

from bscw_filelink.client import BscwFilelinkClient
from bscw_filelink.config import FilelinkConfig
from bscw_filelink.credentials import (
    CredentialBackend,
    CredentialVault,
    InMemoryVault,
    LocalBackend,
    LocalMessageChannel,
    MessageRouter,
    PasswordPromptBroker,
    PopupLauncher,
    RemoteProxyBackend,
)
from bscw_filelink.exceptions import (
    AccountIncompleteError,
    CredentialsInvalidError,
    ErrorKind,
    FilelinkError,
    HTTPStatusError,
    InvalidFolderError,
    NetworkCommunicationError,
    NoPermissionError,
    NoValidCredentialsProvidedError,
    UnexpectedStatusError,
    UploadAbortedError,
)
from bscw_filelink.models import (
    Account,
    Credentials,
    LoginHandling,
    UploadJob,
    UploadResult,
    UploadState,
    is_valid_base_url_format,
)
from bscw_filelink.services import FilelinkService, UploadClient
from bscw_filelink.storage import AccountStore, InMemorySettingsStore, JsonFileSettingsStore

__version__ = "0.1.0"

__all__ = [
    # Main client
    "BscwFilelinkClient",
    "FilelinkConfig",
    "FilelinkService",
    "UploadClient",
    # Models
    "Account",
    "Credentials",
    "LoginHandling",
    "UploadJob",
    "UploadResult",
    "UploadState",
    "is_valid_base_url_format",
    # Storage
    "AccountStore",
    "InMemorySettingsStore",
    "JsonFileSettingsStore",
    # Credentials
    "CredentialBackend",
    "CredentialVault",
    "InMemoryVault",
    "LocalBackend",
    "LocalMessageChannel",
    "MessageRouter",
    "PasswordPromptBroker",
    "PopupLauncher",
    "RemoteProxyBackend",
    # Exceptions
    "FilelinkError",
    "ErrorKind",
    "UploadAbortedError",
    "NoValidCredentialsProvidedError",
    "HTTPStatusError",
    "CredentialsInvalidError",
    "InvalidFolderError",
    "NoPermissionError",
    "NetworkCommunicationError",
    "UnexpectedStatusError",
    "AccountIncompleteError",
]
