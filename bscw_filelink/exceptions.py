"""
BSCW FileLink exception hierarchy.

All exceptions inherit from FilelinkError for easy catching. Every concrete
error carries an ``ErrorKind`` tag so callers can ``match`` on ``error.kind``
instead of chaining ``isinstance`` checks.
"""

from enum import StrEnum
from typing import Any


class ErrorKind(StrEnum):
    """Closed set of failure kinds shared by the upload and credential layers."""

    UPLOAD_ABORTED = "upload_aborted"
    NO_VALID_CREDENTIALS_PROVIDED = "no_valid_credentials_provided"
    CREDENTIALS_INVALID = "credentials_invalid"
    INVALID_FOLDER = "invalid_folder"
    NO_PERMISSION = "no_permission"
    NETWORK_COMMUNICATION = "network_communication"
    ACCOUNT_INCOMPLETE = "account_incomplete"


class FilelinkError(Exception):
    """Base exception for all bscw_filelink errors."""

    kind: ErrorKind

    def __init__(self, message: str = "", **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx})"
        return self.message


class UploadAbortedError(FilelinkError):
    """The upload was cancelled through its cancel token. Not a failure."""

    kind = ErrorKind.UPLOAD_ABORTED

    def __init__(self, message: str = "Upload aborted", *, file_id: str | None = None) -> None:
        super().__init__(message, file_id=file_id)
        self.file_id = file_id


class NoValidCredentialsProvidedError(FilelinkError):
    """The user dismissed the credential prompt."""

    kind = ErrorKind.NO_VALID_CREDENTIALS_PROVIDED

    def __init__(self, message: str = "No credentials provided") -> None:
        super().__init__(message)


class HTTPStatusError(FilelinkError):
    """Server answered with a non-2xx status code."""

    kind = ErrorKind.NETWORK_COMMUNICATION

    def __init__(self, message: str, *, status_code: int, url: str | None = None) -> None:
        super().__init__(message, status_code=status_code, url=url)
        self.status_code = status_code
        self.url = url


class CredentialsInvalidError(HTTPStatusError):
    """Server rejected the credentials (401)."""

    kind = ErrorKind.CREDENTIALS_INVALID

    def __init__(self, message: str = "Credentials rejected", *, url: str | None = None) -> None:
        super().__init__(message, status_code=401, url=url)


class NoPermissionError(HTTPStatusError):
    """Server refused the operation for this user (403)."""

    kind = ErrorKind.NO_PERMISSION

    def __init__(self, message: str = "Permission denied", *, url: str | None = None) -> None:
        super().__init__(message, status_code=403, url=url)


class InvalidFolderError(HTTPStatusError):
    """Configured folder does not exist (404)."""

    kind = ErrorKind.INVALID_FOLDER

    def __init__(self, message: str = "Folder not found", *, url: str | None = None) -> None:
        super().__init__(message, status_code=404, url=url)


class NetworkCommunicationError(FilelinkError):
    """Transport failure or a response that violates the BSCW protocol."""

    kind = ErrorKind.NETWORK_COMMUNICATION


class UnexpectedStatusError(HTTPStatusError, NetworkCommunicationError):
    """Non-2xx status without a dedicated error kind."""

    kind = ErrorKind.NETWORK_COMMUNICATION


class AccountIncompleteError(FilelinkError):
    """Account settings are missing or malformed; never retried."""

    kind = ErrorKind.ACCOUNT_INCOMPLETE

    def __init__(
        self,
        message: str = "Account is not completely configured",
        *,
        account_id: str,
    ) -> None:
        super().__init__(message, account_id=account_id)
        self.account_id = account_id
