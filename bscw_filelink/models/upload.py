"""
Upload-related domain models.
"""

from collections.abc import AsyncIterable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Self

from bscw_filelink.exceptions import ErrorKind, FilelinkError


@dataclass(frozen=True, slots=True)
class Credentials:
    """Username and password, held in memory for the duration of a request."""

    username: str
    password: str = field(repr=False)


@dataclass(frozen=True, kw_only=True)
class UploadJob:
    """
    A single attachment upload requested by the host.

    Attributes:
        file_id: Host-assigned file identifier, also the cancellation key.
        file_name: Name of the file on local disk.
        payload: File content, either in memory or as an async byte stream.
    """

    file_id: str
    file_name: str
    payload: bytes | AsyncIterable[bytes]


class UploadState(StrEnum):
    """States of the upload state machine."""

    IDLE = "idle"
    ACQUIRING_CREDENTIALS = "acquiring_credentials"
    CREATING_FOLDER = "creating_folder"
    UPLOADING = "uploading"
    MINTING_LINK = "minting_link"
    DONE = "done"
    ABORTED = "aborted"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (UploadState.DONE, UploadState.ABORTED, UploadState.FAILED)


@dataclass(frozen=True, kw_only=True)
class UploadResult:
    """
    Terminal outcome of an upload.

    Attributes:
        state: DONE, ABORTED or FAILED.
        url: Public link when DONE, empty otherwise.
        error: The failure when FAILED.
    """

    state: UploadState
    url: str = ""
    error: FilelinkError | None = None

    @classmethod
    def done(cls, url: str) -> Self:
        return cls(state=UploadState.DONE, url=url)

    @classmethod
    def aborted(cls) -> Self:
        return cls(state=UploadState.ABORTED)

    @classmethod
    def failed(cls, error: FilelinkError) -> Self:
        return cls(state=UploadState.FAILED, error=error)

    @property
    def error_kind(self) -> ErrorKind | None:
        """Kind of the outcome; ABORTED maps to UPLOAD_ABORTED, DONE to None."""
        if self.state == UploadState.ABORTED:
            return ErrorKind.UPLOAD_ABORTED
        if self.error is not None:
            return self.error.kind
        return None

    def to_host_response(self) -> dict[str, bool | str]:
        """Shape expected by the host's upload callback."""
        return {"aborted": self.state == UploadState.ABORTED, "url": self.url}
