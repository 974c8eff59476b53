"""BSCW WebDAV and REST requests used by the upload protocol."""

import json
from typing import Any

import httpx
import structlog

from bscw_filelink.api.http_client import AsyncHttpClient, RequestContent
from bscw_filelink.core.cancellation import CancelToken
from bscw_filelink.exceptions import NetworkCommunicationError
from bscw_filelink.models.upload import Credentials

logger = structlog.get_logger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


async def check_credentials(http: AsyncHttpClient, base_url: str, credentials: Credentials) -> None:
    """
    Check credentials with a HEAD request on the configured folder.

    Args:
        http: Configured async HTTP client.
        base_url: Folder URL of the account.
        credentials: Credentials to check.

    Raises:
        CredentialsInvalidError: If the server rejects the credentials.
    """
    await http.request("HEAD", base_url, credentials=credentials)


async def create_collection(http: AsyncHttpClient, url: str, credentials: Credentials) -> None:
    """
    Create a folder with MKCOL.

    Args:
        http: Configured async HTTP client.
        url: URL of the folder to create.
        credentials: Valid credentials.
    """
    await http.request("MKCOL", url, credentials=credentials)


async def put_file(
    http: AsyncHttpClient,
    url: str,
    credentials: Credentials,
    content: RequestContent,
    *,
    cancel_token: CancelToken | None = None,
    timeout: float | httpx.Timeout | None = None,
) -> None:
    """
    Upload file content with PUT.

    Args:
        http: Configured async HTTP client.
        url: Target file URL.
        credentials: Valid credentials.
        content: File body, streamed if it is an async iterable.
        cancel_token: Aborts the transfer when signaled.
        timeout: Overrides the configured timeout.

    Raises:
        UploadAbortedError: If the cancel token fired during the transfer.
    """
    await http.request(
        "PUT",
        url,
        credentials=credentials,
        content=content,
        cancel_token=cancel_token,
        timeout=timeout,
    )


async def generate_public_url(
    http: AsyncHttpClient,
    url: str,
    credentials: Credentials,
    expiration_in_seconds: int,
) -> str:
    """
    Mint a time-limited public link through the publicURL REST API.

    Args:
        http: Configured async HTTP client.
        url: publicURL endpoint for the file.
        credentials: Valid credentials.
        expiration_in_seconds: Lifetime of the link.

    Returns:
        The public download URL.

    Raises:
        NetworkCommunicationError: If the response is not JSON or has no ``url``.
    """
    response = await http.request(
        "POST",
        url,
        credentials=credentials,
        content=f"timeout={expiration_in_seconds}",
        headers={"Content-Type": FORM_CONTENT_TYPE},
    )
    return _parse_public_url(response)


async def delete_resource(http: AsyncHttpClient, url: str, credentials: Credentials) -> None:
    """
    Delete a file or folder.

    Args:
        http: Configured async HTTP client.
        url: Resource URL.
        credentials: Valid credentials.
    """
    await http.request("DELETE", url, credentials=credentials)


def _parse_public_url(response: httpx.Response) -> str:
    try:
        data: Any = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        msg = (
            "Unable to parse publicURL REST API response from server, "
            f"invalid JSON was returned: {e}"
        )
        raise NetworkCommunicationError(msg) from e

    public_url = data.get("url") if isinstance(data, dict) else None
    if not isinstance(public_url, str) or not public_url:
        msg = "Unable to parse publicURL REST API response from server, 'url' key is missing"
        raise NetworkCommunicationError(msg)
    return public_url
