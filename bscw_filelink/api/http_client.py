"""
Async HTTP client for the BSCW server.

Wraps httpx with Basic authentication, cooperative cancellation, and the
translation of transport failures and status codes into the FileLink error
taxonomy.
"""

import asyncio
import base64
from collections.abc import AsyncIterable
from typing import Any

import httpx
import structlog

from bscw_filelink.config import FilelinkConfig
from bscw_filelink.core.cancellation import CancelToken
from bscw_filelink.exceptions import (
    CredentialsInvalidError,
    InvalidFolderError,
    NetworkCommunicationError,
    NoPermissionError,
    UnexpectedStatusError,
    UploadAbortedError,
)
from bscw_filelink.models.upload import Credentials

logger = structlog.get_logger(__name__)

RequestContent = bytes | str | AsyncIterable[bytes]


def basic_auth_header(credentials: Credentials) -> dict[str, str]:
    """
    Build the Authorization header for HTTP Basic authentication.

    Args:
        credentials: Username and password.

    Returns:
        Header dict to merge into the request headers.
    """
    token = f"{credentials.username}:{credentials.password}".encode()
    return {"Authorization": "Basic " + base64.b64encode(token).decode("ascii")}


def raise_for_status(response: httpx.Response, url: str | None = None) -> None:
    """
    Translate a non-2xx response into the matching error.

    Args:
        response: Response to check.
        url: Request URL, attached to the error for context.

    Raises:
        CredentialsInvalidError: On 401.
        NoPermissionError: On 403.
        InvalidFolderError: On 404.
        UnexpectedStatusError: On any other non-2xx status.
    """
    if response.is_success:
        return

    status = response.status_code

    if status == httpx.codes.UNAUTHORIZED:
        raise CredentialsInvalidError(url=url)
    if status == httpx.codes.FORBIDDEN:
        raise NoPermissionError(url=url)
    if status == httpx.codes.NOT_FOUND:
        raise InvalidFolderError(url=url)

    msg = f"Invalid HTTP status code was returned: {status}: {response.reason_phrase}"
    raise UnexpectedStatusError(msg, status_code=status, url=url)


class AsyncHttpClient:
    """Async HTTP client for BSCW WebDAV and REST requests."""

    def __init__(
        self,
        config: FilelinkConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            config: Client configuration.
            transport: Optional transport for testing (mock transport).
        """
        self._config = config
        self._transport = transport

        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    async def __aenter__(self) -> "AsyncHttpClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self._close()

    async def _ensure_client(self) -> httpx.AsyncClient:
        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    timeout=self._config.timeout,
                    transport=self._transport,
                    headers={"User-Agent": self._config.user_agent},
                )
        return self._client

    async def _close(self) -> None:
        async with self._client_lock:
            if self._client is None:
                logger.debug("Client not open.")
                return
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        url: str,
        *,
        credentials: Credentials,
        content: RequestContent | None = None,
        headers: dict[str, str] | None = None,
        cancel_token: CancelToken | None = None,
        timeout: float | httpx.Timeout | None = None,
    ) -> httpx.Response:
        """
        Make an authenticated request and check its status.

        Args:
            method: HTTP method (HEAD, MKCOL, PUT, POST, DELETE).
            url: Absolute URL.
            credentials: Credentials for the Basic authorization header.
            content: Request body, streamed if it is an async iterable.
            headers: Extra headers.
            cancel_token: Aborts the request when signaled.
            timeout: Overrides the configured timeout.

        Returns:
            The successful (2xx) response.

        Raises:
            UploadAbortedError: If the cancel token fired.
            NetworkCommunicationError: On transport failure or unexpected status.
            CredentialsInvalidError: On 401.
            NoPermissionError: On 403.
            InvalidFolderError: On 404.
        """
        if self._client is None:
            msg = "HTTP client not initialized. Use 'async with' first."
            raise RuntimeError(msg)

        request_headers = {**basic_auth_header(credentials), **(headers or {})}
        send = self._send(method, url, content=content, headers=request_headers, timeout=timeout)

        if cancel_token is None:
            response = await send
        else:
            response = await self._send_cancellable(send, cancel_token, url)

        logger.debug("Request completed", method=method, url=url, status=response.status_code)
        raise_for_status(response, url)
        return response

    async def _send(
        self,
        method: str,
        url: str,
        *,
        content: RequestContent | None,
        headers: dict[str, str],
        timeout: float | httpx.Timeout | None,
    ) -> httpx.Response:
        try:
            return await self._client.request(
                method,
                url,
                content=content,
                headers=headers,
                timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
            )
        except (httpx.RequestError, httpx.InvalidURL) as e:
            msg = f"Request to {url} failed: {e}"
            logger.warning("Request failed", method=method, url=url, error_type=type(e).__name__)
            raise NetworkCommunicationError(msg, url=url) from e

    @staticmethod
    async def _send_cancellable(send: Any, cancel_token: CancelToken, url: str) -> httpx.Response:
        """Race a request against its cancel token."""
        if cancel_token.cancelled:
            send.close()
            msg = f"Request to {url} was aborted"
            raise UploadAbortedError(msg)

        request_task = asyncio.ensure_future(send)
        cancel_task = asyncio.ensure_future(cancel_token.wait())
        try:
            await asyncio.wait({request_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            cancel_task.cancel()
            if not request_task.done():
                request_task.cancel()
                await asyncio.wait({request_task})

        # A signaled token wins even if the response arrived in the same turn.
        if cancel_token.cancelled or request_task.cancelled():
            if not request_task.cancelled():
                request_task.exception()
            msg = f"Request to {url} was aborted"
            logger.info("Request aborted", url=url)
            raise UploadAbortedError(msg)
        return request_task.result()
