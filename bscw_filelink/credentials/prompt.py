"""
Password popup broker.

Opens a password popup through the host, suspends the caller until the
popup answers, and routes answers back by correlation id.
"""

import asyncio
from typing import Protocol, runtime_checkable

import structlog

from bscw_filelink.core.pending import PendingResponses

logger = structlog.get_logger(__name__)

CANCELLED_PASSWORD = ""


@runtime_checkable
class PopupLauncher(Protocol):
    """Host capability that shows and hides the password popup window."""

    async def open(self, correlation_id: str, *, username: str, url: str) -> None:
        """
        Show a popup asking for the password of ``username`` at ``url``.

        The popup must answer through ``PasswordPromptBroker.submit_response``
        with the same correlation id.
        """
        ...

    async def close(self, correlation_id: str) -> None:
        """Close a popup the user did not close themselves."""
        ...


class PasswordPromptBroker:
    """
    Correlates password popups with the coroutines waiting for them.

    Submitting, cancelling and closing the window all resolve the waiter;
    cancel and close yield an empty password. Prompts sharing a key
    (one upload job) are serialized, different keys prompt concurrently.
    """

    def __init__(self, launcher: PopupLauncher) -> None:
        """
        Args:
            launcher: Host capability that shows the popup.
        """
        self._launcher = launcher
        self._pending: PendingResponses[str] = PendingResponses()
        self._closed_by_user: set[str] = set()
        self._key_locks: dict[str, tuple[asyncio.Lock, int]] = {}

    async def request_password(self, *, username: str, url: str, key: str | None = None) -> str:
        """
        Show the popup and wait for its answer.

        Args:
            username: Username shown in the popup.
            url: Target URL shown in the popup.
            key: Serialization key, typically the upload job id. Defaults to ``url``.

        Returns:
            The entered password, empty if the popup was cancelled or closed.
        """
        lock_key = key or url
        lock = self._acquire_key_lock(lock_key)
        try:
            async with lock:
                return await self._prompt(username=username, url=url)
        finally:
            self._release_key_lock(lock_key)

    def submit_response(self, correlation_id: str, password: str) -> bool:
        """
        Deliver the popup's answer.

        Returns:
            False if no popup with this id is waiting.
        """
        delivered = self._pending.resolve(correlation_id, password)
        if not delivered:
            logger.debug("Dropping answer for unknown popup", correlation_id=correlation_id)
        return delivered

    def window_closed(self, correlation_id: str) -> bool:
        """Treat a popup closed by the user as a cancelled prompt."""
        if correlation_id not in self._pending:
            return False
        self._closed_by_user.add(correlation_id)
        return self._pending.resolve(correlation_id, CANCELLED_PASSWORD)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def _prompt(self, *, username: str, url: str) -> str:
        correlation_id, future = self._pending.create()
        try:
            await self._launcher.open(correlation_id, username=username, url=url)
            password = await future
        finally:
            self._pending.discard(correlation_id)
            closed_by_user = correlation_id in self._closed_by_user
            self._closed_by_user.discard(correlation_id)
            if not closed_by_user:
                await self._launcher.close(correlation_id)
        return password

    def _acquire_key_lock(self, key: str) -> asyncio.Lock:
        lock, users = self._key_locks.get(key, (None, 0))
        if lock is None:
            lock = asyncio.Lock()
        self._key_locks[key] = (lock, users + 1)
        return lock

    def _release_key_lock(self, key: str) -> None:
        lock, users = self._key_locks[key]
        if users <= 1:
            del self._key_locks[key]
        else:
            self._key_locks[key] = (lock, users - 1)
