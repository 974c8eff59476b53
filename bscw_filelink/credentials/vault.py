"""
Credential vault interface.

The vault is the host's encrypted login storage, addressed by origin
(scheme, host and port of a URL).
"""

from collections.abc import Awaitable, Callable
from typing import Protocol, runtime_checkable

import httpx
import structlog

from bscw_filelink.models.upload import Credentials

logger = structlog.get_logger(__name__)

VaultPrompter = Callable[[str, str, str], Awaitable[Credentials | None]]


def origin_of(url: str) -> str:
    """
    Vault key for a URL, e.g. ``https://host:8443`` for ``https://host:8443/bscw/bscw.cgi/1``.

    Default ports are omitted.
    """
    parsed = httpx.URL(url)
    origin = f"{parsed.scheme}://{parsed.host}"
    if parsed.port is not None:
        origin += f":{parsed.port}"
    return origin


def display_host_port(url: str) -> str:
    """Host and non-default port of a URL, as shown in login prompts."""
    parsed = httpx.URL(url)
    if parsed.port is not None:
        return f"{parsed.host}:{parsed.port}"
    return parsed.host


@runtime_checkable
class CredentialVault(Protocol):
    """
    Capability interface of the host's credential storage.

    Implementations decide on their own whether prompted credentials are saved.
    """

    async def find(self, origin: str) -> list[Credentials]:
        """Return all stored logins for an origin."""
        ...

    async def remove(self, origin: str, credentials: Credentials) -> None:
        """Remove a stored login."""
        ...

    async def prompt_user(self, title: str, text: str, origin: str) -> Credentials | None:
        """
        Ask the user for a username and password.

        Returns:
            The entered credentials, or None if the prompt was dismissed.
        """
        ...


class InMemoryVault:
    """Vault kept in process memory, prompting through an injected callable."""

    def __init__(
        self,
        prompter: VaultPrompter | None = None,
        *,
        save_prompted: bool = True,
    ) -> None:
        """
        Args:
            prompter: Async callable ``(title, text, origin)`` returning credentials
                or None. Without one every prompt counts as dismissed.
            save_prompted: Whether credentials entered in a prompt are stored.
        """
        self._prompter = prompter
        self._save_prompted = save_prompted
        self._logins: dict[str, list[Credentials]] = {}

    def add(self, origin: str, credentials: Credentials) -> None:
        self._logins.setdefault(origin, []).append(credentials)

    async def find(self, origin: str) -> list[Credentials]:
        return list(self._logins.get(origin, []))

    async def remove(self, origin: str, credentials: Credentials) -> None:
        logins = self._logins.get(origin)
        if not logins or credentials not in logins:
            return
        logins.remove(credentials)
        if not logins:
            del self._logins[origin]

    async def prompt_user(self, title: str, text: str, origin: str) -> Credentials | None:
        if self._prompter is None:
            logger.debug("No prompter configured, treating prompt as dismissed", origin=origin)
            return None
        credentials = await self._prompter(title, text, origin)
        if credentials is not None and self._save_prompted:
            self.add(origin, credentials)
        return credentials
