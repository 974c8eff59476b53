"""
Credential backends.

``LocalBackend`` talks to the vault and the popup broker directly and is
used in the privileged context. ``RemoteProxyBackend`` relays the same
requests over a message channel from a restricted context. Callers pick
one at construction time; both satisfy ``CredentialBackend``.
"""

from typing import Any, Protocol, runtime_checkable

import structlog

from bscw_filelink.credentials.messages import (
    MSGTYPE_KEY,
    MessageChannel,
    invoke_login_manager,
    invoke_password_popup,
)
from bscw_filelink.credentials.prompt import PasswordPromptBroker
from bscw_filelink.credentials.vault import CredentialVault, display_host_port, origin_of
from bscw_filelink.exceptions import FilelinkError, NoValidCredentialsProvidedError
from bscw_filelink.models.upload import Credentials

logger = structlog.get_logger(__name__)

DEFAULT_PROMPT_TITLE = "Authentication Required"


@runtime_checkable
class CredentialBackend(Protocol):
    """Source of credentials for the two login handling strategies."""

    async def get_vault_credentials(self, url: str, *, discard_cached: bool) -> Credentials:
        """
        Return stored credentials for the origin of ``url``, prompting if none exist.

        Args:
            url: Account base URL.
            discard_cached: Purge stored logins first to force a prompt.

        Raises:
            NoValidCredentialsProvidedError: If the prompt was dismissed.
        """
        ...

    async def get_popup_password(self, *, username: str, url: str, key: str | None = None) -> str:
        """
        Ask for a password in a popup, never storing it.

        Returns:
            The password, empty if the popup was cancelled or closed.
        """
        ...


class LocalBackend:
    """Backend with direct access to the vault and the popup window."""

    def __init__(
        self,
        vault: CredentialVault,
        prompt_broker: PasswordPromptBroker,
        *,
        prompt_title: str = DEFAULT_PROMPT_TITLE,
    ) -> None:
        """
        Args:
            vault: Host credential storage.
            prompt_broker: Broker for the password popup.
            prompt_title: Title of the vault login prompt.
        """
        self._vault = vault
        self._prompt_broker = prompt_broker
        self._prompt_title = prompt_title

    async def get_vault_credentials(self, url: str, *, discard_cached: bool) -> Credentials:
        origin = origin_of(url)

        if discard_cached:
            for login in await self._vault.find(origin):
                await self._vault.remove(origin, login)
            logger.debug("Discarded cached logins", origin=origin)

        logins = await self._vault.find(origin)
        if logins:
            return logins[0]

        text = f"Enter username and password for {display_host_port(url)}"
        credentials = await self._vault.prompt_user(self._prompt_title, text, origin)
        if credentials is None:
            msg = "Authorization prompt cancelled"
            raise NoValidCredentialsProvidedError(msg)
        return credentials

    async def get_popup_password(self, *, username: str, url: str, key: str | None = None) -> str:
        return await self._prompt_broker.request_password(username=username, url=url, key=key)


class RemoteProxyBackend:
    """
    Backend that relays credential requests to the privileged context.

    A channel failure that is not a FileLink error counts as a dismissed prompt.
    """

    def __init__(self, channel: MessageChannel) -> None:
        """
        Args:
            channel: Channel to the privileged ``MessageRouter``.
        """
        self._channel = channel

    async def get_vault_credentials(self, url: str, *, discard_cached: bool) -> Credentials:
        reply = await self._relay(invoke_login_manager(url, discard_cached))
        return _credentials_from_reply(reply)

    async def get_popup_password(self, *, username: str, url: str, key: str | None = None) -> str:
        try:
            reply = await self._relay(invoke_password_popup(url, username, key))
        except NoValidCredentialsProvidedError:
            return ""
        if not isinstance(reply, dict):
            return ""
        password = reply.get("password")
        return password if isinstance(password, str) else ""

    async def _relay(self, message: dict[str, Any]) -> Any:
        try:
            return await self._channel.send(message)
        except FilelinkError:
            raise
        except Exception as e:
            logger.warning(
                "Credential relay rejected",
                msgtype=message.get(MSGTYPE_KEY),
                error=str(e),
            )
            raise NoValidCredentialsProvidedError(str(e) or "Credential relay rejected") from e


def _credentials_from_reply(reply: Any) -> Credentials:
    try:
        return Credentials(username=reply["username"], password=reply["password"])
    except (KeyError, TypeError) as e:
        msg = "Malformed login manager reply"
        raise NoValidCredentialsProvidedError(msg) from e
