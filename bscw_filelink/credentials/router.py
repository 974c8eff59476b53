"""
Privileged-side handling of relayed credential messages.
"""

import json
from typing import Any

import structlog

from bscw_filelink.credentials.backend import LocalBackend
from bscw_filelink.credentials.messages import MSGTYPE_KEY, MessageType
from bscw_filelink.credentials.prompt import PasswordPromptBroker

logger = structlog.get_logger(__name__)


class MessageRouter:
    """
    Dispatches messages from restricted contexts to the local backend.

    Vault prompt dismissal raises ``NoValidCredentialsProvidedError``, which the
    channel hands back to the sender.
    """

    def __init__(self, backend: LocalBackend, prompt_broker: PasswordPromptBroker) -> None:
        self._backend = backend
        self._prompt_broker = prompt_broker

    async def handle(self, message: dict[str, Any]) -> dict[str, Any] | None:
        """
        Handle one message.

        Returns:
            ``{"username", "password"}`` for login manager requests,
            ``{"password"}`` for popup requests, None for popup responses.

        Raises:
            ValueError: On an unknown message type or a missing field.
        """
        try:
            msgtype = MessageType(message.get(MSGTYPE_KEY))
        except ValueError as e:
            msg = f"Unknown message type: {message.get(MSGTYPE_KEY)!r}"
            raise ValueError(msg) from e

        match msgtype:
            case MessageType.INVOKE_LOGIN_MANAGER:
                credentials = await self._backend.get_vault_credentials(
                    _required(message, "url"),
                    discard_cached=bool(message.get("discardCachedCredentials", False)),
                )
                return {"username": credentials.username, "password": credentials.password}
            case MessageType.INVOKE_PASSWORD_POPUP:
                password = await self._backend.get_popup_password(
                    username=_required(message, "username"),
                    url=_required(message, "url"),
                    key=message.get("key"),
                )
                return {"password": password}
            case MessageType.PASSWORD_POPUP_RESPONSE:
                self._prompt_broker.submit_response(
                    _required(message, "correlationId"),
                    message.get("password", ""),
                )
                return None


def _required(message: dict[str, Any], field: str) -> Any:
    try:
        return message[field]
    except KeyError as e:
        msg = f"Message {message.get(MSGTYPE_KEY)!r} is missing {field!r}"
        raise ValueError(msg) from e


class LocalMessageChannel:
    """
    In-process channel to a ``MessageRouter``.

    Messages and replies pass through JSON so both sides only ever share
    plain data, as they would across a process boundary.
    """

    def __init__(self, router: MessageRouter) -> None:
        self._router = router

    async def send(self, message: dict[str, Any]) -> Any:
        logger.debug("Relaying message", msgtype=message.get(MSGTYPE_KEY))
        reply = await self._router.handle(json.loads(json.dumps(message)))
        return json.loads(json.dumps(reply))
