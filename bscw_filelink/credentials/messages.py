"""
Messages exchanged between a restricted context and the privileged context.

A restricted context (e.g. a settings page) cannot reach the vault or open
windows itself; it sends one of these messages over a ``MessageChannel`` and
awaits the privileged side's reply.
"""

from enum import StrEnum
from typing import Any, Protocol, runtime_checkable

MSGTYPE_KEY = "msgtype"


class MessageType(StrEnum):
    INVOKE_LOGIN_MANAGER = "invokeLoginManager"
    INVOKE_PASSWORD_POPUP = "invokePasswordPopup"
    PASSWORD_POPUP_RESPONSE = "passwordPopupResponse"


@runtime_checkable
class MessageChannel(Protocol):
    """Request/response channel to the privileged context."""

    async def send(self, message: dict[str, Any]) -> Any:
        """
        Send a message and wait for the reply.

        Raises:
            FilelinkError: Whatever the privileged handler raised.
        """
        ...


def invoke_login_manager(url: str, discard_cached: bool) -> dict[str, Any]:
    return {
        MSGTYPE_KEY: MessageType.INVOKE_LOGIN_MANAGER.value,
        "url": url,
        "discardCachedCredentials": discard_cached,
    }


def invoke_password_popup(url: str, username: str, key: str | None = None) -> dict[str, Any]:
    return {
        MSGTYPE_KEY: MessageType.INVOKE_PASSWORD_POPUP.value,
        "url": url,
        "username": username,
        "key": key,
    }


def password_popup_response(correlation_id: str, password: str) -> dict[str, Any]:
    return {
        MSGTYPE_KEY: MessageType.PASSWORD_POPUP_RESPONSE.value,
        "correlationId": correlation_id,
        "password": password,
    }
