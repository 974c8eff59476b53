import asyncio
from unittest.mock import Mock

import pytest

from bscw_filelink.credentials.backend import LocalBackend, RemoteProxyBackend
from bscw_filelink.credentials.messages import (
    invoke_login_manager,
    invoke_password_popup,
    password_popup_response,
)
from bscw_filelink.credentials.prompt import PasswordPromptBroker
from bscw_filelink.credentials.router import LocalMessageChannel, MessageRouter
from bscw_filelink.credentials.vault import InMemoryVault
from bscw_filelink.exceptions import NoValidCredentialsProvidedError
from bscw_filelink.models.upload import Credentials
from bscw_filelink.tests.utils.constants import BASE_URL, ORIGIN, USERNAME
from bscw_filelink.tests.utils.fakes import ScriptedPopupLauncher


def make_router(
    vault: InMemoryVault,
    answers: list[str | None] | None = None,
) -> tuple[MessageRouter, ScriptedPopupLauncher]:
    launcher = ScriptedPopupLauncher(answers)
    broker = PasswordPromptBroker(launcher)
    launcher.broker = broker
    return MessageRouter(LocalBackend(vault, broker), broker), launcher


@pytest.mark.asyncio
async def test_login_manager_message_returns_credentials(credentials: Credentials) -> None:
    vault = InMemoryVault()
    vault.add(ORIGIN, credentials)
    router, _ = make_router(vault)

    reply = await router.handle(invoke_login_manager(BASE_URL, False))

    assert reply == {"username": credentials.username, "password": credentials.password}


@pytest.mark.asyncio
async def test_popup_answered_by_response_message() -> None:
    router, launcher = make_router(InMemoryVault())

    request = asyncio.create_task(router.handle(invoke_password_popup(BASE_URL, USERNAME)))
    for _ in range(100):
        if launcher.opened:
            break
        await asyncio.sleep(0)
    correlation_id = launcher.opened[0][0]

    assert await router.handle(password_popup_response(correlation_id, "pw")) is None
    assert await request == {"password": "pw"}


@pytest.mark.asyncio
async def test_unknown_message_type_raises() -> None:
    router, _ = make_router(InMemoryVault())

    with pytest.raises(ValueError, match="Unknown message type"):
        await router.handle({"msgtype": "somethingElse"})


@pytest.mark.asyncio
async def test_remote_backend_over_local_channel(credentials: Credentials) -> None:
    vault = InMemoryVault()
    vault.add(ORIGIN, credentials)
    router, _ = make_router(vault, answers=["popup-pw"])
    backend = RemoteProxyBackend(LocalMessageChannel(router))

    assert await backend.get_vault_credentials(BASE_URL, discard_cached=False) == credentials
    assert await backend.get_popup_password(username=USERNAME, url=BASE_URL) == "popup-pw"


@pytest.mark.asyncio
async def test_local_channel_propagates_dismissal() -> None:
    router, _ = make_router(InMemoryVault())
    backend = RemoteProxyBackend(LocalMessageChannel(router))

    with pytest.raises(NoValidCredentialsProvidedError):
        await backend.get_vault_credentials(BASE_URL, discard_cached=True)


@pytest.mark.asyncio
async def test_message_missing_field_raises() -> None:
    router, _ = make_router(InMemoryVault())

    with pytest.raises(ValueError, match="missing 'url'"):
        await router.handle({"msgtype": "invokeLoginManager"})


@pytest.mark.asyncio
async def test_malformed_relayed_message_is_dismissal() -> None:
    router, _ = make_router(InMemoryVault())
    channel = LocalMessageChannel(router)

    async def send_without_url(message: dict) -> object:
        return await channel.send({"msgtype": message["msgtype"]})

    proxy = Mock()
    proxy.send = send_without_url

    with pytest.raises(NoValidCredentialsProvidedError):
        await RemoteProxyBackend(proxy).get_vault_credentials(BASE_URL, discard_cached=False)
