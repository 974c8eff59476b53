from pathlib import Path
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from bscw_filelink import BscwFilelinkClient, FilelinkConfig, LoginHandling
from bscw_filelink.api.http_client import basic_auth_header
from bscw_filelink.credentials.vault import InMemoryVault
from bscw_filelink.exceptions import AccountIncompleteError
from bscw_filelink.models.upload import Credentials
from bscw_filelink.tests.utils.constants import (
    ACCOUNT_ID,
    BASE_URL,
    ORIGIN,
    PASSWORD,
    PUBLIC_LINK,
    USERNAME,
)
from bscw_filelink.tests.utils.fakes import ScriptedPopupLauncher
from bscw_filelink.tests.utils.mock_transport import MockTransport


def queue_successful_upload(mock_transport: MockTransport) -> None:
    mock_transport.add_response()
    mock_transport.add_response(status_code=httpx.codes.CREATED)
    mock_transport.add_response(status_code=httpx.codes.CREATED)
    mock_transport.add_response(json_data={"url": PUBLIC_LINK})


def make_client(
    mock_transport: MockTransport,
    launcher: ScriptedPopupLauncher,
    vault: InMemoryVault | None = None,
) -> BscwFilelinkClient:
    client = BscwFilelinkClient(
        FilelinkConfig(upload_chunk_size=4),
        vault=vault or InMemoryVault(),
        popup_launcher=launcher,
        transport=mock_transport,
    )
    launcher.broker = client.prompt_broker
    return client


def test_client_requires_credential_source() -> None:
    with pytest.raises(ValueError):
        BscwFilelinkClient(vault=InMemoryVault())


def test_custom_backend_has_no_local_router() -> None:
    client = BscwFilelinkClient(backend=Mock())

    assert client.prompt_broker is None
    assert client.message_router is None


@pytest.mark.asyncio
async def test_vault_upload_streams_file(
    tmp_path: Path,
    mock_transport: MockTransport,
    credentials: Credentials,
) -> None:
    vault = InMemoryVault()
    vault.add(ORIGIN, credentials)
    path = tmp_path / "report.pdf"
    path.write_bytes(b"%PDF-1.7 content")
    queue_successful_upload(mock_transport)

    async with make_client(mock_transport, ScriptedPopupLauncher(), vault) as client:
        saved = await client.save_settings(
            ACCOUNT_ID,
            username="",
            base_url=BASE_URL,
            expiration_in_days=7,
            login_handling=LoginHandling.SAVE_IN_VAULT,
        )
        response = await client.upload_path(ACCOUNT_ID, "file-1", path)

    assert saved.configured is True
    assert response == {"aborted": False, "url": PUBLIC_LINK}
    assert mock_transport.urls[2].endswith("/report.pdf")
    assert mock_transport.bodies[2] == b"%PDF-1.7 content"


@pytest.mark.asyncio
async def test_popup_upload_uses_entered_password(mock_transport: MockTransport) -> None:
    launcher = ScriptedPopupLauncher([PASSWORD])
    queue_successful_upload(mock_transport)

    async with make_client(mock_transport, launcher) as client:
        await client.save_settings(
            ACCOUNT_ID,
            username=USERNAME,
            base_url=BASE_URL,
            expiration_in_days=7,
            login_handling=LoginHandling.DO_NOT_SAVE,
        )
        response = await client.upload(ACCOUNT_ID, "file-1", "a.txt", b"x")

    assert response["url"] == PUBLIC_LINK
    assert len(launcher.opened) == 1
    expected = basic_auth_header(Credentials(username=USERNAME, password=PASSWORD))["Authorization"]
    assert mock_transport.requests[0].headers["authorization"] == expected


@pytest.mark.asyncio
async def test_upload_to_unconfigured_account_raises(mock_transport: MockTransport) -> None:
    async with make_client(mock_transport, ScriptedPopupLauncher()) as client:
        with pytest.raises(AccountIncompleteError):
            await client.upload(ACCOUNT_ID, "file-1", "a.txt", b"x")


@pytest.mark.asyncio
async def test_delete_account_clears_settings(
    mock_transport: MockTransport,
    credentials: Credentials,
) -> None:
    vault = InMemoryVault()
    vault.add(ORIGIN, credentials)
    on_configured = AsyncMock()
    client = BscwFilelinkClient(
        vault=vault,
        popup_launcher=ScriptedPopupLauncher(),
        on_configured=on_configured,
        transport=mock_transport,
    )

    async with client:
        await client.save_settings(
            ACCOUNT_ID,
            username="",
            base_url=BASE_URL,
            expiration_in_days=3,
            login_handling=LoginHandling.SAVE_IN_VAULT,
        )
        await client.delete_account(ACCOUNT_ID)
        flags = await client.refresh_configured_flags([ACCOUNT_ID])

    assert flags == {ACCOUNT_ID: False}
    assert (await client.load_account(ACCOUNT_ID)).base_url == ""
    assert await vault.find(ORIGIN) == []
