"""
BSCW FileLink client facade.

This is the main entry point for hosts embedding the library. It wires the
HTTP client, account store, credential backend and services together.
"""

import asyncio
from collections.abc import AsyncIterable
from pathlib import Path
from typing import Self

import httpx
import structlog

from bscw_filelink.api.http_client import AsyncHttpClient
from bscw_filelink.config import FilelinkConfig
from bscw_filelink.core.files import read_file_chunks
from bscw_filelink.credentials.backend import CredentialBackend, LocalBackend
from bscw_filelink.credentials.prompt import PasswordPromptBroker, PopupLauncher
from bscw_filelink.credentials.router import MessageRouter
from bscw_filelink.credentials.vault import CredentialVault
from bscw_filelink.models.account import Account, LoginHandling
from bscw_filelink.services.filelink_service import FilelinkService, SaveResult, VerificationResult
from bscw_filelink.storage.account_store import AccountStore, ConfiguredCallback
from bscw_filelink.storage.settings import InMemorySettingsStore, SettingsStore

logger = structlog.get_logger(__name__)


class BscwFilelinkClient:
    """
    Async client for BSCW FileLink.

    Example:
        ```python
        vault = InMemoryVault(prompter=ask_user)
        async with BscwFilelinkClient(vault=vault, popup_launcher=popups) as client:
            await client.save_settings(
                "account1",
                username="alice",
                base_url="https://bscw.example.org/bscw/bscw.cgi/4711",
                expiration_in_days=7,
                login_handling=LoginHandling.SAVE_IN_VAULT,
            )
            response = await client.upload_path("account1", "file-1", "report.pdf")
            print(response["url"])
        ```

    Args:
        config: Client configuration. Uses defaults if not provided.
        settings: Settings persistence. In-memory if not provided.
        vault: Host credential vault, used by the local backend and purged on account deletion.
        popup_launcher: Host capability showing the password popup.
        backend: Credential backend override, e.g. a ``RemoteProxyBackend``.
        on_configured: Host hook receiving ``(account_id, configured)``.
        transport: Optional httpx transport for testing.
    """

    def __init__(
        self,
        config: FilelinkConfig | None = None,
        *,
        settings: SettingsStore | None = None,
        vault: CredentialVault | None = None,
        popup_launcher: PopupLauncher | None = None,
        backend: CredentialBackend | None = None,
        on_configured: ConfiguredCallback | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if backend is None and (vault is None or popup_launcher is None):
            msg = "Either a backend or both a vault and a popup launcher are required"
            raise ValueError(msg)

        self._config = config or FilelinkConfig()
        self._transport = transport
        self._account_store = AccountStore(
            settings or InMemorySettingsStore(),
            on_configured=on_configured,
        )
        self._vault = vault

        self._prompt_broker: PasswordPromptBroker | None = None
        self._router: MessageRouter | None = None
        if backend is None:
            self._prompt_broker = PasswordPromptBroker(popup_launcher)
            local_backend = LocalBackend(
                vault,
                self._prompt_broker,
                prompt_title=self._config.vault_prompt_title,
            )
            self._router = MessageRouter(local_backend, self._prompt_broker)
            backend = local_backend
        self._backend = backend

        self._http: AsyncHttpClient | None = None
        self._service: FilelinkService | None = None
        self._init_lock = asyncio.Lock()

    async def __aenter__(self) -> Self:
        """Enter async context."""
        await self._ensure_initialized()
        return self

    async def __aexit__(
        self, exc_type: type | None, exc_val: BaseException | None, exc_tb: object
    ) -> None:
        """Exit async context."""
        await self.close()

    async def _ensure_initialized(self) -> FilelinkService:
        async with self._init_lock:
            if self._service is None:
                self._http = AsyncHttpClient(self._config, transport=self._transport)
                await self._http.__aenter__()
                self._service = FilelinkService(
                    self._account_store,
                    self._http,
                    self._backend,
                    vault=self._vault,
                    config=self._config,
                )
                logger.debug("Client initialized")
            return self._service

    async def close(self) -> None:
        """Close the client and release resources."""
        async with self._init_lock:
            if self._http:
                await self._http.__aexit__(None, None, None)
                self._http = None
            self._service = None
            logger.debug("Client closed")

    @property
    def accounts(self) -> AccountStore:
        return self._account_store

    @property
    def prompt_broker(self) -> PasswordPromptBroker | None:
        """Popup broker of the local backend; None when a custom backend is used."""
        return self._prompt_broker

    @property
    def message_router(self) -> MessageRouter | None:
        """Router serving relayed requests from restricted contexts."""
        return self._router

    async def upload(
        self,
        account_id: str,
        file_id: str,
        name: str,
        data: bytes | AsyncIterable[bytes],
    ) -> dict[str, bool | str]:
        """
        Upload an attachment and return the host response.

        Returns:
            ``{"aborted": bool, "url": str}``.

        Raises:
            AccountIncompleteError: If the account is not fully configured.
            FilelinkError: If the upload failed.
        """
        service = await self._ensure_initialized()
        return await service.on_file_upload(account_id, file_id, name, data)

    async def upload_path(
        self,
        account_id: str,
        file_id: str,
        path: Path | str,
    ) -> dict[str, bool | str]:
        """Upload a local file, streaming it from disk."""
        path = Path(path)
        chunks = read_file_chunks(path, self._config.upload_chunk_size)
        return await self.upload(account_id, file_id, path.name, chunks)

    async def abort(self, account_id: str, file_id: str) -> bool:
        service = await self._ensure_initialized()
        return await service.on_file_upload_abort(account_id, file_id)

    async def delete(self, account_id: str, file_id: str) -> None:
        service = await self._ensure_initialized()
        await service.on_file_deleted(account_id, file_id)

    async def delete_account(self, account_id: str) -> None:
        service = await self._ensure_initialized()
        await service.on_account_deleted(account_id)

    async def refresh_configured_flags(self, account_ids: list[str]) -> dict[str, bool]:
        service = await self._ensure_initialized()
        return await service.refresh_configured_flags(account_ids)

    async def verify(self, account_id: str) -> VerificationResult:
        service = await self._ensure_initialized()
        return await service.verify_account(account_id)

    async def save_settings(
        self,
        account_id: str,
        *,
        username: str,
        base_url: str,
        expiration_in_days: int | str,
        login_handling: LoginHandling | str,
    ) -> SaveResult:
        service = await self._ensure_initialized()
        return await service.save_settings(
            account_id,
            username=username,
            base_url=base_url,
            expiration_in_days=expiration_in_days,
            login_handling=login_handling,
        )

    async def load_account(self, account_id: str) -> Account:
        return await self._account_store.load(account_id)
