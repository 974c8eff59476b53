"""
Host-facing FileLink service.

Implements the mail client's cloud-file lifecycle callbacks (upload, abort,
delete, account removal) and the actions behind the account settings form.
"""

from collections.abc import AsyncIterable
from dataclasses import dataclass
from enum import StrEnum

import structlog

from bscw_filelink.api.http_client import AsyncHttpClient
from bscw_filelink.config import FilelinkConfig
from bscw_filelink.core.cancellation import CancellationRegistry
from bscw_filelink.credentials.backend import CredentialBackend
from bscw_filelink.credentials.provider import CredentialProvider
from bscw_filelink.credentials.vault import CredentialVault, origin_of
from bscw_filelink.exceptions import (
    AccountIncompleteError,
    ErrorKind,
    FilelinkError,
    NoValidCredentialsProvidedError,
)
from bscw_filelink.models.account import Account, LoginHandling, is_valid_base_url_format
from bscw_filelink.models.upload import UploadJob, UploadState
from bscw_filelink.services.upload_service import UploadClient
from bscw_filelink.storage.account_store import AccountStore

logger = structlog.get_logger(__name__)


class SettingsMessage(StrEnum):
    """Message keys the settings form shows to the user."""

    CREDENTIALS_VERIFIED = "credentialsVerified"
    CREDENTIALS_INVALID = "credentialsInvalidError"
    INVALID_FOLDER = "invalidFolderError"
    NO_PERMISSION = "noPermissionError"
    NETWORK_COMMUNICATION = "networkCommunicationError"
    UNEXPECTED = "unexpectedError"
    FORM_INVALID = "someFormElementsInvalid"
    USERNAME_MISSING = "usernameMissingError"
    BASE_URL_FORMAT_INCORRECT = "baseUrlFormatIncorrectError"


_VERIFY_MESSAGES = {
    ErrorKind.CREDENTIALS_INVALID: SettingsMessage.CREDENTIALS_INVALID,
    ErrorKind.INVALID_FOLDER: SettingsMessage.INVALID_FOLDER,
    ErrorKind.NO_PERMISSION: SettingsMessage.NO_PERMISSION,
    ErrorKind.NETWORK_COMMUNICATION: SettingsMessage.NETWORK_COMMUNICATION,
}


@dataclass(frozen=True, kw_only=True)
class VerificationResult:
    """
    Attributes:
        verified: Whether the server accepted the credentials.
        message: Message to show, None when the user dismissed the prompt.
        error_kind: Kind of the failure, if any.
    """

    verified: bool
    message: SettingsMessage | None
    error_kind: ErrorKind | None = None


@dataclass(frozen=True, kw_only=True)
class SaveResult:
    """
    Attributes:
        stored: Whether the settings were persisted.
        configured: Configured flag reported to the host.
        message: Error message to show, if any.
    """

    stored: bool
    configured: bool = False
    message: SettingsMessage | None = None


class FilelinkService:
    """
    Entry point for the host's FileLink callbacks.

    Holds the state shared by all uploads: cancel tokens by file id and the
    private URL of every finished upload.
    """

    def __init__(
        self,
        account_store: AccountStore,
        http: AsyncHttpClient,
        backend: CredentialBackend,
        *,
        vault: CredentialVault | None = None,
        config: FilelinkConfig | None = None,
    ) -> None:
        """
        Args:
            account_store: Account settings persistence.
            http: Open async HTTP client.
            backend: Credential backend for all accounts.
            vault: Vault to purge when an account is deleted.
            config: Client configuration. Uses defaults if not provided.
        """
        self._account_store = account_store
        self._http = http
        self._backend = backend
        self._vault = vault
        self._config = config or FilelinkConfig()
        self._cancellations = CancellationRegistry()
        self._finished_uploads: dict[str, str] = {}

    @property
    def cancellations(self) -> CancellationRegistry:
        return self._cancellations

    @property
    def finished_uploads(self) -> dict[str, str]:
        return self._finished_uploads

    def client_for(self, account: Account) -> UploadClient:
        """Build an upload client bound to the shared upload state."""
        return UploadClient(
            account,
            self._http,
            CredentialProvider(account, self._backend),
            cancellations=self._cancellations,
            finished_uploads=self._finished_uploads,
            config=self._config,
        )

    async def on_file_upload(
        self,
        account_id: str,
        file_id: str,
        name: str,
        data: bytes | AsyncIterable[bytes],
    ) -> dict[str, bool | str]:
        """
        Upload an attachment.

        Returns:
            ``{"aborted": bool, "url": str}`` for the host.

        Raises:
            AccountIncompleteError: If the account is not fully configured.
            FilelinkError: If the upload failed; the host reports a generic error.
        """
        account = await self._load_complete(account_id)
        result = await self.client_for(account).run_upload(
            UploadJob(file_id=file_id, file_name=name, payload=data)
        )
        if result.state == UploadState.FAILED and result.error is not None:
            raise result.error
        return result.to_host_response()

    async def on_file_upload_abort(self, account_id: str, file_id: str) -> bool:
        """
        Cancel an in-flight upload.

        Returns:
            False if the file is not currently being transferred.
        """
        cancelled = self._cancellations.cancel(file_id)
        logger.info(
            "Upload abort requested",
            account_id=account_id,
            file_id=file_id,
            cancelled=cancelled,
        )
        return cancelled

    async def on_file_deleted(self, account_id: str, file_id: str) -> None:
        """
        Delete a previously uploaded file from the server.

        Errors are logged and dropped, the user cannot retry a deletion.
        """
        absolute_path = self._finished_uploads.pop(file_id, None)
        if absolute_path is None:
            logger.debug("No finished upload for deleted file", file_id=file_id)
            return

        account = await self._account_store.load(account_id)
        if not account.is_complete():
            logger.warning("Skipping deletion, account incomplete", account_id=account_id)
            return

        try:
            await self.client_for(account).delete_file(absolute_path)
        except FilelinkError as e:
            logger.warning(
                "Deleting uploaded file failed",
                file_id=file_id,
                error_kind=e.kind.value,
            )

    async def on_account_deleted(self, account_id: str) -> None:
        """Delete an account's settings and its stored logins."""
        account = await self._account_store.load(account_id)
        await self._account_store.delete(account_id)

        if self._vault is None or not is_valid_base_url_format(account.base_url):
            return
        origin = origin_of(account.base_url)
        for login in await self._vault.find(origin):
            await self._vault.remove(origin, login)
        logger.info("Removed stored logins of deleted account", account_id=account_id)

    async def refresh_configured_flags(self, account_ids: list[str]) -> dict[str, bool]:
        """Report every account's configured flag, e.g. on host start-up."""
        return await self._account_store.refresh_all(account_ids)

    async def verify_account(self, account_id: str) -> VerificationResult:
        """
        Check the stored settings with a single fresh credential prompt.

        Returns:
            The outcome and the message the settings form should show.
        """
        account = await self._account_store.load(account_id)
        client = self.client_for(account)
        try:
            await client.get_and_check_credentials(False, True)
        except NoValidCredentialsProvidedError:
            return VerificationResult(
                verified=False,
                message=None,
                error_kind=ErrorKind.NO_VALID_CREDENTIALS_PROVIDED,
            )
        except FilelinkError as e:
            message = _VERIFY_MESSAGES.get(e.kind, SettingsMessage.UNEXPECTED)
            return VerificationResult(verified=False, message=message, error_kind=e.kind)
        return VerificationResult(verified=True, message=SettingsMessage.CREDENTIALS_VERIFIED)

    async def save_settings(
        self,
        account_id: str,
        *,
        username: str,
        base_url: str,
        expiration_in_days: int | str,
        login_handling: LoginHandling | str,
    ) -> SaveResult:
        """
        Validate and store the settings form.

        Settings are stored even when the base URL format is wrong, so the
        user does not lose input; the account then stays unconfigured.
        """
        username = username.strip()
        base_url = base_url.strip().rstrip("/")
        try:
            expiration = int(str(expiration_in_days).strip())
            handling = LoginHandling(login_handling)
        except ValueError:
            return SaveResult(stored=False, message=SettingsMessage.FORM_INVALID)
        if not base_url or expiration <= 0:
            return SaveResult(stored=False, message=SettingsMessage.FORM_INVALID)

        if not username and handling == LoginHandling.DO_NOT_SAVE:
            return SaveResult(stored=False, message=SettingsMessage.USERNAME_MISSING)

        account = Account(
            account_id=account_id,
            username=username,
            base_url=base_url,
            expiration_in_days=expiration,
            login_handling=handling,
        )
        await self._account_store.store(account)

        if not is_valid_base_url_format(base_url):
            return SaveResult(stored=True, message=SettingsMessage.BASE_URL_FORMAT_INCORRECT)

        configured = await self._account_store.update_configured_flag(account)
        return SaveResult(stored=True, configured=configured)

    async def _load_complete(self, account_id: str) -> Account:
        account = await self._account_store.load(account_id)
        if not account.is_complete():
            raise AccountIncompleteError(account_id=account_id)
        return account
