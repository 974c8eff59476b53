"""
Upload client for BSCW FileLink.

Runs the upload protocol for one account: check credentials, create a
dated folder, PUT the file into it, and mint a public link for it.
"""

from collections.abc import Callable
from datetime import datetime, timezone

import httpx
import structlog

from bscw_filelink.api.endpoints import (
    check_credentials,
    create_collection,
    delete_resource,
    generate_public_url,
    put_file,
)
from bscw_filelink.api.http_client import AsyncHttpClient
from bscw_filelink.api.paths import (
    file_url,
    folder_name_for,
    folder_url,
    parent_path,
    public_url_endpoint,
)
from bscw_filelink.config import FilelinkConfig
from bscw_filelink.core.cancellation import CancellationRegistry
from bscw_filelink.credentials.provider import CredentialProvider
from bscw_filelink.exceptions import (
    AccountIncompleteError,
    CredentialsInvalidError,
    FilelinkError,
    UploadAbortedError,
)
from bscw_filelink.models.account import Account
from bscw_filelink.models.upload import Credentials, UploadJob, UploadResult, UploadState

logger = structlog.get_logger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UploadClient:
    """
    Uploads files to the folder of one BSCW account.

    Each job walks IDLE → ACQUIRING_CREDENTIALS → CREATING_FOLDER → UPLOADING
    → MINTING_LINK and ends in DONE, ABORTED or FAILED.

    Concurrency:
    - Any number of jobs may run at once; each registers its own cancel token
      under its file id in the shared ``CancellationRegistry``.
    - ``finished_uploads`` is shared with the caller so that deletions can be
      served by a different client instance than the upload.
    """

    def __init__(
        self,
        account: Account,
        http: AsyncHttpClient,
        credential_provider: CredentialProvider,
        *,
        cancellations: CancellationRegistry | None = None,
        finished_uploads: dict[str, str] | None = None,
        config: FilelinkConfig | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """
        Args:
            account: Account to upload to.
            http: Open async HTTP client.
            credential_provider: Credential source for the account.
            cancellations: Shared cancel token registry.
            finished_uploads: Shared mapping of file id to private file URL.
            config: Client configuration. Uses defaults if not provided.
            clock: Source of the current time, used for folder names.
        """
        self._account = account
        self._http = http
        self._credential_provider = credential_provider
        self._cancellations = cancellations if cancellations is not None else CancellationRegistry()
        self._finished_uploads = finished_uploads if finished_uploads is not None else {}
        self._config = config or FilelinkConfig()
        self._clock = clock
        self._states: dict[str, UploadState] = {}

    @property
    def account(self) -> Account:
        return self._account

    def state_of(self, file_id: str) -> UploadState:
        """Current state of a job; IDLE for jobs this client never ran."""
        return self._states.get(file_id, UploadState.IDLE)

    def private_url_of(self, file_id: str) -> str | None:
        return self._finished_uploads.get(file_id)

    async def get_and_check_credentials(
        self,
        auto_retry: bool = True,
        discard_cached: bool = False,
        *,
        key: str | None = None,
    ) -> Credentials:
        """
        Obtain credentials and verify them with a HEAD request on the base URL.

        If the server rejects them and ``auto_retry`` is set, the user is asked
        again with the cache discarded. The loop ends when the user provides
        valid credentials, cancels the prompt, or ``max_credential_attempts``
        prompts were used.

        Args:
            auto_retry: Re-prompt after a 401.
            discard_cached: Purge stored credentials before the first prompt.
            key: Prompt serialization key, typically the upload job id.

        Returns:
            Credentials accepted by the server.

        Raises:
            AccountIncompleteError: If the account is not fully configured.
            NoValidCredentialsProvidedError: If the user dismissed the prompt.
            CredentialsInvalidError: If rejected and not retrying (or out of attempts).
            InvalidFolderError: If the base URL does not exist.
            NoPermissionError: If the user may not access the base URL.
            NetworkCommunicationError: On transport failure or unexpected status.
        """
        self._require_complete()
        max_attempts = self._config.max_credential_attempts
        attempt = 0

        while True:
            attempt += 1
            # Stored credentials already failed once, keep the next prompt from reusing them
            discard = discard_cached or attempt > 1
            credentials = await self._credential_provider.get_credentials(
                discard_cached=discard,
                key=key,
            )

            try:
                await check_credentials(self._http, self._account.base_url, credentials)
                return credentials
            except CredentialsInvalidError:
                if not auto_retry:
                    raise
                if max_attempts is not None and attempt >= max_attempts:
                    logger.warning("Giving up after rejected credentials", attempts=attempt)
                    raise
                logger.info("Credentials rejected, prompting again", attempt=attempt)

    async def upload_file(self, job: UploadJob) -> str:
        """
        Upload a file and return its public link.

        Args:
            job: File to upload.

        Returns:
            Public, time-limited download URL.

        Raises:
            UploadAbortedError: If the upload was cancelled through its token.
            FilelinkError: Any other failure, see ``get_and_check_credentials``.
        """
        try:
            self._transition(job.file_id, UploadState.ACQUIRING_CREDENTIALS)
            credentials = await self.get_and_check_credentials(True, False, key=job.file_id)

            self._transition(job.file_id, UploadState.CREATING_FOLDER)
            folder_name = await self._create_folder(credentials)

            self._transition(job.file_id, UploadState.UPLOADING)
            private_url = await self._upload(credentials, folder_name, job)

            self._transition(job.file_id, UploadState.MINTING_LINK)
            public_url = await self._generate_public_url(credentials, folder_name, job.file_name)
        except UploadAbortedError:
            self._transition(job.file_id, UploadState.ABORTED)
            raise
        except FilelinkError as e:
            self._transition(job.file_id, UploadState.FAILED)
            logger.warning("Upload failed", file_id=job.file_id, error_kind=e.kind.value)
            raise

        self._finished_uploads[job.file_id] = private_url
        self._transition(job.file_id, UploadState.DONE)
        return public_url

    async def run_upload(self, job: UploadJob) -> UploadResult:
        """
        Upload a file and report the outcome as a tagged result.

        Returns:
            DONE with the public URL, ABORTED, or FAILED with the error.
        """
        try:
            url = await self.upload_file(job)
        except UploadAbortedError:
            return UploadResult.aborted()
        except FilelinkError as e:
            return UploadResult.failed(e)
        return UploadResult.done(url)

    def cancel_upload(self, file_id: str) -> bool:
        """Signal the cancel token of an in-flight upload."""
        return self._cancellations.cancel(file_id)

    async def delete_file(self, absolute_path: str) -> None:
        """
        Delete an uploaded file by deleting its containing folder.

        Args:
            absolute_path: Private URL recorded when the file was uploaded.

        Raises:
            FilelinkError: If credentials or the DELETE request fail.
        """
        credentials = await self.get_and_check_credentials(True, False)
        folder = parent_path(absolute_path)
        await delete_resource(self._http, folder, credentials)
        logger.info("Deleted upload folder", url=folder)

    def forget_upload(self, file_id: str) -> str | None:
        """Remove and return the private URL recorded for a file."""
        return self._finished_uploads.pop(file_id, None)

    async def _create_folder(self, credentials: Credentials) -> str:
        folder_name = folder_name_for(self._clock())
        url = folder_url(self._account.base_url, folder_name)
        await create_collection(self._http, url, credentials)
        return folder_name

    async def _upload(self, credentials: Credentials, folder_name: str, job: UploadJob) -> str:
        url = file_url(self._account.base_url, folder_name, job.file_name)
        token = self._cancellations.register(job.file_id)
        try:
            await put_file(
                self._http,
                url,
                credentials,
                job.payload,
                cancel_token=token,
                timeout=self._upload_timeout(),
            )
        finally:
            self._cancellations.discard(job.file_id, token)
        return url

    async def _generate_public_url(
        self,
        credentials: Credentials,
        folder_name: str,
        file_name: str,
    ) -> str:
        url = public_url_endpoint(self._account.base_url, folder_name, file_name)
        expiration = self._account.expiration_in_seconds
        return await generate_public_url(self._http, url, credentials, expiration)

    def _upload_timeout(self) -> httpx.Timeout:
        limit = self._config.upload_timeout
        return httpx.Timeout(self._config.timeout, read=limit, write=limit)

    def _require_complete(self) -> None:
        if not self._account.is_complete():
            raise AccountIncompleteError(account_id=self._account.account_id)

    def _transition(self, file_id: str, state: UploadState) -> None:
        self._states[file_id] = state
        logger.debug("Upload state changed", file_id=file_id, state=state.value)
        if state.is_terminal:
            logger.info("Upload finished", file_id=file_id, state=state.value)
