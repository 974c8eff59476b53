"""
Credential provider.

Resolves credentials for an account using the strategy its login handling
selects: the vault (stored, prompted once) or an interactive popup
(never stored).
"""

import structlog

from bscw_filelink.credentials.backend import CredentialBackend
from bscw_filelink.exceptions import NoValidCredentialsProvidedError
from bscw_filelink.models.account import Account, LoginHandling
from bscw_filelink.models.upload import Credentials

logger = structlog.get_logger(__name__)


class CredentialProvider:
    """Strategy selection on top of a ``CredentialBackend``."""

    def __init__(self, account: Account, backend: CredentialBackend) -> None:
        """
        Args:
            account: Account whose credentials are requested.
            backend: Local or relaying backend, chosen by the caller.
        """
        self._account = account
        self._backend = backend

    async def get_credentials(self, *, discard_cached: bool, key: str | None = None) -> Credentials:
        """
        Obtain credentials, prompting the user when needed.

        Args:
            discard_cached: Purge stored credentials first. Ignored by the
                interactive strategy, which never stores any.
            key: Prompt serialization key, typically the upload job id.

        Returns:
            Unchecked credentials.

        Raises:
            NoValidCredentialsProvidedError: If the user dismissed the prompt.
        """
        if self._account.login_handling == LoginHandling.DO_NOT_SAVE:
            return await self._from_popup(key)
        return await self._from_vault(discard_cached)

    async def _from_popup(self, key: str | None) -> Credentials:
        password = await self._backend.get_popup_password(
            username=self._account.username,
            url=self._account.base_url,
            key=key,
        )
        if password == "":
            logger.info("Password prompt cancelled", account_id=self._account.account_id)
            raise NoValidCredentialsProvidedError()
        return Credentials(username=self._account.username, password=password)

    async def _from_vault(self, discard_cached: bool) -> Credentials:
        try:
            return await self._backend.get_vault_credentials(
                self._account.base_url,
                discard_cached=discard_cached,
            )
        except NoValidCredentialsProvidedError:
            logger.info("Login prompt cancelled", account_id=self._account.account_id)
            raise
