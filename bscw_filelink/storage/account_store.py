"""
Account store.

Loads and persists FileLink account settings and tells the host whether an
account is ready for uploads.
"""

import inspect
from collections.abc import Awaitable, Callable, Iterable

import structlog

from bscw_filelink.models.account import Account
from bscw_filelink.storage.settings import SettingsStore

logger = structlog.get_logger(__name__)

ConfiguredCallback = Callable[[str, bool], Awaitable[None] | None]


class AccountStore:
    """Account settings persistence on top of a ``SettingsStore``."""

    def __init__(
        self,
        settings: SettingsStore,
        *,
        on_configured: ConfiguredCallback | None = None,
    ) -> None:
        """
        Args:
            settings: Key-value persistence scoped by account id.
            on_configured: Host hook receiving ``(account_id, configured)``.
        """
        self._settings = settings
        self._on_configured = on_configured

    async def load(self, account_id: str) -> Account:
        """
        Load an account.

        Args:
            account_id: Host account identifier.

        Returns:
            The stored account, or a zero-valued one if never configured.
        """
        record = await self._settings.get(account_id)
        if record is None:
            return Account(account_id=account_id)
        return Account.from_record(account_id, record)

    async def store(self, account: Account) -> None:
        """Persist an account, replacing whatever was stored before."""
        await self._settings.set(account.account_id, account.to_record())
        logger.debug("Account stored", account_id=account.account_id)

    async def delete(self, account_id: str) -> None:
        """Delete an account's settings. No-op if absent."""
        await self._settings.remove(account_id)
        logger.info("Account deleted", account_id=account_id)

    @staticmethod
    def is_complete(account: Account) -> bool:
        return account.is_complete()

    async def update_configured_flag(self, account: Account) -> bool:
        """
        Notify the host whether an account can be used for uploads.

        Returns:
            The configured flag that was reported.
        """
        configured = account.is_complete()
        if self._on_configured is not None:
            result = self._on_configured(account.account_id, configured)
            if inspect.isawaitable(result):
                await result
        logger.debug(
            "Account configured flag updated",
            account_id=account.account_id,
            configured=configured,
        )
        return configured

    async def refresh_all(self, account_ids: Iterable[str]) -> dict[str, bool]:
        """
        Re-report the configured flag of every account, e.g. on host start-up.

        Returns:
            Mapping of account id to configured flag.
        """
        flags = {}
        for account_id in account_ids:
            account = await self.load(account_id)
            flags[account_id] = await self.update_configured_flag(account)
        return flags
