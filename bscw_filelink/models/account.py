"""
Account-related domain models.
"""

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Any, Self

BSCW_CGI_SUFFIX = "bscw.cgi"

USERNAME_KEY = "username"
BASE_URL_KEY = "baseURL"
EXPIRATION_KEY = "expiration"
LOGIN_HANDLING_KEY = "loginHandling"


class LoginHandling(StrEnum):
    """How credentials for an account are obtained."""

    DO_NOT_SAVE = "doNotSave"
    SAVE_IN_VAULT = "saveExperimental"


def is_valid_base_url_format(base_url: str) -> bool:
    """
    Check that a base URL points at a BSCW folder, i.e. ends in ``bscw.cgi/<id>``.

    Args:
        base_url: URL without trailing slashes.

    Returns:
        True if the format is valid.
    """
    components = base_url.split("/")
    if len(components) < 3:
        return False
    object_id = components[-1]
    if not (object_id.isascii() and object_id.isdigit()):
        return False
    return components[-2].endswith(BSCW_CGI_SUFFIX)


def _coerce_expiration(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


@dataclass(frozen=True, kw_only=True)
class Account:
    """
    FileLink account settings.

    Attributes:
        account_id: Host-assigned account identifier.
        username: BSCW username; required when credentials are not stored.
        base_url: Folder URL, e.g. ``https://host/bscw/bscw.cgi/1234``.
        expiration_in_days: Lifetime of minted public links.
        login_handling: Credential strategy.
    """

    account_id: str
    username: str = ""
    base_url: str = ""
    expiration_in_days: int = 0
    login_handling: LoginHandling = LoginHandling.SAVE_IN_VAULT

    @property
    def expiration_in_seconds(self) -> int:
        return self.expiration_in_days * 24 * 60 * 60

    def is_complete(self) -> bool:
        """Check that the account holds everything needed to upload."""
        if not self.base_url or not is_valid_base_url_format(self.base_url):
            return False
        if self.expiration_in_days <= 0:
            return False
        if self.login_handling == LoginHandling.DO_NOT_SAVE:
            return bool(self.username)
        return True

    def with_changes(self, **changes: Any) -> Self:
        return replace(self, **changes)

    def to_record(self) -> dict[str, Any]:
        """Serialize to the persisted settings record."""
        return {
            USERNAME_KEY: self.username,
            BASE_URL_KEY: self.base_url,
            EXPIRATION_KEY: self.expiration_in_days,
            LOGIN_HANDLING_KEY: self.login_handling.value,
        }

    @classmethod
    def from_record(cls, account_id: str, record: dict[str, Any]) -> Self:
        """
        Build an account from a persisted settings record.

        Missing keys fall back to the zero-valued defaults and an unknown
        login handling value falls back to the vault strategy.
        """
        try:
            login_handling = LoginHandling(
                record.get(LOGIN_HANDLING_KEY, LoginHandling.SAVE_IN_VAULT)
            )
        except ValueError:
            login_handling = LoginHandling.SAVE_IN_VAULT
        return cls(
            account_id=account_id,
            username=record.get(USERNAME_KEY) or "",
            base_url=record.get(BASE_URL_KEY) or "",
            expiration_in_days=_coerce_expiration(record.get(EXPIRATION_KEY, 0)),
            login_handling=login_handling,
        )
