from collections.abc import Callable

import pytest

from bscw_filelink.models.account import Account, LoginHandling, is_valid_base_url_format


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://x/bscw.cgi/42", True),
        ("https://bscw.example.org/bscw/bscw.cgi/0", True),
        ("https://x/sub.bscw.cgi/42", True),
        ("https://x/bscw.cgi/", False),
        ("https://x/other.cgi/42", False),
        ("https://x/bscw.cgi/4a", False),
        ("https://x/bscw.cgi/-1", False),
        ("https://x/bscw.cgi/42/", False),
        ("42", False),
        ("bscw.cgi/42", False),
        ("", False),
    ],
)
def test_is_valid_base_url_format(url: str, expected: bool) -> None:
    assert is_valid_base_url_format(url) is expected


def test_never_configured_account_is_zero_valued() -> None:
    account = Account(account_id="a")

    assert account.username == ""
    assert account.base_url == ""
    assert account.expiration_in_days == 0
    assert account.login_handling == LoginHandling.SAVE_IN_VAULT
    assert not account.is_complete()


def test_vault_account_without_username_is_complete(make_account: Callable[..., Account]) -> None:
    account = make_account(username="", login_handling=LoginHandling.SAVE_IN_VAULT)

    assert account.is_complete()


def test_popup_account_requires_username(make_account: Callable[..., Account]) -> None:
    assert not make_account(username="", login_handling=LoginHandling.DO_NOT_SAVE).is_complete()
    assert make_account(username="alice", login_handling=LoginHandling.DO_NOT_SAVE).is_complete()


@pytest.mark.parametrize("expiration", [0, -3])
def test_account_requires_positive_expiration(
    make_account: Callable[..., Account],
    expiration: int,
) -> None:
    assert not make_account(expiration_in_days=expiration).is_complete()


def test_account_requires_valid_base_url(make_account: Callable[..., Account]) -> None:
    assert not make_account(base_url="https://x/other.cgi/42").is_complete()
    assert not make_account(base_url="").is_complete()


def test_expiration_in_seconds(make_account: Callable[..., Account]) -> None:
    assert make_account(expiration_in_days=2).expiration_in_seconds == 172800


def test_to_record_uses_persisted_keys(make_account: Callable[..., Account]) -> None:
    record = make_account(login_handling=LoginHandling.DO_NOT_SAVE).to_record()

    assert record == {
        "username": "alice",
        "baseURL": "https://bscw.example.org/bscw/bscw.cgi/7",
        "expiration": 7,
        "loginHandling": "doNotSave",
    }


def test_from_record_round_trips(make_account: Callable[..., Account]) -> None:
    account = make_account()

    assert Account.from_record(account.account_id, account.to_record()) == account


def test_from_record_coerces_form_values() -> None:
    account = Account.from_record(
        "a",
        {
            "username": None,
            "baseURL": "https://x/bscw.cgi/1",
            "expiration": "14",
            "loginHandling": "bogus",
        },
    )

    assert account.username == ""
    assert account.expiration_in_days == 14
    assert account.login_handling == LoginHandling.SAVE_IN_VAULT


def test_from_record_treats_garbage_expiration_as_unset() -> None:
    account = Account.from_record("a", {"expiration": "soon"})

    assert account.expiration_in_days == 0
