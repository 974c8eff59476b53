from collections.abc import Callable

import pytest

from bscw_filelink.config import FilelinkConfig
from bscw_filelink.models.account import Account, LoginHandling
from bscw_filelink.models.upload import Credentials
from bscw_filelink.tests.utils.constants import ACCOUNT_ID, BASE_URL, PASSWORD, USERNAME
from bscw_filelink.tests.utils.mock_transport import MockTransport


@pytest.fixture
def config() -> FilelinkConfig:
    return FilelinkConfig()


@pytest.fixture
def mock_transport() -> MockTransport:
    return MockTransport()


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(username=USERNAME, password=PASSWORD)


@pytest.fixture
def make_account() -> Callable[..., Account]:
    def _make(
        account_id: str = ACCOUNT_ID,
        username: str = USERNAME,
        base_url: str = BASE_URL,
        expiration_in_days: int = 7,
        login_handling: LoginHandling = LoginHandling.SAVE_IN_VAULT,
    ) -> Account:
        return Account(
            account_id=account_id,
            username=username,
            base_url=base_url,
            expiration_in_days=expiration_in_days,
            login_handling=login_handling,
        )

    return _make
