from collections.abc import AsyncIterator
from unittest.mock import Mock

import pytest
import pytest_asyncio

from bscw_filelink.api.http_client import AsyncHttpClient
from bscw_filelink.config import FilelinkConfig
from bscw_filelink.tests.utils.mock_transport import MockTransport


@pytest_asyncio.fixture
async def http(
    config: FilelinkConfig,
    mock_transport: MockTransport,
) -> AsyncIterator[AsyncHttpClient]:
    async with AsyncHttpClient(config, transport=mock_transport) as client:
        yield client


@pytest.fixture
def mock_backend() -> Mock:
    return Mock()
