import pytest

from bscw_filelink.config import FilelinkConfig


def test_defaults_allow_unlimited_credential_attempts() -> None:
    config = FilelinkConfig()

    assert config.max_credential_attempts is None
    assert config.upload_timeout is None


@pytest.mark.parametrize(
    "kwargs",
    [
        {"timeout": 0},
        {"upload_timeout": -1.0},
        {"max_credential_attempts": 0},
        {"upload_chunk_size": 0},
    ],
)
def test_invalid_values_are_rejected(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        FilelinkConfig(**kwargs)
