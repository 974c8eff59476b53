"""
BSCW FileLink client configuration.
"""

from dataclasses import dataclass


@dataclass(frozen=True, kw_only=True)
class FilelinkConfig:
    """
    Attributes:
        timeout: Request timeout in seconds for metadata requests.
        upload_timeout: Timeout for the PUT request in seconds. None disables it.
        user_agent: User-Agent header value.
        max_credential_attempts: Maximum number of credential prompts per check.
            None keeps prompting until the user cancels.
        upload_chunk_size: Chunk size used when streaming local files.
        vault_prompt_title: Title of the vault login prompt.
    """

    timeout: float = 30.0
    upload_timeout: float | None = None
    user_agent: str = "BSCW-FileLink-Python/1.0"
    max_credential_attempts: int | None = None
    upload_chunk_size: int = 64 * 1024
    vault_prompt_title: str = "Authentication Required"

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            msg = "timeout must be positive"
            raise ValueError(msg)
        if self.upload_timeout is not None and self.upload_timeout <= 0:
            msg = "upload_timeout must be positive"
            raise ValueError(msg)
        if self.max_credential_attempts is not None and self.max_credential_attempts <= 0:
            msg = "max_credential_attempts must be positive"
            raise ValueError(msg)
        if self.upload_chunk_size <= 0:
            msg = "upload_chunk_size must be positive"
            raise ValueError(msg)
