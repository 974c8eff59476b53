"""Cancellation tokens for in-flight uploads."""

import asyncio

import structlog

logger = structlog.get_logger(__name__)


class CancelToken:
    """
    One-shot cancellation signal, based on the browser's AbortController.

    Example:
        ```python
        token = CancelToken()
        assert not token.cancelled

        token.cancel()
        assert token.cancelled

        await token.wait()  # returns immediately once cancelled
        ```
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Signal cancellation. Further calls are no-ops."""
        self._event.set()

    async def wait(self) -> None:
        """Block until the token is cancelled."""
        await self._event.wait()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(cancelled={self.cancelled})"


class CancellationRegistry:
    """
    Shared mapping of job id to cancel token.

    Mutated only by ``register`` (job start), ``cancel`` (signals, keeps the
    entry) and ``discard`` (job completion, idempotent).
    """

    def __init__(self) -> None:
        self._tokens: dict[str, CancelToken] = {}

    def register(self, job_id: str) -> CancelToken:
        """
        Create and store a fresh token for a job.

        Args:
            job_id: Job identifier.

        Returns:
            The new token. A stale token under the same id is replaced.
        """
        token = CancelToken()
        self._tokens[job_id] = token
        return token

    def cancel(self, job_id: str) -> bool:
        """
        Signal the token registered for a job.

        Returns:
            True if a token was found, False for unknown or finished jobs.
        """
        token = self._tokens.get(job_id)
        if token is None:
            logger.debug("No upload in progress to cancel", job_id=job_id)
            return False
        token.cancel()
        return True

    def discard(self, job_id: str, token: CancelToken | None = None) -> None:
        """
        Remove a job's token.

        Args:
            job_id: Job identifier.
            token: If given, only remove the entry when it still holds this token,
                so a finishing job cannot drop a newer registration.
        """
        current = self._tokens.get(job_id)
        if current is None:
            return
        if token is not None and current is not token:
            return
        del self._tokens[job_id]

    def get(self, job_id: str) -> CancelToken | None:
        return self._tokens.get(job_id)

    def __contains__(self, job_id: str) -> bool:
        return job_id in self._tokens

    def __len__(self) -> int:
        return len(self._tokens)
