"""Correlation of asynchronous requests with their responses."""

import asyncio
import uuid
from typing import Generic, TypeVar

T = TypeVar("T")


class PendingResponses(Generic[T]):
    """
    Mapping of correlation id to a future awaiting its response.

    Each outstanding request gets its own id, so responses for concurrent
    requests can never be delivered to the wrong waiter.
    """

    def __init__(self) -> None:
        self._futures: dict[str, asyncio.Future[T]] = {}

    def create(self) -> tuple[str, asyncio.Future[T]]:
        """
        Allocate a new correlation id.

        Returns:
            The id and the future that ``resolve`` will complete.
        """
        correlation_id = uuid.uuid4().hex
        future: asyncio.Future[T] = asyncio.get_running_loop().create_future()
        self._futures[correlation_id] = future
        return correlation_id, future

    def resolve(self, correlation_id: str, value: T) -> bool:
        """
        Deliver a response.

        Returns:
            True if a waiter received it, False for unknown or already resolved ids.
        """
        future = self._futures.pop(correlation_id, None)
        if future is None or future.done():
            return False
        future.set_result(value)
        return True

    def discard(self, correlation_id: str) -> None:
        """Forget a correlation id, cancelling its waiter if still pending."""
        future = self._futures.pop(correlation_id, None)
        if future is not None and not future.done():
            future.cancel()

    def __contains__(self, correlation_id: str) -> bool:
        return correlation_id in self._futures

    def __len__(self) -> int:
        return len(self._futures)
