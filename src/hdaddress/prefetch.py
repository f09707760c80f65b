"""Speculative prefetching of the next address range."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from .source import AddressSource
from .types import next_range

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=AddressSource)


@dataclass
class _Prefetched:
    """The single speculative range in flight."""
    first_index: int
    last_index: int
    task: "asyncio.Task[list[str]]"

    def matches(self, first_index: int, last_index: int) -> bool:
        return self.first_index == first_index and self.last_index == last_index


class PrefetchingSource(AddressSource, Generic[T]):
    """
    Wraps a source and starts deriving the next range of the same size on
    every call.

    If the following call asks for exactly that range, the in-flight result is
    reused instead of delegating again. Any other request discards it; the
    discarded work is not cancelled.

    Calls on one instance must be sequential: the prefetch slot is not safe
    against overlapping derive() calls.
    """

    def __init__(self, source: T) -> None:
        self.source = source
        self._prefetched: Optional[_Prefetched] = None
        # Strong references so running tasks are not garbage collected
        self._pending: set[asyncio.Task] = set()

    async def derive(self, first_index: int, last_index: int) -> list[str]:
        prefetched = self._prefetched
        if prefetched is not None and prefetched.matches(first_index, last_index):
            logger.debug("Prefetch hit for %d-%d", first_index, last_index)
            current = prefetched.task
        else:
            current = self._start(first_index, last_index)
        self._prefetched = None

        next_first, next_last = next_range(first_index, last_index)
        self._prefetched = _Prefetched(
            first_index=next_first,
            last_index=next_last,
            task=self._start(next_first, next_last),
        )

        return await current

    def _start(self, first_index: int, last_index: int) -> "asyncio.Task[list[str]]":
        task = asyncio.ensure_future(self.source.derive(first_index, last_index))
        self._pending.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        # Marks the exception retrieved; awaiting the task still raises it
        error = task.exception()
        if error is not None:
            logger.debug("Address derivation task failed: %r", error)
