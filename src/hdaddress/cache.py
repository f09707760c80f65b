"""Memoization of derived address ranges."""

import logging
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from .source import AddressSource
from .types import range_key

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=AddressSource)


@dataclass
class CachingSourceData:
    """
    Persistable snapshot of a CachingSource.

    Attributes:
        cache: Mapping from "{first}-{last}" keys to derived addresses.
    """

    cache: dict[str, list[str]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Plain form suitable for JSON persistence."""
        return {"cache": self.cache}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CachingSourceData":
        """Rebuilds a snapshot from its plain form."""
        return cls(cache={key: list(value) for key, value in data["cache"].items()})


class CachingSource(AddressSource, Generic[T]):
    """
    Wraps a source and remembers every successfully derived range.

    Lookups are by exact range only. Entries are never evicted. Two concurrent
    misses for the same range both delegate to the wrapped source and the last
    one to finish wins; failures are never cached.
    """

    def __init__(self, source: T) -> None:
        self.source = source
        self._cache: dict[str, list[str]] = {}

    def store(self) -> CachingSourceData:
        """Returns a snapshot referencing the live cache contents."""
        return CachingSourceData(cache=self._cache)

    def restore(self, data: CachingSourceData) -> None:
        """Replaces the whole cache with a previously stored snapshot."""
        self._cache = data.cache

    @property
    def size(self) -> int:
        """Number of cached ranges."""
        return len(self._cache)

    async def derive(self, first_index: int, last_index: int) -> list[str]:
        """Returns a copy of the cached range, deriving and storing it on a miss."""
        key = range_key(first_index, last_index)

        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return list(cached)

        logger.debug("Cache miss for %s", key)
        result = await self.source.derive(first_index, last_index)
        self._cache[key] = list(result)
        return result
