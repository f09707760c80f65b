"""
Address derivation strategies.

An AddressSource turns an inclusive index range into the ordered list of
addresses for that range. Strategies compute the addresses; decorators in
prefetch.py and cache.py wrap any AddressSource without knowing which.
"""

import logging
from abc import ABC, abstractmethod

from .channel import WorkerChannel
from .node import HDNode, NodeDescriptor
from .types import DERIVE_ADDRESS_RANGE, RemoteDerivationError, validate_range

logger = logging.getLogger(__name__)


class AddressSource(ABC):
    """Abstract base class for anything that derives address ranges."""

    @abstractmethod
    async def derive(self, first_index: int, last_index: int) -> list[str]:
        """
        Derive addresses for an inclusive index range.

        Args:
            first_index: First child index (non-negative)
            last_index: Last child index (>= first_index)

        Returns:
            last_index - first_index + 1 addresses in ascending index order
        """
        pass


class NativeAddressSource(AddressSource):
    """Derives addresses in-process from an HD node."""

    def __init__(self, node: HDNode) -> None:
        self.node = node

    async def derive(self, first_index: int, last_index: int) -> list[str]:
        validate_range(first_index, last_index)

        addresses = []
        for i in range(first_index, last_index + 1):
            addresses.append(self.node.derive(i).get_address())
        return addresses


class WorkerAddressSource(AddressSource):
    """Delegates derivation to a background execution context over a channel."""

    def __init__(self, channel: WorkerChannel, node: HDNode, version: int) -> None:
        """
        Creates a source that posts derivation requests to a channel.

        The node's public material is captured once here; later changes to
        the node object are not seen by this source.

        Args:
            channel: Channel to the background execution context
            node: Node whose children are derived
            version: Address version byte
        """
        self.channel = channel
        self.node = NodeDescriptor.from_node(node)
        self.version = version

    async def derive(self, first_index: int, last_index: int) -> list[str]:
        validate_range(first_index, last_index)

        request = {
            "type": DERIVE_ADDRESS_RANGE,
            "node": self.node.to_dict(),
            "version": self.version,
            "firstIndex": first_index,
            "lastIndex": last_index,
        }
        response = await self.channel.post_message(request)

        if "addresses" not in response:
            logger.debug(
                "Background derivation of %d-%d failed: %s",
                first_index, last_index, response.get("error"),
            )
            raise RemoteDerivationError(str(response.get("error", "no addresses in response")))
        addresses = list(response["addresses"])
        expected = last_index - first_index + 1
        if len(addresses) != expected:
            raise RemoteDerivationError(
                f"expected {expected} addresses for {first_index}-{last_index}, got {len(addresses)}"
            )
        return addresses
