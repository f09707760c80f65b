"""Configuration and composition of address sources."""

from dataclasses import dataclass
from typing import Optional

from .cache import CachingSource
from .channel import WorkerChannel
from .node import HDNode
from .prefetch import PrefetchingSource
from .source import AddressSource, NativeAddressSource, WorkerAddressSource
from .types import MAINNET_VERSION, TESTNET_VERSION


@dataclass
class AddressSourceConfig:
    """Configuration for an address source stack."""

    version: int = MAINNET_VERSION
    """Address version byte sent to background workers."""

    prefetch: bool = True
    """Wrap the strategy in a PrefetchingSource."""

    cache: bool = True
    """Wrap the stack in a CachingSource."""

    @classmethod
    def mainnet(cls) -> "AddressSourceConfig":
        """Creates configuration for mainnet P2PKH addresses."""
        return cls(version=MAINNET_VERSION)

    @classmethod
    def testnet(cls) -> "AddressSourceConfig":
        """Creates configuration for testnet P2PKH addresses."""
        return cls(version=TESTNET_VERSION)


def create_address_source(
    node: HDNode,
    config: Optional[AddressSourceConfig] = None,
    channel: Optional[WorkerChannel] = None,
) -> AddressSource:
    """
    Build the usual source stack for a node.

    Example usage:
        ```python
        with ThreadPoolExecutor(max_workers=1) as executor:
            source = create_address_source(
                node,
                AddressSourceConfig.testnet(),
                channel=ExecutorChannel(executor),
            )
            addresses = await source.derive(0, 19)
        ```

    Args:
        node: Node whose children are derived
        config: Stack configuration (default: mainnet, prefetch and cache on)
        channel: Background channel; derives in-process when omitted

    Returns:
        CachingSource(PrefetchingSource(strategy)), minus any layer the
        config disables
    """
    config = config or AddressSourceConfig()

    source: AddressSource
    if channel is not None:
        source = WorkerAddressSource(channel, node, config.version)
    else:
        source = NativeAddressSource(node)

    if config.prefetch:
        source = PrefetchingSource(source)
    if config.cache:
        source = CachingSource(source)
    return source
