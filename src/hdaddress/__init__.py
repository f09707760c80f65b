"""
hdaddress - Address range derivation from HD nodes

Derives ranges of addresses from a hierarchical-deterministic node, in-process
or on a background executor, with optional prefetching and caching layers.
"""

from .types import (
    DERIVE_ADDRESS_RANGE,
    MAINNET_VERSION,
    TESTNET_VERSION,
    AddressSourceError,
    RemoteDerivationError,
    UnknownRequestError,
    validate_range,
    range_key,
    next_range,
)
from .node import (
    HDNode,
    NodeDescriptor,
    Bip32Node,
    encode_address,
    hash160,
)
from .channel import (
    WorkerChannel,
    ExecutorChannel,
    handle_request,
)
from .source import (
    AddressSource,
    NativeAddressSource,
    WorkerAddressSource,
)
from .prefetch import PrefetchingSource
from .cache import CachingSource, CachingSourceData
from .config import AddressSourceConfig, create_address_source

__version__ = "0.1.0"

__all__ = [
    # Types
    "DERIVE_ADDRESS_RANGE",
    "MAINNET_VERSION",
    "TESTNET_VERSION",
    "validate_range",
    "range_key",
    "next_range",
    # Errors
    "AddressSourceError",
    "RemoteDerivationError",
    "UnknownRequestError",
    # Nodes
    "HDNode",
    "NodeDescriptor",
    "Bip32Node",
    "encode_address",
    "hash160",
    # Channel
    "WorkerChannel",
    "ExecutorChannel",
    "handle_request",
    # Sources
    "AddressSource",
    "NativeAddressSource",
    "WorkerAddressSource",
    "PrefetchingSource",
    "CachingSource",
    "CachingSourceData",
    # Config
    "AddressSourceConfig",
    "create_address_source",
]
