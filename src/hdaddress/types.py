"""Type definitions for hdaddress."""

from typing import Tuple


# Request types understood by the background handler
DERIVE_ADDRESS_RANGE = "deriveAddressRange"

# Address encoding versions (P2PKH version byte)
MAINNET_VERSION = 0x00
TESTNET_VERSION = 0x6F

# BIP32 constants
HARDENED_OFFSET = 0x80000000
CHAIN_CODE_SIZE = 32
PUBLIC_KEY_SIZE = 33


def validate_range(first_index: int, last_index: int) -> None:
    """
    Check that an inclusive index range is well formed.

    Raises:
        ValueError: If either bound is negative or hardened (>= 2**31), or
            first_index > last_index
    """
    if first_index < 0 or last_index < 0:
        raise ValueError(
            f"Range bounds must be non-negative, got {first_index}-{last_index}"
        )
    if first_index > last_index:
        raise ValueError(
            f"First index must not exceed last index, got {first_index}-{last_index}"
        )
    if last_index >= HARDENED_OFFSET:
        raise ValueError(
            f"Range must stay below the hardened offset, got {first_index}-{last_index}"
        )


def range_key(first_index: int, last_index: int) -> str:
    """Cache key for a range, e.g. "0-9"."""
    return f"{first_index}-{last_index}"


def next_range(first_index: int, last_index: int) -> Tuple[int, int]:
    """Returns the contiguous range of the same size following the given one."""
    return last_index + 1, last_index + 1 + (last_index - first_index)


# Exception types
class AddressSourceError(Exception):
    """Base exception for hdaddress errors."""
    pass


class RemoteDerivationError(AddressSourceError):
    """The background execution context reported a failure."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Remote derivation failed: {message}")
        self.remote_message = message


class UnknownRequestError(AddressSourceError):
    """The background handler received a request type it does not support."""

    def __init__(self, request_type: object) -> None:
        super().__init__(f"Unknown request type: {request_type!r}")
        self.request_type = request_type
