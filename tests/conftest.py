"""Shared test doubles for address source tests."""

import asyncio
from typing import Optional

import pytest

from hdaddress.channel import WorkerChannel
from hdaddress.node import HDNode
from hdaddress.source import AddressSource

# BIP32 test vector 1, chain m
VECTOR1_MASTER_XPUB = (
    "xpub661MyMwAqRbcFtXgS5sYJABqqG9YLmC4Q1Rdap9gSE8NqtwybGhePY2gZ29ESFjqJoCu1"
    "Rupje8YtGqsefD265TMg7usUDFdp6W1EGMcet8"
)
VECTOR1_SEED_HEX = "000102030405060708090a0b0c0d0e0f"
VECTOR1_MASTER_ADDRESS = "15mKKb2eos1hWa6tisdPwwDC1a5J1y9nma"
# Chain m/0H/1, a non-hardened child of m/0H
VECTOR1_M0H_1_ADDRESS = "1JQheacLPdM5ySCkrZkV66G2ApAXe1mqLj"


class DerivationFailed(Exception):
    """Error raised by the test doubles."""
    pass


class FakeNode(HDNode):
    """Node whose child at index i has address "A{i}"."""

    def __init__(self, index: int = 0, fail_at: Optional[int] = None) -> None:
        self._index = index
        self._fail_at = fail_at

    @property
    def depth(self) -> int:
        return 3

    @property
    def index(self) -> int:
        return self._index

    @property
    def parent_fingerprint(self) -> int:
        return 0x3442193E

    @property
    def chain_code(self) -> bytes:
        return bytes([7] * 32)

    @property
    def public_key(self) -> bytes:
        return bytes([2] + [9] * 32)

    def derive(self, index: int) -> "FakeNode":
        if self._fail_at is not None and index == self._fail_at:
            raise DerivationFailed(f"cannot derive {index}")
        return FakeNode(index)

    def get_address(self) -> str:
        return f"A{self._index}"


class CountingSource(AddressSource):
    """Source returning "A{i}" addresses and recording every call."""

    def __init__(self, failing: Optional[set] = None) -> None:
        self.calls: list[tuple[int, int]] = []
        self.completed: list[tuple[int, int]] = []
        self.failing = failing or set()

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def derive(self, first_index: int, last_index: int) -> list[str]:
        self.calls.append((first_index, last_index))
        await asyncio.sleep(0)
        if (first_index, last_index) in self.failing:
            raise DerivationFailed(f"range {first_index}-{last_index} failed")
        self.completed.append((first_index, last_index))
        return [f"A{i}" for i in range(first_index, last_index + 1)]


class GatedSource(CountingSource):
    """CountingSource whose calls block until release() is called."""

    def __init__(self) -> None:
        super().__init__()
        self._gate = asyncio.Event()

    def release(self) -> None:
        self._gate.set()

    async def derive(self, first_index: int, last_index: int) -> list[str]:
        self.calls.append((first_index, last_index))
        await self._gate.wait()
        return [f"A{i}" for i in range(first_index, last_index + 1)]


class RecordingChannel(WorkerChannel):
    """Channel that records requests and answers with a canned response."""

    def __init__(self, response: Optional[dict] = None, error: Optional[Exception] = None) -> None:
        self.requests: list[dict] = []
        self.response = response
        self.error = error

    async def post_message(self, request: dict) -> dict:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.response is not None:
            return self.response
        first, last = request["firstIndex"], request["lastIndex"]
        return {"addresses": [f"A{i}" for i in range(first, last + 1)]}


@pytest.fixture
def counting_source():
    """A fresh counting source."""
    return CountingSource()


@pytest.fixture
def fake_node():
    """A fake HD node."""
    return FakeNode()
