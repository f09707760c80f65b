"""
HD node material for address derivation.

This module defines the node interface the derivation strategies work against,
the immutable descriptor handed to background execution contexts, and a
public-only BIP32 node backed by the bip32 library.
"""

import hashlib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import base58
from bip32 import BIP32

from .types import CHAIN_CODE_SIZE, MAINNET_VERSION, PUBLIC_KEY_SIZE


def hash160(data: bytes) -> bytes:
    """RIPEMD-160 of SHA-256, as used for P2PKH addresses."""
    return hashlib.new("ripemd160", hashlib.sha256(data).digest()).digest()


def encode_address(public_key: bytes, version: int) -> str:
    """Encode a compressed public key as a Base58Check P2PKH address."""
    payload = bytes([version]) + hash160(public_key)
    return base58.b58encode_check(payload).decode("ascii")


class HDNode(ABC):
    """Abstract base class for a hierarchical-deterministic key node."""

    @property
    @abstractmethod
    def depth(self) -> int:
        """Depth in the derivation tree (0 for master)."""
        pass

    @property
    @abstractmethod
    def index(self) -> int:
        """Child number this node was derived at."""
        pass

    @property
    @abstractmethod
    def parent_fingerprint(self) -> int:
        """Fingerprint of the parent node as an integer."""
        pass

    @property
    @abstractmethod
    def chain_code(self) -> bytes:
        """32-byte chain code."""
        pass

    @property
    @abstractmethod
    def public_key(self) -> bytes:
        """33-byte compressed public key."""
        pass

    @abstractmethod
    def derive(self, index: int) -> "HDNode":
        """Derive the non-hardened child at the given index."""
        pass

    @abstractmethod
    def get_address(self) -> str:
        """Address for this node's public key."""
        pass


@dataclass(frozen=True)
class NodeDescriptor:
    """
    Public derivation material for a node, detached from any key object.

    Attributes:
        depth: Depth in the derivation tree.
        child_num: Child number of the node.
        fingerprint: Parent fingerprint as an integer.
        chain_code: 32-byte chain code.
        public_key: 33-byte compressed public key.
    """

    depth: int
    child_num: int
    fingerprint: int
    chain_code: bytes
    public_key: bytes

    @classmethod
    def from_node(cls, node: HDNode) -> "NodeDescriptor":
        """Captures the descriptor of an HD node."""
        return cls(
            depth=node.depth,
            child_num=node.index,
            fingerprint=node.parent_fingerprint,
            chain_code=bytes(node.chain_code),
            public_key=bytes(node.public_key),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NodeDescriptor":
        """Rebuilds a descriptor from its wire form."""
        return cls(
            depth=data["depth"],
            child_num=data["child_num"],
            fingerprint=data["fingerprint"],
            chain_code=bytes(data["chain_code"]),
            public_key=bytes(data["public_key"]),
        )

    def to_dict(self) -> dict[str, Any]:
        """Wire form used in background requests."""
        return {
            "depth": self.depth,
            "child_num": self.child_num,
            "fingerprint": self.fingerprint,
            "chain_code": self.chain_code,
            "public_key": self.public_key,
        }


class Bip32Node(HDNode):
    """Public-only BIP32 node producing P2PKH addresses."""

    def __init__(self, bip32: BIP32, version: int = MAINNET_VERSION) -> None:
        """
        Wraps a bip32 key.

        Args:
            bip32: Key holding public material only
            version: Address version byte used by get_address()

        Raises:
            ValueError: If the key carries private material
        """
        if bip32.privkey is not None:
            raise ValueError("Bip32Node only accepts public keys, got a private key")

        self._bip32 = bip32
        self._version = version

    @classmethod
    def from_xpub(cls, xpub: str, version: int = MAINNET_VERSION) -> "Bip32Node":
        """
        Creates a node from an extended public key.

        Raises:
            ValueError: If the key is malformed or is an extended private key
        """
        return cls(BIP32.from_xpub(xpub), version)

    @classmethod
    def from_descriptor(
        cls, descriptor: NodeDescriptor, version: int = MAINNET_VERSION
    ) -> "Bip32Node":
        """Rebuilds a node from a descriptor, e.g. inside a background worker."""
        if len(descriptor.chain_code) != CHAIN_CODE_SIZE:
            raise ValueError(
                f"Chain code must be {CHAIN_CODE_SIZE} bytes, got {len(descriptor.chain_code)}"
            )
        if len(descriptor.public_key) != PUBLIC_KEY_SIZE:
            raise ValueError(
                f"Public key must be {PUBLIC_KEY_SIZE} bytes, got {len(descriptor.public_key)}"
            )

        bip32 = BIP32(
            descriptor.chain_code,
            pubkey=descriptor.public_key,
            fingerprint=descriptor.fingerprint.to_bytes(4, "big"),
            depth=descriptor.depth,
            index=descriptor.child_num,
        )
        return cls(bip32, version)

    @property
    def depth(self) -> int:
        return self._bip32.depth

    @property
    def index(self) -> int:
        return self._bip32.index

    @property
    def parent_fingerprint(self) -> int:
        return int.from_bytes(self._bip32.parent_fingerprint, "big")

    @property
    def chain_code(self) -> bytes:
        return self._bip32.chaincode

    @property
    def public_key(self) -> bytes:
        return self._bip32.pubkey

    @property
    def version(self) -> int:
        """Address version byte."""
        return self._version

    @property
    def xpub(self) -> str:
        """Extended public key of this node."""
        return self._bip32.get_xpub()

    def derive(self, index: int) -> "Bip32Node":
        # Hardened indices raise bip32.PrivateDerivationError
        chain_code, public_key = self._bip32.get_extended_pubkey_from_path([index])
        child = BIP32(
            chain_code,
            pubkey=public_key,
            fingerprint=hash160(self._bip32.pubkey)[:4],
            depth=self._bip32.depth + 1,
            index=index,
            network=self._bip32.network,
        )
        return Bip32Node(child, self._version)

    def get_address(self) -> str:
        return encode_address(self._bip32.pubkey, self._version)
