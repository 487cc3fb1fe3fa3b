"""Canonical identity hashing: keccak256(abi.encode(...)).

Field order and ABI types are part of the wire contract with off-chain
indexers; never reorder.
"""

from collections.abc import Sequence
from typing import Any

from eth_abi import encode
from web3 import Web3


def keccak_abi(types: Sequence[str], values: Sequence[Any]) -> str:
    """Return 0x-prefixed keccak256 of the standard ABI encoding of values."""
    return "0x" + bytes(Web3.keccak(encode(list(types), list(values)))).hex()
