"""Address helpers.

Addresses are EIP-55 checksummed hex strings everywhere inside the state
machine so that equality checks are plain string comparisons.
"""

from web3 import Web3

from src.rm_common.errors import InvalidAddressError

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def to_address(value: str) -> str:
    """Normalize to checksum form, raising InvalidAddressError on garbage."""
    if not isinstance(value, str) or not Web3.is_address(value):
        raise InvalidAddressError(value)
    return Web3.to_checksum_address(value)


def is_zero_address(value: str) -> bool:
    return to_address(value) == ZERO_ADDRESS


def derive_address(label: str) -> str:
    """Deterministic address for a named account or contract: last 20 bytes of keccak(label)."""
    digest = bytes(Web3.keccak(text=label))
    return Web3.to_checksum_address("0x" + digest[-20:].hex())
