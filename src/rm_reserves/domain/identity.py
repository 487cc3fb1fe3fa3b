from src.rm_chain.abi import keccak_abi

_RESERVE_ID_TYPES = ("address", "uint256", "address", "address")


def reserve_id(collection: str, token_id: int, seller: str, buyer: str) -> str:
    """keccak256(abi.encode(collection, tokenId, seller, buyer)); role order matters."""
    return keccak_abi(_RESERVE_ID_TYPES, (collection, token_id, seller, buyer))
