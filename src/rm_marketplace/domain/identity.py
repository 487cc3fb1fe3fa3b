from src.rm_chain.abi import keccak_abi
from src.rm_marketplace.domain.models import ReserveTerms

_PROPOSAL_ID_TYPES = (
    "address",  # collection
    "uint256",  # tokenId
    "address",  # paymentToken
    "address",  # collateralToken
    "uint256",  # price
    "uint256",  # collateralPercent
    "uint256",  # reservePeriod
    "address",  # counterparty or zero
)


def proposal_id(terms: ReserveTerms, counterparty: str) -> str:
    """Matching key of a proposal. Expiration and beneficiary are not part of it."""
    return keccak_abi(
        _PROPOSAL_ID_TYPES,
        (
            terms.collection,
            terms.token_id,
            terms.payment_token,
            terms.collateral_token,
            terms.price,
            terms.collateral_percent,
            terms.reserve_period,
            counterparty,
        ),
    )
