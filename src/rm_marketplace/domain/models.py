"""Proposal domain models: pure dataclasses, no persistence dependency."""
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ReserveTerms:
    """Economic terms both sides must agree on exactly."""

    collection: str
    token_id: int
    payment_token: str
    collateral_token: str
    price: int
    collateral_percent: int  # basis points
    reserve_period: int  # seconds

    def event_args(self) -> dict[str, Any]:
        return {
            "collection": self.collection,
            "tokenId": self.token_id,
            "paymentToken": self.payment_token,
            "collateralToken": self.collateral_token,
            "price": self.price,
            "collateralPercent": self.collateral_percent,
            "reservePeriod": self.reserve_period,
        }


@dataclass
class SaleReserveProposal:
    terms: ReserveTerms
    owner: str  # seller
    beneficiary: str
    counterparty: str  # designated buyer, zero address = anyone
    expiration_timestamp: int

    @property
    def initiator(self) -> str:
        return self.owner

    def is_expired(self, now: int) -> bool:
        return now >= self.expiration_timestamp


@dataclass
class PurchaseReserveProposal:
    terms: ReserveTerms
    buyer: str
    beneficiary: str
    counterparty: str  # designated seller, zero address = anyone
    expiration_timestamp: int

    @property
    def initiator(self) -> str:
        return self.buyer

    def is_expired(self, now: int) -> bool:
        return now >= self.expiration_timestamp


@dataclass(frozen=True)
class ProposalOutcome:
    """Result of approve_reserve_to_sell / approve_reserve_to_buy.

    Exactly one of proposal_id (recorded, no match) or reserve_id (matched)
    is set.
    """

    proposal_id: str | None = None
    reserve_id: str | None = None

    @property
    def matched(self) -> bool:
        return self.reserve_id is not None
