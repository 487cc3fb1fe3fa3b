"""Pydantic schemas for rm_marketplace API.

Amounts are ints in the token's smallest unit; periods are seconds;
collateral_percent is in basis points (1000 = 10%).
"""

from pydantic import BaseModel, Field

from src.rm_chain.addresses import ZERO_ADDRESS
from src.rm_marketplace.domain.models import (
    ProposalOutcome,
    PurchaseReserveProposal,
    SaleReserveProposal,
)

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class ReserveTermsRequest(BaseModel):
    """The tuple a proposal is identified by."""

    collection: str
    token_id: int = Field(..., ge=0)
    payment_token: str
    collateral_token: str
    price: int = Field(..., ge=0, description="Price in the payment token's smallest unit")
    collateral_percent: int = Field(..., description="Basis points, 0 < x < 10000")
    reserve_period: int = Field(..., description="Seconds")
    counterparty: str = Field(ZERO_ADDRESS, description="Designated counterparty, zero = anyone")

    def lookup_args(self) -> tuple[str, int, str, str, int, int, int, str]:
        return (
            self.collection,
            self.token_id,
            self.payment_token,
            self.collateral_token,
            self.price,
            self.collateral_percent,
            self.reserve_period,
            self.counterparty,
        )


class ProposeReserveRequest(ReserveTermsRequest):
    beneficiary: str = Field(ZERO_ADDRESS, description="Receives the proceeds, zero = caller")
    validity_period: int = Field(..., description="Seconds the proposal stays matchable")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ProposalOutcomeResponse(BaseModel):
    matched: bool
    proposal_id: str | None
    reserve_id: str | None

    @classmethod
    def from_domain(cls, outcome: ProposalOutcome) -> "ProposalOutcomeResponse":
        return cls(
            matched=outcome.matched,
            proposal_id=outcome.proposal_id,
            reserve_id=outcome.reserve_id,
        )


class ProposalResponse(BaseModel):
    proposal_id: str
    side: str  # "sale" | "purchase"
    initiator: str
    beneficiary: str
    counterparty: str
    expiration_timestamp: int
    collection: str
    token_id: int
    payment_token: str
    collateral_token: str
    price: int
    collateral_percent: int
    reserve_period: int

    @classmethod
    def from_domain(
        cls,
        proposal_id: str,
        proposal: SaleReserveProposal | PurchaseReserveProposal,
    ) -> "ProposalResponse":
        terms = proposal.terms
        return cls(
            proposal_id=proposal_id,
            side="sale" if isinstance(proposal, SaleReserveProposal) else "purchase",
            initiator=proposal.initiator,
            beneficiary=proposal.beneficiary,
            counterparty=proposal.counterparty,
            expiration_timestamp=proposal.expiration_timestamp,
            collection=terms.collection,
            token_id=terms.token_id,
            payment_token=terms.payment_token,
            collateral_token=terms.collateral_token,
            price=terms.price,
            collateral_percent=terms.collateral_percent,
            reserve_period=terms.reserve_period,
        )


class ProposalCanceledResponse(BaseModel):
    proposal_id: str
    canceled: bool = True
