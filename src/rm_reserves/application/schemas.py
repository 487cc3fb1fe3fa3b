"""Pydantic schemas for rm_reserves API."""

from pydantic import BaseModel, Field

from src.rm_reserves.domain.models import Reserve, ReserveAmounts


class CollateralChangeRequest(BaseModel):
    amount: int = Field(..., ge=0, description="Collateral token smallest unit")


class ReserveResponse(BaseModel):
    reserve_id: str
    collection: str
    token_id: int
    payment_token: str
    collateral_token: str
    price: int
    collateral_percent: int
    reserve_period: int
    seller: str
    buyer: str
    seller_beneficiary: str
    buyer_beneficiary: str
    start_timestamp: int
    price_paid_deadline: int
    collateral_amount: int
    required_collateral: int
    paid: bool

    @classmethod
    def from_domain(cls, reserve_id: str, reserve: Reserve) -> "ReserveResponse":
        return cls(
            reserve_id=reserve_id,
            collection=reserve.collection,
            token_id=reserve.token_id,
            payment_token=reserve.payment_token,
            collateral_token=reserve.collateral_token,
            price=reserve.price,
            collateral_percent=reserve.collateral_percent,
            reserve_period=reserve.reserve_period,
            seller=reserve.seller,
            buyer=reserve.buyer,
            seller_beneficiary=reserve.seller_beneficiary,
            buyer_beneficiary=reserve.buyer_beneficiary,
            start_timestamp=reserve.start_timestamp,
            price_paid_deadline=reserve.price_paid_deadline,
            collateral_amount=reserve.collateral_amount,
            required_collateral=reserve.required_collateral,
            paid=reserve.paid,
        )


class ReserveAmountsResponse(BaseModel):
    reserve_id: str
    collateral: int
    payment: int

    @classmethod
    def from_domain(cls, reserve_id: str, amounts: ReserveAmounts) -> "ReserveAmountsResponse":
        return cls(reserve_id=reserve_id, collateral=amounts.collateral, payment=amounts.payment)


class ReserveActionResponse(BaseModel):
    """Result of a state-changing reserve call: the event it emitted."""

    reserve_id: str
    event: str
    args: dict
