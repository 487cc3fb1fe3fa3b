"""Pydantic schemas for rm_parameters API."""

from pydantic import BaseModel, Field

from src.rm_parameters.domain.models import ProtocolParameterSet


class UpdateParameterRequest(BaseModel):
    value: int = Field(..., description="New value (seconds or whole percent)")


class ParametersResponse(BaseModel):
    address: str
    minimum_reserve_period: int
    seller_cancel_fee_percent: int
    buyer_cancel_fee_percent: int
    buyer_purchase_grace_period: int
    governance: str

    @classmethod
    def from_domain(cls, address: str, params: ProtocolParameterSet) -> "ParametersResponse":
        return cls(
            address=address,
            minimum_reserve_period=params.minimum_reserve_period,
            seller_cancel_fee_percent=params.seller_cancel_fee_percent,
            buyer_cancel_fee_percent=params.buyer_cancel_fee_percent,
            buyer_purchase_grace_period=params.buyer_purchase_grace_period,
            governance=params.governance,
        )


class ParameterUpdatedResponse(BaseModel):
    name: str
    previous: int
    current: int
    event: str
