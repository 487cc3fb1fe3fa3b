"""Protocol parameters domain model: pure dataclass plus validators."""

from dataclasses import dataclass
from enum import Enum

from src.rm_common.amounts import is_valid_fee_percent
from src.rm_common.errors import (
    AppError,
    InvalidBuyerCancelFeePercentError,
    InvalidBuyerPurchaseGracePeriodError,
    InvalidMinimumReservePeriodError,
    InvalidSellerCancelFeePercentError,
)


class ParameterName(str, Enum):
    """Settable parameters; the value is the field name on ProtocolParameterSet."""

    MINIMUM_RESERVE_PERIOD = "minimum_reserve_period"
    SELLER_CANCEL_FEE_PERCENT = "seller_cancel_fee_percent"
    BUYER_CANCEL_FEE_PERCENT = "buyer_cancel_fee_percent"
    BUYER_PURCHASE_GRACE_PERIOD = "buyer_purchase_grace_period"

    @property
    def event_name(self) -> str:
        return _EVENT_NAMES[self]


_EVENT_NAMES = {
    ParameterName.MINIMUM_RESERVE_PERIOD: "MinimumReservePeriodUpdated",
    ParameterName.SELLER_CANCEL_FEE_PERCENT: "SellerCancelFeePercentUpdated",
    ParameterName.BUYER_CANCEL_FEE_PERCENT: "BuyerCancelFeePercentUpdated",
    ParameterName.BUYER_PURCHASE_GRACE_PERIOD: "BuyerPurchaseGracePeriodUpdated",
}


@dataclass
class ProtocolParameterSet:
    minimum_reserve_period: int  # seconds
    seller_cancel_fee_percent: int  # whole percent
    buyer_cancel_fee_percent: int  # whole percent
    buyer_purchase_grace_period: int  # seconds, may be 0
    governance: str


def validate_parameter(name: ParameterName, value: int) -> None:
    """Raise the parameter's own error if `value` is out of range."""
    error: AppError | None = None
    if name is ParameterName.MINIMUM_RESERVE_PERIOD and value <= 0:
        error = InvalidMinimumReservePeriodError()
    elif name is ParameterName.SELLER_CANCEL_FEE_PERCENT and not is_valid_fee_percent(value):
        error = InvalidSellerCancelFeePercentError()
    elif name is ParameterName.BUYER_CANCEL_FEE_PERCENT and not is_valid_fee_percent(value):
        error = InvalidBuyerCancelFeePercentError()
    elif name is ParameterName.BUYER_PURCHASE_GRACE_PERIOD and value < 0:
        error = InvalidBuyerPurchaseGracePeriodError()
    if error is not None:
        raise error
