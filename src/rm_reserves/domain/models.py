"""Reserve domain model: pure dataclasses, no persistence dependency."""

from dataclasses import dataclass

from src.rm_common.amounts import required_collateral


@dataclass
class Reserve:
    collection: str
    token_id: int
    payment_token: str
    collateral_token: str
    price: int
    collateral_percent: int  # basis points
    reserve_period: int  # seconds
    seller: str
    buyer: str
    # Income goes to beneficiaries; refunds always go back to the payer.
    seller_beneficiary: str
    buyer_beneficiary: str
    start_timestamp: int
    collateral_amount: int  # running balance held in custody
    paid: bool = False  # false -> true only

    @property
    def price_paid_deadline(self) -> int:
        return self.start_timestamp + self.reserve_period

    @property
    def required_collateral(self) -> int:
        """Collateral floor while unpaid."""
        return required_collateral(self.price, self.collateral_percent)

    def is_expired(self, now: int) -> bool:
        # The deadline instant itself counts as expired.
        return now >= self.price_paid_deadline

    def grace_period_over(self, now: int, grace_period: int) -> bool:
        return now >= self.price_paid_deadline + grace_period

    def is_party(self, account: str) -> bool:
        return account in (self.seller, self.buyer)


@dataclass(frozen=True)
class ReserveAmounts:
    collateral: int
    payment: int

    @classmethod
    def of(cls, reserve: Reserve) -> "ReserveAmounts":
        return cls(
            collateral=reserve.collateral_amount,
            payment=reserve.price if reserve.paid else 0,
        )
