"""Standard reserve terms and the driver that submits them.

Shared by the fixtures in conftest.py and imported directly by test modules.
"""

from dataclasses import dataclass
from typing import Any

from src.rm_chain.addresses import ZERO_ADDRESS
from src.rm_common.datetime_utils import days
from src.rm_deploy.deployer import Deployment
from src.rm_marketplace.domain.models import ProposalOutcome
from src.rm_token.infrastructure.erc20_mock import ERC20Mock
from src.rm_token.infrastructure.erc721_mock import ERC721Mock

E18 = 10**18

TOKEN_ID = 1
PRICE = 100 * E18
COLLATERAL_PERCENT = 1000  # 10%
COLLATERAL = 10 * E18
FEE = 5 * E18  # 5% of PRICE
RESERVE_PERIOD = days(1)
VALIDITY_PERIOD = days(1)

BUYER_FUNDS = 1000 * E18
SELLER_FUNDS = 100 * E18


@dataclass(frozen=True)
class Accounts:
    deployer: str
    seller: str
    buyer: str
    other: str
    seller_beneficiary: str
    buyer_beneficiary: str


class ReserveDriver:
    """Submits proposals with the standard terms, overridable per call."""

    token_id = TOKEN_ID
    price = PRICE
    collateral_percent = COLLATERAL_PERCENT
    collateral = COLLATERAL
    fee = FEE
    reserve_period = RESERVE_PERIOD
    validity_period = VALIDITY_PERIOD
    buyer_funds = BUYER_FUNDS
    seller_funds = SELLER_FUNDS

    def __init__(self, deployment: Deployment, accounts: Accounts) -> None:
        self.deployment = deployment
        self.accounts = accounts
        assert deployment.dai is not None and deployment.collection is not None
        self.dai: ERC20Mock = deployment.dai
        self.collection: ERC721Mock = deployment.collection

    def terms(self, **overrides: Any) -> dict[str, Any]:
        terms: dict[str, Any] = {
            "collection": self.collection.address,
            "token_id": TOKEN_ID,
            "payment_token": self.dai.address,
            "collateral_token": self.dai.address,
            "price": PRICE,
            "collateral_percent": COLLATERAL_PERCENT,
            "reserve_period": RESERVE_PERIOD,
        }
        terms.update(overrides)
        return terms

    def sell(
        self,
        caller: str | None = None,
        beneficiary: str = ZERO_ADDRESS,
        validity_period: int = VALIDITY_PERIOD,
        counterparty: str = ZERO_ADDRESS,
        **overrides: Any,
    ) -> ProposalOutcome:
        return self.deployment.marketplace.approve_reserve_to_sell(
            caller or self.accounts.seller,
            beneficiary=beneficiary,
            validity_period=validity_period,
            counterparty=counterparty,
            **self.terms(**overrides),
        )

    def buy(
        self,
        caller: str | None = None,
        beneficiary: str = ZERO_ADDRESS,
        validity_period: int = VALIDITY_PERIOD,
        counterparty: str = ZERO_ADDRESS,
        **overrides: Any,
    ) -> ProposalOutcome:
        return self.deployment.marketplace.approve_reserve_to_buy(
            caller or self.accounts.buyer,
            beneficiary=beneficiary,
            validity_period=validity_period,
            counterparty=counterparty,
            **self.terms(**overrides),
        )

    def start_reserve(self, **kwargs: Any) -> str:
        """Sale proposal first, matching purchase second; returns the reserve id."""
        self.sell(**kwargs)
        outcome = self.buy(**kwargs)
        assert outcome.reserve_id is not None
        return outcome.reserve_id
