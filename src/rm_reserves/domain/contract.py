"""ReservesManager: custody and settlement of active reserves.

Once the marketplace starts a reserve, the manager holds the NFT, the
collateral and (after payment) the price until the reserve is canceled or
liquidated. Every settlement path deletes the reserve record before moving
any token, so a token hook that re-enters the manager finds nothing to act
on.

Timeline of a reserve (deadline = start + reserve_period):

    start ............ deadline ............ deadline + grace
    cancel allowed   | buyer may liquidate   | seller may liquidate (unpaid)
    pay allowed      |
"""

import dataclasses
import logging

from src.rm_chain.addresses import ZERO_ADDRESS, to_address
from src.rm_chain.chain import Chain, transactional
from src.rm_chain.upgradeable import UpgradeableContract
from src.rm_common.amounts import cancel_fee, required_collateral
from src.rm_common.errors import (
    ActiveProposalNotFoundError,
    AlreadyPaidError,
    BuyerPaymentPeriodNotFinishedError,
    InsufficientCollateralError,
    InvalidAmountError,
    InvalidReserveCallerError,
    OnlyBuyerError,
    OnlyMarketplaceError,
    OnlyProposalBuyerError,
    PaymentPeriodFinishedError,
    PriceAlreadyPaidError,
    ReserveAlreadyActiveError,
    ReserveExpiredError,
    ReserveNotFoundError,
    ReservePeriodNotFinishedError,
    UncollateralizeReserveError,
)
from src.rm_parameters.domain.contract import ProtocolParameters
from src.rm_reserves.domain.identity import reserve_id as compute_reserve_id
from src.rm_reserves.domain.models import Reserve, ReserveAmounts
from src.rm_reserves.domain.repository import ReserveRepositoryProtocol
from src.rm_reserves.infrastructure.persistence import ReserveRepository
from src.rm_token.domain.interfaces import FungibleToken, NonFungibleToken

logger = logging.getLogger(__name__)


class ReservesManager(UpgradeableContract):
    _storage_fields = UpgradeableContract._storage_fields + ("_reserves", "_price_oracle")

    def __init__(
        self, chain: Chain, address: str, marketplace: str, protocol_parameters: str
    ) -> None:
        super().__init__(chain, address)
        # Fixed at construction, like immutables behind a proxy.
        self.marketplace = to_address(marketplace)
        self.protocol_parameters = to_address(protocol_parameters)
        self._reserves: ReserveRepositoryProtocol = ReserveRepository()
        self._price_oracle = ZERO_ADDRESS

    @transactional
    def initialize(self, caller: str, price_oracle: str) -> None:
        self._initializer(caller)
        self._price_oracle = to_address(price_oracle)

    @property
    def price_oracle(self) -> str:
        return self._price_oracle

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def get_reserve(self, reserve_id: str) -> Reserve:
        return dataclasses.replace(self._require_reserve(reserve_id))

    def reserve_amounts(self, reserve_id: str) -> ReserveAmounts:
        return ReserveAmounts.of(self._require_reserve(reserve_id))

    def active_reserve_ids(self) -> list[str]:
        return self._reserves.list_ids()

    def can_start_reserve(
        self,
        collection: str,
        token_id: int,
        collateral_token: str,
        price: int,
        collateral_percent: int,
        seller: str,
        buyer: str,
    ) -> bool:
        """Pre-check that start_reserve can pull the NFT and the collateral."""
        nft = self.chain.resolve(collection, NonFungibleToken)
        if nft.owner_of(token_id) != seller:
            return False
        if nft.get_approved(token_id) != self.address and not nft.is_approved_for_all(
            seller, self.address
        ):
            return False
        collateral = required_collateral(price, collateral_percent)
        token = self.chain.resolve(collateral_token, FungibleToken)
        return (
            token.balance_of(buyer) >= collateral
            and token.allowance(buyer, self.address) >= collateral
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @transactional
    def start_reserve(
        self,
        caller: str,
        collection: str,
        token_id: int,
        payment_token: str,
        collateral_token: str,
        price: int,
        collateral_percent: int,
        reserve_period: int,
        seller: str,
        buyer: str,
        seller_beneficiary: str = ZERO_ADDRESS,
        buyer_beneficiary: str = ZERO_ADDRESS,
    ) -> str:
        if to_address(caller) != self.marketplace:
            raise OnlyMarketplaceError()

        seller, buyer = to_address(seller), to_address(buyer)
        collection = to_address(collection)
        rid = compute_reserve_id(collection, token_id, seller, buyer)
        if self._reserves.get(rid) is not None:
            raise ReserveAlreadyActiveError()

        collateral = required_collateral(price, collateral_percent)
        reserve = Reserve(
            collection=collection,
            token_id=token_id,
            payment_token=to_address(payment_token),
            collateral_token=to_address(collateral_token),
            price=price,
            collateral_percent=collateral_percent,
            reserve_period=reserve_period,
            seller=seller,
            buyer=buyer,
            seller_beneficiary=_or_self(seller_beneficiary, seller),
            buyer_beneficiary=_or_self(buyer_beneficiary, buyer),
            start_timestamp=self.now,
            collateral_amount=collateral,
        )
        self._reserves.save(rid, reserve)

        self._nft(reserve).transfer_from(self.address, seller, self.address, token_id)
        if collateral > 0:
            self._collateral(reserve).transfer_from(self.address, buyer, self.address, collateral)

        logger.info(
            "Reserve %s started: %s #%d seller=%s buyer=%s price=%d collateral=%d",
            rid, collection, token_id, seller, buyer, price, collateral,
        )
        return rid

    @transactional
    def cancel_reserve(self, caller: str, reserve_id: str) -> None:
        caller = to_address(caller)
        reserve = self._reserves.get(reserve_id)
        if reserve is None:
            raise ActiveProposalNotFoundError()
        if not reserve.is_party(caller):
            raise InvalidReserveCallerError()
        if reserve.is_expired(self.now):
            raise ReserveExpiredError()

        params = self._parameters()
        if caller == reserve.seller:
            fee = cancel_fee(reserve.price, params.seller_cancel_fee_percent)
            fee_recipient = reserve.buyer_beneficiary
        else:
            fee = cancel_fee(reserve.price, params.buyer_cancel_fee_percent)
            fee_recipient = reserve.seller_beneficiary

        self._reserves.delete(reserve_id)

        payment = self._payment(reserve)
        if fee > 0:
            payment.transfer_from(self.address, caller, fee_recipient, fee)
        self._nft(reserve).safe_transfer_from(
            self.address, self.address, reserve.seller, reserve.token_id
        )
        if reserve.collateral_amount > 0:
            self._collateral(reserve).transfer(self.address, reserve.buyer, reserve.collateral_amount)
        if reserve.paid:
            payment.transfer(self.address, reserve.buyer, reserve.price)

        logger.info("Reserve %s canceled by %s (fee=%d)", reserve_id, caller, fee)
        self.emit(
            "ReserveCanceled",
            reserveId=reserve_id,
            collection=reserve.collection,
            tokenId=reserve.token_id,
            seller=reserve.seller,
            buyer=reserve.buyer,
            fee=fee,
            executor=caller,
        )

    @transactional
    def liquidate_reserve(self, caller: str, reserve_id: str) -> None:
        caller = to_address(caller)
        reserve = self._require_reserve(reserve_id)
        if not reserve.is_party(caller):
            raise InvalidReserveCallerError()

        if reserve.paid:
            self._execute_purchase(caller, reserve_id, reserve)
        else:
            self._cancel_purchase(caller, reserve_id, reserve)

    def _execute_purchase(self, caller: str, reserve_id: str, reserve: Reserve) -> None:
        if not reserve.is_expired(self.now):
            raise ReservePeriodNotFinishedError()

        self._reserves.delete(reserve_id)

        self._payment(reserve).transfer(self.address, reserve.seller_beneficiary, reserve.price)
        if reserve.collateral_amount > 0:
            self._collateral(reserve).transfer(self.address, reserve.buyer, reserve.collateral_amount)
        self._nft(reserve).safe_transfer_from(
            self.address, self.address, reserve.buyer_beneficiary, reserve.token_id
        )

        logger.info("Reserve %s executed by %s", reserve_id, caller)
        self.emit(
            "PurchaseExecuted",
            reserveId=reserve_id,
            collection=reserve.collection,
            tokenId=reserve.token_id,
            seller=reserve.seller,
            buyer=reserve.buyer,
            payment=reserve.price,
            collateral=reserve.collateral_amount,
            executor=caller,
        )

    def _cancel_purchase(self, caller: str, reserve_id: str, reserve: Reserve) -> None:
        now = self.now
        if caller == reserve.buyer:
            if not reserve.is_expired(now):
                raise ReservePeriodNotFinishedError()
        elif not reserve.grace_period_over(now, self._parameters().buyer_purchase_grace_period):
            raise BuyerPaymentPeriodNotFinishedError()

        self._reserves.delete(reserve_id)

        # Buyer forfeits the collateral for not paying.
        self._nft(reserve).safe_transfer_from(
            self.address, self.address, reserve.seller, reserve.token_id
        )
        if reserve.collateral_amount > 0:
            self._collateral(reserve).transfer(
                self.address, reserve.seller_beneficiary, reserve.collateral_amount
            )

        logger.info("Reserve %s liquidated unpaid by %s", reserve_id, caller)
        self.emit(
            "PurchaseCanceled",
            reserveId=reserve_id,
            collection=reserve.collection,
            tokenId=reserve.token_id,
            seller=reserve.seller,
            buyer=reserve.buyer,
            collateral=reserve.collateral_amount,
            executor=caller,
        )

    @transactional
    def pay_the_price(self, caller: str, reserve_id: str) -> None:
        caller = to_address(caller)
        reserve = self._require_reserve(reserve_id)
        if caller != reserve.buyer:
            raise OnlyProposalBuyerError()
        if reserve.is_expired(self.now):
            raise PaymentPeriodFinishedError()
        if reserve.paid:
            raise AlreadyPaidError()

        reserve.paid = True
        self._reserves.save(reserve_id, reserve)
        self._payment(reserve).transfer_from(self.address, caller, self.address, reserve.price)

        logger.info("Reserve %s paid: %d", reserve_id, reserve.price)
        self.emit("ReservePricePaid", reserveId=reserve_id, buyer=caller, price=reserve.price)

    @transactional
    def increase_reserve_collateral(self, caller: str, reserve_id: str, amount: int) -> None:
        caller = to_address(caller)
        reserve = self._require_reserve(reserve_id)
        if caller != reserve.buyer:
            raise OnlyBuyerError()
        if reserve.paid:
            raise PriceAlreadyPaidError()
        if amount < 0:
            raise InvalidAmountError(amount)

        reserve.collateral_amount += amount
        self._reserves.save(reserve_id, reserve)
        if amount > 0:
            self._collateral(reserve).transfer_from(self.address, caller, self.address, amount)

        self.emit("CollateralIncreased", reserveId=reserve_id, amount=amount)

    @transactional
    def decrease_reserve_collateral(self, caller: str, reserve_id: str, amount: int) -> None:
        caller = to_address(caller)
        reserve = self._require_reserve(reserve_id)
        if caller != reserve.buyer:
            raise OnlyBuyerError()
        if amount < 0:
            raise InvalidAmountError(amount)

        remaining = reserve.collateral_amount - amount
        if reserve.paid:
            # Once paid the collateral only protects the buyer; all of it may go.
            if remaining < 0:
                raise InsufficientCollateralError()
        elif remaining < reserve.required_collateral:
            raise UncollateralizeReserveError()

        reserve.collateral_amount = remaining
        self._reserves.save(reserve_id, reserve)
        if amount > 0:
            self._collateral(reserve).transfer(self.address, caller, amount)

        self.emit("CollateralDecreased", reserveId=reserve_id, amount=amount)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_reserve(self, reserve_id: str) -> Reserve:
        reserve = self._reserves.get(reserve_id)
        if reserve is None:
            raise ReserveNotFoundError()
        return reserve

    def _parameters(self) -> ProtocolParameters:
        return self.chain.resolve(self.protocol_parameters, ProtocolParameters)

    def _nft(self, reserve: Reserve) -> NonFungibleToken:
        return self.chain.resolve(reserve.collection, NonFungibleToken)

    def _payment(self, reserve: Reserve) -> FungibleToken:
        return self.chain.resolve(reserve.payment_token, FungibleToken)

    def _collateral(self, reserve: Reserve) -> FungibleToken:
        return self.chain.resolve(reserve.collateral_token, FungibleToken)


def _or_self(beneficiary: str, party: str) -> str:
    beneficiary = to_address(beneficiary)
    return party if beneficiary == ZERO_ADDRESS else beneficiary
