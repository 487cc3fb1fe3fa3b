"""ReserveMarketplace: lazy, exact-term matching of sale and purchase proposals.

There is no order book. A proposal's identity is the hash of its terms plus
the designated counterparty, so finding the other side is two keyed
lookups: the counterpart that designated the caller, then the one open to
anyone. A match starts a reserve in the ReservesManager; no match (or a
match whose custody pre-check fails) records the incoming proposal.
"""

import logging
from typing import TypeVar

from src.rm_chain.addresses import ZERO_ADDRESS, to_address
from src.rm_chain.chain import Chain, transactional
from src.rm_chain.upgradeable import UpgradeableContract
from src.rm_common.amounts import is_valid_collateral_percent, required_collateral
from src.rm_common.errors import (
    InvalidAmountError,
    InvalidCollateralPercentError,
    InvalidValidityPeriodError,
    NotEnoughCollateralBalanceError,
    NotInitializedError,
    OnlyBuyerCanCancelError,
    OnlyOwnerCanCancelError,
    OnlyTokenOwnerCanApproveError,
    ProposalAlreadyExistsError,
    ProposalNotFoundError,
    ReservePeriodTooShortError,
)
from src.rm_marketplace.domain.identity import proposal_id as compute_proposal_id
from src.rm_marketplace.domain.models import (
    ProposalOutcome,
    PurchaseReserveProposal,
    ReserveTerms,
    SaleReserveProposal,
)
from src.rm_marketplace.domain.repository import ProposalRepositoryProtocol
from src.rm_marketplace.infrastructure.persistence import ProposalRepository
from src.rm_parameters.domain.contract import ProtocolParameters
from src.rm_reserves.domain.contract import ReservesManager
from src.rm_token.domain.interfaces import FungibleToken, NonFungibleToken

logger = logging.getLogger(__name__)

P = TypeVar("P", SaleReserveProposal, PurchaseReserveProposal)


class ReserveMarketplace(UpgradeableContract):
    _storage_fields = UpgradeableContract._storage_fields + (
        "_reserves_manager",
        "_sale_proposals",
        "_purchase_proposals",
    )

    def __init__(self, chain: Chain, address: str, protocol_parameters: str) -> None:
        super().__init__(chain, address)
        self.protocol_parameters = to_address(protocol_parameters)
        self._reserves_manager = ZERO_ADDRESS
        self._sale_proposals: ProposalRepositoryProtocol[SaleReserveProposal] = (
            ProposalRepository()
        )
        self._purchase_proposals: ProposalRepositoryProtocol[PurchaseReserveProposal] = (
            ProposalRepository()
        )

    @transactional
    def initialize(self, caller: str, reserves_manager: str) -> None:
        """Second deployment phase: the manager is deployed after the marketplace."""
        self._initializer(caller)
        self._reserves_manager = to_address(reserves_manager)

    @property
    def reserves_manager(self) -> str:
        return self._reserves_manager

    # ------------------------------------------------------------------
    # Seller side
    # ------------------------------------------------------------------

    @transactional
    def approve_reserve_to_sell(
        self,
        caller: str,
        collection: str,
        token_id: int,
        payment_token: str,
        collateral_token: str,
        price: int,
        beneficiary: str,
        collateral_percent: int,
        reserve_period: int,
        validity_period: int,
        counterparty: str = ZERO_ADDRESS,
    ) -> ProposalOutcome:
        seller = to_address(caller)
        terms = _make_terms(
            collection, token_id, payment_token, collateral_token,
            price, collateral_percent, reserve_period,
        )
        counterparty = to_address(counterparty)

        nft = self.chain.resolve(terms.collection, NonFungibleToken)
        if nft.owner_of(terms.token_id) != seller:
            raise OnlyTokenOwnerCanApproveError()
        self._validate_terms(terms, validity_period)

        match = self._find_purchase_match(terms, seller, counterparty)
        if match is not None:
            purchase_id, purchase = match
            self._purchase_proposals.delete(purchase_id)
            reserve_id = self._manager().start_reserve(
                self.address,
                terms.collection,
                terms.token_id,
                terms.payment_token,
                terms.collateral_token,
                terms.price,
                terms.collateral_percent,
                terms.reserve_period,
                seller=seller,
                buyer=purchase.buyer,
                seller_beneficiary=beneficiary,
                buyer_beneficiary=purchase.beneficiary,
            )
            logger.info("Sale matched purchase proposal %s -> reserve %s", purchase_id, reserve_id)
            self.emit(
                "SaleReserved",
                reserveId=reserve_id,
                seller=seller,
                buyer=purchase.buyer,
                **terms.event_args(),
            )
            return ProposalOutcome(reserve_id=reserve_id)

        proposal = SaleReserveProposal(
            terms=terms,
            owner=seller,
            beneficiary=_or_self(beneficiary, seller),
            counterparty=counterparty,
            expiration_timestamp=self.now + validity_period,
        )
        sale_id = compute_proposal_id(terms, counterparty)
        self._record(self._sale_proposals, sale_id, proposal)
        logger.info("Sale proposal %s recorded by %s", sale_id, seller)
        self.emit("SaleReserveProposed", **terms.event_args())
        return ProposalOutcome(proposal_id=sale_id)

    def get_sale_reserve_proposal(
        self,
        collection: str,
        token_id: int,
        payment_token: str,
        collateral_token: str,
        price: int,
        collateral_percent: int,
        reserve_period: int,
        counterparty: str = ZERO_ADDRESS,
    ) -> tuple[SaleReserveProposal, str]:
        terms = _make_terms(
            collection, token_id, payment_token, collateral_token,
            price, collateral_percent, reserve_period,
        )
        sale_id = compute_proposal_id(terms, to_address(counterparty))
        proposal = self._sale_proposals.get(sale_id)
        if proposal is None:
            raise ProposalNotFoundError()
        return proposal, sale_id

    @transactional
    def cancel_sale_reserve_proposal(
        self,
        caller: str,
        collection: str,
        token_id: int,
        payment_token: str,
        collateral_token: str,
        price: int,
        collateral_percent: int,
        reserve_period: int,
        counterparty: str = ZERO_ADDRESS,
    ) -> None:
        proposal, sale_id = self.get_sale_reserve_proposal(
            collection, token_id, payment_token, collateral_token,
            price, collateral_percent, reserve_period, counterparty,
        )
        if to_address(caller) != proposal.owner:
            raise OnlyOwnerCanCancelError()

        self._sale_proposals.delete(sale_id)
        logger.info("Sale proposal %s canceled", sale_id)
        self.emit("SaleReserveProposalCanceled", owner=proposal.owner, **proposal.terms.event_args())

    # ------------------------------------------------------------------
    # Buyer side
    # ------------------------------------------------------------------

    @transactional
    def approve_reserve_to_buy(
        self,
        caller: str,
        collection: str,
        token_id: int,
        payment_token: str,
        collateral_token: str,
        price: int,
        beneficiary: str,
        collateral_percent: int,
        reserve_period: int,
        validity_period: int,
        counterparty: str = ZERO_ADDRESS,
    ) -> ProposalOutcome:
        buyer = to_address(caller)
        terms = _make_terms(
            collection, token_id, payment_token, collateral_token,
            price, collateral_percent, reserve_period,
        )
        counterparty = to_address(counterparty)
        self._validate_terms(terms, validity_period)

        collateral = required_collateral(terms.price, terms.collateral_percent)
        # Collateral-token funding is checked at match time by can_start_reserve.
        token = self.chain.resolve(terms.payment_token, FungibleToken)
        if token.balance_of(buyer) < collateral:
            raise NotEnoughCollateralBalanceError()

        match = self._find_sale_match(terms, buyer, counterparty)
        if match is not None:
            sale_id, sale = match
            self._sale_proposals.delete(sale_id)
            reserve_id = self._manager().start_reserve(
                self.address,
                terms.collection,
                terms.token_id,
                terms.payment_token,
                terms.collateral_token,
                terms.price,
                terms.collateral_percent,
                terms.reserve_period,
                seller=sale.owner,
                buyer=buyer,
                seller_beneficiary=sale.beneficiary,
                buyer_beneficiary=beneficiary,
            )
            logger.info("Purchase matched sale proposal %s -> reserve %s", sale_id, reserve_id)
            self.emit(
                "PurchaseReserved",
                reserveId=reserve_id,
                seller=sale.owner,
                buyer=buyer,
                **terms.event_args(),
            )
            return ProposalOutcome(reserve_id=reserve_id)

        proposal = PurchaseReserveProposal(
            terms=terms,
            buyer=buyer,
            beneficiary=_or_self(beneficiary, buyer),
            counterparty=counterparty,
            expiration_timestamp=self.now + validity_period,
        )
        purchase_id = compute_proposal_id(terms, counterparty)
        self._record(self._purchase_proposals, purchase_id, proposal)
        logger.info("Purchase proposal %s recorded by %s", purchase_id, buyer)
        self.emit("PurchaseReserveProposed", **terms.event_args())
        return ProposalOutcome(proposal_id=purchase_id)

    def get_purchase_reserve_proposal(
        self,
        collection: str,
        token_id: int,
        payment_token: str,
        collateral_token: str,
        price: int,
        collateral_percent: int,
        reserve_period: int,
        counterparty: str = ZERO_ADDRESS,
    ) -> tuple[PurchaseReserveProposal, str]:
        terms = _make_terms(
            collection, token_id, payment_token, collateral_token,
            price, collateral_percent, reserve_period,
        )
        purchase_id = compute_proposal_id(terms, to_address(counterparty))
        proposal = self._purchase_proposals.get(purchase_id)
        if proposal is None:
            raise ProposalNotFoundError()
        return proposal, purchase_id

    @transactional
    def cancel_purchase_reserve_proposal(
        self,
        caller: str,
        collection: str,
        token_id: int,
        payment_token: str,
        collateral_token: str,
        price: int,
        collateral_percent: int,
        reserve_period: int,
        counterparty: str = ZERO_ADDRESS,
    ) -> None:
        proposal, purchase_id = self.get_purchase_reserve_proposal(
            collection, token_id, payment_token, collateral_token,
            price, collateral_percent, reserve_period, counterparty,
        )
        if to_address(caller) != proposal.buyer:
            raise OnlyBuyerCanCancelError()

        self._purchase_proposals.delete(purchase_id)
        logger.info("Purchase proposal %s canceled", purchase_id)
        self.emit(
            "PurchaseReserveProposalCanceled", buyer=proposal.buyer, **proposal.terms.event_args()
        )

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def _find_purchase_match(
        self, terms: ReserveTerms, seller: str, designated_buyer: str
    ) -> tuple[str, PurchaseReserveProposal] | None:
        manager = self._manager()
        for key_counterparty in (seller, ZERO_ADDRESS):
            purchase_id = compute_proposal_id(terms, key_counterparty)
            purchase = self._purchase_proposals.get(purchase_id)
            if purchase is None:
                continue
            if purchase.is_expired(self.now):
                logger.info("Purchase proposal %s expired, not matching", purchase_id)
                continue
            if purchase.buyer == seller:
                continue
            if designated_buyer != ZERO_ADDRESS and purchase.buyer != designated_buyer:
                continue
            if not manager.can_start_reserve(
                terms.collection, terms.token_id, terms.collateral_token,
                terms.price, terms.collateral_percent, seller, purchase.buyer,
            ):
                logger.info("Purchase proposal %s cannot be funded, not matching", purchase_id)
                continue
            return purchase_id, purchase
        return None

    def _find_sale_match(
        self, terms: ReserveTerms, buyer: str, designated_seller: str
    ) -> tuple[str, SaleReserveProposal] | None:
        manager = self._manager()
        for key_counterparty in (buyer, ZERO_ADDRESS):
            sale_id = compute_proposal_id(terms, key_counterparty)
            sale = self._sale_proposals.get(sale_id)
            if sale is None:
                continue
            if sale.is_expired(self.now):
                logger.info("Sale proposal %s expired, not matching", sale_id)
                continue
            if sale.owner == buyer:
                continue
            if designated_seller != ZERO_ADDRESS and sale.owner != designated_seller:
                continue
            if not manager.can_start_reserve(
                terms.collection, terms.token_id, terms.collateral_token,
                terms.price, terms.collateral_percent, sale.owner, buyer,
            ):
                logger.info("Sale proposal %s cannot be funded, not matching", sale_id)
                continue
            return sale_id, sale
        return None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _record(self, repo: ProposalRepositoryProtocol[P], key: str, proposal: P) -> None:
        """Store a proposal; a live one from another initiator is not overwritten."""
        existing = repo.get(key)
        if (
            existing is not None
            and existing.initiator != proposal.initiator
            and not existing.is_expired(self.now)
        ):
            raise ProposalAlreadyExistsError()
        repo.save(key, proposal)

    def _validate_terms(self, terms: ReserveTerms, validity_period: int) -> None:
        if terms.reserve_period <= self._parameters().minimum_reserve_period:
            raise ReservePeriodTooShortError()
        if not is_valid_collateral_percent(terms.collateral_percent):
            raise InvalidCollateralPercentError()
        if terms.price < 0:
            raise InvalidAmountError(terms.price)
        if validity_period < 0:
            raise InvalidValidityPeriodError()

    def _parameters(self) -> ProtocolParameters:
        return self.chain.resolve(self.protocol_parameters, ProtocolParameters)

    def _manager(self) -> ReservesManager:
        if self._reserves_manager == ZERO_ADDRESS:
            raise NotInitializedError("reserves manager")
        return self.chain.resolve(self._reserves_manager, ReservesManager)


def _make_terms(
    collection: str,
    token_id: int,
    payment_token: str,
    collateral_token: str,
    price: int,
    collateral_percent: int,
    reserve_period: int,
) -> ReserveTerms:
    return ReserveTerms(
        collection=to_address(collection),
        token_id=token_id,
        payment_token=to_address(payment_token),
        collateral_token=to_address(collateral_token),
        price=price,
        collateral_percent=collateral_percent,
        reserve_period=reserve_period,
    )


def _or_self(beneficiary: str, party: str) -> str:
    beneficiary = to_address(beneficiary)
    return party if beneficiary == ZERO_ADDRESS else beneficiary
