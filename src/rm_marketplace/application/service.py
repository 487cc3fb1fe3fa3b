"""MarketplaceApplicationService: thin composition layer over ReserveMarketplace.

Every call runs under the runtime lock; the contract itself is all-or-nothing.
"""

from src.rm_deploy.application.runtime import ReserveRuntime
from src.rm_marketplace.application.schemas import (
    ProposalCanceledResponse,
    ProposalOutcomeResponse,
    ProposalResponse,
    ProposeReserveRequest,
    ReserveTermsRequest,
)


class MarketplaceApplicationService:
    async def propose_sale(
        self, runtime: ReserveRuntime, caller: str, req: ProposeReserveRequest
    ) -> ProposalOutcomeResponse:
        async with runtime.lock:
            outcome = runtime.deployment.marketplace.approve_reserve_to_sell(
                caller,
                req.collection,
                req.token_id,
                req.payment_token,
                req.collateral_token,
                req.price,
                req.beneficiary,
                req.collateral_percent,
                req.reserve_period,
                req.validity_period,
                req.counterparty,
            )
        return ProposalOutcomeResponse.from_domain(outcome)

    async def propose_purchase(
        self, runtime: ReserveRuntime, caller: str, req: ProposeReserveRequest
    ) -> ProposalOutcomeResponse:
        async with runtime.lock:
            outcome = runtime.deployment.marketplace.approve_reserve_to_buy(
                caller,
                req.collection,
                req.token_id,
                req.payment_token,
                req.collateral_token,
                req.price,
                req.beneficiary,
                req.collateral_percent,
                req.reserve_period,
                req.validity_period,
                req.counterparty,
            )
        return ProposalOutcomeResponse.from_domain(outcome)

    async def get_sale(
        self, runtime: ReserveRuntime, req: ReserveTermsRequest
    ) -> ProposalResponse:
        async with runtime.lock:
            proposal, proposal_id = runtime.deployment.marketplace.get_sale_reserve_proposal(
                *req.lookup_args()
            )
        return ProposalResponse.from_domain(proposal_id, proposal)

    async def get_purchase(
        self, runtime: ReserveRuntime, req: ReserveTermsRequest
    ) -> ProposalResponse:
        async with runtime.lock:
            proposal, proposal_id = runtime.deployment.marketplace.get_purchase_reserve_proposal(
                *req.lookup_args()
            )
        return ProposalResponse.from_domain(proposal_id, proposal)

    async def cancel_sale(
        self, runtime: ReserveRuntime, caller: str, req: ReserveTermsRequest
    ) -> ProposalCanceledResponse:
        marketplace = runtime.deployment.marketplace
        async with runtime.lock:
            _, proposal_id = marketplace.get_sale_reserve_proposal(*req.lookup_args())
            marketplace.cancel_sale_reserve_proposal(caller, *req.lookup_args())
        return ProposalCanceledResponse(proposal_id=proposal_id)

    async def cancel_purchase(
        self, runtime: ReserveRuntime, caller: str, req: ReserveTermsRequest
    ) -> ProposalCanceledResponse:
        marketplace = runtime.deployment.marketplace
        async with runtime.lock:
            _, proposal_id = marketplace.get_purchase_reserve_proposal(*req.lookup_args())
            marketplace.cancel_purchase_reserve_proposal(caller, *req.lookup_args())
        return ProposalCanceledResponse(proposal_id=proposal_id)
