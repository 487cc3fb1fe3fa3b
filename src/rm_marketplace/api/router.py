"""rm_marketplace REST API: sale and purchase reserve proposals.

Lookups and cancels take the full term tuple in the body since the proposal
id is derived from it.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.rm_common.response import ApiResponse, success_response
from src.rm_deploy.application.runtime import ReserveRuntime, get_runtime
from src.rm_gateway.auth.dependencies import get_caller
from src.rm_marketplace.application.schemas import ProposeReserveRequest, ReserveTermsRequest
from src.rm_marketplace.application.service import MarketplaceApplicationService

router = APIRouter(prefix="/proposals", tags=["proposals"])

_service = MarketplaceApplicationService()


# ---------------------------------------------------------------------------
# Sale side
# ---------------------------------------------------------------------------


@router.post("/sale")
async def propose_sale(
    body: ProposeReserveRequest,
    caller: Annotated[str, Depends(get_caller)],
    runtime: Annotated[ReserveRuntime, Depends(get_runtime)],
    request: Request,
) -> ApiResponse:
    data = await _service.propose_sale(runtime, caller, body)
    return success_response(data.model_dump(), request)


@router.post("/sale/lookup")
async def get_sale_proposal(
    body: ReserveTermsRequest,
    runtime: Annotated[ReserveRuntime, Depends(get_runtime)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_sale(runtime, body)
    return success_response(data.model_dump(), request)


@router.post("/sale/cancel")
async def cancel_sale_proposal(
    body: ReserveTermsRequest,
    caller: Annotated[str, Depends(get_caller)],
    runtime: Annotated[ReserveRuntime, Depends(get_runtime)],
    request: Request,
) -> ApiResponse:
    data = await _service.cancel_sale(runtime, caller, body)
    return success_response(data.model_dump(), request)


# ---------------------------------------------------------------------------
# Purchase side
# ---------------------------------------------------------------------------


@router.post("/purchase")
async def propose_purchase(
    body: ProposeReserveRequest,
    caller: Annotated[str, Depends(get_caller)],
    runtime: Annotated[ReserveRuntime, Depends(get_runtime)],
    request: Request,
) -> ApiResponse:
    data = await _service.propose_purchase(runtime, caller, body)
    return success_response(data.model_dump(), request)


@router.post("/purchase/lookup")
async def get_purchase_proposal(
    body: ReserveTermsRequest,
    runtime: Annotated[ReserveRuntime, Depends(get_runtime)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_purchase(runtime, body)
    return success_response(data.model_dump(), request)


@router.post("/purchase/cancel")
async def cancel_purchase_proposal(
    body: ReserveTermsRequest,
    caller: Annotated[str, Depends(get_caller)],
    runtime: Annotated[ReserveRuntime, Depends(get_runtime)],
    request: Request,
) -> ApiResponse:
    data = await _service.cancel_purchase(runtime, caller, body)
    return success_response(data.model_dump(), request)
