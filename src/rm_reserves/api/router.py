"""rm_reserves REST API: active reserve views and lifecycle calls."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.rm_common.response import ApiResponse, success_response
from src.rm_deploy.application.runtime import ReserveRuntime, get_runtime
from src.rm_gateway.auth.dependencies import get_caller
from src.rm_reserves.application.schemas import CollateralChangeRequest
from src.rm_reserves.application.service import ReservesApplicationService

router = APIRouter(prefix="/reserves", tags=["reserves"])

_service = ReservesApplicationService()


@router.get("")
async def list_reserves(
    runtime: Annotated[ReserveRuntime, Depends(get_runtime)],
    request: Request,
) -> ApiResponse:
    data = await _service.list_reserves(runtime)
    return success_response([r.model_dump() for r in data], request)


@router.get("/{reserve_id}")
async def get_reserve(
    reserve_id: str,
    runtime: Annotated[ReserveRuntime, Depends(get_runtime)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_reserve(runtime, reserve_id)
    return success_response(data.model_dump(), request)


@router.get("/{reserve_id}/amounts")
async def get_reserve_amounts(
    reserve_id: str,
    runtime: Annotated[ReserveRuntime, Depends(get_runtime)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_amounts(runtime, reserve_id)
    return success_response(data.model_dump(), request)


@router.post("/{reserve_id}/cancel")
async def cancel_reserve(
    reserve_id: str,
    caller: Annotated[str, Depends(get_caller)],
    runtime: Annotated[ReserveRuntime, Depends(get_runtime)],
    request: Request,
) -> ApiResponse:
    data = await _service.cancel(runtime, caller, reserve_id)
    return success_response(data.model_dump(), request)


@router.post("/{reserve_id}/liquidate")
async def liquidate_reserve(
    reserve_id: str,
    caller: Annotated[str, Depends(get_caller)],
    runtime: Annotated[ReserveRuntime, Depends(get_runtime)],
    request: Request,
) -> ApiResponse:
    data = await _service.liquidate(runtime, caller, reserve_id)
    return success_response(data.model_dump(), request)


@router.post("/{reserve_id}/pay")
async def pay_the_price(
    reserve_id: str,
    caller: Annotated[str, Depends(get_caller)],
    runtime: Annotated[ReserveRuntime, Depends(get_runtime)],
    request: Request,
) -> ApiResponse:
    data = await _service.pay(runtime, caller, reserve_id)
    return success_response(data.model_dump(), request)


@router.post("/{reserve_id}/collateral/increase")
async def increase_collateral(
    reserve_id: str,
    body: CollateralChangeRequest,
    caller: Annotated[str, Depends(get_caller)],
    runtime: Annotated[ReserveRuntime, Depends(get_runtime)],
    request: Request,
) -> ApiResponse:
    data = await _service.increase_collateral(runtime, caller, reserve_id, body.amount)
    return success_response(data.model_dump(), request)


@router.post("/{reserve_id}/collateral/decrease")
async def decrease_collateral(
    reserve_id: str,
    body: CollateralChangeRequest,
    caller: Annotated[str, Depends(get_caller)],
    runtime: Annotated[ReserveRuntime, Depends(get_runtime)],
    request: Request,
) -> ApiResponse:
    data = await _service.decrease_collateral(runtime, caller, reserve_id, body.amount)
    return success_response(data.model_dump(), request)
