"""Chain REST API: deployment addresses, event log, local time travel."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from src.rm_common.response import ApiResponse, success_response
from src.rm_deploy.application.runtime import ReserveRuntime, get_runtime
from src.rm_deploy.application.schemas import IncreaseTimeRequest
from src.rm_deploy.application.service import ChainApplicationService

router = APIRouter(tags=["chain"])

_service = ChainApplicationService()


@router.get("/chain")
async def get_chain_info(
    runtime: Annotated[ReserveRuntime, Depends(get_runtime)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_info(runtime)
    return success_response(data.model_dump(), request)


@router.post("/chain/time/increase")
async def increase_time(
    body: IncreaseTimeRequest,
    runtime: Annotated[ReserveRuntime, Depends(get_runtime)],
    request: Request,
) -> ApiResponse:
    data = await _service.increase_time(runtime, body.seconds)
    return success_response(data.model_dump(), request)


@router.get("/events")
async def list_events(
    runtime: Annotated[ReserveRuntime, Depends(get_runtime)],
    request: Request,
    name: str | None = Query(None, description="Event name, e.g. SaleReserved"),
    emitter: str | None = Query(None, description="Emitting contract address"),
    from_index: int = Query(0, ge=0, description="First event index to return"),
    limit: int = Query(100, ge=1, le=1000, description="Items per page"),
) -> ApiResponse:
    data = await _service.list_events(runtime, name, emitter, from_index, limit)
    return success_response(data.model_dump(), request)
