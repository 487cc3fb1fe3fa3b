"""rm_parameters REST API: read the protocol parameters, governance updates."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.rm_common.response import ApiResponse, success_response
from src.rm_deploy.application.runtime import ReserveRuntime, get_runtime
from src.rm_gateway.auth.dependencies import get_caller
from src.rm_parameters.application.schemas import UpdateParameterRequest
from src.rm_parameters.application.service import ParametersApplicationService
from src.rm_parameters.domain.models import ParameterName

router = APIRouter(prefix="/parameters", tags=["parameters"])

_service = ParametersApplicationService()


@router.get("")
async def get_parameters(
    runtime: Annotated[ReserveRuntime, Depends(get_runtime)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_parameters(runtime)
    return success_response(data.model_dump(), request)


@router.put("/{name}")
async def update_parameter(
    name: ParameterName,
    body: UpdateParameterRequest,
    caller: Annotated[str, Depends(get_caller)],
    runtime: Annotated[ReserveRuntime, Depends(get_runtime)],
    request: Request,
) -> ApiResponse:
    data = await _service.update_parameter(runtime, caller, name, body.value)
    return success_response(data.model_dump(), request)
