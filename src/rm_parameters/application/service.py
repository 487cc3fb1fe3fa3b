"""ParametersApplicationService: serialises governance calls into the runtime."""

from src.rm_deploy.application.runtime import ReserveRuntime
from src.rm_parameters.application.schemas import (
    ParametersResponse,
    ParameterUpdatedResponse,
)
from src.rm_parameters.domain.models import ParameterName


class ParametersApplicationService:
    async def get_parameters(self, runtime: ReserveRuntime) -> ParametersResponse:
        contract = runtime.deployment.parameters
        async with runtime.lock:
            return ParametersResponse.from_domain(contract.address, contract.parameters)

    async def update_parameter(
        self, runtime: ReserveRuntime, caller: str, name: ParameterName, value: int
    ) -> ParameterUpdatedResponse:
        contract = runtime.deployment.parameters
        async with runtime.lock:
            previous = getattr(contract.parameters, name.value)
            contract.set_parameter(caller, name, value)
        return ParameterUpdatedResponse(
            name=name.value, previous=previous, current=value, event=name.event_name
        )
