"""ReservesApplicationService: runs ReservesManager calls under the runtime lock.

State-changing calls answer with the event the manager emitted, which is
what a client would read off the transaction receipt.
"""

from collections.abc import Callable

from src.rm_chain.events import Event
from src.rm_common.errors import InternalError
from src.rm_deploy.application.runtime import ReserveRuntime
from src.rm_reserves.application.schemas import (
    ReserveActionResponse,
    ReserveAmountsResponse,
    ReserveResponse,
)


class ReservesApplicationService:
    async def get_reserve(self, runtime: ReserveRuntime, reserve_id: str) -> ReserveResponse:
        async with runtime.lock:
            reserve = runtime.deployment.manager.get_reserve(reserve_id)
        return ReserveResponse.from_domain(reserve_id, reserve)

    async def get_amounts(
        self, runtime: ReserveRuntime, reserve_id: str
    ) -> ReserveAmountsResponse:
        async with runtime.lock:
            amounts = runtime.deployment.manager.reserve_amounts(reserve_id)
        return ReserveAmountsResponse.from_domain(reserve_id, amounts)

    async def list_reserves(self, runtime: ReserveRuntime) -> list[ReserveResponse]:
        manager = runtime.deployment.manager
        async with runtime.lock:
            return [
                ReserveResponse.from_domain(rid, manager.get_reserve(rid))
                for rid in manager.active_reserve_ids()
            ]

    async def cancel(
        self, runtime: ReserveRuntime, caller: str, reserve_id: str
    ) -> ReserveActionResponse:
        manager = runtime.deployment.manager
        return await self._execute(
            runtime, reserve_id, lambda: manager.cancel_reserve(caller, reserve_id)
        )

    async def liquidate(
        self, runtime: ReserveRuntime, caller: str, reserve_id: str
    ) -> ReserveActionResponse:
        manager = runtime.deployment.manager
        return await self._execute(
            runtime, reserve_id, lambda: manager.liquidate_reserve(caller, reserve_id)
        )

    async def pay(
        self, runtime: ReserveRuntime, caller: str, reserve_id: str
    ) -> ReserveActionResponse:
        manager = runtime.deployment.manager
        return await self._execute(
            runtime, reserve_id, lambda: manager.pay_the_price(caller, reserve_id)
        )

    async def increase_collateral(
        self, runtime: ReserveRuntime, caller: str, reserve_id: str, amount: int
    ) -> ReserveActionResponse:
        manager = runtime.deployment.manager
        return await self._execute(
            runtime,
            reserve_id,
            lambda: manager.increase_reserve_collateral(caller, reserve_id, amount),
        )

    async def decrease_collateral(
        self, runtime: ReserveRuntime, caller: str, reserve_id: str, amount: int
    ) -> ReserveActionResponse:
        manager = runtime.deployment.manager
        return await self._execute(
            runtime,
            reserve_id,
            lambda: manager.decrease_reserve_collateral(caller, reserve_id, amount),
        )

    async def _execute(
        self, runtime: ReserveRuntime, reserve_id: str, call: Callable[[], None]
    ) -> ReserveActionResponse:
        manager = runtime.deployment.manager
        async with runtime.lock:
            mark = len(runtime.chain.events)
            call()
            emitted = runtime.chain.events.since(mark)
        event = _last_from(emitted, manager.address)
        return ReserveActionResponse(reserve_id=reserve_id, event=event.name, args=event.args)


def _last_from(events: list[Event], emitter: str) -> Event:
    for event in reversed(events):
        if event.emitter == emitter:
            return event
    raise InternalError(f"No event emitted by {emitter}")
