"""ChainApplicationService: deployment info, event log, local block time."""

from src.rm_chain.addresses import to_address
from src.rm_chain.clock import ManualClock
from src.rm_common.errors import ClockNotAdjustableError
from src.rm_deploy.application.runtime import ReserveRuntime
from src.rm_deploy.application.schemas import (
    ChainInfoResponse,
    EventListResponse,
    EventOut,
)


class ChainApplicationService:
    async def get_info(self, runtime: ReserveRuntime) -> ChainInfoResponse:
        async with runtime.lock:
            return ChainInfoResponse.from_runtime(runtime)

    async def list_events(
        self,
        runtime: ReserveRuntime,
        name: str | None,
        emitter: str | None,
        from_index: int,
        limit: int,
    ) -> EventListResponse:
        emitter = to_address(emitter) if emitter else None
        async with runtime.lock:
            matching = [
                e
                for e in runtime.chain.events.filter(name=name, emitter=emitter)
                if e.index >= from_index
            ]
            total = len(runtime.chain.events)
        page = matching[:limit]
        # Resume after the last returned event, or at the log end when exhausted.
        next_index = page[-1].index + 1 if len(matching) > limit else total
        return EventListResponse(
            items=[EventOut.from_domain(e) for e in page],
            next_index=next_index,
        )

    async def increase_time(self, runtime: ReserveRuntime, seconds: int) -> ChainInfoResponse:
        """Move the block clock forward; local networks only."""
        clock = runtime.chain.clock
        if not runtime.network.is_local or not isinstance(clock, ManualClock):
            raise ClockNotAdjustableError()
        async with runtime.lock:
            clock.increase(seconds)
            return ChainInfoResponse.from_runtime(runtime)
