"""Pydantic schemas for the chain/deployment API."""

from typing import Any

from pydantic import BaseModel, Field

from src.rm_chain.events import Event
from src.rm_deploy.application.runtime import ReserveRuntime


class IncreaseTimeRequest(BaseModel):
    seconds: int = Field(..., ge=0)


class ChainInfoResponse(BaseModel):
    network: str
    chain_id: int
    block_timestamp: int
    deployer: str
    contracts: dict[str, str]

    @classmethod
    def from_runtime(cls, runtime: ReserveRuntime) -> "ChainInfoResponse":
        deployment = runtime.deployment
        return cls(
            network=deployment.network.name,
            chain_id=runtime.chain.chain_id,
            block_timestamp=runtime.chain.now(),
            deployer=deployment.deployer,
            contracts=deployment.addresses(),
        )


class EventOut(BaseModel):
    index: int
    name: str
    emitter: str
    timestamp: int
    args: dict[str, Any]

    @classmethod
    def from_domain(cls, event: Event) -> "EventOut":
        return cls(
            index=event.index,
            name=event.name,
            emitter=event.emitter,
            timestamp=event.timestamp,
            args=event.args,
        )


class EventListResponse(BaseModel):
    items: list[EventOut]
    next_index: int
