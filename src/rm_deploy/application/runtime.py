"""Process-wide reserve runtime: one Chain, one Deployment, one lock.

Contract calls are synchronous and all-or-nothing; the HTTP layer takes
`runtime.lock` around each call so requests are applied one at a time, in
arrival order, like transactions in a block.
"""

import asyncio
import logging

from config.networks import NetworkConfig, get_network
from config.settings import settings
from src.rm_chain.chain import Chain
from src.rm_chain.clock import Clock, ManualClock, SystemClock
from src.rm_deploy.deployer import Deployment, deploy

logger = logging.getLogger(__name__)


class ReserveRuntime:
    def __init__(self, deployment: Deployment, chain: Chain) -> None:
        self.deployment = deployment
        self.chain = chain
        self.lock = asyncio.Lock()

    @property
    def network(self) -> NetworkConfig:
        return self.deployment.network


def build_runtime(
    network_name: str | None = None,
    deployer: str | None = None,
    clock: Clock | None = None,
) -> ReserveRuntime:
    network = get_network(network_name or settings.NETWORK)
    if clock is None:
        # Local networks get a clock that can be moved, like evm_increaseTime.
        clock = ManualClock(SystemClock().now()) if network.is_local else SystemClock()
    chain = Chain(clock=clock, chain_id=network.chain_id)
    deployment = deploy(chain, deployer or settings.DEPLOYER_ADDRESS, network)
    logger.info("Reserve runtime ready on %s", network.name)
    return ReserveRuntime(deployment, chain)


_runtime: ReserveRuntime | None = None


def get_runtime() -> ReserveRuntime:
    global _runtime  # noqa: PLW0603
    if _runtime is None:
        _runtime = build_runtime()
    return _runtime
